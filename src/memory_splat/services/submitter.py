"""Submission of splat generation jobs."""

from dataclasses import dataclass

from memory_splat.adapters.sharp_client import SharpClient
from memory_splat.domain.errors import SubmissionError
from memory_splat.services.jobs import JobTracker


@dataclass
class SplatJobSubmitter:
    """Creates remote jobs and registers them with the tracker."""

    client: SharpClient
    tracker: JobTracker

    async def submit_by_reference(self, image_ref: str) -> str:
        """Submit an image the backend can fetch by URL."""
        if not image_ref.strip():
            raise SubmissionError("Image reference is empty")
        request_id = await self.client.submit(image_ref)
        self.tracker.register(request_id, image_ref)
        return request_id

    async def submit_by_content(self, content: bytes, filename: str) -> str:
        """Upload image bytes directly."""
        if not content:
            raise SubmissionError(f"Image content for {filename} is empty")
        request_id = await self.client.submit_file(content, filename)
        self.tracker.register(request_id, f"blob:{filename}")
        return request_id
