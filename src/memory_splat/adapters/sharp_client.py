"""HTTP client for the Sharp image-to-splat backend."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from memory_splat.domain.errors import (
    GenerationError,
    PollTransientError,
    SubmissionError,
)
from memory_splat.domain.jobs import JobStatusResponse, SplatResult, SubmitResponse

logger = logging.getLogger(__name__)


class SharpClient(Protocol):
    """Interface for the remote splat generation backend."""

    async def submit(self, image_url: str) -> str:
        """Submit a reachable image URL and return the request id."""

    async def submit_file(self, content: bytes, filename: str) -> str:
        """Upload image bytes and return the request id."""

    async def get_status(self, request_id: str) -> JobStatusResponse:
        """Return the current job status."""

    async def get_result(self, request_id: str) -> SplatResult:
        """Return the generated asset of a completed job."""


@dataclass
class HttpxSharpClient(SharpClient):
    """Sharp backend client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    submit_timeout: float = 300
    request_timeout: float = 15

    @classmethod
    def create(
        cls,
        base_url: str,
        submit_timeout: float = 300,
        request_timeout: float = 15,
    ) -> "HttpxSharpClient":
        """Create a Sharp client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            submit_timeout=submit_timeout,
            request_timeout=request_timeout,
        )

    async def submit(self, image_url: str) -> str:
        """Submit an image URL via the JSON endpoint."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/submit",
                json={"imageUrl": image_url},
                timeout=self.submit_timeout,
            )
        except httpx.HTTPError as exc:
            raise SubmissionError(f"Sharp submit failed: {exc}") from exc
        return _parse_submit(response)

    async def submit_file(self, content: bytes, filename: str) -> str:
        """Submit image bytes via the multipart endpoint."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/submit-file",
                files={"file": (filename, content)},
                timeout=self.submit_timeout,
            )
        except httpx.HTTPError as exc:
            raise SubmissionError(f"Sharp submit failed: {exc}") from exc
        return _parse_submit(response)

    async def get_status(self, request_id: str) -> JobStatusResponse:
        """Query job status; every failure here is retryable."""
        try:
            response = await self.http_client.get(
                f"{self.base_url}/status",
                params={"request_id": request_id},
                headers={"Cache-Control": "no-store"},
                timeout=self.request_timeout,
            )
            response.raise_for_status()
            return JobStatusResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as exc:
            raise PollTransientError(
                f"Status query for {request_id} failed: {exc}"
            ) from exc

    async def get_result(self, request_id: str) -> SplatResult:
        """Fetch the result of a completed job."""
        try:
            response = await self.http_client.get(
                f"{self.base_url}/result",
                params={"request_id": request_id},
                timeout=self.request_timeout,
            )
            response.raise_for_status()
            return SplatResult.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as exc:
            raise GenerationError(f"Failed to get result: {exc}") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _parse_submit(response: httpx.Response) -> str:
    if response.is_error:
        raise SubmissionError(f"Sharp submit failed: {response.text}")
    try:
        payload = SubmitResponse.model_validate(response.json())
    except ValueError as exc:
        raise SubmissionError("Sharp submit returned no request id") from exc
    logger.info("Submitted splat job %s", payload.request_id)
    return payload.request_id
