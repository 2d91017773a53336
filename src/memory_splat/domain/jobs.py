"""Models for remote splat generation jobs."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobStatus(StrEnum):
    """States of the status polling state machine."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in {JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.TIMED_OUT}


@dataclass
class JobRecord:
    """Outstanding remote job held by the tracker."""

    request_id: str
    image_ref: str
    started_at: datetime
    photo_id: str | None = None


@dataclass(frozen=True)
class StatusEvent:
    """One observation produced by the poll loop."""

    request_id: str
    status: JobStatus
    attempt: int
    elapsed_seconds: int
    error: str | None = None


class SubmitResponse(BaseModel):
    """Backend acknowledgement of a new job."""

    request_id: str = Field(min_length=1)


class JobStatusResponse(BaseModel):
    """Backend status payload for a job."""

    status: JobStatus
    error: str | None = None

    @field_validator("status")
    @classmethod
    def status_must_come_from_backend(cls, v: JobStatus) -> JobStatus:
        if v == JobStatus.TIMED_OUT:
            raise ValueError("timed_out is a local state, not a backend status")
        return v


class SplatResult(BaseModel):
    """Generated splat asset returned by the backend."""

    model_config = ConfigDict(populate_by_name=True)

    asset_url: str = Field(alias="ply_url")
    filename: str
    size_bytes: int = Field(ge=0)
