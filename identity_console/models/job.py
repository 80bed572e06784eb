# models/job.py

"""
Import job data models
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum

from identity_console.core.config import settings
from identity_console.models.user import UserInput


class JobState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    COMPLETED = "completed"


ACTIVE_STATES = (JobState.RUNNING, JobState.PAUSED)


class OperationStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class ResultFilter(str, Enum):
    ALL = "all"
    SUCCESS = "success"
    ERROR = "error"


class OperationResult(BaseModel):
    email: str
    status: OperationStatus
    message: str
    user_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == OperationStatus.SUCCESS


class PendingInput(BaseModel):
    """Job configuration: raw user text and per-job settings."""

    user_data: str = ""
    send_invites: bool = Field(default_factory=lambda: settings.default_send_invites)
    delay_in_seconds: int = Field(default_factory=lambda: settings.default_delay_seconds, ge=0)


class JobRecord(BaseModel):
    status: JobState = JobState.IDLE
    pending_input: PendingInput = Field(default_factory=PendingInput)
    results: List[OperationResult] = []
    progress: float = 0.0
    success_count: int = 0
    fail_count: int = 0
    elapsed_seconds: int = 0
    countdown: int = 0
    next_pending_email: Optional[str] = None
    show_stats: bool = False
    stop_requested: bool = False

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATES


class SettingsUpdate(BaseModel):
    user_data: Optional[str] = None
    send_invites: Optional[bool] = None
    delay_in_seconds: Optional[int] = Field(None, ge=0, description="Seconds to wait between users")


class StartJobRequest(SettingsUpdate):
    """Start body; falls back to the stored pending input for omitted fields."""

    users: Optional[List[UserInput]] = Field(None, description="Pre-parsed user records")


class JobSnapshot(JobRecord):
    """Read-only projection returned to observers."""

    account_id: str
    total_count: int
    progress_line: str
