"""Pydantic models for delivery and run outcomes."""

from enum import Enum

from pydantic import BaseModel, Field


class Channel(str, Enum):
    EMAIL = "email"
    WHATSAPP = "whatsapp"


class ErrorKind(str, Enum):
    """Which part of the error taxonomy an outcome belongs to."""

    SOURCE_READ = "source_read"
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    DELIVERY = "delivery"

    @property
    def is_fatal(self) -> bool:
        return self in (ErrorKind.SOURCE_READ, ErrorKind.CONFIGURATION)


class JobState(str, Enum):
    START = "start"
    LOAD_RECIPIENTS = "load_recipients"
    LOAD_ENTITIES = "load_entities"
    MATCH_WINDOW = "match_window"
    DISPATCH = "dispatch"
    DONE = "done"
    FAILED = "failed"


class DeliveryResult(BaseModel):
    """Outcome of one transport call for one (recipient, message, channel)."""

    recipient_id: str
    channel: Channel
    subject: str = ""
    success: bool
    error_kind: ErrorKind | None = None
    error: str | None = None


class DispatchReport(BaseModel):
    """Aggregated outcome of one dispatcher pass."""

    sent: int = 0
    failed: int = 0
    skipped: int = 0
    cancelled: bool = False
    results: list[DeliveryResult] = Field(default_factory=list)

    def record(self, result: DeliveryResult) -> None:
        self.results.append(result)
        if result.success:
            self.sent += 1
        else:
            self.failed += 1

    @property
    def attempted(self) -> int:
        return self.sent + self.failed


class RunResult(BaseModel):
    """Typed outcome of one job run."""

    job: str
    status: str = Field(..., pattern="^(success|failed|skipped)$")
    state: JobState
    error_kind: ErrorKind | None = None
    error: str | None = None
    report: DispatchReport | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"
