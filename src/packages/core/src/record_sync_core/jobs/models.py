"""Job models."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, Enum):
    """Job lifecycle states. Transitions only move forward."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    COMPLETED_WITH_ERRORS = "COMPLETED_WITH_ERRORS"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.COMPLETED_WITH_ERRORS)


class Operation(str, Enum):
    """Write operation requested for a job."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    UPSERT = "UPSERT"

    @classmethod
    def parse(cls, value: "str | Operation | None") -> "Operation":
        """Parse an operation name case-insensitively. Defaults to INSERT."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.INSERT
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown operation: {value}") from None


class ErrorRow(BaseModel):
    """A record that failed to sync, pinned to its position in the submitted list."""

    model_config = ConfigDict(frozen=True)

    row_number: int = Field(..., ge=1)
    error_message: str
    raw_data: str
    id: int | None = None


class Job(BaseModel):
    """Job metadata and counters."""

    job_id: str
    target_id: str
    resource_type: str
    status: JobStatus
    total_records: int = 0
    processed_records: int = 0
    success_count: int = 0
    error_count: int = 0
    source_label: str | None = None
    operation: Operation = Operation.INSERT
    external_id_field: str | None = None
    creator: str | None = None
    created_at: str
    completed_at: str | None = None
    errors: list[ErrorRow] = Field(default_factory=list)

    def summary(self) -> dict:
        """Job fields without the error rows."""
        return self.model_dump(mode="json", exclude={"errors"})
