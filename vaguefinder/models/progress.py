"""Provider load progress model."""

from pydantic import BaseModel, Field

from vaguefinder.models.enums import LoadStatus


class ProgressSnapshot(BaseModel):
    """Most recent update emitted while a provider loads."""
    
    status: LoadStatus
    resource_name: str | None = Field(default=None, description="Model being loaded")
    resource_file: str | None = Field(default=None, description="File currently handled")
    progress_fraction: float | None = Field(default=None, ge=0.0, le=1.0)
    bytes_loaded: int | None = None
    bytes_total: int | None = None
