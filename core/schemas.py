"""
Pydantic models passed between the CLI, the service and the AWS layer.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UploadRequest(BaseModel):
    """A single upload-and-link request. Built per call, never stored."""
    model_config = ConfigDict(frozen=True)

    file_name: str = Field(
        ...,
        min_length=1,
        description="Name of the file; also the object key (should be unique)",
        examples=["report.csv"]
    )
    local_directory: str = Field(
        default="",
        description="Directory holding the file, including the trailing slash",
        examples=["/tmp/"]
    )
    use_env_folder: bool = Field(
        default=False,
        description="Store under <env>/<YYYY>/<MM>/<DD>/ instead of the bucket root"
    )
    link_duration_hours: int = Field(
        default=72,
        ge=1,
        description="Lifetime of the presigned link in hours"
    )

    @field_validator('file_name')
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """File name must not be blank"""
        if not v.strip():
            raise ValueError('File name must not be blank')
        return v

    @property
    def local_path(self) -> str:
        return f"{self.local_directory}{self.file_name}"


class AssumedCredentials(BaseModel):
    """Short-lived credentials returned by the token service"""
    model_config = ConfigDict(frozen=True)

    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: Optional[datetime] = None


class OperationResult(BaseModel):
    """Outcome of an operation: a value on success, an error message otherwise"""
    value: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return bool(self.value) and not self.error
