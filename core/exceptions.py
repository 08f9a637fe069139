"""
Custom exceptions for the file link service.
All exceptions inherit from base FileLinkException.
"""


# ============================================================================
# Base Exception
# ============================================================================

class FileLinkException(Exception):
    """Base exception for all application errors"""
    def __init__(self, message: str, detail: dict = None):
        self.message = message
        self.detail = detail or {}
        super().__init__(self.message)

    @property
    def error_code(self) -> str:
        return self.detail.get("error_code", type(self).__name__)


# ============================================================================
# Local Precondition Exceptions
# ============================================================================

class ConfigurationError(FileLinkException):
    """Service used before a required setting (bucket name) was provided"""


class SourceFileNotFoundError(FileLinkException):
    """Local file to upload does not exist"""


# ============================================================================
# Remote (SDK) Exceptions
# ============================================================================

class RemoteOperationError(FileLinkException):
    """Base exception for object store and token service failures"""


class S3BucketNotFoundError(RemoteOperationError):
    """S3 bucket doesn't exist or not accessible"""


class S3AccessDeniedError(RemoteOperationError):
    """S3 access denied (credentials/permissions issue)"""


class S3KeyNotFoundError(RemoteOperationError):
    """S3 object key doesn't exist"""


class S3UploadError(RemoteOperationError):
    """Failed to put an object"""


class S3PresignError(RemoteOperationError):
    """Failed to generate presigned download URL"""


class ObjectWaitTimeoutError(RemoteOperationError):
    """Object did not become visible within the polling budget"""


class AssumeRoleError(RemoteOperationError):
    """Token service refused or failed the role assumption"""
