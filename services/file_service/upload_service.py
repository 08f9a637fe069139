"""
File upload service.
Puts local files into an S3 bucket and hands out presigned download links,
optionally signing with credentials from an assumed role.
"""
import os
import time
from datetime import date
from typing import Callable, Optional

from config import Settings, get_settings
from core.aws.s3_client import (
    create_s3_client,
    put_local_file,
    wait_until_object_exists,
    generate_presigned_download_url,
)
from core.aws.sts_client import create_sts_client, create_scoped_s3_client
from core.exceptions import (
    ConfigurationError,
    FileLinkException,
    SourceFileNotFoundError,
)
from core.schemas import OperationResult, UploadRequest
from core.utils.helpers import (
    clamp_link_duration,
    describe_exception,
    get_environment_folder,
    hours_to_seconds,
)
from core.utils.logger import setup_logger

logger = setup_logger(__name__)


class FileUploadService:
    """
    Store files in S3 and generate public links to download them.

    Set the bucket name with `set_bucket` before any operation.

    The string-returning methods report failures through an empty return
    value plus `get_error()`. `upload_and_presign` returns an
    `OperationResult` instead and leaves the error channel alone.

    An instance holds mutable state (bucket, client, last error); use one
    instance per thread.
    """

    def __init__(
        self,
        client=None,
        settings: Optional[Settings] = None,
        sts_client_factory: Optional[Callable] = None,
        today: Callable[[], date] = date.today,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.settings = settings or get_settings()
        self._client = client if client is not None else create_s3_client(self.settings.aws_region)
        self._sts_client_factory = sts_client_factory or create_sts_client
        self._today = today
        self._sleep = sleep
        self._bucket_name = ""
        self._error = ""

    @property
    def client(self):
        """S3 client currently used for every operation"""
        return self._client

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def set_bucket(self, bucket: str) -> None:
        self._bucket_name = bucket

    def get_error(self) -> str:
        """Last recorded error message, empty if the last operation succeeded"""
        return self._error

    def check_bucket_set(self) -> None:
        """
        Raises:
            ConfigurationError: If no bucket name was set
        """
        if not self._bucket_name:
            raise ConfigurationError(
                message="Bucket name is not set",
                detail={"error_code": "500"}
            )

    def get_folder(self) -> str:
        """Folder for the current environment, e.g. dev/2024/03/07/"""
        return get_environment_folder(self.settings.app_env, self._today())

    # ------------------------------------------------------------------
    # Raising core, shared by both result styles
    # ------------------------------------------------------------------

    def _build_key(self, file_name: str, use_env_folder: bool) -> str:
        if use_env_folder:
            return self.get_folder() + file_name
        return file_name

    def _store(self, client, request: UploadRequest) -> str:
        local_path = request.local_path
        if not os.path.isfile(local_path):
            raise SourceFileNotFoundError(
                message=f"File for S3 upload not found: {local_path}",
                detail={"local_path": local_path, "error_code": "FileNotFound"}
            )

        key = self._build_key(request.file_name, request.use_env_folder)
        logger.info(f"Putting a file: {key} in bucket: {self._bucket_name}")
        put_local_file(client, self._bucket_name, key, local_path)

        # wait for the object to be accessible
        wait_until_object_exists(
            client,
            self._bucket_name,
            key,
            delay=self.settings.object_wait_delay_seconds,
            max_attempts=self.settings.object_wait_max_attempts,
            sleep=self._sleep
        )
        logger.info(f"File: {key} stored")
        return key

    def _presign(self, client, key: str, link_duration_hours: int) -> str:
        logger.info(f"Getting presigned URL for: {key}")
        url = generate_presigned_download_url(
            client,
            self._bucket_name,
            key,
            hours_to_seconds(link_duration_hours)
        )
        logger.info(f"Presigned URL created: {url}")
        return url

    # ------------------------------------------------------------------
    # String results + last-error channel
    # ------------------------------------------------------------------

    def put_file(self, file_name: str, local_directory: str, use_env_folder: bool = False) -> str:
        """
        Store a local file in the bucket.

        Args:
            file_name: Name of the file, used as the object key (should be unique)
            local_directory: Directory of the file, with a trailing slash
            use_env_folder: Store under the environment folder (see get_folder)

        Returns:
            Object key, or "" on failure (see get_error)

        Raises:
            ConfigurationError: If no bucket name was set
        """
        self.check_bucket_set()
        self._error = ""
        # blank names fall through to the missing-file check
        request = UploadRequest.model_construct(
            file_name=file_name,
            local_directory=local_directory,
            use_env_folder=use_env_folder
        )
        try:
            return self._store(self._client, request)
        except SourceFileNotFoundError as e:
            self._error = e.message
            logger.critical(self._error)
        except FileLinkException as e:
            self._error = describe_exception(e)
            logger.critical(f"Exception saving file: {file_name} in S3. Error: {self._error}")
        return ""

    def get_presigned_url(self, key: str, link_duration_hours: Optional[int] = None) -> str:
        """
        Get a presigned GET URL for an object in the bucket.

        Args:
            key: Object key to presign
            link_duration_hours: Link lifetime (default: DEFAULT_LINK_HOURS)

        Returns:
            Presigned URL, or "" on failure (see get_error)

        Raises:
            ConfigurationError: If no bucket name was set
        """
        self.check_bucket_set()
        self._error = ""
        if link_duration_hours is None:
            link_duration_hours = self.settings.default_link_hours
        try:
            return self._presign(self._client, key, int(link_duration_hours))
        except FileLinkException as e:
            self._error = describe_exception(e)
            logger.critical(f"Exception in presigned URL, key: {key}. Error: {self._error}")
        return ""

    def get_presigned_file_url(
        self,
        file_name: str,
        local_directory: str,
        use_env_folder: bool = False,
        link_duration_hours: Optional[int] = None
    ) -> str:
        """Store a file and return a presigned URL for it ("" on failure)"""
        key = self.put_file(file_name, local_directory, use_env_folder)
        if not key or self._error:
            return ""
        return self.get_presigned_url(key, link_duration_hours)

    def assume_role(self, region: str, role_arn: str, session_name: str) -> None:
        """
        Replace the S3 client with one signing as the given role.

        On failure the previous client stays in place and get_error() is set.
        """
        self._error = ""
        try:
            self._client = create_scoped_s3_client(
                region, role_arn, session_name, sts_client_factory=self._sts_client_factory
            )
        except FileLinkException as e:
            self._error = "Error creating STS-" + describe_exception(e)
            logger.critical(self._error)

    def get_presigned_file_with_sts(
        self,
        file_name: str,
        local_directory: str,
        region: str,
        role_arn: str,
        session_name: str,
        use_env_folder: bool = False,
        link_duration_hours: Optional[int] = None
    ) -> str:
        """
        Store a file and return a presigned URL signed as an assumed role.

        The link duration is capped at STS_MAX_LINK_HOURS (36), the
        lifetime of a role session. If the role cannot be assumed nothing
        is signed: the result is "" and get_error() holds the STS error,
        rather than falling back to the previous client.
        """
        key = self.put_file(file_name, local_directory, use_env_folder)
        if not key or self._error:
            return ""

        self.assume_role(region, role_arn, session_name)
        if self._error:
            return ""

        if link_duration_hours is None:
            link_duration_hours = self.settings.sts_link_hours
        hours = clamp_link_duration(link_duration_hours, self.settings.sts_max_link_hours)
        return self.get_presigned_url(key, hours)

    # ------------------------------------------------------------------
    # Typed result
    # ------------------------------------------------------------------

    def upload_and_presign(self, request: UploadRequest, client=None) -> OperationResult:
        """
        Store a file and presign it, reporting the outcome as a value.

        Args:
            request: What to upload and for how long to link it
            client: S3 client to use, e.g. from create_scoped_s3_client
                (default: the service client)

        Returns:
            OperationResult with the URL, or the error description

        Raises:
            ConfigurationError: If no bucket name was set
        """
        self.check_bucket_set()
        client = client if client is not None else self._client
        try:
            key = self._store(client, request)
            return OperationResult(value=self._presign(client, key, request.link_duration_hours))
        except FileLinkException as e:
            logger.critical(f"Upload and presign failed for {request.file_name}: {e.message}")
            return OperationResult(error=describe_exception(e))
