"""
S3 client for AWS operations.
Handles object upload, visibility polling and presigned download URLs.
"""
import time
from typing import Callable, Optional, Type

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, BotoCoreError

from config import get_settings
from core.schemas import AssumedCredentials
from core.utils.logger import setup_logger
from core.exceptions import (
    RemoteOperationError,
    S3BucketNotFoundError,
    S3AccessDeniedError,
    S3KeyNotFoundError,
    S3UploadError,
    S3PresignError,
    ObjectWaitTimeoutError,
)

logger = setup_logger(__name__)

ACCESS_DENIED_CODES = ('AccessDenied', 'InvalidAccessKeyId', 'SignatureDoesNotMatch', 'ExpiredToken')
MISSING_OBJECT_CODES = ('404', 'NoSuchKey', 'NotFound')


def create_s3_client(region: Optional[str] = None, credentials: Optional[AssumedCredentials] = None):
    """
    Create an S3 client.

    Credentials are taken from `credentials` when given, then from the
    AWS_* settings, and otherwise left to the boto3 default chain.

    Args:
        region: AWS region (default: AWS_REGION setting)
        credentials: Temporary credentials from an assumed role

    Returns:
        boto3 S3 client
    """
    settings = get_settings()
    region = region or settings.aws_region

    client_kwargs = {
        'region_name': region,
        'config': Config(
            signature_version=settings.s3_signature_version,
            retries={'max_attempts': 5, 'mode': 'standard'},
        ),
    }
    if credentials is not None:
        client_kwargs.update(
            aws_access_key_id=credentials.access_key_id,
            aws_secret_access_key=credentials.secret_access_key,
            aws_session_token=credentials.session_token,
        )
    elif settings.aws_access_key_id and settings.aws_secret_access_key:
        client_kwargs.update(
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            aws_session_token=settings.aws_session_token or None,
        )

    logger.debug(f"Creating S3 client for region {region}")
    return boto3.client('s3', **client_kwargs)


def _translate_client_error(
    e: ClientError,
    bucket: str,
    key: str,
    fallback: Type[RemoteOperationError],
    action: str
) -> RemoteOperationError:
    """Translate a botocore ClientError into an application exception"""
    error_code = e.response.get('Error', {}).get('Code', 'Unknown')
    error_message = e.response.get('Error', {}).get('Message', str(e))
    detail = {"bucket": bucket, "s3_key": key, "error_code": error_code}

    if error_code == 'NoSuchBucket':
        return S3BucketNotFoundError(message=f"S3 bucket not found: {bucket}", detail=detail)
    if error_code in ACCESS_DENIED_CODES:
        return S3AccessDeniedError(message=f"S3 access denied: {error_message}", detail=detail)
    if error_code == 'NoSuchKey':
        return S3KeyNotFoundError(message=f"S3 key not found: {key}", detail=detail)
    return fallback(message=f"S3 {action} error: {error_message}", detail=detail)


def put_local_file(client, bucket: str, key: str, local_path: str) -> None:
    """
    Upload a local file to S3 with a single PutObject call.

    Args:
        client: boto3 S3 client
        bucket: Target bucket
        key: Object key
        local_path: Path of the file to send

    Raises:
        S3BucketNotFoundError: If S3 bucket doesn't exist
        S3AccessDeniedError: If S3 access is denied
        S3UploadError: For other S3 errors, or if the file cannot be read
    """
    try:
        with open(local_path, 'rb') as body:
            client.put_object(Bucket=bucket, Key=key, Body=body)
    except ClientError as e:
        raise _translate_client_error(e, bucket, key, S3UploadError, "upload") from e
    except BotoCoreError as e:
        raise S3UploadError(
            message=f"AWS service error: {str(e)}",
            detail={"bucket": bucket, "s3_key": key}
        ) from e
    except OSError as e:
        raise S3UploadError(
            message=f"Cannot read {local_path}: {e}",
            detail={"bucket": bucket, "s3_key": key, "local_path": local_path, "error_code": "LocalFileReadError"}
        ) from e


def wait_until_object_exists(
    client,
    bucket: str,
    key: str,
    delay: Optional[float] = None,
    max_attempts: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep
) -> int:
    """
    Poll HeadObject until the object is visible.

    Args:
        client: boto3 S3 client
        bucket: Bucket holding the object
        key: Object key
        delay: Seconds between attempts (default: OBJECT_WAIT_DELAY_SECONDS)
        max_attempts: Attempts before giving up (default: OBJECT_WAIT_MAX_ATTEMPTS)
        sleep: Sleep function, replaceable by a fake clock

    Returns:
        Number of attempts it took

    Raises:
        ObjectWaitTimeoutError: If the object never became visible
        S3AccessDeniedError / S3BucketNotFoundError / S3UploadError: On other S3 errors
    """
    settings = get_settings()
    delay = settings.object_wait_delay_seconds if delay is None else delay
    max_attempts = settings.object_wait_max_attempts if max_attempts is None else max_attempts

    for attempt in range(1, max_attempts + 1):
        try:
            client.head_object(Bucket=bucket, Key=key)
            return attempt
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            if error_code not in MISSING_OBJECT_CODES:
                raise _translate_client_error(e, bucket, key, S3UploadError, "head object") from e
            logger.warning(f"Object {key} not visible yet (attempt {attempt}/{max_attempts})")
        except BotoCoreError as e:
            raise S3UploadError(
                message=f"AWS service error: {str(e)}",
                detail={"bucket": bucket, "s3_key": key}
            ) from e

        if attempt < max_attempts:
            sleep(delay)

    raise ObjectWaitTimeoutError(
        message=f"Object {key} not visible in {bucket} after {max_attempts} attempts",
        detail={"bucket": bucket, "s3_key": key, "error_code": "ObjectWaitTimeout"}
    )


def generate_presigned_download_url(client, bucket: str, key: str, expires_in: int) -> str:
    """
    Generate a presigned URL for downloading a file from S3.

    Args:
        client: boto3 S3 client
        bucket: Bucket holding the object
        key: The S3 object key (path) for the file
        expires_in: URL expiration time in seconds

    Returns:
        Presigned URL string for GET operation

    Raises:
        S3AccessDeniedError: If S3 access is denied
        S3PresignError: For other S3 errors
    """
    try:
        return client.generate_presigned_url(
            'get_object',
            Params={
                'Bucket': bucket,
                'Key': key
            },
            ExpiresIn=expires_in
        )
    except ClientError as e:
        raise _translate_client_error(e, bucket, key, S3PresignError, "presign") from e
    except BotoCoreError as e:
        raise S3PresignError(
            message=f"AWS service error: {str(e)}",
            detail={"bucket": bucket, "s3_key": key}
        ) from e
