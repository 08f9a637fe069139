"""
STS client for AWS operations.
Exchanges a role ARN for temporary credentials and builds scoped S3 clients.
"""
from typing import Callable, Optional

import boto3
from botocore.exceptions import ClientError, BotoCoreError

from config import get_settings
from core.aws.s3_client import create_s3_client
from core.schemas import AssumedCredentials
from core.utils.logger import setup_logger
from core.exceptions import AssumeRoleError

logger = setup_logger(__name__)


def create_sts_client(region: Optional[str] = None):
    """Create an STS client using the default credential chain"""
    return boto3.client('sts', region_name=region or get_settings().aws_region)


def assume_role(
    region: str,
    role_arn: str,
    session_name: str,
    sts_client=None,
    sts_client_factory: Optional[Callable] = None
) -> AssumedCredentials:
    """
    Assume an IAM role and return its temporary credentials.

    Args:
        region: AWS region of the token service
        role_arn: ARN of the role to assume
        session_name: Caller-chosen role session name
        sts_client: Existing STS client
        sts_client_factory: Builds the STS client from `region` when
            sts_client is not given (default: create_sts_client)

    Returns:
        AssumedCredentials for the role session

    Raises:
        AssumeRoleError: If the role cannot be assumed
    """
    detail = {"role_arn": role_arn, "session_name": session_name, "region": region}
    try:
        if sts_client is None:
            sts_client = (sts_client_factory or create_sts_client)(region)
        logger.info(f"Assuming role {role_arn} (session: {session_name})")
        result = sts_client.assume_role(RoleArn=role_arn, RoleSessionName=session_name)
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        error_message = e.response.get('Error', {}).get('Message', str(e))
        raise AssumeRoleError(
            message=f"Error creating STS session: {error_message}",
            detail={**detail, "error_code": error_code}
        ) from e
    except BotoCoreError as e:
        raise AssumeRoleError(
            message=f"AWS service error: {str(e)}",
            detail={**detail, "error_code": type(e).__name__}
        ) from e

    credentials = result['Credentials']
    return AssumedCredentials(
        access_key_id=credentials['AccessKeyId'],
        secret_access_key=credentials['SecretAccessKey'],
        session_token=credentials['SessionToken'],
        expiration=credentials.get('Expiration'),
    )


def create_scoped_s3_client(
    region: str,
    role_arn: str,
    session_name: str,
    sts_client=None,
    sts_client_factory: Optional[Callable] = None
):
    """
    Return a new S3 client signing with the assumed role's credentials.

    Raises:
        AssumeRoleError: If the role cannot be assumed or the client cannot be built
    """
    credentials = assume_role(
        region, role_arn, session_name,
        sts_client=sts_client, sts_client_factory=sts_client_factory
    )
    try:
        return create_s3_client(region=region, credentials=credentials)
    except BotoCoreError as e:
        raise AssumeRoleError(
            message=f"Cannot create S3 client for role {role_arn}: {str(e)}",
            detail={"role_arn": role_arn, "region": region, "error_code": type(e).__name__}
        ) from e
