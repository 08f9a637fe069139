"""
Helper utility functions.
"""
import traceback
from datetime import date
from typing import Optional

from botocore.exceptions import ClientError

from core.exceptions import FileLinkException

SECONDS_PER_HOUR = 3600


def get_environment_folder(environment: str, today: Optional[date] = None) -> str:
    """
    Build the dated folder prefix used for environment-partitioned keys.

    Args:
        environment: Environment label (e.g. "dev", "prod")
        today: Date to use (default: current local date)

    Returns:
        Folder prefix with a trailing slash

    Example:
        >>> get_environment_folder("dev", date(2024, 3, 7))
        'dev/2024/03/07/'
    """
    today = today or date.today()
    return f"{environment}/{today:%Y/%m/%d}/"


def clamp_link_duration(hours: int, max_hours: int) -> int:
    """Cap a link duration (hours) at max_hours."""
    return min(int(hours), max_hours)


def hours_to_seconds(hours: int) -> int:
    """Convert a link duration in hours to seconds."""
    return int(hours) * SECONDS_PER_HOUR


def describe_exception(exc: BaseException) -> str:
    """
    Render an exception as "<code>: <message> <traceback>".

    The code is the AWS error code for botocore ClientErrors, the
    error_code of application exceptions, or the exception class name.
    """
    if isinstance(exc, ClientError):
        code = exc.response.get('Error', {}).get('Code', 'Unknown')
    elif isinstance(exc, FileLinkException):
        code = exc.error_code
    else:
        code = type(exc).__name__

    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return f"{code}: {exc} {trace}".rstrip()
