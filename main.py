"""
Command line entry point: upload a file and print a presigned download URL.

Usage:
    python main.py report.csv --directory assets/ --bucket my-bucket --hours 24
"""
import argparse
import sys
from typing import List, Optional

from config import get_settings
from core.aws.s3_client import create_s3_client
from core.exceptions import ConfigurationError
from core.utils.logger import app_logger as logger
from services.file_service import FileUploadService

DEFAULT_DIRECTORY = "assets/"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3-presigned",
        description="Upload a file to S3 and print a presigned download URL"
    )
    parser.add_argument('file', nargs='?', default=None, help='File name')
    parser.add_argument('--directory', default=DEFAULT_DIRECTORY,
                        help=f'Directory holding the file (default: {DEFAULT_DIRECTORY})')
    parser.add_argument('--bucket', default=None, help='S3 bucket name (default: S3_BUCKET_NAME)')
    parser.add_argument('--region', default=None, help='AWS region (default: AWS_REGION)')
    parser.add_argument('--hours', type=int, default=None, help='Link expiration in hours')
    parser.add_argument('--env-folder', action='store_true',
                        help='Store under <env>/<YYYY>/<MM>/<DD>/')
    parser.add_argument('--role-arn', default=None, help='Role to assume for signing the link')
    parser.add_argument('--session-name', default='presigned-link',
                        help='Role session name (with --role-arn)')
    return parser


def run(argv: Optional[List[str]] = None, service: Optional[FileUploadService] = None) -> int:
    """Run the command and return its exit code"""
    args = build_parser().parse_args(argv)
    settings = get_settings()

    if not args.file:
        print("A file name is required", file=sys.stderr)
        return 2
    print(f"You passed an argument: {args.file}", file=sys.stderr)

    if service is None:
        client = create_s3_client(args.region) if args.region else None
        service = FileUploadService(client=client, settings=settings)
    service.set_bucket(args.bucket or settings.s3_bucket_name)

    try:
        if args.role_arn:
            url = service.get_presigned_file_with_sts(
                args.file,
                args.directory,
                args.region or settings.aws_region,
                args.role_arn,
                args.session_name,
                use_env_folder=args.env_folder,
                link_duration_hours=args.hours
            )
        else:
            url = service.get_presigned_file_url(
                args.file,
                args.directory,
                use_env_folder=args.env_folder,
                link_duration_hours=args.hours
            )
    except ConfigurationError as e:
        logger.error(f"{e.message}. Pass --bucket or set S3_BUCKET_NAME")
        return 2

    if not url:
        print(f"Failed to create presigned URL: {service.get_error()}", file=sys.stderr)
        return 1

    print(url)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
