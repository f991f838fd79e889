"""
Command-line interface for OBS Python SDK
Uploads in-memory data or local files using configuration from the environment
"""

import argparse
import asyncio
import json
import sys
from typing import Dict, Optional

from . import __version__
from .client import OBSClient
from .config import OBSConfiguration
from .exceptions import OBSError
from .models import ObjectACL, StorageClass, UploadFileRequest, UploadObjectRequest
from .signing.utils import md5_base64, md5_base64_file


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='obs-cli',
        description='Upload objects to OBS. Credentials and endpoint are read from '
                    'OBS_AK, OBS_SK, OBS_SECURITY_TOKEN and OBS_ENDPOINT.'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'OBS Python SDK {__version__}'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    setup_put_object_parser(subparsers)
    setup_put_file_parser(subparsers)

    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--bucket', required=True, help='Target bucket')
    parser.add_argument('--key', required=True, help='Target object key')
    parser.add_argument('--content-type', help='Content type (default: application/octet-stream)')
    parser.add_argument(
        '--acl',
        choices=[acl.value for acl in ObjectACL],
        help='Canned ACL for the object'
    )
    parser.add_argument(
        '--storage-class',
        choices=[sc.value for sc in StorageClass],
        help='Storage class for the object'
    )
    parser.add_argument(
        '--meta',
        action='append',
        default=[],
        metavar='KEY=VALUE',
        help='User metadata entry (repeatable)'
    )
    parser.add_argument('--md5', action='store_true', help='Send a Content-MD5 header')


def setup_put_object_parser(subparsers):
    """Setup in-memory upload subcommand."""
    put_parser = subparsers.add_parser('put-object', help='Upload data given on the command line or stdin')
    _add_common_arguments(put_parser)
    source = put_parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--data', help='Object content (UTF-8)')
    source.add_argument('--stdin', action='store_true', help='Read object content from stdin')


def setup_put_file_parser(subparsers):
    """Setup file upload subcommand."""
    put_parser = subparsers.add_parser('put-file', help='Upload a local file')
    _add_common_arguments(put_parser)
    put_parser.add_argument('--path', required=True, help='Local file to upload')


def parse_metadata(entries) -> Dict[str, str]:
    """Parse KEY=VALUE metadata arguments."""
    metadata = {}
    for entry in entries:
        key, sep, value = entry.partition('=')
        if not sep or not key:
            raise ValueError(f"Invalid metadata entry '{entry}', expected KEY=VALUE")
        metadata[key] = value
    return metadata


def _common_request_kwargs(args) -> dict:
    return {
        'bucket_name': args.bucket,
        'object_key': args.key,
        'content_type': args.content_type,
        'acl': ObjectACL(args.acl) if args.acl else None,
        'storage_class': StorageClass(args.storage_class) if args.storage_class else None,
        'metadata': parse_metadata(args.meta),
    }


async def handle_put_object_command(args, client: OBSClient) -> int:
    """Handle in-memory upload."""
    data = sys.stdin.buffer.read() if args.stdin else args.data.encode('utf-8')
    request = UploadObjectRequest(
        data=data,
        content_md5=md5_base64(data) if args.md5 else None,
        **_common_request_kwargs(args)
    )
    response = await client.upload_object(request)
    print(json.dumps(response.to_dict(), indent=2))
    return 0


async def handle_put_file_command(args, client: OBSClient) -> int:
    """Handle file upload."""
    request = UploadFileRequest(
        file_path=args.path,
        content_md5=md5_base64_file(args.path) if args.md5 else None,
        **_common_request_kwargs(args)
    )
    response = await client.upload_file(request)
    print(json.dumps(response.to_dict(), indent=2))
    return 0


async def run_command(args, configuration: OBSConfiguration) -> int:
    """Run the selected command with a client for the configuration."""
    async with OBSClient(configuration) as client:
        if args.command == 'put-object':
            return await handle_put_object_command(args, client)
        return await handle_put_file_command(args, client)


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command not in ('put-object', 'put-file'):
        parser.print_help()
        return 1

    try:
        configuration = OBSConfiguration.from_env()
        if args.verbose:
            configuration.log_level = 'debug'
        return asyncio.run(run_command(args, configuration))
    except OBSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
