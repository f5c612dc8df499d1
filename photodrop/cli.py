"""
Command Line Interface for the photodrop server.
"""

import argparse
import logging
import os
import shutil
from typing import List, Optional

from .archive_exporter import ArchiveExporter
from .archive_progress import ArchiveProgress
from .config import DEFAULT_CATALOG_LIMIT, DEFAULT_PREVIEW_WIDTH, ServerConfig
from .exceptions import ArchiveError
from . import server


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('photodrop')


def cmd_serve(args: argparse.Namespace) -> int:
    """Execute serve command."""
    logger = setup_logging(args.verbose)

    config = ServerConfig.from_args(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    logger.info(f"Storage: {config.storage_path}")
    logger.info(f"Image cache: {config.image_cache_path}")
    logger.info(f"Preview width: {config.preview_width}px")

    try:
        server.run(config, logger)
    except OSError as e:
        logger.error(f"Could not serve on {config.host}:{config.port}: {e}")
        return 1
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Execute export command: write the originals archive to a local file."""
    logger = setup_logging(args.verbose)

    logger.info(f"Storage: {args.storage_path}")
    logger.info(f"Output: {args.output}")

    exporter = ArchiveExporter(args.storage_path, logger)
    progress = None
    if not args.quiet:
        progress = ArchiveProgress(show_files=args.show_files, logger=logger)

    try:
        with exporter.export(progress=progress) as stream:
            shutil.copyfile(stream.path, args.output)
    except ArchiveError as e:
        logger.error(f"Export failed: {e}")
        return 1
    except OSError as e:
        logger.error(f"Could not write {args.output}: {e}")
        return 1

    if not args.quiet:
        print()
        print(f"Files: {stream.entry_count}")
        print(f"Archive: {os.path.abspath(args.output)} ({stream.size} bytes)")

    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='photodrop',
        description='Photo upload server with gallery previews',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  photodrop serve --storage-path ./files --image-cache-path ./cache --port 8080
  photodrop export --storage-path ./files -o originals.zip
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Run the web server')
    serve_parser.add_argument('--storage-path', required=True, help='Directory for uploaded originals')
    serve_parser.add_argument('--image-cache-path', required=True, help='Directory for preview images')
    serve_parser.add_argument('--port', type=int, required=True, help='Serve port')
    serve_parser.add_argument('--host', default='0.0.0.0', help='Interface to bind (default: 0.0.0.0)')
    serve_parser.add_argument('--preview-width', type=int, default=DEFAULT_PREVIEW_WIDTH,
                              help=f'Preview width in pixels (default: {DEFAULT_PREVIEW_WIDTH})')
    serve_parser.add_argument('--catalog-limit', type=int, default=DEFAULT_CATALOG_LIMIT,
                              help=f'Previews shown on the gallery page (default: {DEFAULT_CATALOG_LIMIT})')
    serve_parser.add_argument('--max-upload-mb', type=int, default=30,
                              help='Largest accepted upload in MiB (default: 30)')
    serve_parser.add_argument('-v', '--verbose', action='store_true', default=argparse.SUPPRESS,
                              help='Enable verbose logging')

    # Export command
    export_parser = subparsers.add_parser('export', help='Write all originals to a zip file')
    export_parser.add_argument('--storage-path', required=True, help='Directory of uploaded originals')
    export_parser.add_argument('-o', '--output', default='files.zip', help='Output archive file')
    export_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    export_parser.add_argument('--show-files', action='store_true',
                               help='Print each file as it is archived')
    export_parser.add_argument('-v', '--verbose', action='store_true', default=argparse.SUPPRESS,
                               help='Enable verbose logging')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'serve':
        return cmd_serve(parsed_args)
    elif parsed_args.command == 'export':
        return cmd_export(parsed_args)

    return 1
