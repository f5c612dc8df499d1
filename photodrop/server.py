"""
HTTP front end: gallery page, uploads, static files and the originals archive.
"""

import logging
import os
import socketserver
from typing import Optional
from wsgiref.simple_server import WSGIServer

from bottle import Bottle, HTTPResponse, abort, request, response, run as bottle_run, static_file, template

from .archive_exporter import ArchiveExporter
from .archive_progress import ArchiveProgress
from .catalog import CatalogLister
from .config import ServerConfig
from .exceptions import ArchiveError, ListError, PhotodropError, UploadInputError, UploadTooLargeError
from .file_store import OriginalStore, PreviewCache
from .ingestion import Ingestor
from .preview_generator import PreviewGenerator

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
VIEWS_DIR = os.path.join(PACKAGE_DIR, 'views')
STATIC_DIR = os.path.join(PACKAGE_DIR, 'static')
TEMPLATE_LOOKUP = [VIEWS_DIR]

UPLOAD_FIELD = 'file'


class ThreadingWSGIServer(socketserver.ThreadingMixIn, WSGIServer):
    """wsgiref server handling each request on its own thread."""
    daemon_threads = True


def plain_error(error):
    """Render errors as their bare message."""
    response.content_type = 'text/plain; charset=utf-8'
    return error.body


def create_app(config: ServerConfig, logger: Optional[logging.Logger] = None) -> Bottle:
    """
    Build the WSGI application for the given configuration.

    Args:
        config: Server configuration
        logger: Optional logger instance

    Returns:
        Bottle application
    """
    logger = logger or logging.getLogger(__name__)

    originals = OriginalStore(config.storage_path, logger)
    previews = PreviewCache(config.image_cache_path, logger)
    preview_gen = PreviewGenerator(
        width=config.preview_width,
        quality=config.preview_quality,
        logger=logger
    )
    ingestor = Ingestor(originals, previews, preview_gen, logger)
    lister = CatalogLister(previews, limit=config.catalog_limit, logger=logger)
    exporter = ArchiveExporter(config.storage_path, logger)

    app = Bottle()
    for code in (400, 404, 405, 413, 500):
        app.error_handler[code] = plain_error

    @app.get('/')
    def gallery():
        """Render the preview gallery, newest first."""
        try:
            page = lister.page()
        except ListError as e:
            logger.error(f"Gallery listing failed for {e.path}: {e}")
            abort(500, "could not list files")
        return template('index', page=page, template_lookup=TEMPLATE_LOOKUP)

    @app.post('/')
    def upload():
        """Accept a single file upload in the 'file' form field."""
        try:
            filename, data = read_upload(request, config.max_upload_bytes)
            result = ingestor.ingest(filename, data)
        except PhotodropError as e:
            logger.error(f"Upload failed ({e.status_code}): {e}")
            abort(e.status_code, e.message)

        logger.debug(f"Upload complete: {result.original.filename}")
        response.content_type = 'text/plain; charset=utf-8'
        return 'ok'

    @app.get('/files/all')
    def files_archive():
        """Download every original as one zip archive."""
        try:
            stream = exporter.export(progress=ArchiveProgress(logger=logger))
        except ArchiveError as e:
            logger.error(f"Archive export failed for {e.path}: {e}")
            abort(e.status_code, e.message)

        r = HTTPResponse(body=stream)
        r.set_header('Content-Type', stream.content_type)
        r.set_header('Content-Length', str(stream.size))
        r.set_header('Content-Disposition', f'attachment; filename="{stream.filename}"')
        return r

    @app.get('/files/<filepath:path>')
    def files(filepath):
        return static_file(filepath, root=config.storage_path)

    @app.get('/imagecache/<filepath:path>')
    def imagecache(filepath):
        return static_file(filepath, root=config.image_cache_path)

    @app.get('/static/<filepath:path>')
    def static(filepath):
        """Serve the gallery's own stylesheet and scripts."""
        return static_file(filepath, root=STATIC_DIR)

    return app


def read_upload(req, max_bytes: int):
    """
    Pull the uploaded file out of a multipart request.

    Returns:
        Tuple of (client filename exactly as sent, content)

    Raises:
        UploadTooLargeError: If the body exceeds max_bytes
        UploadInputError: If the form has no file field
    """
    if req.content_length > max_bytes:
        raise UploadTooLargeError(
            f"request body too large: {req.content_length} bytes (limit {max_bytes})"
        )

    upload = req.files.get(UPLOAD_FIELD)
    if upload is None:
        raise UploadInputError(f"can not open form file: no '{UPLOAD_FIELD}' field")

    data = upload.file.read()
    if len(data) > max_bytes:
        raise UploadTooLargeError(f"upload too large: {len(data)} bytes (limit {max_bytes})")

    # FileUpload.filename is sanitized and would change the extension
    return upload.raw_filename or '', data


def run(config: ServerConfig, logger: Optional[logging.Logger] = None) -> None:
    """
    Serve the application until interrupted.

    Raises:
        OSError: If the listening socket cannot be bound
    """
    logger = logger or logging.getLogger(__name__)
    app = create_app(config, logger)
    logger.info(f"Serving on: {config.host}:{config.port}")
    bottle_run(
        app=app,
        host=config.host,
        port=config.port,
        server='wsgiref',
        server_class=ThreadingWSGIServer,
        quiet=True,
    )
    logger.info("Exiting.")
