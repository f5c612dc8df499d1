"""
Pytest fixtures for photodrop tests.
"""

import io
from dataclasses import dataclass
from typing import Dict
from wsgiref.util import setup_testing_defaults

import pytest


def make_jpeg(size=(100, 100), color='red') -> bytes:
    from PIL import Image

    img = Image.new('RGB', size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format='JPEG')
    return buffer.getvalue()


@pytest.fixture
def jpeg_factory():
    """Fixture providing a function that builds JPEG bytes of a given size."""
    return make_jpeg


@pytest.fixture
def sample_image_bytes():
    """Fixture providing a landscape JPEG wider than the preview width."""
    return make_jpeg((1024, 768), color='blue')


@pytest.fixture
def small_image_bytes():
    """Fixture providing a JPEG narrower than the preview width."""
    return make_jpeg((100, 100))


@pytest.fixture
def detailed_image_bytes():
    """Fixture providing a JPEG with enough detail that truncation breaks decoding."""
    from PIL import Image

    img = Image.linear_gradient('L').resize((1024, 768)).convert('RGB')
    buffer = io.BytesIO()
    img.save(buffer, format='JPEG', quality=95)
    return buffer.getvalue()


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes."""
    from PIL import Image

    img = Image.new('RGBA', (100, 100), color=(255, 0, 0, 128))
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def storage_dir(tmp_path):
    """Fixture providing an empty original store directory."""
    path = tmp_path / 'files'
    path.mkdir()
    return path


@pytest.fixture
def cache_dir(tmp_path):
    """Fixture providing an empty preview cache directory."""
    path = tmp_path / 'imagecache'
    path.mkdir()
    return path


@pytest.fixture
def original_store(storage_dir, logger):
    from photodrop.file_store import OriginalStore

    return OriginalStore(str(storage_dir), logger)


@pytest.fixture
def preview_cache(cache_dir, logger):
    from photodrop.file_store import PreviewCache

    return PreviewCache(str(cache_dir), logger)


@pytest.fixture
def config(storage_dir, cache_dir):
    """Fixture providing a valid server configuration."""
    from photodrop.config import ServerConfig

    return ServerConfig(
        storage_path=str(storage_dir),
        image_cache_path=str(cache_dir),
        port=8080,
    )


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')


@dataclass
class WsgiResponse:
    status_code: int
    headers: Dict[str, str]
    body: bytes

    @property
    def text(self) -> str:
        return self.body.decode('utf-8')


def wsgi_request(app, method, path, body=b'', content_type=None) -> WsgiResponse:
    """Drive a WSGI app with a single request and collect the response."""
    environ = {}
    setup_testing_defaults(environ)
    environ['REQUEST_METHOD'] = method
    environ['PATH_INFO'] = path
    environ['wsgi.input'] = io.BytesIO(body)
    environ['CONTENT_LENGTH'] = str(len(body))
    if content_type:
        environ['CONTENT_TYPE'] = content_type

    captured = {}

    def start_response(status, headers, exc_info=None):
        captured['status'] = status
        captured['headers'] = dict(headers)

    result = app(environ, start_response)
    try:
        out = b''.join(result)
    finally:
        if hasattr(result, 'close'):
            result.close()

    return WsgiResponse(
        status_code=int(captured['status'].split()[0]),
        headers=captured['headers'],
        body=out,
    )


@pytest.fixture
def make_client(logger):
    """Fixture providing a factory for clients bound to a fresh app."""
    from urllib3.filepost import encode_multipart_formdata
    from photodrop.server import create_app

    class Client:
        def __init__(self, app):
            self.app = app

        def get(self, path):
            return wsgi_request(self.app, 'GET', path)

        def post(self, path, fields):
            body, content_type = encode_multipart_formdata(fields)
            return wsgi_request(self.app, 'POST', path, body, content_type)

    def factory(config):
        return Client(create_app(config, logger))

    return factory


@pytest.fixture
def client(make_client, config):
    """Fixture providing a client for the default configuration."""
    return make_client(config)
