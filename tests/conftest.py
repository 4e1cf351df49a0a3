import io

import pytest
from PIL import Image
from starlette.requests import Request

BOUNDARY = "toolkit-test-boundary"


@pytest.fixture
def anyio_backend():
    # Dwing anyio om alleen asyncio te gebruiken (geen Trio nodig)
    return "asyncio"


def _image_bytes(fmt: str) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (16, 16), color=(200, 30, 30)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture(scope="session")
def png_bytes() -> bytes:
    return _image_bytes("PNG")


@pytest.fixture(scope="session")
def jpeg_bytes() -> bytes:
    return _image_bytes("JPEG")


@pytest.fixture
def make_request():
    """
    Build a Starlette Request whose body arrives in chunks.
    make_request(body, headers={...}, chunk_size=None)
    """

    def _make(body: bytes = b"", headers: dict | None = None, chunk_size: int | None = None) -> Request:
        if chunk_size:
            chunks = [body[i:i + chunk_size] for i in range(0, len(body), chunk_size)] or [b""]
        else:
            chunks = [body]
        messages = [
            {"type": "http.request", "body": c, "more_body": i < len(chunks) - 1}
            for i, c in enumerate(chunks)
        ]

        async def receive():
            if messages:
                return messages.pop(0)
            return {"type": "http.disconnect"}

        raw_headers = [
            (k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()
        ]
        scope = {
            "type": "http",
            "method": "POST",
            "path": "/",
            "query_string": b"",
            "headers": raw_headers,
        }
        return Request(scope, receive)

    return _make


@pytest.fixture
def multipart():
    """
    multipart([(field, filename_or_None, content), ...]) -> (body, content_type)
    """

    def _build(parts):
        body = b""
        for name, filename, content in parts:
            disposition = f'form-data; name="{name}"'
            if filename is not None:
                disposition += f'; filename="{filename}"'
            body += f"--{BOUNDARY}\r\nContent-Disposition: {disposition}\r\n".encode()
            if filename is not None:
                body += b"Content-Type: application/octet-stream\r\n"
            body += b"\r\n" + content + b"\r\n"
        body += f"--{BOUNDARY}--\r\n".encode()
        return body, f"multipart/form-data; boundary={BOUNDARY}"

    return _build
