import pytest

from toolkit.services.sniffing import DEFAULT_TYPE, SNIFF_LEN, detect_content_type


@pytest.mark.parametrize(
    "data,expected",
    [
        (b"", "text/plain; charset=utf-8"),
        (b"Hello, World!", "text/plain; charset=utf-8"),
        (b"\x00\x01\x02\x03", DEFAULT_TYPE),
        (b"   <html><body>hi</body></html>", "text/html; charset=utf-8"),
        (b"<!DOCTYPE html>\n<html>", "text/html; charset=utf-8"),
        (b"<!-- comment -->", "text/html; charset=utf-8"),
        (b"<abbr>not a tag we know</abbr>", "text/plain; charset=utf-8"),
        (b'\n<?xml version="1.0"?><a/>', "text/xml; charset=utf-8"),
        (b"%PDF-1.7\n", "application/pdf"),
        (b"GIF89a\x01\x00", "image/gif"),
        (b"BM\x00\x00", "image/bmp"),
        (b"RIFF\x24\x00\x00\x00WEBPVP8 ", "image/webp"),
        (b"PK\x03\x04\x14\x00", "application/zip"),
        (b"\x1f\x8b\x08\x00", "application/x-gzip"),
        (b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom", "video/mp4"),
        (b"\xef\xbb\xbfhello", "text/plain; charset=utf-8"),
        (b"wOF2\x00\x01", "font/woff2"),
    ],
)
def test_detect_content_type(data, expected):
    assert detect_content_type(data) == expected


def test_real_images(png_bytes, jpeg_bytes):
    assert detect_content_type(png_bytes) == "image/png"
    assert detect_content_type(jpeg_bytes) == "image/jpeg"


def test_only_prefix_is_considered():
    data = b"a" * SNIFF_LEN + b"\x00\x00\x00"
    assert detect_content_type(data) == "text/plain; charset=utf-8"
