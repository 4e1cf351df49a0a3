# toolkit/services/sniffing.py
"""
Content sniffing volgens het WHATWG MIME Sniffing algoritme.

Only the first SNIFF_LEN bytes are considered. The signature table is checked
in order and the first match wins; unknown binary data falls back to
application/octet-stream. Type labels (incl. charset parameters) are the ones
browsers and most HTTP stacks report, so allow-lists can be written against
them directly.
"""
from typing import Callable, List, Optional

SNIFF_LEN = 512
DEFAULT_TYPE = "application/octet-stream"

_WS = b"\t\n\x0c\r "
_TAG_TERMINATORS = (ord(" "), ord(">"))

Matcher = Callable[[bytes, int], Optional[str]]


def _exact(sig: bytes, ctype: str) -> Matcher:
    def match(data: bytes, first_non_ws: int) -> Optional[str]:
        return ctype if data.startswith(sig) else None

    return match


def _masked(mask: bytes, pattern: bytes, ctype: str, skip_ws: bool = False) -> Matcher:
    assert len(mask) == len(pattern)

    def match(data: bytes, first_non_ws: int) -> Optional[str]:
        if skip_ws:
            data = data[first_non_ws:]
        if len(data) < len(pattern):
            return None
        for i, p in enumerate(pattern):
            if data[i] & mask[i] != p:
                return None
        return ctype

    return match


def _html(tag: bytes) -> Matcher:
    def match(data: bytes, first_non_ws: int) -> Optional[str]:
        data = data[first_non_ws:]
        if len(data) < len(tag) + 1:
            return None
        for i, b in enumerate(tag):
            db = data[i]
            if ord("A") <= b <= ord("Z"):
                db &= 0xDF
            if b != db:
                return None
        if data[len(tag)] not in _TAG_TERMINATORS:
            return None
        return "text/html; charset=utf-8"

    return match


def _mp4(data: bytes, first_non_ws: int) -> Optional[str]:
    # ISO base media: first box must be "ftyp" with an mp4 brand
    if len(data) < 12:
        return None
    box_size = int.from_bytes(data[:4], "big")
    if len(data) < box_size or box_size % 4 != 0:
        return None
    if data[4:8] != b"ftyp":
        return None
    for start in range(8, box_size, 4):
        if start == 12:
            continue  # minor version
        if data[start:start + 3] == b"mp4":
            return "video/mp4"
    return None


def _text(data: bytes, first_non_ws: int) -> Optional[str]:
    for b in data[first_non_ws:]:
        if b <= 0x08 or b == 0x0B or 0x0E <= b <= 0x1A or 0x1C <= b <= 0x1F:
            return None
    return "text/plain; charset=utf-8"


_FF4 = b"\xff\xff\xff\xff"
_RIFF_MASK = _FF4 + b"\x00\x00\x00\x00" + _FF4

_SIGNATURES: List[Matcher] = [
    *(
        _html(tag)
        for tag in (
            b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1",
            b"<DIV", b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B",
            b"<BODY", b"<BR", b"<P", b"<!--",
        )
    ),
    _masked(b"\xff" * 5, b"<?xml", "text/xml; charset=utf-8", skip_ws=True),
    _exact(b"%PDF-", "application/pdf"),
    _exact(b"%!PS-Adobe-", "application/postscript"),
    # byte order marks
    _masked(b"\xff\xff\x00\x00", b"\xfe\xff\x00\x00", "text/plain; charset=utf-16be"),
    _masked(b"\xff\xff\x00\x00", b"\xff\xfe\x00\x00", "text/plain; charset=utf-16le"),
    _masked(b"\xff\xff\xff\x00", b"\xef\xbb\xbf\x00", "text/plain; charset=utf-8"),
    # images
    _exact(b"\x00\x00\x01\x00", "image/x-icon"),
    _exact(b"\x00\x00\x02\x00", "image/x-icon"),
    _exact(b"BM", "image/bmp"),
    _exact(b"GIF87a", "image/gif"),
    _exact(b"GIF89a", "image/gif"),
    _masked(_RIFF_MASK + b"\xff\xff", b"RIFF\x00\x00\x00\x00WEBPVP", "image/webp"),
    _exact(b"\x89PNG\x0d\x0a\x1a\x0a", "image/png"),
    _exact(b"\xff\xd8\xff", "image/jpeg"),
    # audio / video
    _masked(_RIFF_MASK, b"FORM\x00\x00\x00\x00AIFF", "audio/aiff"),
    _masked(b"\xff\xff\xff", b"ID3", "audio/mpeg"),
    _masked(b"\xff" * 5, b"OggS\x00", "application/ogg"),
    _masked(b"\xff" * 8, b"MThd\x00\x00\x00\x06", "audio/midi"),
    _masked(_RIFF_MASK, b"RIFF\x00\x00\x00\x00AVI ", "video/avi"),
    _masked(_RIFF_MASK, b"RIFF\x00\x00\x00\x00WAVE", "audio/wave"),
    _mp4,
    _exact(b"\x1a\x45\xdf\xa3", "video/webm"),
    # fonts
    _masked(b"\x00" * 34 + b"\xff\xff", b"\x00" * 34 + b"LP", "application/vnd.ms-fontobject"),
    _exact(b"\x00\x01\x00\x00", "font/ttf"),
    _exact(b"OTTO", "font/otf"),
    _exact(b"ttcf", "font/collection"),
    _exact(b"wOFF", "font/woff"),
    _exact(b"wOF2", "font/woff2"),
    # archives
    _exact(b"\x1f\x8b\x08", "application/x-gzip"),
    _exact(b"PK\x03\x04", "application/zip"),
    _exact(b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    _exact(b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    _exact(b"\x00asm", "application/wasm"),
    _text,
]


def detect_content_type(data: bytes) -> str:
    """Sniff the MIME type of `data`; always returns a valid type."""
    data = data[:SNIFF_LEN]
    first_non_ws = 0
    while first_non_ws < len(data) and data[first_non_ws] in _WS:
        first_non_ws += 1

    for match in _SIGNATURES:
        ctype = match(data, first_non_ws)
        if ctype:
            return ctype
    return DEFAULT_TYPE
