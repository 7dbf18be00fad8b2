"""
Cache value encoding.

Values are stored as orjson text. Large payloads may be gzip-compressed and
base64-encoded behind ``COMPRESSION_MARKER`` so readers can tell them apart.
"""

from base64 import b64decode, b64encode
from binascii import Error as BinasciiError
from gzip import BadGzipFile
from gzip import compress as gzip_compress
from gzip import decompress as gzip_decompress
from typing import Any

from orjson import OPT_NON_STR_KEYS, JSONDecodeError, JSONEncodeError
from orjson import dumps as orjson_dumps
from orjson import loads as orjson_loads

from blog_api.errors.cache import CacheDeserializationError, CacheSerializationError

COMPRESSION_MARKER = "\x00GZIP\x00"


def serialize(value: object) -> str:
    """
    Encode ``value`` as JSON text; unknown types fall back to ``str()``.

    Raises:
        CacheSerializationError: The value has no JSON form (e.g. an int over 64 bits).
    """
    try:
        return orjson_dumps(value, default=str, option=OPT_NON_STR_KEYS).decode()
    except JSONEncodeError as e:
        raise CacheSerializationError from e


def deserialize(value: str | bytes) -> Any:
    try:
        return orjson_loads(value)
    except JSONDecodeError as e:
        raise CacheDeserializationError from e


def do_compress(data: str, threshold: int) -> bool:
    return len(data.encode()) > threshold


def compress(data: str) -> str:
    return COMPRESSION_MARKER + b64encode(gzip_compress(data.encode())).decode()


def decompress(data: str) -> str:
    """
    Undo ``compress``; text without the marker is returned as is.

    Raises:
        CacheDeserializationError: The payload is not valid base64 gzip.
    """
    if not data.startswith(COMPRESSION_MARKER):
        return data
    payload = data.removeprefix(COMPRESSION_MARKER)
    try:
        return gzip_decompress(b64decode(payload)).decode()
    except (BinasciiError, BadGzipFile, EOFError, UnicodeDecodeError) as e:
        raise CacheDeserializationError from e
