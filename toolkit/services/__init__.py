# Services package: randomizer, sniffing, uploads, JSON codec, remote push

from .json_codec import error_json, read_json, write_json
from .randomizer import random_string
from .uploads import upload_files, upload_one_file

__all__ = [
    "error_json",
    "random_string",
    "read_json",
    "upload_files",
    "upload_one_file",
    "write_json",
]
