"""
woolcode: store text and files as Minecraft wool structures.

Features:

- Packets: length-prefixed JSON metadata, raw payload, Fletcher-16 (mod 255) trailer.
- Each packet byte becomes two 4-bit blocks, one of the 16 wool colours.
- Structures are exchanged as newline-separated block ids (.mcwool files);
  imports are verified end to end before they are accepted.
- CLI to encode, decode, verify, inspect and lay out structures.

The codec is pure: no state between calls, no output; failures are raised as
subclasses of woolcode.errors.WoolError.
"""

__version__ = "0.1"

from .codec import (
    DecodedResult,
    EncodedResult,
    blocks_to_id_string,
    decode,
    encode,
    encode_file,
    id_string_to_blocks,
)
from .errors import WoolError

__all__ = [
    "encode",
    "encode_file",
    "decode",
    "blocks_to_id_string",
    "id_string_to_blocks",
    "EncodedResult",
    "DecodedResult",
    "WoolError",
]
