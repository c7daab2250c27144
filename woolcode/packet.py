from __future__ import annotations

import struct
from typing import Tuple

from .constants import CHECKSUM_BYTES, MAX_META_LEN, META_LEN_BYTES, MIN_PACKET_SIZE
from .errors import ChecksumMismatch, MetadataTooLarge, TooShort, TruncatedMetadata
from .fletcher import fletcher16
from .metadata import Metadata


# Packet layout (big endian)
#  - meta_len u16
#  - meta[meta_len] (UTF-8 JSON)
#  - payload[*]
#  - fletcher16[2] over everything above
_META_LEN_STRUCT = struct.Struct(">H")


def build_packet(payload: bytes, metadata: Metadata) -> bytes:
    meta = metadata.to_json()
    if len(meta) > MAX_META_LEN:
        raise MetadataTooLarge(f"Metadata too large: {len(meta)} bytes (max {MAX_META_LEN})")
    content = _META_LEN_STRUCT.pack(len(meta)) + meta + bytes(payload)
    return content + fletcher16(content)


def parse_packet(buf: bytes) -> Tuple[Metadata, bytes]:
    """Verify and split a packet.

    Returns: (metadata, payload)
    """
    if len(buf) < MIN_PACKET_SIZE:
        raise TooShort(f"Data too short: {len(buf)} bytes (need at least {MIN_PACKET_SIZE})")
    content = bytes(buf[:-CHECKSUM_BYTES])
    received = bytes(buf[-CHECKSUM_BYTES:])
    calculated = fletcher16(content)
    if received != calculated:
        raise ChecksumMismatch(
            f"Checksum mismatch: data may be corrupted (got {received.hex()}, expected {calculated.hex()})"
        )
    (meta_len,) = _META_LEN_STRUCT.unpack_from(content, 0)
    if len(content) < META_LEN_BYTES + meta_len:
        raise TruncatedMetadata(
            f"Metadata truncated: header declares {meta_len} bytes, {len(content) - META_LEN_BYTES} available"
        )
    metadata = Metadata.from_json(content[META_LEN_BYTES : META_LEN_BYTES + meta_len])
    return metadata, content[META_LEN_BYTES + meta_len :]
