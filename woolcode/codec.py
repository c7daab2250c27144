from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from .constants import DEFAULT_BINARY_FILENAME, DEFAULT_MIME_TYPE, KIND_FILE, KIND_TEXT, KINDS
from .metadata import Metadata
from .nibbles import pack_nibbles, unpack_nibbles
from .packet import build_packet, parse_packet
from .textform import blocks_to_text, text_to_blocks


@dataclass
class EncodedResult:
    blocks: List[int]
    original_size: int
    metadata: Metadata


@dataclass
class DecodedResult:
    metadata: Metadata
    data: Union[str, bytes]

    @property
    def is_text(self) -> bool:
        return self.metadata.kind == KIND_TEXT

    @property
    def mime_type(self) -> str:
        return self.metadata.mime_type or DEFAULT_MIME_TYPE

    @property
    def suggested_name(self) -> str:
        return self.metadata.name or DEFAULT_BINARY_FILENAME


def encode(
    data: Union[str, bytes],
    kind: str = KIND_TEXT,
    *,
    name: Optional[str] = None,
    mime_type: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> EncodedResult:
    """Frame ``data`` into a packet and split it into wool blocks.

    Args:
        data: Text (encoded as UTF-8) or raw bytes.
        kind: "text" or "file".
        name: File name recorded in the metadata (file kind only).
        mime_type: MIME type recorded in the metadata (file kind only).
        timestamp: Creation time in ms since epoch; defaults to now.
    """
    if kind not in KINDS:
        raise ValueError(f"Unknown payload kind: {kind!r}")
    payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    if kind == KIND_TEXT:
        metadata = Metadata.for_text(timestamp)
    else:
        metadata = Metadata.for_file(name, mime_type, timestamp)
    packet = build_packet(payload, metadata)
    return EncodedResult(blocks=pack_nibbles(packet), original_size=len(packet), metadata=metadata)


def encode_file(path: str, *, mime_type: Optional[str] = None, timestamp: Optional[int] = None) -> EncodedResult:
    with open(path, "rb") as fh:
        payload = fh.read()
    if mime_type is None:
        mime_type = mimetypes.guess_type(path)[0] or ""
    return encode(payload, KIND_FILE, name=os.path.basename(path), mime_type=mime_type, timestamp=timestamp)


def decode(blocks: Sequence[int]) -> DecodedResult:
    """Rebuild and verify the packet carried by ``blocks``.

    Text payloads come back as ``str``; anything else as ``bytes``.
    """
    metadata, payload = parse_packet(unpack_nibbles(blocks))
    if metadata.kind == KIND_TEXT:
        return DecodedResult(metadata=metadata, data=payload.decode("utf-8", errors="replace"))
    return DecodedResult(metadata=metadata, data=payload)


def blocks_to_id_string(blocks: Sequence[int]) -> str:
    return blocks_to_text(blocks)


def id_string_to_blocks(text: str) -> EncodedResult:
    """Parse a structure id listing and validate it end to end.

    Any decode failure (checksum, truncation, metadata) is raised even though
    the id listing itself was well formed.
    """
    blocks = text_to_blocks(text)
    decoded = decode(blocks)
    return EncodedResult(blocks=blocks, original_size=len(blocks) // 2, metadata=decoded.metadata)
