from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .constants import KINDS, KIND_FILE, KIND_TEXT, now_ms
from .errors import MetadataParseError


@dataclass(frozen=True)
class Metadata:
    """Describes the payload carried by a packet.

    On the wire this is a compact JSON object with keys ``type``, ``name``,
    ``mimeType`` and ``timestamp`` (ms since epoch); optional keys are omitted
    when unset. Parsing is stricter than writers need to be: ``type`` must be
    "text" or "file" and ``timestamp`` an integer, otherwise
    MetadataParseError is raised.
    """

    kind: str
    timestamp: int
    name: Optional[str] = None
    mime_type: Optional[str] = None

    @classmethod
    def for_text(cls, timestamp: Optional[int] = None) -> "Metadata":
        return cls(kind=KIND_TEXT, timestamp=now_ms() if timestamp is None else timestamp)

    @classmethod
    def for_file(cls, name: Optional[str], mime_type: Optional[str], timestamp: Optional[int] = None) -> "Metadata":
        return cls(
            kind=KIND_FILE,
            timestamp=now_ms() if timestamp is None else timestamp,
            name=name,
            mime_type=mime_type,
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"type": self.kind}
        if self.name is not None:
            d["name"] = self.name
        if self.mime_type is not None:
            d["mimeType"] = self.mime_type
        d["timestamp"] = self.timestamp
        return d

    def to_json(self) -> bytes:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    @classmethod
    def from_dict(cls, d: Any) -> "Metadata":
        if not isinstance(d, dict):
            raise MetadataParseError("Metadata header is not a JSON object")
        kind = d.get("type")
        if kind not in KINDS:
            raise MetadataParseError(f"Metadata header has invalid type: {kind!r}")
        ts = d.get("timestamp")
        if isinstance(ts, bool) or not isinstance(ts, int):
            raise MetadataParseError(f"Metadata header has invalid timestamp: {ts!r}")
        name = d.get("name")
        mime_type = d.get("mimeType")
        for key, val in (("name", name), ("mimeType", mime_type)):
            if val is not None and not isinstance(val, str):
                raise MetadataParseError(f"Metadata header field {key} must be a string")
        return cls(kind=kind, timestamp=ts, name=name, mime_type=mime_type)

    @classmethod
    def from_json(cls, raw: bytes) -> "Metadata":
        try:
            d = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise MetadataParseError(f"Failed to parse metadata header: {e}") from e
        return cls.from_dict(d)
