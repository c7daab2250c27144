from __future__ import annotations

import re
from typing import Iterable, List

from .palette import from_id, to_id


_SEPARATORS = re.compile(r"[\s,]+")


def blocks_to_text(symbols: Iterable[int]) -> str:
    return "\n".join(to_id(s) for s in symbols)


def text_to_blocks(text: str) -> List[int]:
    """Parse wool ids separated by newlines, commas or spaces.

    Stops at the first unknown id (UnknownIdentifier).
    """
    # leading UTF-8 BOM
    return [from_id(tok) for tok in _SEPARATORS.split(text.lstrip("\ufeff").strip()) if tok]
