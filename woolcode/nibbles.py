from __future__ import annotations

import warnings
from typing import List, Sequence

from .constants import SYMBOL_BITS, SYMBOL_MASK
from .errors import OddSymbolCount
from .palette import check_symbol


def pack_nibbles(data: bytes) -> List[int]:
    """Split each byte into two symbols, high nibble first."""
    out: List[int] = []
    for b in data:
        out.append((b >> SYMBOL_BITS) & SYMBOL_MASK)
        out.append(b & SYMBOL_MASK)
    return out


def unpack_nibbles(symbols: Sequence[int]) -> bytes:
    """Join (high, low) symbol pairs back into bytes.

    An odd trailing symbol is dropped with an OddSymbolCount warning; the
    packet layer decides whether what remains is usable.
    """
    n = len(symbols)
    if n % 2:
        warnings.warn(
            f"Odd number of blocks ({n}), ignoring last block",
            OddSymbolCount,
            stacklevel=2,
        )
    out = bytearray(n // 2)
    for i in range(n // 2):
        hi = check_symbol(symbols[2 * i])
        lo = check_symbol(symbols[2 * i + 1])
        out[i] = (hi << SYMBOL_BITS) | lo
    return bytes(out)
