"""
Display layout: linear block index -> (x, y, z) inside a 16x16 footprint.

Blocks fill a layer row by row along x, then z; every 256 blocks start a new
layer one step up in y. Nothing here affects the encoded data.
"""
from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from .constants import CHUNK_SIZE, LAYER_SIZE


def block_position(index: int) -> Tuple[int, int, int]:
    if index < 0:
        raise ValueError("Block index must be non-negative")
    y, rem = divmod(index, LAYER_SIZE)
    z, x = divmod(rem, CHUNK_SIZE)
    return x, y, z


def structure_dimensions(count: int) -> Tuple[int, int, int]:
    """Bounding box (width, height, depth) occupied by ``count`` blocks."""
    if count <= 0:
        return 0, 0, 0
    height = (count + LAYER_SIZE - 1) // LAYER_SIZE
    if count >= LAYER_SIZE:
        return CHUNK_SIZE, height, CHUNK_SIZE
    depth = (count + CHUNK_SIZE - 1) // CHUNK_SIZE
    width = CHUNK_SIZE if count >= CHUNK_SIZE else count
    return width, height, depth


def iter_positions(blocks: Iterable[int]) -> Iterator[Tuple[int, int, int, int]]:
    for i, sym in enumerate(blocks):
        x, y, z = block_position(i)
        yield x, y, z, sym
