"""
The 16-colour wool palette.

Every mapping is a tuple indexed by symbol (0..15); the reverse id lookup is
derived from WOOL_IDS once at import time.
"""
from __future__ import annotations

from typing import Dict

from .constants import SYMBOL_COUNT
from .errors import InvalidSymbol, UnknownIdentifier


# Minecraft block ids, used by the structure text form
WOOL_IDS = (
    "white_wool",
    "orange_wool",
    "magenta_wool",
    "light_blue_wool",
    "yellow_wool",
    "lime_wool",
    "pink_wool",
    "gray_wool",
    "light_gray_wool",
    "cyan_wool",
    "purple_wool",
    "blue_wool",
    "brown_wool",
    "green_wool",
    "red_wool",
    "black_wool",
)

WOOL_COLORS = (
    "#FFFFFF",
    "#D87F33",
    "#B24CD8",
    "#6699D8",
    "#E5E533",
    "#7FCC19",
    "#F27FA5",
    "#4C4C4C",
    "#999999",
    "#4C7F99",
    "#7F3FB2",
    "#334CB2",
    "#664C33",
    "#667F33",
    "#993333",
    "#191919",
)

# Display names (zh-CN)
WOOL_NAMES = (
    "白色羊毛",
    "橙色羊毛",
    "品红色羊毛",
    "淡蓝色羊毛",
    "黄色羊毛",
    "黄绿色羊毛",
    "粉红色羊毛",
    "灰色羊毛",
    "淡灰色羊毛",
    "青色羊毛",
    "紫色羊毛",
    "蓝色羊毛",
    "棕色羊毛",
    "绿色羊毛",
    "红色羊毛",
    "黑色羊毛",
)

_ID_TO_SYMBOL: Dict[str, int] = {wid: sym for sym, wid in enumerate(WOOL_IDS)}


def check_symbol(symbol: int) -> int:
    # bool is an int subclass but never a valid block
    if isinstance(symbol, bool) or not isinstance(symbol, int) or not 0 <= symbol < SYMBOL_COUNT:
        raise InvalidSymbol(symbol)
    return symbol


def to_id(symbol: int) -> str:
    return WOOL_IDS[check_symbol(symbol)]


def from_id(identifier: str) -> int:
    try:
        return _ID_TO_SYMBOL[identifier]
    except KeyError:
        raise UnknownIdentifier(identifier) from None


def color_of(symbol: int) -> str:
    return WOOL_COLORS[check_symbol(symbol)]


def name_of(symbol: int) -> str:
    return WOOL_NAMES[check_symbol(symbol)]
