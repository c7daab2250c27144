from __future__ import annotations

import argparse
import random
import sys
from typing import List, Optional

from woolcode.errors import WoolError
from woolcode.palette import WOOL_IDS, from_id
from woolcode.textform import blocks_to_text, text_to_blocks


def _load(path: str) -> List[int]:
    with open(path, "r", encoding="utf-8") as f:
        return text_to_blocks(f.read())


def _save(path: str, blocks: List[int]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(blocks_to_text(blocks))


def _flip_block(blocks: List[int], index: int, xor_val: int = 0x1) -> None:
    if index < 0 or index >= len(blocks):
        raise ValueError(f"Block index out of range (0..{len(blocks)-1})")
    new = blocks[index] ^ (xor_val & 0x0F)
    if new == blocks[index]:
        raise ValueError("XOR mask must change the block (use a mask in 1..15)")
    blocks[index] = new


def cmd_block(args: argparse.Namespace) -> None:
    blocks = _load(args.structure)
    old = blocks[args.index] if 0 <= args.index < len(blocks) else None
    if args.to is not None:
        if old is None:
            raise ValueError(f"Block index out of range (0..{len(blocks)-1})")
        blocks[args.index] = from_id(args.to)
    else:
        _flip_block(blocks, args.index, xor_val=args.xor)
    _save(args.structure, blocks)
    print(f"Replaced block {args.index}: {WOOL_IDS[old]} -> {WOOL_IDS[blocks[args.index]]}")


def cmd_random(args: argparse.Namespace) -> None:
    rng = random.Random(args.seed)
    blocks = _load(args.structure)
    if not blocks:
        raise ValueError("Structure has no blocks")
    for _ in range(args.count):
        _flip_block(blocks, rng.randrange(0, len(blocks)), xor_val=args.xor)
    _save(args.structure, blocks)
    print(f"Flipped {args.count} block(s) at random positions")


def cmd_truncate(args: argparse.Namespace) -> None:
    blocks = _load(args.structure)
    if args.count < 0 or args.count > len(blocks):
        raise ValueError(f"--count must be within 0..{len(blocks)}")
    _save(args.structure, blocks[: len(blocks) - args.count])
    print(f"Removed {args.count} trailing block(s)")


def main(argv: Optional[list[str]] = None) -> None:
    ap = argparse.ArgumentParser(prog="woolcode.corrupt", description="Corrupt wool structures for testing")
    sub = ap.add_subparsers(dest="cmd", required=False)

    p_block = sub.add_parser("block", help="Change one block at a given index")
    p_block.add_argument("structure", help="Path to .mcwool structure")
    p_block.add_argument("--index", type=int, required=True, help="Block index (0-based)")
    p_block.add_argument("--to", help="Replacement wool id (default: XOR the value with --xor)")
    p_block.add_argument("--xor", type=lambda x: int(x, 0), default=0x1, help="XOR mask to apply (default 0x1)")
    p_block.set_defaults(func=cmd_block)

    p_rand = sub.add_parser("random", help="Flip N random blocks")
    p_rand.add_argument("structure", help="Path to .mcwool structure")
    p_rand.add_argument("--count", type=int, default=1, help="Number of random block flips (default 1)")
    p_rand.add_argument("--seed", type=int, default=None, help="PRNG seed for reproducibility")
    p_rand.add_argument("--xor", type=lambda x: int(x, 0), default=0x1, help="XOR mask to apply (default 0x1)")
    p_rand.set_defaults(func=cmd_random)

    p_trunc = sub.add_parser("truncate", help="Drop trailing blocks")
    p_trunc.add_argument("structure", help="Path to .mcwool structure")
    p_trunc.add_argument("--count", type=int, default=1, help="Number of blocks to drop (default 1)")
    p_trunc.set_defaults(func=cmd_truncate)

    # Pre-dispatch: a bare structure path means one random flip
    subcommands = {"block", "random", "truncate"}
    if argv is None:
        argv = sys.argv[1:]
    if argv and (argv[0] not in subcommands) and (not argv[0].startswith("-")):
        dap = argparse.ArgumentParser(prog="woolcode.corrupt [default random]")
        dap.add_argument("structure")
        dap.add_argument("--count", type=int, default=1, help="Number of random block flips (default 1)")
        dap.add_argument("--seed", type=int, default=None, help="PRNG seed for reproducibility")
        dap.add_argument("--xor", type=lambda x: int(x, 0), default=0x1, help="XOR mask to apply (default 0x1)")
        dargs = dap.parse_args(argv)
        try:
            cmd_random(dargs)
        except (WoolError, OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(2)
        return

    args = ap.parse_args(argv)
    if not getattr(args, "func", None):
        ap.print_help()
        sys.exit(2)
    try:
        args.func(args)
    except (WoolError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
