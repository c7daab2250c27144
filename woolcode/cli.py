from __future__ import annotations

import os
import sys
import argparse
import json as _json
import warnings
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from woolcode.codec import decode, encode, encode_file, id_string_to_blocks, blocks_to_id_string
from woolcode.constants import (
    DEFAULT_BINARY_FILENAME,
    DEFAULT_MAX_INPUT_SIZE,
    DEFAULT_TEXT_FILENAME,
    KIND_TEXT,
    STRUCTURE_EXT,
    now_ms,
)
from woolcode.errors import WoolError, OddSymbolCount
from woolcode.layout import iter_positions, structure_dimensions
from woolcode.palette import WOOL_COLORS, WOOL_IDS, WOOL_NAMES, to_id
from woolcode.textform import text_to_blocks


def _report_warnings(func: Callable, *args: Any) -> Any:
    """Call ``func`` and print any codec warnings it raised to stderr.

    Warnings are printed even when ``func`` fails.
    """
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", OddSymbolCount)
        try:
            return func(*args)
        finally:
            for w in caught:
                print(f"Warning: {w.message}", file=sys.stderr)


def _read_structure(path: str) -> str:
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def _format_timestamp(ms: int) -> str:
    try:
        return datetime.fromtimestamp(ms / 1000.0, tz=timezone.utc).isoformat(timespec="seconds")
    except (OverflowError, OSError, ValueError):
        return "invalid"


def _safe_output_name(name: str) -> str:
    """Reduce a name recorded in a structure to a bare file name."""
    base = os.path.basename(name.replace("\\", "/"))
    if base in ("", ".", ".."):
        return ""
    return base


def _next_nonconflicting_path(path: str) -> str:
    if not os.path.exists(path):
        return path
    base_dir = os.path.dirname(path)
    root, ext = os.path.splitext(os.path.basename(path))
    i = 1
    while True:
        candidate = os.path.join(base_dir, f"{root} ({i}){ext}")
        if not os.path.exists(candidate):
            return candidate
        i += 1


def _dims(count: int) -> str:
    w, h, d = structure_dimensions(count)
    return f"{w}x{h}x{d}"


def cmd_encode(
    path: Optional[str],
    *,
    text: Optional[str] = None,
    output: Optional[str] = None,
    max_size: int = DEFAULT_MAX_INPUT_SIZE,
    mime_type: Optional[str] = None,
    quiet: bool = False,
) -> bool:
    """Encode a text string or a file into a .mcwool structure.

    Args:
        path: Input file path (ignored when ``text`` is given).
        text: Text to encode instead of a file.
        output: Destination structure path. Defaults to
            ``wool_structure_<ms>.mcwool`` in the current directory.
        max_size: Reject inputs larger than this many bytes; 0 disables.
        mime_type: Override the guessed MIME type of a file input.
        quiet: Only print the summary line.
    """
    if text is not None:
        size = len(text.encode("utf-8"))
        label = "text"
    else:
        if path is None:
            raise ValueError("Nothing to encode: pass a file or --text")
        size = os.path.getsize(path)
        label = os.path.basename(path)
    if max_size and size > max_size:
        raise ValueError(
            f"Input too large: {size} bytes (limit {max_size}; pass --max-size 0 to disable)"
        )

    if text is not None:
        result = encode(text, KIND_TEXT)
    else:
        result = encode_file(path, mime_type=mime_type)

    out = output or f"wool_structure_{now_ms()}{STRUCTURE_EXT}"
    with open(out, "w", encoding="utf-8") as fh:
        fh.write(blocks_to_id_string(result.blocks))

    if not quiet:
        print(f"   encoding: {label} ({size} bytes)")
        print(f"    written: {out}")
    print(
        f"Encoded {len(result.blocks)} blocks from {result.original_size} packet bytes; "
        f"structure {_dims(len(result.blocks))}"
    )
    return True


def cmd_decode(
    structure: str,
    *,
    outdir: str = ".",
    exists: str = "rename",
    to_stdout: bool = False,
    quiet: bool = False,
) -> bool:
    """Decode a .mcwool structure and write out its payload.

    Text payloads go to ``decoded_text.txt`` (or stdout with ``to_stdout``),
    files to the name recorded in the structure.
    """
    blocks = text_to_blocks(_read_structure(structure))
    result = _report_warnings(decode, blocks)

    if result.is_text and to_stdout:
        sys.stdout.write(result.data)
        if not result.data.endswith("\n"):
            sys.stdout.write("\n")
        return True

    if result.is_text:
        fname = DEFAULT_TEXT_FILENAME
        data = result.data.encode("utf-8")
    else:
        fname = _safe_output_name(result.suggested_name) or DEFAULT_BINARY_FILENAME
        data = result.data

    os.makedirs(outdir or ".", exist_ok=True)
    dst = os.path.join(outdir or ".", fname)
    actual_dst = dst
    if os.path.exists(dst):
        if exists == "skip":
            if not quiet:
                print(f"    skipping: {fname} (exists)")
            return True
        if exists == "fail":
            raise FileExistsError(f"Destination exists: {dst}")
        if exists == "rename":
            actual_dst = _next_nonconflicting_path(dst)
    with open(actual_dst, "wb") as fh:
        fh.write(data)

    if not quiet:
        print(f"   decoding: {structure}")
        if actual_dst != dst:
            print(f"       note: renamed to {actual_dst}")
    kind = "text" if result.is_text else result.mime_type
    print(f"Decoded {len(data)} bytes ({kind}) to {actual_dst}")
    return True


def cmd_verify(structure: str) -> bool:
    """Verify a structure end to end.

    Prints:
        "OK" on success, "FAIL" when the structure does not decode.
    """
    try:
        _report_warnings(id_string_to_blocks, _read_structure(structure))
    except WoolError as exc:
        print("FAIL")
        print(f"Reason: {exc}", file=sys.stderr)
        return False
    print("OK")
    return True


def cmd_info(structure: str, *, as_json: bool = False) -> bool:
    imported = _report_warnings(id_string_to_blocks, _read_structure(structure))
    meta = imported.metadata
    counts = Counter(imported.blocks)
    w, h, d = structure_dimensions(len(imported.blocks))

    if as_json:
        print(
            _json.dumps(
                {
                    "path": structure,
                    "metadata": meta.to_dict(),
                    "blocks": len(imported.blocks),
                    "packet_bytes": imported.original_size,
                    "dimensions": [w, h, d],
                    "colors": {to_id(s): counts[s] for s in sorted(counts)},
                },
                ensure_ascii=False,
            )
        )
        return True

    print(f"Structure: {structure}")
    print(f"  Type: {meta.kind}")
    if meta.name is not None:
        print(f"  Name: {meta.name}")
    if meta.mime_type is not None:
        print(f"  MIME type: {meta.mime_type or '(unknown)'}")
    print(f"  Created: {meta.timestamp} ({_format_timestamp(meta.timestamp)})")
    print(f"  Blocks: {len(imported.blocks)}")
    print(f"  Packet bytes: {imported.original_size}")
    print(f"  Dimensions: {w}x{h}x{d}")
    print("  Colours:")
    for sym in sorted(counts):
        print(f"    {to_id(sym):<16}{counts[sym]}")
    return True


def cmd_palette() -> bool:
    for sym, (wid, color, name) in enumerate(zip(WOOL_IDS, WOOL_COLORS, WOOL_NAMES)):
        print(f"{sym:>2}\t{wid}\t{color}\t{name}")
    return True


def cmd_layout(structure: str) -> bool:
    """Print one ``x y z id`` line per block of a structure."""
    blocks = text_to_blocks(_read_structure(structure))
    for x, y, z, sym in iter_positions(blocks):
        print(f"{x} {y} {z} {to_id(sym)}")
    return True


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="woolcode",
        description="Encode text and files as Minecraft wool structures",
        epilog="Structures are plain text: one wool block id per line (.mcwool).",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    # encode
    ap_encode = sub.add_parser("encode", help="Encode text or a file into a structure")
    src = ap_encode.add_mutually_exclusive_group(required=True)
    src.add_argument("input", nargs="?", help="Input file path")
    src.add_argument("--text", help="Encode this text instead of a file")
    ap_encode.add_argument("-o", "--output", help="Output .mcwool path")
    ap_encode.add_argument(
        "--max-size",
        type=int,
        default=DEFAULT_MAX_INPUT_SIZE,
        help=f"Reject inputs larger than this many bytes (default {DEFAULT_MAX_INPUT_SIZE}; 0 disables)",
    )
    ap_encode.add_argument("--mime", help="MIME type to record for a file input (default: guessed)")
    ap_encode.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    # decode
    ap_decode = sub.add_parser("decode", help="Decode a structure back into text or a file")
    ap_decode.add_argument("structure", help="Structure (.mcwool) path")
    ap_decode.add_argument("--outdir", default=".", help="Output directory")
    ap_decode.add_argument("--stdout", action="store_true", help="Print text payloads instead of writing a file")
    ap_decode.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")
    ap_decode.add_argument(
        "--exists",
        choices=["overwrite", "skip", "rename", "fail"],
        default="rename",
        help=(
            "What to do if the destination file exists: overwrite, skip, "
            "rename (append ' (n)' before extension), or fail. Default: rename"
        ),
    )

    ap_verify = sub.add_parser("verify", help="Verify structure integrity")
    ap_verify.add_argument("structure", help="Structure path")

    ap_info = sub.add_parser("info", help="Show structure information")
    ap_info.add_argument("structure", help="Structure path")
    ap_info.add_argument("--json", action="store_true", help="Emit JSON")

    sub.add_parser("palette", help="List the 16 wool blocks and their values")

    ap_layout = sub.add_parser("layout", help="Print block coordinates (x y z id)")
    ap_layout.add_argument("structure", help="Structure path")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "encode":
            cmd_encode(
                args.input,
                text=args.text,
                output=args.output,
                max_size=args.max_size,
                mime_type=args.mime,
                quiet=args.quiet,
            )
        elif args.cmd == "decode":
            cmd_decode(args.structure, outdir=args.outdir, exists=args.exists, to_stdout=args.stdout, quiet=args.quiet)
        elif args.cmd == "verify":
            ok = cmd_verify(args.structure)
            sys.exit(0 if ok else 1)
        elif args.cmd == "info":
            cmd_info(args.structure, as_json=args.json)
        elif args.cmd == "palette":
            cmd_palette()
        elif args.cmd == "layout":
            cmd_layout(args.structure)
        else:
            raise RuntimeError("Unknown command")
    except (WoolError, OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
