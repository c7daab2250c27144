from __future__ import annotations

import os
import random
import tempfile
import unittest
import warnings
from pathlib import Path

from woolcode.codec import (
    decode,
    encode,
    encode_file,
    blocks_to_id_string,
    id_string_to_blocks,
)
from woolcode.errors import (
    ChecksumMismatch,
    InvalidSymbol,
    MetadataParseError,
    MetadataTooLarge,
    OddSymbolCount,
    TooShort,
    TruncatedMetadata,
    UnknownIdentifier,
    WoolError,
)
from woolcode.fletcher import fletcher16
from woolcode.metadata import Metadata
from woolcode.nibbles import pack_nibbles, unpack_nibbles
from woolcode.packet import build_packet, parse_packet
from woolcode.palette import WOOL_COLORS, WOOL_IDS, WOOL_NAMES, color_of, from_id, name_of, to_id
from woolcode.textform import blocks_to_text, text_to_blocks


TS = 1700000000000


def _frame(content: bytes) -> bytes:
    return content + fletcher16(content)


class Fletcher16Tests(unittest.TestCase):
    def test_known_vectors(self):
        self.assertEqual(fletcher16(b""), b"\x00\x00")
        self.assertEqual(fletcher16(b"abcde"), bytes([0xF0, 0xC8]))
        self.assertEqual(fletcher16(b"abcdef"), bytes([0x57, 0x20]))
        self.assertEqual(fletcher16(b"abcdefgh"), bytes([0x27, 0x06]))

    def test_modulus_is_255(self):
        # 0xFF folds to 0 under mod 255; mod 256 would give ff ff
        self.assertEqual(fletcher16(b"\xff"), b"\x00\x00")
        self.assertEqual(fletcher16(b"\xff" * 1000), b"\x00\x00")
        self.assertEqual(fletcher16(b"\x01\xff"), b"\x01\x02")


class PacketTests(unittest.TestCase):
    def test_hi_scenario_layout(self):
        meta = Metadata.for_text(TS)
        packet = build_packet(b"Hi", meta)
        meta_bytes = b'{"type":"text","timestamp":1700000000000}'
        self.assertEqual(len(meta_bytes), 41)
        content = b"\x00\x29" + meta_bytes + b"Hi"
        self.assertEqual(packet, content + fletcher16(content))

        got_meta, payload = parse_packet(packet)
        self.assertEqual(got_meta, meta)
        self.assertEqual(payload, b"Hi")

    def test_roundtrip_through_nibbles(self):
        rng = random.Random(1234)
        for size in (0, 1, 2, 255, 4096):
            payload = bytes(rng.randrange(256) for _ in range(size))
            meta = Metadata.for_file("blob.bin", "application/x-test", TS)
            packet = build_packet(payload, meta)
            got_meta, got_payload = parse_packet(unpack_nibbles(pack_nibbles(packet)))
            self.assertEqual(got_meta, meta)
            self.assertEqual(got_payload, payload)

    def test_metadata_wire_form(self):
        meta = Metadata.for_file("a.txt", "text/plain", 5)
        self.assertEqual(meta.to_json(), b'{"type":"file","name":"a.txt","mimeType":"text/plain","timestamp":5}')
        # Non-ASCII names are stored as raw UTF-8
        meta = Metadata.for_file("羊毛.txt", "", 5)
        self.assertIn("羊毛.txt".encode("utf-8"), meta.to_json())

    def test_metadata_length_bound(self):
        base = len(Metadata.for_file("", "", TS).to_json())

        ok = Metadata.for_file("a" * (65535 - base), "", TS)
        self.assertEqual(len(ok.to_json()), 65535)
        packet = build_packet(b"payload", ok)
        self.assertEqual(packet[:2], b"\xff\xff")
        self.assertEqual(parse_packet(packet), (ok, b"payload"))

        too_big = Metadata.for_file("a" * (65536 - base), "", TS)
        self.assertEqual(len(too_big.to_json()), 65536)
        with self.assertRaises(MetadataTooLarge):
            build_packet(b"payload", too_big)

    def test_too_short(self):
        for buf in (b"", b"\x00", b"\x00\x00\x00"):
            with self.assertRaises(TooShort):
                parse_packet(buf)

    def test_minimal_frame_reaches_metadata_parse(self):
        # 4 bytes is a structurally valid frame; empty metadata is not valid JSON
        with self.assertRaises(MetadataParseError):
            parse_packet(_frame(b"\x00\x00"))

    def test_truncated_metadata(self):
        with self.assertRaises(TruncatedMetadata):
            parse_packet(_frame(b"\x00\x10{}"))

    def test_metadata_parse_errors(self):
        for raw in (b"abc", b"\xff\xfe", b"[]", b'{"type":"video","timestamp":1}', b'{"type":"text"}'):
            content = len(raw).to_bytes(2, "big") + raw
            with self.assertRaises(MetadataParseError):
                parse_packet(_frame(content))

    def test_deeply_nested_metadata_is_a_parse_error(self):
        raw = b"[" * 30000 + b"]" * 30000
        content = len(raw).to_bytes(2, "big") + raw
        with self.assertRaises(MetadataParseError):
            parse_packet(_frame(content))
        with self.assertRaises(MetadataParseError):
            decode(pack_nibbles(_frame(content)))

    def test_checksum_mismatch(self):
        packet = bytearray(build_packet(b"hello", Metadata.for_text(TS)))
        packet[-1] ^= 0x01
        with self.assertRaises(ChecksumMismatch):
            parse_packet(bytes(packet))

    def test_single_bit_flips_detected(self):
        rng = random.Random(42)
        payload = bytes(rng.randrange(256) for _ in range(200))
        packet = build_packet(payload, Metadata.for_file("sample.bin", "application/octet-stream", TS))
        nbits = len(packet) * 8
        for bit in rng.sample(range(nbits), 150):
            corrupted = bytearray(packet)
            corrupted[bit // 8] ^= 1 << (bit % 8)
            with self.assertRaises(ChecksumMismatch, msg=f"bit {bit} flip not detected"):
                parse_packet(bytes(corrupted))

    def test_errors_share_base(self):
        for exc in (MetadataTooLarge, TooShort, ChecksumMismatch, TruncatedMetadata, MetadataParseError):
            self.assertTrue(issubclass(exc, WoolError))


class NibbleTests(unittest.TestCase):
    def test_pack_high_nibble_first(self):
        self.assertEqual(pack_nibbles(b"\x48\x69\x00\xff"), [4, 8, 6, 9, 0, 0, 15, 15])
        self.assertEqual(pack_nibbles(b""), [])

    def test_unpack(self):
        self.assertEqual(unpack_nibbles([4, 8, 6, 9]), b"Hi")

    def test_odd_count_warns_and_drops(self):
        with self.assertWarns(OddSymbolCount):
            self.assertEqual(unpack_nibbles([5]), b"")
        with self.assertWarns(OddSymbolCount):
            self.assertEqual(unpack_nibbles([4, 8, 6]), b"H")

    def test_even_count_does_not_warn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            self.assertEqual(unpack_nibbles([0, 1]), b"\x01")

    def test_out_of_range_rejected(self):
        for bad in ([16, 0], [0, -1], [1.0, 2]):
            with self.assertRaises(InvalidSymbol):
                unpack_nibbles(bad)


class PaletteTests(unittest.TestCase):
    def test_tables_are_parallel(self):
        self.assertEqual(len(WOOL_IDS), 16)
        self.assertEqual(len(WOOL_COLORS), 16)
        self.assertEqual(len(WOOL_NAMES), 16)
        self.assertEqual(len(set(WOOL_IDS)), 16)

    def test_bijection(self):
        for sym in range(16):
            self.assertEqual(from_id(to_id(sym)), sym)
        self.assertEqual(to_id(0), "white_wool")
        self.assertEqual(to_id(3), "light_blue_wool")
        self.assertEqual(to_id(8), "light_gray_wool")
        self.assertEqual(to_id(15), "black_wool")
        self.assertEqual(color_of(14), "#993333")
        self.assertEqual(name_of(0), "白色羊毛")

    def test_rejects_invalid(self):
        for bad in (-1, 16, 255, True, "1"):
            with self.assertRaises(InvalidSymbol):
                to_id(bad)
        for bad in ("White_Wool", "wool", ""):
            with self.assertRaises(UnknownIdentifier):
                from_id(bad)


class TextFormTests(unittest.TestCase):
    def test_newline_joined(self):
        self.assertEqual(blocks_to_text([0, 15, 3]), "white_wool\nblack_wool\nlight_blue_wool")
        self.assertEqual(blocks_to_text([]), "")

    def test_roundtrip(self):
        rng = random.Random(7)
        blocks = [rng.randrange(16) for _ in range(500)]
        self.assertEqual(text_to_blocks(blocks_to_text(blocks)), blocks)

    def test_lenient_separators(self):
        text = "  white_wool, orange_wool\n\nmagenta_wool ,,\tblack_wool\r\n"
        self.assertEqual(text_to_blocks(text), [0, 1, 2, 15])
        self.assertEqual(text_to_blocks("   \n "), [])

    def test_unknown_identifier_fails_fast(self):
        with self.assertRaises(UnknownIdentifier) as cm:
            text_to_blocks("white_wool, bogus_wool")
        self.assertEqual(cm.exception.token, "bogus_wool")
        with self.assertRaises(UnknownIdentifier) as cm:
            text_to_blocks("nope_wool also_bad")
        self.assertEqual(cm.exception.token, "nope_wool")

    def test_leading_bom_ignored(self):
        self.assertEqual(text_to_blocks("\ufeffwhite_wool\nblack_wool"), [0, 15])
        res = encode("hi", timestamp=TS)
        imported = id_string_to_blocks("\ufeff" + blocks_to_id_string(res.blocks))
        self.assertEqual(imported.blocks, res.blocks)


class FacadeTests(unittest.TestCase):
    def test_encode_decode_text(self):
        res = encode("Hi", "text", timestamp=TS)
        self.assertEqual(res.original_size, 2 + 41 + 2 + 2)
        self.assertEqual(len(res.blocks), 2 * res.original_size)
        self.assertEqual(res.metadata, Metadata(kind="text", timestamp=TS))

        out = decode(res.blocks)
        self.assertEqual(out.data, "Hi")
        self.assertEqual(out.metadata, res.metadata)
        self.assertTrue(out.is_text)

    def test_encode_decode_unicode_text(self):
        text = "羊毛 ✓ wool\n"
        out = decode(encode(text).blocks)
        self.assertEqual(out.data, text)

    def test_timestamp_defaults_to_now(self):
        res = encode("x")
        self.assertGreater(res.metadata.timestamp, TS)

    def test_encode_decode_file_bytes(self):
        payload = os.urandom(1024)
        res = encode(payload, "file", name="data.bin", mime_type="application/x-data", timestamp=TS)
        out = decode(res.blocks)
        self.assertIsInstance(out.data, bytes)
        self.assertEqual(out.data, payload)
        self.assertEqual(out.mime_type, "application/x-data")
        self.assertEqual(out.suggested_name, "data.bin")

    def test_file_defaults(self):
        out = decode(encode(b"\x00\x01", "file", mime_type="").blocks)
        self.assertEqual(out.mime_type, "application/octet-stream")
        self.assertEqual(out.suggested_name, "downloaded_file")

    def test_unknown_kind_rejected(self):
        with self.assertRaises(ValueError):
            encode("x", "video")

    def test_encode_file_reads_name_and_type(self):
        with tempfile.TemporaryDirectory() as tmp:
            p = Path(tmp) / "notes.txt"
            p.write_bytes(b"some notes\n")
            res = encode_file(str(p), timestamp=TS)
            self.assertEqual(res.metadata.kind, "file")
            self.assertEqual(res.metadata.name, "notes.txt")
            self.assertEqual(res.metadata.mime_type, "text/plain")
            self.assertEqual(decode(res.blocks).data, b"some notes\n")

            q = Path(tmp) / "blob.unknownext"
            q.write_bytes(b"\x00")
            self.assertEqual(encode_file(str(q)).metadata.mime_type, "")

    def test_odd_length_decode(self):
        with self.assertWarns(OddSymbolCount):
            with self.assertRaises(TooShort):
                decode([5])

    def test_trailing_extra_block_is_dropped(self):
        res = encode("hello", timestamp=TS)
        with self.assertWarns(OddSymbolCount):
            out = decode(res.blocks + [7])
        self.assertEqual(out.data, "hello")

    def test_id_string_roundtrip(self):
        res = encode("round trip", timestamp=TS)
        s = blocks_to_id_string(res.blocks)
        self.assertEqual(len(s.splitlines()), len(res.blocks))
        imported = id_string_to_blocks(s)
        self.assertEqual(imported.blocks, res.blocks)
        self.assertEqual(imported.metadata, res.metadata)
        self.assertEqual(imported.original_size, res.original_size)

    def test_id_string_import_accepts_commas(self):
        res = encode("commas", timestamp=TS)
        s = ", ".join(WOOL_IDS[b] for b in res.blocks)
        self.assertEqual(id_string_to_blocks(s).blocks, res.blocks)

    def test_id_string_import_validates_checksum(self):
        res = encode("tamper", timestamp=TS)
        blocks = list(res.blocks)
        blocks[-6] ^= 0x3
        with self.assertRaises(ChecksumMismatch):
            id_string_to_blocks(blocks_to_id_string(blocks))

    def test_id_string_import_unknown_identifier(self):
        with self.assertRaises(UnknownIdentifier):
            id_string_to_blocks("white_wool\nbogus_wool")


if __name__ == "__main__":
    unittest.main()
