import time


# Packet layout
META_LEN_BYTES = 2
CHECKSUM_BYTES = 2
MIN_PACKET_SIZE = META_LEN_BYTES + CHECKSUM_BYTES  # empty metadata and payload
MAX_META_LEN = 0xFFFF  # u16 length field

# Metadata kinds and wire keys
KIND_TEXT = "text"
KIND_FILE = "file"
KINDS = (KIND_TEXT, KIND_FILE)

DEFAULT_MIME_TYPE = "application/octet-stream"

# Symbols
SYMBOL_BITS = 4
SYMBOL_COUNT = 1 << SYMBOL_BITS  # 16 wool colours
SYMBOL_MASK = SYMBOL_COUNT - 1

# Display layout (Minecraft chunk footprint)
CHUNK_SIZE = 16
LAYER_SIZE = CHUNK_SIZE * CHUNK_SIZE

# CLI defaults
STRUCTURE_EXT = ".mcwool"
DEFAULT_MAX_INPUT_SIZE = 500 * 1024  # 500 KiB, 0 disables
DEFAULT_TEXT_FILENAME = "decoded_text.txt"
DEFAULT_BINARY_FILENAME = "downloaded_file"


def now_ms() -> int:
    return int(time.time() * 1000)
