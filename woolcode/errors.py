class WoolError(Exception):
    """Base class for woolcode-specific errors."""


# Packet framing
class MetadataTooLarge(WoolError):
    pass


class TooShort(WoolError):
    pass


class ChecksumMismatch(WoolError):
    pass


class TruncatedMetadata(WoolError):
    pass


class MetadataParseError(WoolError):
    pass


# Symbols and the id text form
class UnknownIdentifier(WoolError):
    def __init__(self, token: str):
        super().__init__(f"Unknown wool id: {token!r}")
        self.token = token


class InvalidSymbol(WoolError):
    def __init__(self, value):
        super().__init__(f"Symbol out of range 0..15: {value!r}")
        self.value = value


# Warnings (non-fatal)
class OddSymbolCount(UserWarning):
    """Raised through the warnings module when a trailing block is dropped."""
