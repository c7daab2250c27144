"""
Fletcher-16 checksum, modulus 255.

Both accumulators wrap at 255 (not 256); existing structures depend on it.
"""


def fletcher16(data: bytes) -> bytes:
    sum1 = 0
    sum2 = 0
    for b in data:
        sum1 = (sum1 + b) % 255
        sum2 = (sum2 + sum1) % 255
    return bytes((sum1, sum2))
