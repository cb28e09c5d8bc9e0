import numpy as np


def to_int8(n):
    """
    Encode a number as the unsigned byte of an 8-bit signed integer.

    Values outside of -128..127 are clamped (127 -> 0x7f, -128 -> 0x80), they do not wrap around.
    """
    return int(np.clip(n, -0x80, 0x7F)) & 0xFF


def from_int8(n):
    """Decode a byte as an 8-bit signed integer"""
    n &= 0xFF
    return n - 0x100 if n & 0x80 else n


def split_uint16_le(v):
    """Split a 16-bit unsigned integer into [low byte, high byte]"""
    return [v & 0xFF, (v >> 8) & 0xFF]
