"""128-bit block primitives used by the OCB mode of operation.

Blocks are 16-byte ``bytes`` objects in big-endian ("memory correct") order.
"""

from __future__ import annotations

from collections.abc import Sequence

BLOCK_SIZE = 16

_MASK64 = (1 << 64) - 1
_MASK128 = (1 << 128) - 1
_REDUCTION = 135


def _check_block(block: bytes, name: str = "block") -> None:
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"{name} must be {BLOCK_SIZE} bytes, got {len(block)}")


def xor_blocks(a: bytes, b: bytes) -> bytes:
    """Return the bytewise XOR of two equally long byte strings."""
    if len(a) != len(b):
        raise ValueError(f"cannot xor blocks of length {len(a)} and {len(b)}")
    value = int.from_bytes(a, "big") ^ int.from_bytes(b, "big")
    return value.to_bytes(len(a), "big")


def double_block(block: bytes) -> bytes:
    """Multiply a block by x in GF(2^128), the doubling operation of OCB."""
    _check_block(block)
    value = int.from_bytes(block, "big")
    carry = value >> 127
    doubled = ((value << 1) & _MASK128) ^ (_REDUCTION if carry else 0)
    return doubled.to_bytes(BLOCK_SIZE, "big")


def ntz(x: int) -> int:
    """Return the number of trailing zero bits of a positive integer."""
    if x <= 0:
        raise ValueError("ntz is defined only for positive integers")
    return (x & -x).bit_length() - 1


def gen_offset(ktop_str: Sequence[int], bot: int) -> bytes:
    """Build the initial offset from the stretched nonce key and shift ``bot``.

    ``ktop_str`` holds three 64-bit words; the result is the 128 bits that
    start ``bot`` bits into their concatenation.
    """
    if len(ktop_str) != 3:
        raise ValueError("ktop_str must hold exactly three 64-bit words")
    if not 0 <= bot < 64:
        raise ValueError("bot must be in the range 0..63")
    k0, k1, k2 = (word & _MASK64 for word in ktop_str)
    if bot:
        left = ((k0 << bot) | (k1 >> (64 - bot))) & _MASK64
        right = ((k1 << bot) | (k2 >> (64 - bot))) & _MASK64
    else:
        left, right = k0, k1
    return left.to_bytes(8, "big") + right.to_bytes(8, "big")