"""Key schedule and per-key state for AES-OCB.

Holds the AES cipher for a key together with the precomputed L values and
the cached nonce-dependent "Ktop" material used to derive initial offsets.
"""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from alfalfa.blocks import BLOCK_SIZE, double_block, gen_offset

KEY_LEN = 16
NONCE_LEN = 12
TAG_LEN = 16
L_TABLE_SZ = 16

_MASK64 = (1 << 64) - 1
_ZERO_BLOCK = bytes(BLOCK_SIZE)


class AuthenticationError(Exception):
    """Raised when a ciphertext or its tag fails to authenticate."""


class UnsupportedError(Exception):
    """Raised when a key, nonce or tag length is not supported."""


class OcbKey:
    """AES-128 key material and derived values for OCB encryption."""

    def __init__(self, key: bytes, nonce_len: int = NONCE_LEN, tag_len: int = TAG_LEN) -> None:
        if nonce_len != NONCE_LEN:
            raise UnsupportedError(f"nonce length must be {NONCE_LEN}, got {nonce_len}")
        if tag_len != TAG_LEN:
            raise UnsupportedError(f"tag length must be {TAG_LEN}, got {tag_len}")
        key = bytes(key)
        if len(key) != KEY_LEN:
            raise UnsupportedError(f"key length must be {KEY_LEN}, got {len(key)}")

        self.nonce_len = nonce_len
        self.tag_len = tag_len
        self._cipher: Cipher | None = Cipher(algorithms.AES(key), modes.ECB())

        self.lstar = self.encrypt_block(_ZERO_BLOCK)
        self.ldollar = double_block(self.lstar)
        table = [double_block(self.ldollar)]
        while len(table) < L_TABLE_SZ:
            table.append(double_block(table[-1]))
        self.l_table: tuple[bytes, ...] = tuple(table)

        self._cached_top = _ZERO_BLOCK
        self._ktop_str: tuple[int, int, int] = (0, 0, 0)

    def _require_cipher(self) -> Cipher:
        if self._cipher is None:
            raise RuntimeError("OCB key has been cleared")
        return self._cipher

    def encrypt_block(self, block: bytes) -> bytes:
        """Encrypt a single 16-byte block with AES."""
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"block must be {BLOCK_SIZE} bytes, got {len(block)}")
        encryptor = self._require_cipher().encryptor()
        return encryptor.update(bytes(block)) + encryptor.finalize()

    def decrypt_block(self, block: bytes) -> bytes:
        """Decrypt a single 16-byte block with AES."""
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"block must be {BLOCK_SIZE} bytes, got {len(block)}")
        decryptor = self._require_cipher().decryptor()
        return decryptor.update(bytes(block)) + decryptor.finalize()

    def get_l(self, tz: int) -> bytes:
        """Return L[tz], doubling past the precomputed table when needed."""
        if tz < 0:
            raise ValueError("L index must be non-negative")
        self._require_cipher()
        if tz < L_TABLE_SZ:
            return self.l_table[tz]
        value = self.l_table[-1]
        for _ in range(L_TABLE_SZ - 1, tz):
            value = double_block(value)
        return value

    def offset_from_nonce(self, nonce: bytes) -> bytes:
        """Derive the initial OCB offset for a 12-byte nonce."""
        if len(nonce) != self.nonce_len:
            raise ValueError(f"nonce must be {self.nonce_len} bytes, got {len(nonce)}")
        top = bytearray(b"\x00\x00\x00\x01" + bytes(nonce))
        bottom = top[-1] & 0x3F
        top[-1] &= 0xC0
        top_block = bytes(top)
        if top_block != self._cached_top:
            ktop = self.encrypt_block(top_block)
            k0 = int.from_bytes(ktop[:8], "big")
            k1 = int.from_bytes(ktop[8:], "big")
            k2 = (k0 ^ (k0 << 8) ^ (k1 >> 56)) & _MASK64
            self._cached_top = top_block
            self._ktop_str = (k0, k1, k2)
        return gen_offset(self._ktop_str, bottom)

    def clear(self) -> None:
        """Forget the key and every value derived from it."""
        self._cipher = None
        self.lstar = _ZERO_BLOCK
        self.ldollar = _ZERO_BLOCK
        self.l_table = tuple(_ZERO_BLOCK for _ in range(L_TABLE_SZ))
        self._cached_top = _ZERO_BLOCK
        self._ktop_str = (0, 0, 0)