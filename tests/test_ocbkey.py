import pytest

from alfalfa.blocks import double_block, xor_blocks
from alfalfa.ocbkey import L_TABLE_SZ, OcbKey, UnsupportedError

IETF_KEY = bytes(range(16))
IETF_NONCE = bytes(range(12))


@pytest.fixture
def key():
    return OcbKey(IETF_KEY, 12, 16)


def test_aes_known_answer(key):
    plaintext = bytes.fromhex("00112233445566778899aabbccddeeff")
    assert key.encrypt_block(plaintext) == bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a")


def test_block_round_trip(key):
    block = bytes(range(100, 116))
    assert key.decrypt_block(key.encrypt_block(block)) == block


def test_lstar_is_encrypted_zero_block(key):
    assert key.lstar == key.encrypt_block(bytes(16))


def test_l_values_form_doubling_chain(key):
    assert key.ldollar == double_block(key.lstar)
    assert key.get_l(0) == double_block(key.ldollar)
    assert len(key.l_table) == L_TABLE_SZ
    for i in range(L_TABLE_SZ - 1):
        assert key.get_l(i + 1) == double_block(key.get_l(i))


def test_get_l_beyond_table(key):
    assert key.get_l(L_TABLE_SZ) == double_block(key.get_l(L_TABLE_SZ - 1))
    assert key.get_l(L_TABLE_SZ + 1) == double_block(key.get_l(L_TABLE_SZ))


def test_get_l_negative_rejected(key):
    with pytest.raises(ValueError):
        key.get_l(-1)


def test_offset_with_zero_bottom_is_ktop(key):
    nonce = bytes(11) + b"\x40"
    assert key.offset_from_nonce(nonce) == key.encrypt_block(b"\x00\x00\x00\x01" + nonce)


def test_offset_with_byte_shift_uses_stretch(key):
    base = bytes(11) + b"\x80"
    shifted = bytes(11) + b"\x88"
    ktop = key.encrypt_block(b"\x00\x00\x00\x01" + base)
    stretch_byte = xor_blocks(ktop[0:1], ktop[1:2])
    assert key.offset_from_nonce(shifted) == ktop[1:16] + stretch_byte


def test_offset_is_stable_across_cache(key):
    first = key.offset_from_nonce(IETF_NONCE)
    key.offset_from_nonce(bytes(12))
    assert key.offset_from_nonce(IETF_NONCE) == first


def test_offset_rejects_wrong_nonce_length(key):
    with pytest.raises(ValueError):
        key.offset_from_nonce(bytes(8))


def test_unsupported_nonce_length():
    with pytest.raises(UnsupportedError):
        OcbKey(IETF_KEY, 8, 16)


def test_unsupported_key_length():
    with pytest.raises(UnsupportedError):
        OcbKey(bytes(24), 12, 16)


def test_wrong_block_length_rejected(key):
    with pytest.raises(ValueError):
        key.encrypt_block(bytes(15))
    with pytest.raises(ValueError):
        key.decrypt_block(bytes(17))


def test_clear_forgets_key(key):
    key.clear()
    assert key.lstar == bytes(16)
    with pytest.raises(RuntimeError):
        key.encrypt_block(bytes(16))
    with pytest.raises(RuntimeError):
        key.offset_from_nonce(IETF_NONCE)