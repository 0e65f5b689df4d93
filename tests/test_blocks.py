import pytest

from alfalfa.blocks import double_block, gen_offset, ntz, xor_blocks

ZERO = bytes(16)
SAMPLE_A = bytes(range(16))
SAMPLE_B = bytes(range(100, 116))


def test_xor_with_self_is_zero():
    assert xor_blocks(SAMPLE_A, SAMPLE_A) == ZERO


def test_xor_with_zero_is_identity():
    assert xor_blocks(SAMPLE_A, ZERO) == SAMPLE_A


def test_xor_is_commutative_and_involutive():
    mixed = xor_blocks(SAMPLE_A, SAMPLE_B)
    assert mixed == xor_blocks(SAMPLE_B, SAMPLE_A)
    assert xor_blocks(mixed, SAMPLE_B) == SAMPLE_A


def test_xor_keeps_length_for_short_strings():
    assert len(xor_blocks(b"\x01\x02\x03", b"\x00\x00\x00")) == 3
    assert xor_blocks(b"\x01\x02\x03", b"\x00\x00\x00") == b"\x01\x02\x03"


def test_xor_length_mismatch_raises():
    with pytest.raises(ValueError):
        xor_blocks(SAMPLE_A, b"\x00")


def test_double_without_carry_shifts_left():
    assert double_block(bytes(15) + b"\x01") == bytes(15) + b"\x02"


def test_double_with_carry_reduces_by_135():
    assert double_block(b"\x80" + bytes(15)) == bytes(15) + bytes([135])


def test_double_of_zero_is_zero():
    assert double_block(ZERO) == ZERO


def test_double_is_linear():
    left = double_block(xor_blocks(SAMPLE_A, SAMPLE_B))
    right = xor_blocks(double_block(SAMPLE_A), double_block(SAMPLE_B))
    assert left == right


def test_double_rejects_wrong_length():
    with pytest.raises(ValueError):
        double_block(b"\x00" * 15)


@pytest.mark.parametrize("k", range(32))
def test_ntz_of_power_of_two(k):
    assert ntz(1 << k) == k


@pytest.mark.parametrize("x", [1, 3, 5, 7, 255, 1001])
def test_ntz_of_odd_is_zero(x):
    assert ntz(x) == 0


def test_ntz_shift_invariant():
    for x in (3, 5, 12, 40):
        assert ntz(x << 4) == ntz(x) + 4


@pytest.mark.parametrize("x", [0, -4])
def test_ntz_rejects_non_positive(x):
    with pytest.raises(ValueError):
        ntz(x)


KTOP = (0x0001020304050607, 0x08090A0B0C0D0E0F, 0x1011121314151617)


def test_gen_offset_bot_zero_takes_first_two_words():
    assert gen_offset(KTOP, 0) == bytes(range(16))


def test_gen_offset_byte_shift():
    assert gen_offset(KTOP, 8) == bytes(range(1, 17))
    assert gen_offset(KTOP, 16) == bytes(range(2, 18))


def test_gen_offset_length():
    for bot in range(64):
        assert len(gen_offset(KTOP, bot)) == 16


def test_gen_offset_bad_bot_raises():
    with pytest.raises(ValueError):
        gen_offset(KTOP, 64)
    with pytest.raises(ValueError):
        gen_offset(KTOP, -1)


def test_gen_offset_bad_words_raises():
    with pytest.raises(ValueError):
        gen_offset(KTOP[:2], 0)