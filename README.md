# alfalfa

Building blocks for an encrypted, emulated datagram link:

- `alfalfa.blocks`: 128-bit block arithmetic for the OCB mode of operation.
- `alfalfa.ocbkey`: the AES-128 key schedule and the per-key values used by OCB.
- `alfalfa.keycodec`: the base64 text form of 16-byte session keys.
- `alfalfa.delayqueue`: queues that release packets according to a recorded
  delivery schedule.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Block primitives (`alfalfa.blocks`)

Blocks are 16-byte `bytes` values in big-endian order.

- `xor_blocks(a, b)` returns the bytewise XOR of two byte strings of equal
  length. It raises `ValueError` if the lengths differ.
- `double_block(block)` multiplies a block by x in GF(2^128), reducing with 135.
- `ntz(x)` returns the number of trailing zero bits of a positive integer.
- `gen_offset(ktop_str, bot)` takes three 64-bit words and a shift of 0 to 63.
  It returns the 128 bits that start `bot` bits into the words joined together.

## OCB key state (`alfalfa.ocbkey`)

`OcbKey(key, nonce_len=12, tag_len=16)` holds an AES-128 key, along with the
values that OCB derives from it: `lstar`, `ldollar` and the 16-entry `l_table`.
Any key length other than 16, nonce length other than 12 or tag length other
than 16 raises `UnsupportedError`.

- `encrypt_block(block)` and `decrypt_block(block)` run AES on a single
  16-byte block.
- `get_l(tz)` returns L[tz]. Past the end of the table, it keeps doubling.
- `offset_from_nonce(nonce)` derives the initial OCB offset for a 12-byte nonce.
  It caches the encrypted nonce top, so that nonces that differ only in their
  low six bits reuse it.
- `clear()` forgets the key and the derived values. After that, any further
  use raises `RuntimeError`.

The module also defines an `AuthenticationError` exception class.

```python
from alfalfa.ocbkey import OcbKey

key = OcbKey(bytes(16))
offset = key.offset_from_nonce(bytes(12))
block = key.encrypt_block(offset)
assert key.decrypt_block(block) == offset
key.clear()
```

## Session key text form (`alfalfa.keycodec`)

- `base64_encode(raw)` turns 16 bytes into 24 characters of padded base64.
- `base64_decode(b64)` accepts 24 characters, as `str` or `bytes`, and returns
  exactly 16 bytes.

Both functions raise `KeyCodecError`, a subclass of `ValueError`, on bad
lengths or malformed input.

```python
from alfalfa.keycodec import base64_decode, base64_encode

text = base64_encode(bytes(range(16)))
assert base64_decode(text) == bytes(range(16))
```

## Link delay queues (`alfalfa.delayqueue`)

A delivery schedule is a text file of millisecond offsets in non-decreasing
order, separated by whitespace. `load_schedule(path, base_timestamp)` reads the
file, adds `base_timestamp` to every entry and returns a list. It stops at the
first token that is not an unsigned integer. It raises `ValueError` if the
times go backwards.

Both queue classes take `(name, ms_delay, schedule, clock=None)`. `clock` is a
callable that returns the current time in milliseconds; if it is left out, a
monotonic clock is used. A packet passed to `write(packet)` first waits
`ms_delay` milliseconds. After that, it waits for a delivery opportunity from
the schedule. `read()` returns the packets delivered since the last call, in
order. `wait_time()` returns the number of milliseconds until the queue next
needs attention.

- `ServiceDelayQueue` delivers one whole packet per opportunity. Opportunities
  that pass with nothing to deliver are dropped. When it has nothing pending,
  `wait_time()` returns 100.
- `ByteDelayQueue` gives each opportunity a budget of 1500 bytes. A packet
  larger than the budget that is left collects budget over later
  opportunities until it can be delivered.

Deliveries and per-second usage figures are logged through the `logging`
logger `alfalfa.delayqueue`.

```python
from alfalfa.delayqueue import ServiceDelayQueue

now = [0]
queue = ServiceDelayQueue("uplink", 5, [10, 20], clock=lambda: now[0])
queue.write(b"hello")
now[0] = 10
assert queue.read() == [b"hello"]
```

## What this package does not do

It does not contain a complete OCB encrypt/decrypt routine for whole messages
and tags. It has no nonce-framed message sessions and no random-number helper.
It provides no command-line programs, and it has no socket code that would
drive the delay queues over a live network. It supplies the pieces listed
above, and callers put them together.