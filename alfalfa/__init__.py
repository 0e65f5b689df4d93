"""OCB block primitives and AES key state, base64 session key encoding, and link delay queues."""

__version__ = "0.1.0"