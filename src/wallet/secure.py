"""
Secure Buffers - Secret bytes that are zeroed when they go out of scope.

Python gives no guarantee about when immutable ``bytes`` are freed or
whether their memory is cleared, so every seed, key and symmetric key in
the wallet lives in a ``SecretBytes`` (a mutable ``bytearray``) which is
overwritten on every exit path of its ``with`` block.

Usage:
    with SecretBytes(derive_something()) as key:
        use(key.data)
    # key is all zeros here, even if use() raised
"""

import hmac


class SecretBytes:
    """A bytearray-backed secret that wipes itself."""

    __slots__ = ("_buf",)

    def __init__(self, data: bytes | bytearray = b""):
        self._buf = bytearray(data)

    @classmethod
    def zeros(cls, length: int) -> "SecretBytes":
        return cls(bytes(length))

    @property
    def data(self) -> bytearray:
        """The live buffer (do not keep references past the owner's scope)."""
        return self._buf

    def to_bytes(self) -> bytes:
        """Immutable copy, for APIs that only accept ``bytes``."""
        return bytes(self._buf)

    def hex(self) -> str:
        return self._buf.hex()

    def to_int(self) -> int:
        return int.from_bytes(self._buf, "big")

    def wipe(self) -> None:
        """Overwrite the buffer with zeros in place."""
        for i in range(len(self._buf)):
            self._buf[i] = 0

    @property
    def is_wiped(self) -> bool:
        return not any(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def __getitem__(self, item):
        return self._buf[item]

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def __eq__(self, other) -> bool:
        if isinstance(other, SecretBytes):
            return hmac.compare_digest(self._buf, other._buf)
        if isinstance(other, (bytes, bytearray)):
            return hmac.compare_digest(self._buf, other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"SecretBytes(<{len(self._buf)} bytes>)"

    def __enter__(self) -> "SecretBytes":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __del__(self):
        """Attempt to clear the secret on destruction."""
        if hasattr(self, "_buf"):
            self.wipe()
