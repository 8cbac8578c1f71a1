"""
Keys - secp256k1 key pair helpers.

All curve operations share coincurve's process-wide GLOBAL_CONTEXT, which is
created once at import time and is read-only afterwards.
"""

from coincurve import PublicKey
from coincurve.context import GLOBAL_CONTEXT

from .errors import InvalidSecretKey
from .secure import SecretBytes


SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECRET_KEY_SIZE = 32
PUBLIC_KEY_SIZE = 33  # compressed


def validate_secret(secret: bytes | bytearray | SecretBytes) -> None:
    """Raise InvalidSecretKey unless secret is 32 bytes in [1, n-1]."""
    if len(secret) != SECRET_KEY_SIZE:
        raise InvalidSecretKey(
            f"Secret key must be {SECRET_KEY_SIZE} bytes, got {len(secret)}"
        )
    scalar = int.from_bytes(bytes(secret), "big")
    if not 0 < scalar < SECP256K1_ORDER:
        raise InvalidSecretKey("Secret key is outside the curve order")


def public_key(secret: bytes | bytearray | SecretBytes) -> bytes:
    """Compressed (33-byte) public key for a secret scalar."""
    validate_secret(secret)
    point = PublicKey.from_valid_secret(bytes(secret), context=GLOBAL_CONTEXT)
    return point.format(compressed=True)


def to_hex(key: bytes | bytearray | SecretBytes) -> str:
    """Lowercase hex for display/export."""
    return bytes(key).hex()
