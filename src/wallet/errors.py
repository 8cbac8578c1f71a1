"""
Wallet Errors - Closed error taxonomy for the wallet core.

Every failure the core can raise is one of the kinds below, so callers
branch on ``error.kind`` instead of parsing message text.
"""

from enum import Enum


class ErrorKind(Enum):
    """The complete set of core failure kinds."""
    INVALID_MNEMONIC = "invalid_mnemonic"
    INVALID_DERIVATION_PATH = "invalid_derivation_path"
    INVALID_SECRET_KEY = "invalid_secret_key"
    DECRYPTION_FAILURE = "decryption_failure"
    INVALID_FORMAT = "invalid_format"
    IO_ERROR = "io_error"


class WalletError(Exception):
    """Base class for all wallet core errors."""
    kind: ErrorKind


class InvalidMnemonic(WalletError, ValueError):
    """Unknown word, wrong word count, or checksum mismatch."""
    kind = ErrorKind.INVALID_MNEMONIC


class InvalidDerivationPath(WalletError, ValueError):
    """Malformed path syntax or out-of-range index."""
    kind = ErrorKind.INVALID_DERIVATION_PATH


class InvalidSecretKey(WalletError, ValueError):
    """Secret scalar outside [1, n-1]."""
    kind = ErrorKind.INVALID_SECRET_KEY


class DecryptionFailure(WalletError):
    """Wrong passphrase or tampered record."""
    kind = ErrorKind.DECRYPTION_FAILURE


class InvalidFormat(WalletError):
    """Unrecognized record version or truncated record."""
    kind = ErrorKind.INVALID_FORMAT


class WalletIOError(WalletError, OSError):
    """Underlying read/write failure."""
    kind = ErrorKind.IO_ERROR
