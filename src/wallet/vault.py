"""
Vault - Encrypted storage for the mnemonic phrase.

Industry-standard security:
- Argon2id key derivation (memory-hard)
- AES-256-GCM authenticated encryption
- Fixed binary record, written atomically

Record layout (version 1):
    [version:1][salt:16][nonce:12][ciphertext:N][tag:16]

The phrase never exists unencrypted on disk.
"""

import logging
import os
import secrets
from dataclasses import dataclass
from pathlib import Path

from argon2.low_level import hash_secret_raw, Type
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import DecryptionFailure, InvalidFormat, WalletIOError
from .secure import SecretBytes

logger = logging.getLogger(__name__)


# ============================================
# Security Constants
# ============================================

FORMAT_VERSION = 1

# Argon2id parameters for format version 1 (OWASP high-security profile).
# They are not stored in the record, so changing them breaks old files.
ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST = 65536  # 64 MB
ARGON2_PARALLELISM = 4
ARGON2_HASH_LEN = 32  # 256 bits for AES-256

SALT_SIZE = 16
NONCE_SIZE = 12  # 96 bits (recommended for GCM)
TAG_SIZE = 16

HEADER_SIZE = 1 + SALT_SIZE + NONCE_SIZE
MIN_RECORD_SIZE = HEADER_SIZE + TAG_SIZE

# Secure file permissions (Unix only)
SECURE_FILE_MODE = 0o600  # Owner read/write only


def set_secure_permissions(filepath: Path) -> None:
    """
    Set restrictive file permissions on Unix systems.

    No-op on Windows (NTFS uses ACLs, not Unix permissions).
    """
    if os.name == 'posix':
        try:
            os.chmod(filepath, SECURE_FILE_MODE)
        except OSError as e:
            # Best effort - the record is encrypted either way
            logger.warning(f"Could not restrict permissions on {filepath}: {e}")


# ============================================
# Record
# ============================================

@dataclass(frozen=True)
class EncryptedSeedRecord:
    """One encrypted mnemonic phrase, as stored on disk."""
    version: int
    salt: bytes
    nonce: bytes
    ciphertext: bytes
    tag: bytes

    def __post_init__(self):
        if len(self.salt) != SALT_SIZE:
            raise InvalidFormat(f"Salt must be {SALT_SIZE} bytes, got {len(self.salt)}")
        if len(self.nonce) != NONCE_SIZE:
            raise InvalidFormat(f"Nonce must be {NONCE_SIZE} bytes, got {len(self.nonce)}")
        if len(self.tag) != TAG_SIZE:
            raise InvalidFormat(f"Tag must be {TAG_SIZE} bytes, got {len(self.tag)}")

    def to_bytes(self) -> bytes:
        """Serialize to the fixed binary layout."""
        return bytes([self.version]) + self.salt + self.nonce + self.ciphertext + self.tag

    @classmethod
    def from_bytes(cls, data: bytes) -> "EncryptedSeedRecord":
        """
        Parse the fixed binary layout.

        Raises:
            InvalidFormat: truncated record or unknown version
        """
        if len(data) < MIN_RECORD_SIZE:
            raise InvalidFormat(
                f"Record is truncated: {len(data)} bytes, need at least {MIN_RECORD_SIZE}"
            )

        version = data[0]
        if version != FORMAT_VERSION:
            raise InvalidFormat(f"Unsupported record version: {version}")

        return cls(
            version=version,
            salt=bytes(data[1:1 + SALT_SIZE]),
            nonce=bytes(data[1 + SALT_SIZE:HEADER_SIZE]),
            ciphertext=bytes(data[HEADER_SIZE:-TAG_SIZE]),
            tag=bytes(data[-TAG_SIZE:]),
        )


# ============================================
# Key Derivation
# ============================================

def derive_key(passphrase: str, salt: bytes) -> SecretBytes:
    """
    Derive an AES-256 key from the vault passphrase using Argon2id.

    Argon2id is memory-hard, making brute-force attacks expensive.
    With these parameters, each guess requires ~64MB RAM and takes
    around a second on modern hardware.
    """
    return SecretBytes(hash_secret_raw(
        secret=passphrase.encode('utf-8'),
        salt=salt,
        time_cost=ARGON2_TIME_COST,
        memory_cost=ARGON2_MEMORY_COST,
        parallelism=ARGON2_PARALLELISM,
        hash_len=ARGON2_HASH_LEN,
        type=Type.ID
    ))


# ============================================
# Encryption
# ============================================

def encrypt(plaintext: str, passphrase: str) -> EncryptedSeedRecord:
    """Encrypt a phrase under a vault passphrase with a fresh salt and nonce."""
    salt = secrets.token_bytes(SALT_SIZE)
    nonce = secrets.token_bytes(NONCE_SIZE)

    with derive_key(passphrase, salt) as key:
        ciphertext_and_tag = AESGCM(key.data).encrypt(nonce, plaintext.encode('utf-8'), None)

    return EncryptedSeedRecord(
        version=FORMAT_VERSION,
        salt=salt,
        nonce=nonce,
        ciphertext=ciphertext_and_tag[:-TAG_SIZE],
        tag=ciphertext_and_tag[-TAG_SIZE:],
    )


def decrypt(record: EncryptedSeedRecord, passphrase: str) -> str:
    """
    Decrypt and authenticate a record.

    Raises:
        InvalidFormat: record version is not supported
        DecryptionFailure: wrong passphrase or tampered data
    """
    if record.version != FORMAT_VERSION:
        raise InvalidFormat(f"Unsupported record version: {record.version}")

    with derive_key(passphrase, record.salt) as key:
        try:
            plaintext = AESGCM(key.data).decrypt(record.nonce, record.ciphertext + record.tag, None)
        except InvalidTag as e:
            raise DecryptionFailure("Wrong passphrase or corrupted wallet file") from e

    try:
        return plaintext.decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecryptionFailure("Decrypted data is not valid UTF-8") from e


# ============================================
# File Operations
# ============================================

def save_record(record: EncryptedSeedRecord, filepath: str | Path) -> None:
    """
    Write a record atomically.

    The data goes to a temp file next to the target which then replaces
    it, so a failed write never leaves a partial record at ``filepath``.

    Raises:
        WalletIOError: the record could not be written
    """
    filepath = Path(filepath)
    temp_path = filepath.with_suffix(filepath.suffix + '.tmp')

    try:
        with open(temp_path, 'wb') as f:
            f.write(record.to_bytes())
            f.flush()
            os.fsync(f.fileno())
        set_secure_permissions(temp_path)
        temp_path.replace(filepath)
    except OSError as e:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            logger.warning(f"Could not remove temp file {temp_path}")
        raise WalletIOError(f"Failed to write wallet file {filepath}: {e}") from e

    logger.info(f"Saved encrypted seed to {filepath}")


def load_record(filepath: str | Path) -> EncryptedSeedRecord:
    """
    Read a record from disk.

    Raises:
        WalletIOError: the file could not be read
        InvalidFormat: the file is not a valid record
    """
    filepath = Path(filepath)

    try:
        with open(filepath, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise WalletIOError(f"Failed to read wallet file {filepath}: {e}") from e

    logger.debug(f"Loaded {len(data)} bytes from {filepath}")
    return EncryptedSeedRecord.from_bytes(data)
