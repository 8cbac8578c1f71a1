"""
Wallet package - Key derivation and encrypted seed storage.

Contains:
- mnemonic: BIP-39 phrase codec and seed stretching
- hdkey: BIP-32 extended private keys and derivation paths
- keys: secp256k1 public keys
- vault: Argon2id + AES-256-GCM encrypted seed records
- Wallet: facade composing the above
"""

from .errors import (
    ErrorKind,
    WalletError,
    InvalidMnemonic,
    InvalidDerivationPath,
    InvalidSecretKey,
    DecryptionFailure,
    InvalidFormat,
    WalletIOError,
)
from .secure import SecretBytes
from .mnemonic import MnemonicPhrase
from .hdkey import DerivationPath, ExtendedPrivateKey
from .vault import EncryptedSeedRecord
from .core import (
    Wallet,
    KASPA_DERIVATION_PATH,
    create_wallet,
    restore_wallet,
    derive,
    public_key_hex,
    vault_encrypt,
    vault_decrypt,
    load_record,
    save_record,
)

__all__ = [
    # Errors
    "ErrorKind",
    "WalletError",
    "InvalidMnemonic",
    "InvalidDerivationPath",
    "InvalidSecretKey",
    "DecryptionFailure",
    "InvalidFormat",
    "WalletIOError",
    # Types
    "SecretBytes",
    "MnemonicPhrase",
    "DerivationPath",
    "ExtendedPrivateKey",
    "EncryptedSeedRecord",
    # Facade
    "Wallet",
    "KASPA_DERIVATION_PATH",
    "create_wallet",
    "restore_wallet",
    "derive",
    "public_key_hex",
    "vault_encrypt",
    "vault_decrypt",
    "load_record",
    "save_record",
]
