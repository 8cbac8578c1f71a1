"""
Wallet Core - Facade over mnemonic, HD derivation and key helpers.

Usage:
    # Create new wallet
    wallet = Wallet.create()
    phrase = wallet.phrase  # Show once, store securely offline
    save_record(vault_encrypt(phrase, "vault-passphrase"), "wallet.dat")

    # Unlock existing wallet
    phrase = vault_decrypt(load_record("wallet.dat"), "vault-passphrase")
    wallet = Wallet.from_phrase(phrase)
    with wallet.derive_private_key("m/44'/111111'/0'/0/0") as secret:
        print(wallet.public_key_hex(secret))
"""

import logging
from pathlib import Path
from typing import Optional

from . import hdkey, keys, mnemonic, vault
from .hdkey import DerivationPath, ExtendedPrivateKey
from .mnemonic import MnemonicPhrase
from .secure import SecretBytes
from .vault import EncryptedSeedRecord

logger = logging.getLogger(__name__)


# BIP-44 derivation path for Kaspa (SLIP-44 coin type 111111)
KASPA_DERIVATION_PATH = "m/44'/111111'/0'/0/0"


# ============================================
# Wallet Class
# ============================================

class Wallet:
    """
    HD wallet holding one mnemonic in memory.

    Keys are derived on demand and handed to the caller as SecretBytes;
    the wallet keeps no derived material of its own.
    """

    def __init__(self, mnemonic_phrase: MnemonicPhrase, bip39_passphrase: str = ""):
        """Initialize wallet from an already validated mnemonic."""
        self._mnemonic: Optional[MnemonicPhrase] = mnemonic_phrase
        self._bip39_passphrase: Optional[str] = bip39_passphrase

    @classmethod
    def create(cls, word_count: int = 12) -> "Wallet":
        """
        Create a new wallet with a fresh random mnemonic.

        Args:
            word_count: 12, 15, 18, 21 or 24
        """
        wallet = cls(mnemonic.generate(word_count))
        logger.info(f"Generated new {word_count}-word mnemonic")
        return wallet

    @classmethod
    def from_phrase(cls, phrase: str, bip39_passphrase: str = "") -> "Wallet":
        """
        Restore a wallet from a user-supplied phrase.

        Raises:
            InvalidMnemonic: the phrase does not validate
        """
        return cls(mnemonic.parse(phrase), bip39_passphrase)

    @property
    def mnemonic(self) -> MnemonicPhrase:
        if self._mnemonic is None:
            raise RuntimeError("Wallet is locked")
        return self._mnemonic

    @property
    def phrase(self) -> str:
        """The mnemonic phrase (sensitive - only show during backup!)."""
        return mnemonic.to_phrase(self.mnemonic)

    def derive_extended_key(self, path: DerivationPath | str = KASPA_DERIVATION_PATH) -> ExtendedPrivateKey:
        """
        Derive the extended private key at ``path``.

        The caller owns the result and should use it as a context manager.
        """
        if isinstance(path, str):
            path = DerivationPath.parse(path)

        with mnemonic.derive_seed(self.mnemonic, self._bip39_passphrase) as seed:
            master = hdkey.master_key(seed)

        if not path.indices:
            return master

        with master:
            return hdkey.derive_path(master, path)

    def derive_private_key(self, path: DerivationPath | str = KASPA_DERIVATION_PATH) -> SecretBytes:
        """
        Derive the 32-byte secret key at ``path``.

        WARNING: Handle with extreme care! Wipe it (or use ``with``) when done.
        """
        with self.derive_extended_key(path) as xprv:
            return SecretBytes(xprv.secret.data)

    @staticmethod
    def public_key_hex(secret: SecretBytes | bytes) -> str:
        """Compressed public key hex for a secret key."""
        return keys.to_hex(keys.public_key(secret))

    def lock(self) -> None:
        """Drop the mnemonic from the wallet."""
        self._mnemonic = None
        self._bip39_passphrase = None

    def __del__(self):
        """Attempt to clear sensitive data on destruction."""
        self.lock()


# ============================================
# Facade Functions
# ============================================

def create_wallet(word_count: int = 12) -> tuple[MnemonicPhrase, str]:
    """Generate a new mnemonic and return it with its phrase text."""
    new = mnemonic.generate(word_count)
    return new, mnemonic.to_phrase(new)


def restore_wallet(phrase: str) -> MnemonicPhrase:
    """Validate a phrase (raises InvalidMnemonic)."""
    return mnemonic.parse(phrase)


def derive(mnemonic_phrase: MnemonicPhrase, path: DerivationPath | str,
           bip39_passphrase: str = "") -> SecretBytes:
    """Secret key at ``path`` for a mnemonic."""
    return Wallet(mnemonic_phrase, bip39_passphrase).derive_private_key(path)


def public_key_hex(secret: SecretBytes | bytes) -> str:
    return Wallet.public_key_hex(secret)


def vault_encrypt(phrase: str, passphrase: str) -> EncryptedSeedRecord:
    return vault.encrypt(phrase, passphrase)


def vault_decrypt(record: EncryptedSeedRecord, passphrase: str) -> str:
    return vault.decrypt(record, passphrase)


def load_record(filepath: str | Path) -> EncryptedSeedRecord:
    return vault.load_record(filepath)


def save_record(record: EncryptedSeedRecord, filepath: str | Path) -> None:
    vault.save_record(record, filepath)
