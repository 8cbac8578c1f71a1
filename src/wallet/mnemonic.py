"""
Mnemonic - BIP-39 phrase encoding, validation and seed stretching.

A phrase is 12-24 words from the English BIP-39 wordlist, encoding the
entropy plus a checksum. Encoding, checksum and seed stretching all come
from the ``mnemonic`` package; this module adds validation with per-kind
errors and keeps the phrase and its entropy together.
"""

import unicodedata
from dataclasses import dataclass, field

from mnemonic import Mnemonic

from .errors import InvalidMnemonic
from .secure import SecretBytes


# ============================================
# Constants
# ============================================

# Word count -> entropy size in bits
WORD_COUNT_TO_STRENGTH = {
    12: 128,
    15: 160,
    18: 192,
    21: 224,
    24: 256,
}
VALID_WORD_COUNTS = tuple(WORD_COUNT_TO_STRENGTH)

SEED_LENGTH = 64

_MNEMO = Mnemonic("english")
WORDLIST: tuple[str, ...] = tuple(_MNEMO.wordlist)
_WORDS = frozenset(WORDLIST)


# ============================================
# Data Classes
# ============================================

@dataclass(frozen=True)
class MnemonicPhrase:
    """A validated BIP-39 mnemonic (words + the entropy they encode)."""
    words: tuple[str, ...] = field(repr=False)
    entropy: bytes = field(repr=False)

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def phrase(self) -> str:
        return to_phrase(self)

    def __str__(self) -> str:
        return f"MnemonicPhrase(<{self.word_count} words>)"


# ============================================
# Encoding
# ============================================

def from_entropy(entropy: bytes) -> MnemonicPhrase:
    """Encode raw entropy (16, 20, 24, 28 or 32 bytes) as a mnemonic."""
    try:
        phrase = _MNEMO.to_mnemonic(bytes(entropy))
    except ValueError as e:
        raise InvalidMnemonic(
            f"Entropy must be 16, 20, 24, 28 or 32 bytes, got {len(entropy)}"
        ) from e
    return MnemonicPhrase(words=tuple(phrase.split()), entropy=bytes(entropy))


def generate(word_count: int = 12) -> MnemonicPhrase:
    """Create a fresh mnemonic from the system's secure random source."""
    strength = WORD_COUNT_TO_STRENGTH.get(word_count)
    if strength is None:
        raise InvalidMnemonic(
            f"word_count must be one of {list(VALID_WORD_COUNTS)}, got {word_count}"
        )
    phrase = _MNEMO.generate(strength=strength)
    return MnemonicPhrase(words=tuple(phrase.split()), entropy=bytes(_MNEMO.to_entropy(phrase)))


def normalize_phrase(phrase: str) -> list[str]:
    """NFKD-normalize, lowercase and split a phrase on any whitespace."""
    return unicodedata.normalize("NFKD", phrase).lower().split()


def parse(phrase: str) -> MnemonicPhrase:
    """
    Validate a user-supplied phrase and recover its entropy.

    Raises:
        InvalidMnemonic: unknown word, wrong word count, or bad checksum
    """
    words = normalize_phrase(phrase)

    if len(words) not in WORD_COUNT_TO_STRENGTH:
        raise InvalidMnemonic(
            f"Number of words must be one of {list(VALID_WORD_COUNTS)}, got {len(words)}"
        )

    for position, word in enumerate(words, start=1):
        if word not in _WORDS:
            raise InvalidMnemonic(f"Unknown word #{position}: '{word}'")

    try:
        entropy = _MNEMO.to_entropy(words)
    except LookupError as e:
        raise InvalidMnemonic(f"Unknown word in mnemonic: {e}") from e
    except ValueError as e:
        raise InvalidMnemonic("Mnemonic checksum mismatch") from e

    return MnemonicPhrase(words=tuple(words), entropy=bytes(entropy))


def to_phrase(mnemonic: MnemonicPhrase) -> str:
    """Join the words back into the canonical single-space phrase."""
    return " ".join(mnemonic.words)


def is_valid(phrase: str) -> bool:
    """Check a phrase without raising."""
    try:
        parse(phrase)
    except InvalidMnemonic:
        return False
    return True


# ============================================
# Seed Derivation
# ============================================

def derive_seed(mnemonic: MnemonicPhrase, bip39_passphrase: str = "") -> SecretBytes:
    """
    Stretch a mnemonic into the 64-byte BIP-39 seed.

    PBKDF2-HMAC-SHA512, 2048 rounds, salt "mnemonic" + passphrase. The
    passphrase here is the optional BIP-39 extension word, not the vault
    passphrase.
    """
    return SecretBytes(Mnemonic.to_seed(to_phrase(mnemonic), passphrase=bip39_passphrase))
