"""
HD Keys - BIP-32 hierarchical deterministic private key derivation.

    seed --HMAC-SHA512("Bitcoin seed")--> master (k, c)
    (k, c) --child i--> (k + IL mod n, IR)

Hardened children (i >= 2^31) mix in the parent secret, normal children
mix in the parent public key. Invalid intermediate keys (probability about
2^-127) fail with InvalidSecretKey instead of skipping to the next index.
"""

import hashlib
import hmac
import struct
from dataclasses import dataclass, field

import base58
from Cryptodome.Hash import RIPEMD160

from .errors import InvalidDerivationPath, InvalidSecretKey
from .keys import SECP256K1_ORDER, public_key, validate_secret
from .secure import SecretBytes


# ============================================
# Constants
# ============================================

MASTER_HMAC_KEY = b"Bitcoin seed"
HARDENED_OFFSET = 0x80000000
MAX_INDEX = 0xFFFFFFFF
MAX_DEPTH = 255
ROOT_MARKER = "m"
HARDENED_MARKERS = ("'", "h", "H")

# BIP-32 mainnet private version bytes ("xprv")
XPRV_VERSION = bytes.fromhex("0488ade4")


def _hmac_sha512(key: bytes, data: bytes) -> bytes:
    return hmac.new(key, data, hashlib.sha512).digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))."""
    return RIPEMD160.new(hashlib.sha256(data).digest()).digest()


# ============================================
# Derivation Path
# ============================================

@dataclass(frozen=True)
class DerivationPath:
    """An ordered list of child indices (hardened ones include 2^31)."""
    indices: tuple[int, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "DerivationPath":
        """
        Parse "m/44'/111111'/0'/0/0".

        Raises:
            InvalidDerivationPath: missing root, malformed or oversized segment
        """
        if not isinstance(text, str):
            raise InvalidDerivationPath(f"Derivation path must be a string, got {type(text).__name__}")

        parts = text.strip().split("/")
        if parts[0] != ROOT_MARKER:
            raise InvalidDerivationPath(f"Derivation path must start with '{ROOT_MARKER}': {text!r}")

        indices = []
        for segment in parts[1:]:
            hardened = segment.endswith(HARDENED_MARKERS)
            digits = segment[:-1] if hardened else segment

            # isdigit() alone accepts non-ASCII digits like '²'
            if not (digits.isascii() and digits.isdigit()):
                raise InvalidDerivationPath(f"Invalid path segment {segment!r} in {text!r}")

            index = int(digits)
            if index >= HARDENED_OFFSET:
                raise InvalidDerivationPath(f"Path index {index} exceeds 2^31 - 1 in {text!r}")

            indices.append(index + HARDENED_OFFSET if hardened else index)

        return cls(tuple(indices))

    def __str__(self) -> str:
        parts = [ROOT_MARKER]
        for index in self.indices:
            if index >= HARDENED_OFFSET:
                parts.append(f"{index - HARDENED_OFFSET}'")
            else:
                parts.append(str(index))
        return "/".join(parts)

    def __len__(self) -> int:
        return len(self.indices)

    def is_hardened(self, position: int) -> bool:
        return self.indices[position] >= HARDENED_OFFSET


# ============================================
# Extended Private Key
# ============================================

@dataclass
class ExtendedPrivateKey:
    """A secret scalar plus chain code and its place in the tree."""
    secret: SecretBytes = field(repr=False)
    chain_code: SecretBytes = field(repr=False)
    depth: int = 0
    parent_fingerprint: bytes = b"\x00\x00\x00\x00"
    child_number: int = 0

    @property
    def public_key(self) -> bytes:
        """Compressed public key (33 bytes)."""
        return public_key(self.secret)

    @property
    def fingerprint(self) -> bytes:
        """First 4 bytes of HASH160 of the public key."""
        return hash160(self.public_key)[:4]

    def to_xprv(self) -> str:
        """Base58Check BIP-32 serialization (mainnet "xprv")."""
        payload = (
            XPRV_VERSION
            + bytes([self.depth])
            + self.parent_fingerprint
            + struct.pack(">I", self.child_number)
            + bytes(self.chain_code)
            + b"\x00"
            + bytes(self.secret)
        )
        return base58.b58encode_check(payload).decode("ascii")

    def wipe(self) -> None:
        """Clear the secret and chain code from memory."""
        self.secret.wipe()
        self.chain_code.wipe()

    def __enter__(self) -> "ExtendedPrivateKey":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()


def _split(digest: bytes) -> tuple[SecretBytes, SecretBytes]:
    return SecretBytes(digest[:32]), SecretBytes(digest[32:])


def master_key(seed: bytes | bytearray | SecretBytes) -> ExtendedPrivateKey:
    """
    Derive the root key from a BIP-39 seed.

    Raises:
        InvalidSecretKey: IL is zero or not below the curve order
    """
    secret, chain_code = _split(_hmac_sha512(MASTER_HMAC_KEY, bytes(seed)))
    try:
        validate_secret(secret)
    except InvalidSecretKey:
        secret.wipe()
        chain_code.wipe()
        raise
    return ExtendedPrivateKey(secret=secret, chain_code=chain_code)


def derive_child(parent: ExtendedPrivateKey, index: int) -> ExtendedPrivateKey:
    """
    Derive child ``index`` of ``parent``. Indices >= 2^31 are hardened.

    Raises:
        InvalidDerivationPath: index outside [0, 2^32) or depth overflow
        InvalidSecretKey: IL >= n or the child scalar is zero
    """
    if not isinstance(index, int) or not 0 <= index <= MAX_INDEX:
        raise InvalidDerivationPath(f"Child index out of range: {index!r}")
    if parent.depth >= MAX_DEPTH:
        raise InvalidDerivationPath(f"Maximum derivation depth ({MAX_DEPTH}) reached")

    if index >= HARDENED_OFFSET:
        data = b"\x00" + bytes(parent.secret) + struct.pack(">I", index)
    else:
        data = parent.public_key + struct.pack(">I", index)

    tweak, chain_code = _split(_hmac_sha512(bytes(parent.chain_code), data))
    with tweak:
        tweak_int = tweak.to_int()
        if tweak_int >= SECP256K1_ORDER:
            chain_code.wipe()
            raise InvalidSecretKey(f"Derived tweak for child {index} is not below the curve order")

        child_int = (tweak_int + parent.secret.to_int()) % SECP256K1_ORDER
        if child_int == 0:
            chain_code.wipe()
            raise InvalidSecretKey(f"Derived child {index} has a zero secret")

    return ExtendedPrivateKey(
        secret=SecretBytes(child_int.to_bytes(32, "big")),
        chain_code=chain_code,
        depth=parent.depth + 1,
        parent_fingerprint=parent.fingerprint,
        child_number=index,
    )


def derive_path(master: ExtendedPrivateKey, path: DerivationPath | str) -> ExtendedPrivateKey:
    """
    Walk ``path`` from ``master``. An empty path returns ``master`` itself.

    Every intermediate key is wiped once its child exists; ``master`` is left
    to its owner.
    """
    if isinstance(path, str):
        path = DerivationPath.parse(path)

    key = master
    try:
        for index in path.indices:
            child = derive_child(key, index)
            if key is not master:
                key.wipe()
            key = child
    except BaseException:
        if key is not master:
            key.wipe()
        raise
    return key
