import pytest

import wallet
from wallet import (
    InvalidDerivationPath,
    InvalidMnemonic,
    KASPA_DERIVATION_PATH,
    Wallet,
)


def test_create_wallet_returns_matching_phrase():
    mnemonic_phrase, phrase = wallet.create_wallet()
    assert len(phrase.split()) == 12
    assert wallet.restore_wallet(phrase) == mnemonic_phrase


def test_restore_wallet_rejects_bad_phrase():
    with pytest.raises(InvalidMnemonic):
        wallet.restore_wallet("abandon " * 12)


def test_derive_matches_across_calls(zero_phrase):
    parsed = wallet.restore_wallet(zero_phrase)
    with wallet.derive(parsed, KASPA_DERIVATION_PATH) as a, wallet.derive(parsed, KASPA_DERIVATION_PATH) as b:
        assert a == b
        assert wallet.public_key_hex(a) == wallet.public_key_hex(b)


def test_derive_root_path(zero_phrase):
    parsed = wallet.restore_wallet(zero_phrase)
    with wallet.derive(parsed, "m") as root, wallet.derive(parsed, "m/0") as child:
        assert root != child


def test_derive_rejects_bad_path(zero_phrase):
    with pytest.raises(InvalidDerivationPath):
        wallet.derive(wallet.restore_wallet(zero_phrase), "44'/0")


def test_bip39_passphrase_changes_keys(zero_phrase):
    parsed = wallet.restore_wallet(zero_phrase)
    with wallet.derive(parsed, "m/0") as plain, wallet.derive(parsed, "m/0", bip39_passphrase="extra") as extended:
        assert plain != extended


def test_wallet_class(zero_phrase):
    w = Wallet.from_phrase(zero_phrase)
    assert w.phrase == zero_phrase

    with w.derive_extended_key("m/44'/111111'/0'") as account:
        assert account.depth == 3
        assert account.to_xprv().startswith("xprv")

    with w.derive_private_key() as secret:
        pubkey = w.public_key_hex(secret)
    assert len(pubkey) == 66
    assert secret.is_wiped


def test_wallet_create_word_count():
    assert len(Wallet.create(24).phrase.split()) == 24


def test_wallet_lock(zero_phrase):
    w = Wallet.from_phrase(zero_phrase)
    w.lock()
    with pytest.raises(RuntimeError):
        w.derive_private_key()


def test_vault_facade(tmp_path, zero_phrase):
    path = tmp_path / "wallet.dat"
    wallet.save_record(wallet.vault_encrypt(zero_phrase, "p@ss"), path)
    assert wallet.vault_decrypt(wallet.load_record(path), "p@ss") == zero_phrase


def test_facade_end_to_end(tmp_path):
    created, phrase = wallet.create_wallet()
    path = tmp_path / "wallet.dat"
    wallet.save_record(wallet.vault_encrypt(phrase, "p@ss"), path)

    recovered = wallet.restore_wallet(wallet.vault_decrypt(wallet.load_record(path), "p@ss"))
    with wallet.derive(created, KASPA_DERIVATION_PATH) as before, \
            wallet.derive(recovered, KASPA_DERIVATION_PATH) as after:
        assert wallet.public_key_hex(before) == wallet.public_key_hex(after)
