"""Shared fixtures."""

import pytest

from wallet import vault


@pytest.fixture(autouse=True)
def fast_kdf(monkeypatch):
    """Cheap Argon2id parameters so vault tests run quickly."""
    monkeypatch.setattr(vault, "ARGON2_TIME_COST", 1)
    monkeypatch.setattr(vault, "ARGON2_MEMORY_COST", 1024)
    monkeypatch.setattr(vault, "ARGON2_PARALLELISM", 1)


@pytest.fixture
def app_home(tmp_path, monkeypatch):
    """Isolated application data directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("KASPA_WALLET_HOME", str(home))
    return home


@pytest.fixture
def zero_phrase():
    """BIP-39 phrase for 16 zero bytes of entropy."""
    return " ".join(["abandon"] * 11 + ["about"])
