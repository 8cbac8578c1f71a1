import pytest

import app
import wallet
from networks import NodeError


@pytest.fixture
def wallet_file(tmp_path, app_home):
    return tmp_path / "wallet.dat"


def run(wallet_file, *argv):
    return app.main(["--file", str(wallet_file), *argv])


def expected_pubkey(phrase, path=wallet.KASPA_DERIVATION_PATH):
    with wallet.derive(wallet.restore_wallet(phrase), path) as secret:
        return wallet.public_key_hex(secret)


def test_new_then_export_pub(wallet_file, capsys):
    assert run(wallet_file, "new", "--passphrase", "p@ss") == 0
    out = capsys.readouterr().out
    phrase = out.strip().splitlines()[-1]
    assert len(phrase.split()) == 12
    assert wallet_file.exists()
    assert phrase.encode() not in wallet_file.read_bytes()

    assert run(wallet_file, "export-pub", "--passphrase", "p@ss") == 0
    assert capsys.readouterr().out.strip() == expected_pubkey(phrase)


def test_new_with_24_words(wallet_file, capsys):
    assert run(wallet_file, "new", "-p", "x", "--words", "24") == 0
    assert len(capsys.readouterr().out.strip().splitlines()[-1].split()) == 24


def test_new_refuses_to_overwrite(wallet_file, capsys):
    wallet_file.write_bytes(b"keep me")
    assert run(wallet_file, "new", "-p", "x") == 1
    assert "already exists" in capsys.readouterr().err
    assert wallet_file.read_bytes() == b"keep me"

    assert run(wallet_file, "new", "-p", "x", "--force") == 0
    assert wallet_file.read_bytes() != b"keep me"


def test_restore_and_address(wallet_file, capsys, zero_phrase):
    assert run(wallet_file, "restore", "--mnemonic", zero_phrase, "--passphrase", "p") == 0
    capsys.readouterr()

    assert run(wallet_file, "address", "-p", "p", "--path", "m/44'/111111'/0'/0/1") == 0
    out = capsys.readouterr().out
    assert expected_pubkey(zero_phrase, "m/44'/111111'/0'/0/1") in out
    assert "address encoding is not provided" in out


def test_restore_rejects_bad_mnemonic(wallet_file, capsys):
    assert run(wallet_file, "restore", "-m", "abandon " * 12, "-p", "p") == 1
    assert "checksum" in capsys.readouterr().err
    assert not wallet_file.exists()


def test_wrong_passphrase(wallet_file, capsys, zero_phrase):
    run(wallet_file, "restore", "-m", zero_phrase, "-p", "right")
    capsys.readouterr()
    assert run(wallet_file, "export-pub", "-p", "wrong") == 1
    err = capsys.readouterr().err
    assert "Wrong passphrase" in err
    assert "Traceback" not in err


def test_missing_wallet_file(wallet_file, capsys):
    assert run(wallet_file, "export-pub", "-p", "x") == 1
    assert "Failed to read wallet file" in capsys.readouterr().err


def test_invalid_path(wallet_file, capsys, zero_phrase):
    run(wallet_file, "restore", "-m", zero_phrase, "-p", "p")
    capsys.readouterr()
    assert run(wallet_file, "export-pub", "-p", "p", "--path", "44'/0") == 1
    assert "must start with 'm'" in capsys.readouterr().err


class FakeNodeClient:
    calls = []

    def __init__(self, base_url, timeout=10.0):
        self.base_url = base_url

    def get_balance(self, address):
        self.calls.append(("balance", self.base_url, address))
        return {"confirmed": 10}

    def broadcast(self, tx_hex):
        self.calls.append(("broadcast", self.base_url, tx_hex))
        return '{"txid": "ff"}'


@pytest.fixture
def fake_node(monkeypatch):
    FakeNodeClient.calls = []
    monkeypatch.setattr(app, "NodeClient", FakeNodeClient)
    return FakeNodeClient


def test_balance(wallet_file, capsys, fake_node):
    assert run(wallet_file, "--node", "http://n:1", "balance", "kaspa:qq") == 0
    assert fake_node.calls == [("balance", "http://n:1", "kaspa:qq")]
    assert "{'confirmed': 10}" in capsys.readouterr().out


def test_balance_node_error(wallet_file, capsys, monkeypatch):
    class Down(FakeNodeClient):
        def get_balance(self, address):
            raise NodeError("Cannot reach node")

    monkeypatch.setattr(app, "NodeClient", Down)
    assert run(wallet_file, "balance", "kaspa:qq") == 1
    assert "Cannot reach node" in capsys.readouterr().err


def test_send_without_raw_tx(wallet_file, capsys, zero_phrase, fake_node):
    run(wallet_file, "restore", "-m", zero_phrase, "-p", "p")
    capsys.readouterr()
    assert run(wallet_file, "send", "kaspa:qqdest", "1000", "-p", "p") == 2
    captured = capsys.readouterr()
    assert expected_pubkey(zero_phrase) in captured.out
    assert "--raw-tx" in captured.err
    assert fake_node.calls == []


def test_send_broadcasts_raw_tx(wallet_file, capsys, zero_phrase, fake_node):
    run(wallet_file, "restore", "-m", zero_phrase, "-p", "p")
    capsys.readouterr()
    assert run(wallet_file, "send", "kaspa:qqdest", "1000", "-p", "p", "--raw-tx", "beef") == 0
    assert fake_node.calls == [("broadcast", "http://127.0.0.1:16110", "beef")]
    assert '"txid": "ff"' in capsys.readouterr().out


def test_send_rejects_non_positive_amount(wallet_file, capsys):
    assert run(wallet_file, "send", "kaspa:qq", "0", "-p", "p") == 2


def test_usage_error_exits_2(wallet_file):
    with pytest.raises(SystemExit) as excinfo:
        run(wallet_file, "frobnicate")
    assert excinfo.value.code == 2


def test_settings_supply_defaults(tmp_path, app_home, capsys, zero_phrase):
    from settings import save_settings

    target = tmp_path / "from-settings.dat"
    save_settings({"wallet_file": str(target)})
    assert app.main(["restore", "-m", zero_phrase, "-p", "p"]) == 0
    assert target.exists()


def test_vault_work_runs_on_the_vault_worker(wallet_file, capsys, zero_phrase, monkeypatch):
    from services import VaultWorker

    class RecordingWorker(VaultWorker):
        def __init__(self):
            super().__init__()
            self.jobs = []

        def submit(self, fn, *args):
            self.jobs.append(fn.__name__)
            return super().submit(fn, *args)

    worker = RecordingWorker()
    monkeypatch.setattr(app, "vault_worker", worker)
    try:
        assert run(wallet_file, "restore", "-m", zero_phrase, "-p", "p") == 0
        assert run(wallet_file, "export-pub", "-p", "p") == 0
    finally:
        worker.stop(timeout=5)

    assert worker.jobs == ["encrypt", "decrypt"]
    assert capsys.readouterr().out.strip().splitlines()[-1] == expected_pubkey(zero_phrase)
