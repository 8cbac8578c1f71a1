import threading

import pytest

from services import VaultWorker
from wallet import DecryptionFailure


@pytest.fixture
def worker():
    w = VaultWorker()
    yield w
    w.stop(timeout=5)


def test_encrypt_and_decrypt_off_thread(worker):
    record = worker.encrypt("phrase words", "p").result(timeout=10)
    assert worker.decrypt(record, "p").result(timeout=10) == "phrase words"


def test_errors_come_back_through_future(worker):
    record = worker.encrypt("phrase words", "p").result(timeout=10)
    future = worker.decrypt(record, "wrong")
    with pytest.raises(DecryptionFailure):
        future.result(timeout=10)
    # the worker keeps serving after a failed job
    assert worker.decrypt(record, "p").result(timeout=10) == "phrase words"


def test_jobs_run_on_one_dedicated_thread(worker):
    names = [worker.submit(lambda: threading.current_thread().name).result(timeout=5) for _ in range(3)]
    assert set(names) == {"vault-worker"}
    assert threading.current_thread().name not in names


def test_stop_and_restart(worker):
    worker.start()
    assert worker.is_running
    worker.stop(timeout=5)
    assert not worker.is_running
    assert worker.submit(lambda: 42).result(timeout=5) == 42


def test_cancelled_job_is_skipped(worker):
    gate = threading.Event()
    first = worker.submit(gate.wait, 5)
    second = worker.submit(lambda: "ran")
    assert second.cancel()
    gate.set()
    assert first.result(timeout=5) is True
    assert second.cancelled()


def test_restart_after_timed_out_stop_serves_new_jobs(worker):
    gate = threading.Event()
    busy = worker.submit(gate.wait, 5)
    worker.stop(timeout=0.1)
    assert not worker.is_running

    # the replacement thread must not wait behind the old thread's job
    assert worker.submit(lambda: "fresh").result(timeout=5) == "fresh"

    gate.set()
    assert busy.result(timeout=5) is True
    assert worker.submit(lambda: "again").result(timeout=5) == "again"

