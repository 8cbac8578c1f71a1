"""
Vault Worker - Runs Argon2id-bound vault operations off the caller's thread.

Each vault encrypt/decrypt spends most of its time in one Argon2id call
(about a second, 64 MB). That call cannot be interrupted, so a responsive
caller hands it to this worker's single background thread and waits on the
returned Future instead.
"""

import logging
import queue
import threading
from concurrent.futures import Future
from typing import Callable, Optional

from wallet import vault
from wallet.vault import EncryptedSeedRecord

logger = logging.getLogger(__name__)

_STOP = object()


class VaultWorker:
    """One dedicated daemon thread that executes vault jobs in order."""

    def __init__(self, name: str = "vault-worker"):
        self._name = name
        self._queue: Optional[queue.Queue] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _start_locked(self) -> None:
        # Each thread owns its queue, so a thread still finishing a job
        # after stop() never shares work with its replacement.
        if self.is_running:
            return
        self._queue = queue.Queue()
        self._thread = threading.Thread(
            target=self._run, args=(self._queue,), name=self._name, daemon=True
        )
        self._thread.start()

    def start(self) -> None:
        """Start the worker thread (no-op if already running)."""
        with self._lock:
            self._start_locked()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Finish queued jobs, then stop the thread."""
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._queue.put(_STOP)
            self._thread = None
            self._queue = None
        thread.join(timeout)

    def submit(self, fn: Callable, *args) -> Future:
        """Queue ``fn(*args)``; the Future carries its result or exception."""
        future: Future = Future()
        with self._lock:
            self._start_locked()
            self._queue.put((future, fn, args))
        return future

    def encrypt(self, plaintext: str, passphrase: str) -> "Future[EncryptedSeedRecord]":
        return self.submit(vault.encrypt, plaintext, passphrase)

    def decrypt(self, record: EncryptedSeedRecord, passphrase: str) -> "Future[str]":
        return self.submit(vault.decrypt, record, passphrase)

    def _run(self, jobs: queue.Queue) -> None:
        """Process jobs until the stop marker arrives."""
        while True:
            item = jobs.get()
            if item is _STOP:
                break

            future, fn, args = item
            if not future.set_running_or_notify_cancel():
                continue

            try:
                result = fn(*args)
            except Exception as e:
                logger.debug(f"Vault job {getattr(fn, '__name__', fn)} failed: {type(e).__name__}")
                future.set_exception(e)
            else:
                future.set_result(result)


# Global vault worker instance
vault_worker = VaultWorker()
