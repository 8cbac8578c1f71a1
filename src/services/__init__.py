"""
Services package - Background services for the Kaspa wallet.

Contains:
- VaultWorker: dedicated thread for slow vault key derivation
- logging: logging configuration and log file housekeeping
"""

from .worker import VaultWorker, vault_worker

__all__ = [
    "VaultWorker",
    "vault_worker",
]
