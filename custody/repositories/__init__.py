"""
Repository layer для журнала проводок
"""

from custody.repositories.base import BaseRepository, TransferLedger
from custody.repositories.exceptions import LedgerStorageError, RepositoryError
from custody.repositories.memory_ledger import InMemoryTransferLedger
from custody.repositories.transfer_repository import TransferRepository


__all__ = [
    "BaseRepository",
    "InMemoryTransferLedger",
    "LedgerStorageError",
    "RepositoryError",
    "TransferLedger",
    "TransferRepository",
]
