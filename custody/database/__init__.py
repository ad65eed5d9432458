"""
Database package: подключение к SQLite и модели журнала проводок
"""

from custody.database.db import Database
from custody.database.models import AssetAmount, OrderLine, SettlementReceipt, TransferRecord


__all__ = [
    "AssetAmount",
    "Database",
    "OrderLine",
    "SettlementReceipt",
    "TransferRecord",
]
