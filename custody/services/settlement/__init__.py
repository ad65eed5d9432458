"""
Интеграция с расчетной сетью
"""

from custody.services.settlement.exceptions import (
    InsufficientFeeError,
    SettlementError,
    TransferTimeoutError,
    TransientSettlementError,
    is_transient_error,
)
from custody.services.settlement.assets import create_asset_code, format_quantity, to_asset_amounts
from custody.services.settlement.client import DryRunSettlementClient, SettlementClient


__all__ = [
    "DryRunSettlementClient",
    "InsufficientFeeError",
    "SettlementClient",
    "SettlementError",
    "TransferTimeoutError",
    "TransientSettlementError",
    "create_asset_code",
    "format_quantity",
    "is_transient_error",
    "to_asset_amounts",
]
