"""Pydantic schemas package"""
from custody.schemas.webhook import (
    CancelOrderEventSchema,
    SaleOrderEventSchema,
    StockPickingEventSchema,
)


__all__ = [
    "CancelOrderEventSchema",
    "SaleOrderEventSchema",
    "StockPickingEventSchema",
]
