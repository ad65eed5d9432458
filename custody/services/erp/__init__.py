"""
Интеграция с ERP
"""

from custody.services.erp.client import (
    ErpError,
    OdooOrderLineResolver,
    OrderLineResolver,
    StaticOrderLineResolver,
)


__all__ = [
    "ErpError",
    "OdooOrderLineResolver",
    "OrderLineResolver",
    "StaticOrderLineResolver",
]
