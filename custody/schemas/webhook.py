"""Pydantic схемы для валидации вебхуков ERP"""
from typing import Any

from pydantic import BaseModel, Field, field_validator

from custody.core.constants import ErpState


def _many2one_id(value: Any) -> Any:
    """Поле many2one приходит из ERP как [id, display_name]"""
    if isinstance(value, (list, tuple)):
        if not value:
            raise ValueError("Пустая ссылка на запись ERP")
        return value[0]
    return value


class SaleOrderEventSchema(BaseModel):
    """Изменение заказа продажи (создание и подтверждение)"""

    id: int = Field(..., gt=0, description="ID заказа продажи")
    order_line: list[int] = Field(..., min_length=1, description="ID строк заказа")
    state: str = Field(..., description="Состояние заказа в ERP")

    @field_validator("order_line")
    @classmethod
    def validate_order_line(cls, v: list[int]) -> list[int]:
        """ID строк положительные и без повторов"""
        if any(line_id <= 0 for line_id in v):
            raise ValueError("ID строки заказа должен быть положительным")
        if len(set(v)) != len(v):
            raise ValueError("ID строк заказа повторяются")
        return v

    @field_validator("state")
    @classmethod
    def validate_state(cls, v: str) -> str:
        allowed = (ErpState.DRAFT, ErpState.SALE)
        if v not in allowed:
            raise ValueError(f"Недопустимое состояние заказа. Допустимые: {', '.join(allowed)}")
        return v


class StockPickingEventSchema(BaseModel):
    """Изменение отгрузки (сборка и доставка)"""

    id: int = Field(..., gt=0, description="ID отгрузки")
    sale_id: int = Field(..., gt=0, description="ID заказа продажи")
    state: str = Field(..., description="Состояние отгрузки в ERP")

    @field_validator("sale_id", mode="before")
    @classmethod
    def validate_sale_id(cls, v: Any) -> Any:
        return _many2one_id(v)

    @field_validator("state")
    @classmethod
    def validate_state(cls, v: str) -> str:
        allowed = (ErpState.ASSIGNED, ErpState.DONE)
        if v not in allowed:
            raise ValueError(f"Недопустимое состояние отгрузки. Допустимые: {', '.join(allowed)}")
        return v


class CancelOrderEventSchema(BaseModel):
    """Отмена заказа продажи"""

    id: int = Field(..., gt=0, description="ID заказа продажи")
    state: str = Field(..., description="Состояние заказа в ERP")

    @field_validator("state")
    @classmethod
    def validate_state(cls, v: str) -> str:
        if v != ErpState.CANCEL:
            raise ValueError(f"Ожидалось состояние '{ErpState.CANCEL}'")
        return v
