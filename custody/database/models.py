"""
Модели данных
"""
from dataclasses import dataclass
from datetime import datetime

from custody.core.constants import FAILED_REFERENCE, Stage


@dataclass(frozen=True)
class TransferRecord:
    """
    Запись журнала проводок

    Одна запись на каждую попытку перехода заказа на этап.
    Пустая ссылка означает неудачную проводку. Запись неизменяема:
    журнал только дополняется, исправления оформляются новыми записями.
    """

    order_id: int
    stage: str
    reference: str
    recorded_at: datetime
    id: int | None = None  # Порядковый номер в журнале, назначается хранилищем

    @property
    def is_failed(self) -> bool:
        """Проводка завершилась неудачей"""
        return self.reference == FAILED_REFERENCE

    @property
    def is_main_path(self) -> bool:
        """Запись относится к основному пути заказа"""
        return Stage.is_main_path(self.stage)

    def to_dict(self) -> dict:
        """Представление записи для трассировки"""
        return {
            "id": self.id,
            "order_id": self.order_id,
            "stage": self.stage,
            "reference": self.reference,
            "recorded_at": self.recorded_at.isoformat(),
        }


@dataclass(frozen=True)
class OrderLine:
    """Строка заказа: товар и количество"""

    product_id: int
    quantity: float


@dataclass(frozen=True)
class AssetAmount:
    """Количество актива в представлении расчетной сети"""

    asset_code: str
    quantity: str


@dataclass(frozen=True)
class SettlementReceipt:
    """Квитанция успешной проводки в расчетной сети"""

    reference: str
    recorded_at: datetime
