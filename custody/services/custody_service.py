"""
Сервис хранения заказов (точки входа для вызывающей стороны)
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from custody.core.constants import ErpState, Stage
from custody.database.models import TransferRecord
from custody.repositories.base import TransferLedger
from custody.schemas.webhook import (
    CancelOrderEventSchema,
    SaleOrderEventSchema,
    StockPickingEventSchema,
)
from custody.services.order_sequencer import OrderSequencer


logger = logging.getLogger(__name__)


class CustodyService:
    """
    Точки входа по этапам заказа

    Изменяющие операции только ставят переход в очередь и сразу
    возвращают управление. Данные возвращает только запрос трассировки.
    """

    def __init__(self, sequencer: OrderSequencer, ledger: TransferLedger):
        """
        Args:
            sequencer: Очередь переходов заказов
            ledger: Журнал проводок (для трассировки)
        """
        self.sequencer = sequencer
        self.ledger = ledger

    def create_order(self, order_id: int, line_ids: Sequence[int]) -> asyncio.Future:
        """Создание заказа из указанных строк"""
        return self.sequencer.enqueue(Stage.CREATE, order_id, line_ids)

    def confirm_order(self, order_id: int, line_ids: Sequence[int]) -> asyncio.Future:
        """Подтверждение заказа"""
        return self.sequencer.enqueue(Stage.CONFIRM, order_id, line_ids)

    def consolidate_order(self, order_id: int) -> asyncio.Future:
        """Сборка заказа на складе"""
        return self.sequencer.enqueue(Stage.CONSOLIDATE, order_id)

    def deliver_order(self, order_id: int) -> asyncio.Future:
        """Доставка заказа"""
        return self.sequencer.enqueue(Stage.DELIVER, order_id)

    def cancel_order(self, order_id: int) -> asyncio.Future:
        """Отмена заказа"""
        return self.sequencer.enqueue(Stage.CANCEL, order_id)

    async def get_trace(self, order_id: int) -> list[TransferRecord]:
        """
        Трассировка заказа

        Args:
            order_id: ID заказа

        Returns:
            Все записи журнала заказа в порядке записи
        """
        return await self.ledger.history(order_id)

    def process_erp_event(self, payload: dict[str, Any]) -> asyncio.Future | None:
        """
        Обработка вебхука ERP

        Состояние документа определяет этап: заказ продажи (draft, sale)
        создает и подтверждает заказ, отгрузка (assigned, done) собирает
        и доставляет, состояние cancel отменяет.

        Args:
            payload: Тело вебхука

        Returns:
            Future поставленного перехода или None, если состояние не отслеживается

        Raises:
            pydantic.ValidationError: Если тело вебхука некорректно
        """
        state = payload.get("state")
        stage = ErpState.to_stage(state) if isinstance(state, str) else None

        if stage is None:
            logger.debug(f"Вебхук ERP с состоянием {state!r} пропущен")
            return None

        if stage in (Stage.CREATE, Stage.CONFIRM):
            sale_order = SaleOrderEventSchema.model_validate(payload)
            return self.sequencer.enqueue(stage, sale_order.id, sale_order.order_line)

        if stage in (Stage.CONSOLIDATE, Stage.DELIVER):
            picking = StockPickingEventSchema.model_validate(payload)
            return self.sequencer.enqueue(stage, picking.sale_id)

        cancel = CancelOrderEventSchema.model_validate(payload)
        return self.sequencer.enqueue(stage, cancel.id)
