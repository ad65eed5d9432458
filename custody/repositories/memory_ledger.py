"""
Журнал проводок в памяти процесса
"""

import logging
from collections import defaultdict
from dataclasses import replace

from custody.database.models import TransferRecord


logger = logging.getLogger(__name__)


class InMemoryTransferLedger:
    """
    Журнал проводок без внешнего хранилища

    Порядковые номера сквозные для всех заказов, как у автоинкремента
    в таблице transfer_records. Данные живут до завершения процесса.
    """

    def __init__(self):
        self._records: dict[int, list[TransferRecord]] = defaultdict(list)
        self._sequence = 0

    async def append(self, record: TransferRecord) -> TransferRecord:
        """Добавить запись в журнал"""
        self._sequence += 1
        stored = replace(record, id=self._sequence)
        self._records[stored.order_id].append(stored)
        logger.debug(f"Проводка #{stored.id} ({stored.stage}) записана для заказа #{stored.order_id}")
        return stored

    async def history(self, order_id: int) -> list[TransferRecord]:
        """История заказа от старых записей к новым"""
        return list(self._records.get(order_id, ()))

    def __len__(self) -> int:
        return self._sequence
