"""
Репозиторий журнала проводок (SQLite)
"""

import logging

import aiosqlite

from custody.database.models import TransferRecord
from custody.repositories.base import BaseRepository
from custody.repositories.exceptions import LedgerStorageError
from custody.utils.helpers import get_now, parse_timestamp


logger = logging.getLogger(__name__)


class TransferRepository(BaseRepository[TransferRecord]):
    """Журнал проводок заказов в таблице transfer_records"""

    async def append(self, record: TransferRecord) -> TransferRecord:
        """
        Добавление записи в журнал

        Args:
            record: Запись без порядкового номера

        Returns:
            Сохраненная запись с порядковым номером

        Raises:
            LedgerStorageError: Если запись не удалось сохранить
        """
        try:
            cursor = await self._execute(
                """
                INSERT INTO transfer_records (order_id, stage, reference, recorded_at, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    record.order_id,
                    record.stage,
                    record.reference,
                    record.recorded_at.isoformat(),
                    get_now().isoformat(),
                ),
            )
            await self.db.commit()
        except aiosqlite.Error as e:
            logger.error(f"Не удалось записать проводку заказа #{record.order_id}: {e}")
            raise LedgerStorageError("append", record.order_id, e) from e

        stored = TransferRecord(
            id=cursor.lastrowid,
            order_id=record.order_id,
            stage=record.stage,
            reference=record.reference,
            recorded_at=record.recorded_at,
        )
        logger.debug(f"Проводка #{stored.id} ({stored.stage}) записана для заказа #{stored.order_id}")
        return stored

    async def history(self, order_id: int) -> list[TransferRecord]:
        """
        История проводок заказа

        Args:
            order_id: ID заказа

        Returns:
            Список записей от старых к новым

        Raises:
            LedgerStorageError: Если журнал недоступен
        """
        try:
            rows = await self._fetch_all(
                """
                SELECT id, order_id, stage, reference, recorded_at
                FROM transfer_records
                WHERE order_id = ?
                ORDER BY id ASC
                """,
                (order_id,),
            )
        except aiosqlite.Error as e:
            logger.error(f"Не удалось прочитать журнал заказа #{order_id}: {e}")
            raise LedgerStorageError("history", order_id, e) from e

        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> TransferRecord:
        """Преобразование строки БД в TransferRecord"""
        return TransferRecord(
            id=row["id"],
            order_id=row["order_id"],
            stage=row["stage"],
            reference=row["reference"],
            recorded_at=parse_timestamp(row["recorded_at"]),
        )
