"""
Базовый репозиторий и контракт журнала проводок
"""

import logging
from collections.abc import Sequence
from typing import Generic, Protocol, TypeVar

import aiosqlite

from custody.database.models import TransferRecord


logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransferLedger(Protocol):
    """
    Контракт журнала проводок

    Журнал упорядочен и только дополняется. Удаление не предусмотрено.
    Пишет в журнал только воркер OrderSequencer, по одной записи за раз.
    """

    async def append(self, record: TransferRecord) -> TransferRecord:
        """Добавить запись, вернуть ее с назначенным порядковым номером"""
        ...

    async def history(self, order_id: int) -> Sequence[TransferRecord]:
        """История заказа, от старых записей к новым"""
        ...


class BaseRepository(Generic[T]):
    """
    Базовый класс для всех репозиториев
    Предоставляет общую функциональность для работы с БД
    """

    def __init__(self, db_connection: aiosqlite.Connection):
        """
        Инициализация репозитория

        Args:
            db_connection: Подключение к базе данных
        """
        self.db = db_connection

    async def _execute(self, query: str, params: tuple | dict | None = None) -> aiosqlite.Cursor:
        """
        Выполнение SQL запроса

        Args:
            query: SQL запрос
            params: Параметры запроса

        Returns:
            Cursor с результатом
        """
        if params:
            return await self.db.execute(query, params)
        return await self.db.execute(query)

    async def _fetch_all(
        self, query: str, params: tuple | dict | None = None
    ) -> list[aiosqlite.Row]:
        """
        Получение всех записей

        Args:
            query: SQL запрос
            params: Параметры запроса

        Returns:
            Список строк результата
        """
        cursor = await self._execute(query, params)
        return list(await cursor.fetchall())
