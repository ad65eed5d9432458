"""
Работа с базой данных
"""

import logging
from typing import TYPE_CHECKING

import aiosqlite

from custody.core.config import Config


if TYPE_CHECKING:
    from custody.services.service_factory import ServiceFactory


logger = logging.getLogger(__name__)


class Database:
    """Класс для работы с базой данных"""

    def __init__(self, db_path: str | None = None):
        """
        Инициализация

        Args:
            db_path: Путь к файлу базы данных
        """
        self.db_path = db_path or Config.DATABASE_PATH
        self.connection: aiosqlite.Connection | None = None
        self._service_factory: "ServiceFactory | None" = None

    def _get_connection(self) -> aiosqlite.Connection:
        """
        Внутренний помощник для получения активного соединения.

        Гарантирует, что соединение инициализировано, чтобы mypy не видел None.
        """
        if self.connection is None:
            raise RuntimeError("База данных не подключена")
        return self.connection

    def get_connection(self) -> aiosqlite.Connection:
        """
        Публичный accessor для безопасного доступа к соединению.

        Используется сервисами/репозиториями вместо обращения к self.connection напрямую.
        """
        return self._get_connection()

    async def connect(self):
        """Подключение к базе данных"""
        connection = await aiosqlite.connect(self.db_path)
        connection.row_factory = aiosqlite.Row
        await connection.execute("PRAGMA journal_mode=WAL")
        self.connection = connection
        logger.info("Подключено к базе данных: %s", self.db_path)

    async def disconnect(self):
        """Отключение от базы данных"""
        connection = self.connection
        if connection:
            await connection.close()
            self.connection = None
            self._service_factory = None
            logger.info("Отключено от базы данных")

    @property
    def services(self) -> "ServiceFactory":
        """
        Получение Service Factory для доступа к сервисам

        Returns:
            ServiceFactory: Фабрика сервисов
        """
        if self._service_factory is None:
            from custody.services.service_factory import ServiceFactory

            self._service_factory = ServiceFactory(self._get_connection())
        return self._service_factory

    async def init_db(self):
        """
        Инициализация базы данных

        ВАЖНО: Схема БД управляется через Alembic миграции!
        Если миграции не применялись, создается минимальная схема.

        Для применения миграций используйте:
        $ alembic upgrade head
        """
        if not self.connection:
            await self.connect()

        connection = self._get_connection()

        cursor = await connection.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='transfer_records'"
        )
        table_exists = await cursor.fetchone()

        if not table_exists:
            logger.warning("Таблица transfer_records не найдена! Запустите миграции: alembic upgrade head")
            await self._create_schema()
        else:
            logger.info("[OK] База данных инициализирована (схема существует)")

        await self._create_indexes()

    async def _create_schema(self):
        """Создание схемы журнала без Alembic"""
        connection = self._get_connection()

        await connection.execute(
            """
            CREATE TABLE IF NOT EXISTS transfer_records (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                order_id INTEGER NOT NULL,
                stage TEXT NOT NULL,
                reference TEXT NOT NULL DEFAULT '',
                recorded_at TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                CHECK (stage IN ('create', 'confirm', 'consolidate', 'deliver', 'cancel'))
            )
        """
        )

        await connection.commit()
        logger.info("[OK] Схема журнала проводок создана")

    async def _create_indexes(self):
        """Создание индексов для оптимизации"""
        connection = self._get_connection()
        await connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_transfer_records_order_id ON transfer_records(order_id)"
        )
        await connection.commit()
