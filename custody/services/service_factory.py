"""
Factory для создания сервисов и репозиториев
"""

import logging

import aiosqlite

from custody.core.config import Config
from custody.domain.transfer_state_machine import TransferStateMachine
from custody.repositories import TransferLedger, TransferRepository
from custody.services.custody_service import CustodyService
from custody.services.erp.client import OdooOrderLineResolver, OrderLineResolver
from custody.services.order_sequencer import OrderSequencer
from custody.services.settlement.client import DryRunSettlementClient, SettlementClient
from custody.services.settlement.executor import TransferExecutor


logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory для создания сервисов с инжекцией зависимостей

    Внешние участники (журнал, клиент расчетной сети, ERP) можно передать
    явно, иначе они создаются по настройкам Config.
    """

    def __init__(
        self,
        db_connection: aiosqlite.Connection | None = None,
        settlement_client: SettlementClient | None = None,
        resolver: OrderLineResolver | None = None,
        ledger: TransferLedger | None = None,
    ):
        """
        Инициализация фабрики

        Args:
            db_connection: Подключение к базе данных
            settlement_client: Клиент расчетной сети
            resolver: Источник строк заказа
            ledger: Журнал проводок (вместо таблицы в базе данных)
        """
        if db_connection is None and ledger is None:
            raise ValueError("Требуется подключение к базе данных или журнал проводок")

        self.db_connection = db_connection
        self._ledger = ledger
        self._settlement_client = settlement_client
        self._resolver = resolver
        self._state_machine = None
        self._transfer_executor = None
        self._order_sequencer = None
        self._custody_service = None

    @property
    def ledger(self) -> TransferLedger:
        """Ленивая инициализация журнала проводок (TransferRepository по умолчанию)"""
        if self._ledger is None:
            self._ledger = TransferRepository(self.db_connection)
        return self._ledger

    @property
    def state_machine(self) -> TransferStateMachine:
        """Ленивая инициализация TransferStateMachine"""
        if self._state_machine is None:
            self._state_machine = TransferStateMachine()
        return self._state_machine

    @property
    def settlement_client(self) -> SettlementClient:
        """Клиент расчетной сети по SETTLEMENT_MODE"""
        if self._settlement_client is None:
            if Config.SETTLEMENT_MODE != "dry_run":
                raise ValueError(f"SETTLEMENT_MODE '{Config.SETTLEMENT_MODE}' не поддерживается")
            logger.warning("Расчетная сеть в режиме dry_run: проводки не отправляются")
            self._settlement_client = DryRunSettlementClient()
        return self._settlement_client

    @property
    def order_line_resolver(self) -> OrderLineResolver:
        """Источник строк заказа (ERP по настройкам ERP_*)"""
        if self._resolver is None:
            self._resolver = OdooOrderLineResolver(
                url=Config.ERP_URL,
                database=Config.ERP_DATABASE,
                username=Config.ERP_USERNAME,
                password=Config.ERP_PASSWORD,
            )
        return self._resolver

    @property
    def transfer_executor(self) -> TransferExecutor:
        """Ленивая инициализация TransferExecutor"""
        if self._transfer_executor is None:
            self._transfer_executor = TransferExecutor(
                client=self.settlement_client,
                max_attempts=Config.retry_max_attempts(),
                retry_delay=Config.TRANSFER_RETRY_DELAY,
                asset_prefix=Config.ASSET_CODE_PREFIX,
            )
        return self._transfer_executor

    @property
    def order_sequencer(self) -> OrderSequencer:
        """Очередь переходов заказов (одна на фабрику)"""
        if self._order_sequencer is None:
            self._order_sequencer = OrderSequencer(
                ledger=self.ledger,
                executor=self.transfer_executor,
                resolver=self.order_line_resolver,
                state_machine=self.state_machine,
            )
        return self._order_sequencer

    @property
    def custody_service(self) -> CustodyService:
        """Получение Custody Service"""
        if self._custody_service is None:
            self._custody_service = CustodyService(
                sequencer=self.order_sequencer, ledger=self.ledger
            )
        return self._custody_service

    def reset(self):
        """Сброс кэшированных сервисов (для тестирования)"""
        self._state_machine = None
        self._transfer_executor = None
        self._order_sequencer = None
        self._custody_service = None
        logger.debug("ServiceFactory: сервисы сброшены")
