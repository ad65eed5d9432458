"""
Pytest fixtures и конфигурация для тестов
"""
import sys
from collections.abc import AsyncGenerator, Sequence
from pathlib import Path

import pytest
import pytest_asyncio


# Добавляем корневую директорию в PYTHONPATH
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))

from custody.core.config import Config
from custody.database import AssetAmount, Database, OrderLine, SettlementReceipt
from custody.repositories import InMemoryTransferLedger, LedgerStorageError
from custody.services.erp.client import StaticOrderLineResolver
from custody.services.order_sequencer import OrderSequencer
from custody.services.settlement.executor import TransferExecutor
from custody.utils.helpers import get_now


class FakeSettlementClient:
    """
    Клиент расчетной сети для тестов

    Записывает все вызовы. Ошибки из очереди failures выбрасываются
    по одной на вызов, после чего вызовы успешны.
    """

    def __init__(self, failures: Sequence[BaseException] = ()):
        self.failures = list(failures)
        self.calls: list[tuple[str, str, str, tuple[AssetAmount, ...]]] = []

    async def transfer(
        self,
        stage: str,
        source_role: str,
        destination_role: str,
        amounts: Sequence[AssetAmount],
    ) -> SettlementReceipt:
        self.calls.append((stage, source_role, destination_role, tuple(amounts)))
        if self.failures:
            raise self.failures.pop(0)
        return SettlementReceipt(reference=f"tx-{len(self.calls)}", recorded_at=get_now())


class FailingLedger(InMemoryTransferLedger):
    """Журнал, запись в который всегда завершается ошибкой хранилища"""

    async def append(self, record):
        raise LedgerStorageError("append", record.order_id, RuntimeError("disk full"))


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[Database, None]:
    """
    Фикстура для тестовой базы данных (in-memory)
    """
    database = Database(":memory:")
    await database.connect()
    await database.init_db()
    yield database
    await database.disconnect()


@pytest.fixture
def ledger() -> InMemoryTransferLedger:
    """
    Фикстура для журнала проводок в памяти
    """
    return InMemoryTransferLedger()


@pytest.fixture
def resolver() -> StaticOrderLineResolver:
    """
    Фикстура для строк заказов 100, 200, 300
    """
    resolver = StaticOrderLineResolver()
    resolver.add_order(
        100,
        {1001: OrderLine(product_id=7, quantity=2), 1002: OrderLine(product_id=8, quantity=1.5)},
    )
    resolver.add_order(200, {2001: OrderLine(product_id=9, quantity=1)})
    resolver.add_order(300, {3001: OrderLine(product_id=10, quantity=4)})
    return resolver


@pytest.fixture
def settlement_client() -> FakeSettlementClient:
    """
    Фикстура для клиента расчетной сети без ошибок
    """
    return FakeSettlementClient()


@pytest.fixture
def executor(settlement_client: FakeSettlementClient) -> TransferExecutor:
    """
    Фикстура для исполнителя проводок
    """
    return TransferExecutor(settlement_client)


@pytest_asyncio.fixture
async def sequencer(
    ledger: InMemoryTransferLedger,
    executor: TransferExecutor,
    resolver: StaticOrderLineResolver,
) -> AsyncGenerator[OrderSequencer, None]:
    """
    Фикстура для очереди переходов заказов
    """
    order_sequencer = OrderSequencer(ledger=ledger, executor=executor, resolver=resolver)
    order_sequencer.start()
    yield order_sequencer
    await order_sequencer.stop()


@pytest.fixture
def mock_config(monkeypatch) -> None:
    """
    Фикстура для замены конфигурации на тестовую
    """
    monkeypatch.setattr(Config, "DATABASE_PATH", ":memory:")
    monkeypatch.setattr(Config, "SETTLEMENT_MODE", "dry_run")
    monkeypatch.setattr(Config, "ASSET_CODE_PREFIX", "ODOO")
    monkeypatch.setattr(Config, "TRANSFER_RETRY_MAX_ATTEMPTS", 0)
    monkeypatch.setattr(Config, "TRANSFER_RETRY_DELAY", 0.0)
    monkeypatch.setattr(Config, "ERP_URL", "http://erp.test")
    monkeypatch.setattr(Config, "ERP_DATABASE", "erp")
    monkeypatch.setattr(Config, "ERP_USERNAME", "custody")
    monkeypatch.setattr(Config, "ERP_PASSWORD", "secret")


@pytest.fixture
def make_settlement_client():
    """
    Фикстура-фабрика клиента расчетной сети с заданными ошибками
    """
    return FakeSettlementClient


@pytest.fixture
def failing_ledger() -> FailingLedger:
    """
    Фикстура для журнала с ошибкой хранилища при записи
    """
    return FailingLedger()
