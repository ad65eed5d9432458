"""
Последовательная обработка переходов заказов
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from custody.core.constants import FAILED_REFERENCE, Stage
from custody.database.models import OrderLine, TransferRecord
from custody.domain.transfer_state_machine import TransferStateMachine
from custody.repositories.base import TransferLedger
from custody.repositories.exceptions import LedgerStorageError
from custody.services.erp.client import OrderLineResolver
from custody.services.settlement.executor import TransferExecutor
from custody.utils.helpers import get_now


logger = logging.getLogger(__name__)


@dataclass
class _Submission:
    """Заявка на переход заказа в очереди"""

    stage: str
    order_id: int
    line_ids: tuple[int, ...] | None
    future: asyncio.Future


# Сигнал остановки обработчика очереди
_STOP = object()


class OrderSequencer:
    """
    Очередь переходов заказов с единственным обработчиком

    Все заявки (всех заказов) обрабатываются строго по одной в порядке
    поступления. Каждая заявка видит в журнале результаты всех
    предыдущих, поэтому проверка перехода и запись результата не могут
    перемежаться с другой заявкой. Начатая заявка выполняется до конца,
    включая повторы проводки.
    """

    def __init__(
        self,
        ledger: TransferLedger,
        executor: TransferExecutor,
        resolver: OrderLineResolver,
        state_machine: TransferStateMachine | None = None,
    ):
        """
        Инициализация очереди

        Args:
            ledger: Журнал проводок
            executor: Исполнитель проводок
            resolver: Источник строк заказа
            state_machine: State machine для валидации переходов
        """
        self.ledger = ledger
        self.executor = executor
        self.resolver = resolver
        self.state_machine = state_machine or TransferStateMachine()
        self._queue: asyncio.Queue = asyncio.Queue()
        self._worker: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        """Обработчик очереди запущен"""
        return self._worker is not None and not self._worker.done()

    @property
    def pending(self) -> int:
        """Количество заявок в очереди"""
        return self._queue.qsize()

    def start(self) -> None:
        """Запуск обработчика очереди (повторный вызов ничего не делает)"""
        if self.is_running:
            return
        self._worker = asyncio.get_running_loop().create_task(self._run(), name="order-sequencer")
        logger.info("Обработчик очереди заказов запущен")

    async def stop(self) -> None:
        """Остановка обработчика после обработки всех заявок в очереди"""
        if not self.is_running:
            return
        self._queue.put_nowait(_STOP)
        await self._worker
        self._worker = None
        logger.info("Обработчик очереди заказов остановлен")

    async def join(self) -> None:
        """Ожидание обработки всех заявок в очереди"""
        await self._queue.join()

    def _put(self, stage: str, order_id: int, line_ids: Sequence[int] | None) -> asyncio.Future:
        if stage not in Stage.all_stages():
            raise ValueError(f"Неизвестный этап: {stage}")

        future = asyncio.get_running_loop().create_future()
        self._queue.put_nowait(
            _Submission(
                stage=stage,
                order_id=order_id,
                line_ids=tuple(line_ids) if line_ids else None,
                future=future,
            )
        )
        self.start()
        return future

    async def submit(
        self, stage: str, order_id: int, line_ids: Sequence[int] | None = None
    ) -> str | None:
        """
        Поставить переход в очередь и дождаться результата

        Args:
            stage: Этап заказа
            order_id: ID заказа
            line_ids: ID строк заказа (для создания и подтверждения)

        Returns:
            Ссылка на проводку или None, если переход отклонен или проводка не удалась

        Raises:
            ValueError: Если этап неизвестен
            LedgerStorageError: Если журнал недоступен
        """
        return await self._put(stage, order_id, line_ids)

    def enqueue(
        self, stage: str, order_id: int, line_ids: Sequence[int] | None = None
    ) -> asyncio.Future:
        """
        Поставить переход в очередь без ожидания

        Ошибка заявки, результат которой никто не ждет, логируется.

        Returns:
            Future с результатом submit
        """
        future = self._put(stage, order_id, line_ids)
        future.add_done_callback(self._log_failure)
        return future

    @staticmethod
    def _log_failure(future: asyncio.Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Заявка завершилась ошибкой: {error}", exc_info=error)

    async def _run(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                if item is _STOP:
                    return
                if item.future.cancelled():
                    continue
                try:
                    result = await self._process(item)
                except Exception as e:
                    if not item.future.done():
                        item.future.set_exception(e)
                else:
                    if not item.future.done():
                        item.future.set_result(result)
            finally:
                self._queue.task_done()

    async def _resolve_lines(self, item: _Submission) -> list[OrderLine]:
        if item.line_ids:
            return await self.resolver.get_products_for_lines(item.line_ids)
        return await self.resolver.get_order_lines(item.order_id)

    async def _process(self, item: _Submission) -> str | None:
        """
        Обработка одной заявки

        Проверка перехода, получение строк заказа, проводка и запись
        результата в журнал. Неудачная проводка записывается с пустой
        ссылкой и блокирует основной путь заказа.
        """
        stage, order_id = item.stage, item.order_id
        history = await self.ledger.history(order_id)

        result = self.state_machine.validate(stage, history)
        if not result.is_valid:
            logger.info(
                f"Заказ #{order_id}: переход на этап {stage} отклонен "
                f"({result.error_code}: {result.error_message})"
            )
            return None

        source_stage = None
        if stage == Stage.CANCEL:
            source_stage = self.state_machine.last_successful_stage(history)

        try:
            order_lines = await self._resolve_lines(item)
            receipt = await self.executor.execute(stage, order_id, order_lines, source_stage)
        except LedgerStorageError:
            raise
        except Exception as e:
            logger.exception(f"Заказ #{order_id}: проводка {stage} не удалась: {e}")
            await self.ledger.append(
                TransferRecord(
                    order_id=order_id,
                    stage=stage,
                    reference=FAILED_REFERENCE,
                    recorded_at=get_now(),
                )
            )
            return None

        record = await self.ledger.append(
            TransferRecord(
                order_id=order_id,
                stage=stage,
                reference=receipt.reference,
                recorded_at=receipt.recorded_at,
            )
        )
        logger.info(f"Заказ #{order_id}: этап {Stage.get_stage_name(stage)} записан (#{record.id})")
        return receipt.reference
