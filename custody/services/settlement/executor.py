"""
Исполнитель проводок заказа в расчетной сети
"""

import logging
from collections.abc import Sequence

from custody.core.constants import CustodyRole, ErrorCode, Stage
from custody.database.models import OrderLine, SettlementReceipt
from custody.services.settlement.assets import to_asset_amounts
from custody.services.settlement.client import SettlementClient
from custody.services.settlement.exceptions import SettlementError, is_transient_error
from custody.utils.retry import retry_on_transient_error


logger = logging.getLogger(__name__)


class TransferExecutor:
    """
    Выполнение проводки этапа

    Переводит строки заказа в активы, определяет маршрут между позициями
    хранения и отправляет проводку, повторяя ее при временных ошибках.
    """

    # Этап основного пути → позиция, из которой забираются активы
    SOURCE_ROLES: dict[str, str] = {
        Stage.CREATE: CustodyRole.ISSUER,
        Stage.CONFIRM: CustodyRole.CREATE,
        Stage.CONSOLIDATE: CustodyRole.CONFIRM,
        Stage.DELIVER: CustodyRole.CONSOLIDATE,
    }

    def __init__(
        self,
        client: SettlementClient,
        max_attempts: int | None = None,
        retry_delay: float = 0.0,
        asset_prefix: str = "ODOO",
    ):
        """
        Args:
            client: Клиент расчетной сети
            max_attempts: Лимит попыток при временных ошибках (None = без ограничения)
            retry_delay: Базовая задержка между попытками (0 = повтор сразу)
            asset_prefix: Префикс кодов активов
        """
        self.client = client
        self.asset_prefix = asset_prefix
        self._transfer = retry_on_transient_error(
            max_attempts=max_attempts,
            base_delay=retry_delay,
            is_transient=is_transient_error,
        )(client.transfer)

    def resolve_route(self, stage: str, source_stage: str | None = None) -> tuple[str, str]:
        """
        Маршрут проводки: (позиция-источник, позиция-получатель)

        Args:
            stage: Этап заказа
            source_stage: Последний успешный этап (обязателен для отмены)

        Returns:
            Кортеж ролей хранения

        Raises:
            ValueError: Если этап неизвестен или для отмены не указан source_stage
        """
        if stage == Stage.CANCEL:
            if source_stage is None:
                raise ValueError("Для отмены требуется последний успешный этап заказа")
            return CustodyRole.for_stage(source_stage), CustodyRole.CANCEL

        if stage not in self.SOURCE_ROLES:
            raise ValueError(f"Неизвестный этап: {stage}")

        return self.SOURCE_ROLES[stage], CustodyRole.for_stage(stage)

    async def execute(
        self,
        stage: str,
        order_id: int,
        order_lines: Sequence[OrderLine],
        source_stage: str | None = None,
    ) -> SettlementReceipt:
        """
        Выполнение проводки этапа

        Args:
            stage: Этап заказа
            order_id: ID заказа
            order_lines: Строки заказа
            source_stage: Последний успешный этап (для отмены)

        Returns:
            SettlementReceipt успешной проводки

        Raises:
            ValueError: Некорректные строки заказа или маршрут
            SettlementError: Окончательная ошибка расчетной сети с кодом этапа
        """
        amounts = to_asset_amounts(order_lines, self.asset_prefix)
        source_role, destination_role = self.resolve_route(stage, source_stage)

        logger.debug(
            f"Заказ #{order_id}: проводка {stage} {source_role} → {destination_role}, "
            f"активов: {len(amounts)}"
        )

        try:
            receipt = await self._transfer(stage, source_role, destination_role, amounts)
        except SettlementError as e:
            if e.code != ErrorCode.GENERIC_ERROR and not is_transient_error(e):
                raise
            raise SettlementError(ErrorCode.for_transfer(stage), str(e) or None) from e
        except Exception as e:
            raise SettlementError(ErrorCode.for_transfer(stage)) from e

        logger.info(f"Заказ #{order_id}: проводка {stage} выполнена, ссылка {receipt.reference}")
        return receipt
