"""
Клиент расчетной сети
"""

import hashlib
import logging
import uuid
from collections.abc import Sequence
from typing import Protocol

from custody.database.models import AssetAmount, SettlementReceipt
from custody.utils.helpers import get_now, truncate_text


logger = logging.getLogger(__name__)


class SettlementClient(Protocol):
    """
    Операция перевода активов в расчетной сети

    Реализация отвечает за создание активов, линии доверия и отправку
    транзакции. Временные ошибки (таймаут, недостаточная комиссия)
    выбрасываются как TransientSettlementError, остальные - как любые
    другие исключения.
    """

    async def transfer(
        self,
        stage: str,
        source_role: str,
        destination_role: str,
        amounts: Sequence[AssetAmount],
    ) -> SettlementReceipt:
        """Перевести активы между позициями хранения"""
        ...


class DryRunSettlementClient:
    """
    Клиент без обращения к сети

    Возвращает синтетические ссылки на проводки. Используется для
    локального запуска и проверки конфигурации.
    """

    def __init__(self):
        self.transfers: list[tuple[str, str, str, tuple[AssetAmount, ...]]] = []

    async def transfer(
        self,
        stage: str,
        source_role: str,
        destination_role: str,
        amounts: Sequence[AssetAmount],
    ) -> SettlementReceipt:
        """
        Имитация перевода

        Args:
            stage: Этап заказа
            source_role: Позиция-источник
            destination_role: Позиция-получатель
            amounts: Количества активов

        Returns:
            SettlementReceipt с синтетической ссылкой
        """
        self.transfers.append((stage, source_role, destination_role, tuple(amounts)))
        reference = hashlib.sha256(uuid.uuid4().bytes).hexdigest()

        logger.info(
            "[DRY RUN] %s: %s → %s, активов: %d, ссылка %s",
            stage,
            source_role,
            destination_role,
            len(amounts),
            truncate_text(reference),
        )
        return SettlementReceipt(reference=reference, recorded_at=get_now())
