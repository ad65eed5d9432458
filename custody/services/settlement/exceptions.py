"""
Исключения расчетной сети и классификация временных ошибок
"""

import asyncio

from custody.core.constants import ERROR_MESSAGES, ErrorCode


# Коды результата транзакции, после которых имеет смысл повторить отправку
TRANSIENT_RESULT_CODES = frozenset({"tx_insufficient_fee", "timeout"})

# HTTP статус шлюза расчетной сети при истечении ожидания
GATEWAY_TIMEOUT_STATUS = 504


class SettlementError(Exception):
    """
    Ошибка проводки в расчетной сети

    Attributes:
        code: Код ошибки (ErrorCode)
        result_codes: Коды результата транзакции от сети, если есть
        status: HTTP статус ответа сети, если есть
    """

    def __init__(
        self,
        code: str = ErrorCode.GENERIC_ERROR,
        message: str | None = None,
        result_codes: list[str] | tuple[str, ...] | None = None,
        status: int | None = None,
    ):
        self.code = code
        self.result_codes = tuple(result_codes or ())
        self.status = status
        super().__init__(message or ERROR_MESSAGES.get(code, ERROR_MESSAGES[ErrorCode.GENERIC_ERROR]))


class TransientSettlementError(SettlementError):
    """Временная ошибка: проводку можно безопасно отправить повторно"""


class TransferTimeoutError(TransientSettlementError):
    """Истекло время ожидания проводки"""

    def __init__(self, message: str = "Settlement transaction timed out", **kwargs):
        kwargs.setdefault("status", GATEWAY_TIMEOUT_STATUS)
        super().__init__(message=message, **kwargs)


class InsufficientFeeError(TransientSettlementError):
    """Сеть отклонила проводку из-за недостаточной комиссии"""

    def __init__(self, message: str = "Settlement transaction fee is insufficient", **kwargs):
        kwargs.setdefault("result_codes", ("tx_insufficient_fee",))
        super().__init__(message=message, **kwargs)


def is_transient_error(error: BaseException) -> bool:
    """
    Классификация ошибки расчетной сети

    Временными считаются таймауты и отказ из-за недостаточной комиссии.
    Все остальное (включая бизнес-ошибки сети) - окончательная ошибка.

    Args:
        error: Исключение из операции перевода

    Returns:
        True если проводку можно повторить
    """
    if isinstance(error, TransientSettlementError):
        return True

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return True

    if isinstance(error, SettlementError):
        if TRANSIENT_RESULT_CODES.intersection(error.result_codes):
            return True
        if error.status == GATEWAY_TIMEOUT_STATUS:
            return True

    return False
