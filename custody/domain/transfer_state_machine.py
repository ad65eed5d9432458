"""
State Machine для валидации переходов заказа по этапам хранения
"""

from collections.abc import Sequence
from dataclasses import dataclass

from custody.core.constants import ERROR_MESSAGES, ErrorCode, Stage
from custody.database.models import TransferRecord


class InvalidTransferTransitionError(Exception):
    """Исключение при попытке недопустимого перехода заказа на этап"""

    def __init__(self, stage: str, error_code: str, reason: str = ""):
        self.stage = stage
        self.error_code = error_code
        self.reason = reason
        message = f"Недопустимый переход на этап '{stage}' ({error_code})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


@dataclass(frozen=True)
class TransitionExpectation:
    """Требования к истории заказа перед переходом на этап основного пути"""

    history_length: int
    previous_stage: str | None = None


@dataclass
class TransferTransitionResult:
    """Результат валидации перехода"""

    is_valid: bool
    error_code: str | None = None
    error_message: str | None = None


class TransferStateMachine:
    """
    State Machine жизненного цикла заказа

    Граф переходов:

    CREATE → CONFIRM → CONSOLIDATE → DELIVER
      ↓         ↓           ↓
    CANCEL    CANCEL      CANCEL

    Решение принимается только по истории журнала проводок заказа,
    без обращения к расчетной сети. Неудачная последняя проводка
    блокирует основной путь; отмена при этом проверяется по последней
    успешной проводке.
    """

    # Этап основного пути → длина истории и этап последней записи перед ним
    EXPECTATIONS: dict[str, TransitionExpectation] = {
        Stage.CREATE: TransitionExpectation(history_length=0),
        Stage.CONFIRM: TransitionExpectation(history_length=1, previous_stage=Stage.CREATE),
        Stage.CONSOLIDATE: TransitionExpectation(history_length=2, previous_stage=Stage.CONFIRM),
        Stage.DELIVER: TransitionExpectation(history_length=3, previous_stage=Stage.CONSOLIDATE),
    }

    # Этапы, из которых допустима отмена
    CANCELLABLE_STAGES: frozenset[str] = frozenset(
        {Stage.CREATE, Stage.CONFIRM, Stage.CONSOLIDATE}
    )

    @staticmethod
    def last_successful_stage(history: Sequence[TransferRecord]) -> str | None:
        """
        Последний успешно пройденный этап основного пути

        Args:
            history: История заказа от старых записей к новым

        Returns:
            Этап или None, если успешных проводок основного пути нет
        """
        for record in reversed(history):
            if not record.is_failed and record.is_main_path:
                return record.stage
        return None

    @staticmethod
    def is_cancelled(history: Sequence[TransferRecord]) -> bool:
        """Заказ уже успешно отменен"""
        return any(record.stage == Stage.CANCEL and not record.is_failed for record in history)

    @classmethod
    def validate(
        cls,
        stage: str,
        history: Sequence[TransferRecord],
        raise_exception: bool = False,
    ) -> TransferTransitionResult:
        """
        Валидация перехода заказа на этап

        Args:
            stage: Запрошенный этап
            history: История заказа от старых записей к новым
            raise_exception: Выбрасывать ли исключение при ошибке

        Returns:
            TransferTransitionResult с результатом валидации

        Raises:
            ValueError: Если этап неизвестен
            InvalidTransferTransitionError: Если переход недопустим и raise_exception=True
        """
        if stage not in Stage.all_stages():
            raise ValueError(f"Неизвестный этап: {stage}")

        result = cls._check(stage, history)

        if not result.is_valid and raise_exception:
            raise InvalidTransferTransitionError(
                stage, result.error_code or ErrorCode.GENERIC_ERROR, result.error_message or ""
            )

        return result

    @classmethod
    def validate_or_raise(cls, stage: str, history: Sequence[TransferRecord]) -> None:
        """
        Валидация перехода с исключением при отказе

        Raises:
            InvalidTransferTransitionError: Если переход недопустим
        """
        cls.validate(stage, history, raise_exception=True)

    @classmethod
    def _check(cls, stage: str, history: Sequence[TransferRecord]) -> TransferTransitionResult:
        """Проверка правил перехода без обработки ошибок"""
        if cls.is_cancelled(history):
            return cls._reject(ErrorCode.ORDER_CANCELLED_ERROR)

        if stage == Stage.CANCEL:
            return cls._check_cancel(history)

        # Неудачная последняя проводка блокирует основной путь
        if history and history[-1].is_failed:
            return cls._reject(ErrorCode.ORDER_FAILED_ERROR)

        expectation = cls.EXPECTATIONS[stage]
        if len(history) != expectation.history_length:
            return cls._reject(ErrorCode.for_transition(stage))

        if expectation.previous_stage and history[-1].stage != expectation.previous_stage:
            return cls._reject(ErrorCode.for_transition(stage))

        return TransferTransitionResult(is_valid=True)

    @classmethod
    def _check_cancel(cls, history: Sequence[TransferRecord]) -> TransferTransitionResult:
        """Отмена проверяется по последней успешной проводке основного пути"""
        successful = [record for record in history if record.is_main_path and not record.is_failed]

        if not 1 <= len(successful) < len(Stage.main_path()):
            return cls._reject(ErrorCode.ORDER_UNABLE_TO_CANCEL_ERROR)

        if cls.last_successful_stage(history) not in cls.CANCELLABLE_STAGES:
            return cls._reject(ErrorCode.ORDER_UNABLE_TO_CANCEL_ERROR)

        return TransferTransitionResult(is_valid=True)

    @staticmethod
    def _reject(error_code: str) -> TransferTransitionResult:
        """Результат с отказом"""
        return TransferTransitionResult(
            is_valid=False,
            error_code=error_code,
            error_message=ERROR_MESSAGES[error_code],
        )
