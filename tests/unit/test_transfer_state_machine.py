"""
Тесты для TransferStateMachine
"""
from datetime import datetime, timezone

import pytest

from custody.core.constants import ErrorCode, Stage
from custody.database.models import TransferRecord
from custody.domain.transfer_state_machine import (
    InvalidTransferTransitionError,
    TransferStateMachine,
)


def make_history(*steps: tuple[str, bool]) -> list[TransferRecord]:
    """История заказа из пар (этап, успех)"""
    return [
        TransferRecord(
            id=index,
            order_id=1,
            stage=stage,
            reference=f"tx-{index}" if ok else "",
            recorded_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        for index, (stage, ok) in enumerate(steps, start=1)
    ]


class TestMainPath:
    """Тесты переходов основного пути"""

    @pytest.mark.parametrize(
        ("stage", "steps"),
        [
            (Stage.CREATE, ()),
            (Stage.CONFIRM, ((Stage.CREATE, True),)),
            (Stage.CONSOLIDATE, ((Stage.CREATE, True), (Stage.CONFIRM, True))),
            (
                Stage.DELIVER,
                ((Stage.CREATE, True), (Stage.CONFIRM, True), (Stage.CONSOLIDATE, True)),
            ),
        ],
    )
    def test_valid_transitions(self, stage, steps):
        """Тест допустимых переходов"""
        result = TransferStateMachine.validate(stage, make_history(*steps))
        assert result.is_valid
        assert result.error_code is None

    def test_confirm_on_fresh_order(self):
        """Тест: подтверждение без создания"""
        result = TransferStateMachine.validate(Stage.CONFIRM, [])
        assert not result.is_valid
        assert result.error_code == ErrorCode.ORDER_UNABLE_TO_CONFIRM_ERROR

    def test_create_twice(self):
        """Тест: повторное создание отклоняется"""
        result = TransferStateMachine.validate(Stage.CREATE, make_history((Stage.CREATE, True)))
        assert not result.is_valid
        assert result.error_code == ErrorCode.ORDER_UNABLE_TO_CREATE_ERROR

    def test_skip_stage(self):
        """Тест: пропуск этапа (доставка после подтверждения)"""
        history = make_history((Stage.CREATE, True), (Stage.CONFIRM, True))
        result = TransferStateMachine.validate(Stage.DELIVER, history)
        assert result.error_code == ErrorCode.ORDER_UNABLE_TO_DELIVER_ERROR

    def test_failed_last_record_poisons_order(self):
        """Тест: неудачная последняя проводка блокирует основной путь"""
        history = make_history((Stage.CREATE, True), (Stage.CONFIRM, False))

        result = TransferStateMachine.validate(Stage.CONSOLIDATE, history)
        assert not result.is_valid
        assert result.error_code == ErrorCode.ORDER_FAILED_ERROR

        # Повтор неудавшегося этапа тоже невозможен
        result = TransferStateMachine.validate(Stage.CONFIRM, history)
        assert result.error_code == ErrorCode.ORDER_FAILED_ERROR

    def test_failed_create_blocks_confirm(self):
        """Тест: после неудачного создания подтверждение невозможно"""
        result = TransferStateMachine.validate(Stage.CONFIRM, make_history((Stage.CREATE, False)))
        assert not result.is_valid

    def test_unknown_stage(self):
        """Тест: неизвестный этап"""
        with pytest.raises(ValueError, match="Неизвестный этап"):
            TransferStateMachine.validate("archive", [])


class TestCancel:
    """Тесты отмены заказа"""

    @pytest.mark.parametrize("last_stage", [Stage.CREATE, Stage.CONFIRM, Stage.CONSOLIDATE])
    def test_cancel_from_cancellable_stage(self, last_stage):
        """Тест отмены из допустимых этапов"""
        path = Stage.main_path()
        steps = [(stage, True) for stage in path[: path.index(last_stage) + 1]]
        result = TransferStateMachine.validate(Stage.CANCEL, make_history(*steps))
        assert result.is_valid

    def test_cancel_fresh_order(self):
        """Тест: отмена заказа без проводок"""
        result = TransferStateMachine.validate(Stage.CANCEL, [])
        assert result.error_code == ErrorCode.ORDER_UNABLE_TO_CANCEL_ERROR

    def test_cancel_after_delivery(self):
        """Тест: доставленный заказ отменить нельзя"""
        steps = [(stage, True) for stage in Stage.main_path()]
        result = TransferStateMachine.validate(Stage.CANCEL, make_history(*steps))
        assert result.error_code == ErrorCode.ORDER_UNABLE_TO_CANCEL_ERROR

    def test_cancel_after_failed_stage(self):
        """Тест: отмена проверяется по последней успешной проводке"""
        history = make_history((Stage.CREATE, True), (Stage.CONFIRM, False))
        result = TransferStateMachine.validate(Stage.CANCEL, history)
        assert result.is_valid
        assert TransferStateMachine.last_successful_stage(history) == Stage.CREATE

    def test_cancel_after_failed_create(self):
        """Тест: без успешных проводок отмена невозможна"""
        result = TransferStateMachine.validate(Stage.CANCEL, make_history((Stage.CREATE, False)))
        assert result.error_code == ErrorCode.ORDER_UNABLE_TO_CANCEL_ERROR

    def test_cancel_retry_after_failed_cancel(self):
        """Тест: неудачная отмена не блокирует повторную отмену"""
        history = make_history((Stage.CREATE, True), (Stage.CANCEL, False))
        assert TransferStateMachine.validate(Stage.CANCEL, history).is_valid

    def test_cancelled_order_rejects_everything(self):
        """Тест: отмененный заказ не принимает переходов"""
        history = make_history((Stage.CREATE, True), (Stage.CANCEL, True))
        for stage in Stage.all_stages():
            result = TransferStateMachine.validate(stage, history)
            assert result.error_code == ErrorCode.ORDER_CANCELLED_ERROR


class TestHelpers:
    """Тесты вспомогательных методов"""

    def test_last_successful_stage_empty(self):
        """Тест: пустая история"""
        assert TransferStateMachine.last_successful_stage([]) is None

    def test_last_successful_stage_ignores_cancel(self):
        """Тест: отмена не является этапом основного пути"""
        history = make_history((Stage.CREATE, True), (Stage.CONFIRM, True), (Stage.CANCEL, False))
        assert TransferStateMachine.last_successful_stage(history) == Stage.CONFIRM

    def test_validate_or_raise(self):
        """Тест исключения при недопустимом переходе"""
        with pytest.raises(InvalidTransferTransitionError) as exc_info:
            TransferStateMachine.validate_or_raise(Stage.DELIVER, [])

        assert exc_info.value.stage == Stage.DELIVER
        assert exc_info.value.error_code == ErrorCode.ORDER_UNABLE_TO_DELIVER_ERROR

    def test_validate_or_raise_valid(self):
        """Тест: допустимый переход не выбрасывает исключение"""
        TransferStateMachine.validate_or_raise(Stage.CREATE, [])
