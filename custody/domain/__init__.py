"""
Domain layer для бизнес-логики
"""

from custody.domain.transfer_state_machine import (
    InvalidTransferTransitionError,
    TransferStateMachine,
    TransferTransitionResult,
)


__all__ = [
    "InvalidTransferTransitionError",
    "TransferStateMachine",
    "TransferTransitionResult",
]
