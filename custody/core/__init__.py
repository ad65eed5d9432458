"""Ядро приложения - конфигурация и константы"""

from custody.core.config import Config
from custody.core.constants import ERROR_MESSAGES, CustodyRole, ErpState, ErrorCode, Stage


__all__ = [
    "Config",
    "CustodyRole",
    "ERROR_MESSAGES",
    "ErpState",
    "ErrorCode",
    "Stage",
]
