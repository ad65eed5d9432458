"""
Конфигурация приложения из переменных окружения
"""

import os

from dotenv import load_dotenv


load_dotenv()


def _get_int(name: str, default: int) -> int:
    """Чтение целого числа из окружения"""
    value = os.getenv(name, "").strip()
    return int(value) if value else default


def _get_float(name: str, default: float) -> float:
    """Чтение числа с плавающей точкой из окружения"""
    value = os.getenv(name, "").strip()
    return float(value) if value else default


class Config:
    """Конфигурация сервиса"""

    # База данных
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "custody.db")

    # Логирование
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOGS_DIR: str = os.getenv("LOGS_DIR", "logs")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Error tracking (опционально, требует extra monitoring)
    SENTRY_DSN: str = os.getenv("SENTRY_DSN", "")
    SENTRY_TRACES_SAMPLE_RATE: float = _get_float("SENTRY_TRACES_SAMPLE_RATE", 0.0)

    # Расчетная сеть
    SETTLEMENT_MODE: str = os.getenv("SETTLEMENT_MODE", "dry_run")
    ASSET_CODE_PREFIX: str = os.getenv("ASSET_CODE_PREFIX", "ODOO")

    # Повторы при временных ошибках расчетной сети:
    # 0 попыток = без ограничения, 0 секунд = повтор сразу
    TRANSFER_RETRY_MAX_ATTEMPTS: int = _get_int("TRANSFER_RETRY_MAX_ATTEMPTS", 0)
    TRANSFER_RETRY_DELAY: float = _get_float("TRANSFER_RETRY_DELAY", 0.0)

    # ERP (источник строк заказа)
    ERP_URL: str = os.getenv("ERP_URL", "")
    ERP_DATABASE: str = os.getenv("ERP_DATABASE", "")
    ERP_USERNAME: str = os.getenv("ERP_USERNAME", "")
    ERP_PASSWORD: str = os.getenv("ERP_PASSWORD", "")

    SETTLEMENT_MODES = ("dry_run",)

    @classmethod
    def validate(cls) -> bool:
        """
        Проверка обязательных настроек

        Returns:
            True если конфигурация корректна

        Raises:
            ValueError: Если обязательная настройка не задана или некорректна
        """
        if not cls.DATABASE_PATH:
            raise ValueError("DATABASE_PATH не установлен")

        if cls.SETTLEMENT_MODE not in cls.SETTLEMENT_MODES:
            raise ValueError(
                f"SETTLEMENT_MODE '{cls.SETTLEMENT_MODE}' не поддерживается. "
                f"Допустимые: {', '.join(cls.SETTLEMENT_MODES)}"
            )

        if not cls.ASSET_CODE_PREFIX:
            raise ValueError("ASSET_CODE_PREFIX не установлен")

        if cls.TRANSFER_RETRY_MAX_ATTEMPTS < 0:
            raise ValueError("TRANSFER_RETRY_MAX_ATTEMPTS не может быть отрицательным")

        if cls.TRANSFER_RETRY_DELAY < 0:
            raise ValueError("TRANSFER_RETRY_DELAY не может быть отрицательным")

        for name in ("ERP_URL", "ERP_DATABASE", "ERP_USERNAME", "ERP_PASSWORD"):
            if not getattr(cls, name):
                raise ValueError(f"{name} не установлен")

        return True

    @classmethod
    def retry_max_attempts(cls) -> int | None:
        """Лимит попыток для executor (None = без ограничения)"""
        return cls.TRANSFER_RETRY_MAX_ATTEMPTS or None
