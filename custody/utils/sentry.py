"""
Опциональная интеграция Sentry для error tracking
"""

import logging

from custody.core.config import Config


logger = logging.getLogger(__name__)

# Тег компонента для событий этого сервиса
SERVICE_TAG = "custody"


def init_sentry(dsn: str | None = None, environment: str | None = None) -> str | None:
    """
    Инициализация Sentry (опционально)

    Событием становится только ERROR: неудачные проводки, которые
    OrderSequencer логирует через logger.exception. Отклоненные переходы
    (INFO) и повторы при временных ошибках (WARNING) остаются breadcrumbs.

    Args:
        dsn: DSN проекта (по умолчанию Config.SENTRY_DSN)
        environment: Окружение (по умолчанию Config.ENVIRONMENT)

    Returns:
        DSN если Sentry инициализирован, None если не настроен или SDK не установлен
    """
    dsn = dsn or Config.SENTRY_DSN
    environment = environment or Config.ENVIRONMENT

    if not dsn:
        logger.info("SENTRY_DSN не установлен, error tracking отключен")
        return None

    try:
        import sentry_sdk
        from sentry_sdk.integrations.logging import LoggingIntegration
    except ImportError:
        logger.warning("Sentry SDK не установлен: pip install -e .[monitoring]")
        return None

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=Config.SENTRY_TRACES_SAMPLE_RATE,
        integrations=[LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
        send_default_pii=False,
    )
    sentry_sdk.set_tag("service", SERVICE_TAG)
    sentry_sdk.set_tag("settlement_mode", Config.SETTLEMENT_MODE)
    sentry_sdk.set_tag("asset_prefix", Config.ASSET_CODE_PREFIX)

    logger.info(f"Sentry инициализирован (environment: {environment}, mode: {Config.SETTLEMENT_MODE})")
    return dsn
