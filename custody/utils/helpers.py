"""
Вспомогательные функции
"""

import logging
from datetime import datetime, timezone


logger = logging.getLogger(__name__)


def get_now() -> datetime:
    """
    Получить текущее время в UTC

    Returns:
        datetime объект с timezone UTC
    """
    return datetime.now(timezone.utc)


def format_datetime(dt: datetime) -> str:
    """
    Форматирование даты и времени

    Args:
        dt: Объект datetime

    Returns:
        Строка с датой и временем
    """
    return dt.strftime("%d.%m.%Y %H:%M:%S")


def parse_timestamp(value: str | datetime) -> datetime:
    """
    Разбор метки времени расчетной сети или БД (ISO 8601)

    Метки без часового пояса считаются UTC.

    Args:
        value: Строка ISO 8601 (допускается суффикс Z) или datetime

    Returns:
        datetime объект с timezone
    """
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def truncate_text(text: str, max_length: int = 16, suffix: str = "...") -> str:
    """
    Обрезка текста до максимальной длины

    Args:
        text: Исходный текст
        max_length: Максимальная длина
        suffix: Суффикс для обрезанного текста

    Returns:
        Обрезанный текст
    """
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix
