"""Утилиты и вспомогательные функции"""
from custody.utils.helpers import format_datetime, get_now, parse_timestamp, truncate_text


__all__ = [
    "format_datetime",
    "get_now",
    "parse_timestamp",
    "truncate_text",
]
