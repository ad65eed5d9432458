"""
Retry механизм для операций расчетной сети
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from custody.services.settlement.exceptions import is_transient_error


logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_transient_error(
    max_attempts: int | None = None,
    base_delay: float = 0.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    is_transient: Callable[[BaseException], bool] = is_transient_error,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Декоратор для повтора операции при временных ошибках

    По умолчанию повторяет без ограничения числа попыток и без задержки:
    повторная отправка той же проводки не приводит к двойному списанию
    на стороне расчетной сети.

    Args:
        max_attempts: Максимальное количество попыток (None = без ограничения)
        base_delay: Базовая задержка между попытками (секунды, 0 = сразу)
        max_delay: Максимальная задержка между попытками (секунды)
        exponential_base: База для экспоненциального роста задержки
        is_transient: Классификатор временных ошибок

    Returns:
        Декоратор функции

    Raises:
        Окончательная ошибка пробрасывается сразу. Временная ошибка
        пробрасывается, только если исчерпан лимит попыток.

    Example:
        @retry_on_transient_error()
        async def submit(client, amounts):
            return await client.transfer(...)
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            name = getattr(func, "__name__", type(func).__name__)
            attempt = 0
            while True:
                attempt += 1
                try:
                    return await func(*args, **kwargs)

                except Exception as e:
                    if not is_transient(e):
                        raise

                    if max_attempts is not None and attempt >= max_attempts:
                        logger.error(
                            "%s: Max attempts (%d) reached. Giving up. Last error: %s",
                            name,
                            max_attempts,
                            str(e),
                        )
                        raise

                    delay = 0.0
                    if base_delay > 0:
                        delay = min(base_delay * (exponential_base ** (attempt - 1)), max_delay)

                    logger.warning(
                        "%s: transient %s on attempt %d%s. Retrying in %.2f seconds. Error: %s",
                        name,
                        type(e).__name__,
                        attempt,
                        f"/{max_attempts}" if max_attempts else "",
                        delay,
                        str(e),
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator
