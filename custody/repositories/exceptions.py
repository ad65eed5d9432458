"""
Исключения для работы с репозиториями
"""


class RepositoryError(Exception):
    """Базовое исключение для репозиториев"""


class LedgerStorageError(RepositoryError):
    """
    Ошибка хранилища журнала проводок

    Возникает при сбое чтения или записи журнала. Не повторяется
    на уровне сервиса: без записи нельзя гарантировать, что каждому
    внешнему вызову соответствует запись в журнале.
    """

    def __init__(self, operation: str, order_id: int, cause: Exception | None = None):
        self.operation = operation
        self.order_id = order_id
        self.cause = cause
        message = f"Ledger {operation} failed for order #{order_id}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
