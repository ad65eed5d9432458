"""
Получение строк заказа из ERP
"""

import asyncio
import logging
import xmlrpc.client
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol

from custody.database.models import OrderLine


logger = logging.getLogger(__name__)


class ErpError(Exception):
    """Ошибка обращения к ERP"""


class OrderLineResolver(Protocol):
    """Источник строк заказа (товар и количество)"""

    async def get_order_lines(self, order_id: int) -> list[OrderLine]:
        """Все строки заказа"""
        ...

    async def get_products_for_lines(self, line_ids: Sequence[int]) -> list[OrderLine]:
        """Строки заказа по их ID"""
        ...


class StaticOrderLineResolver:
    """
    Строки заказов из памяти процесса

    Используется в тестах и в режиме CLI --memory.
    """

    def __init__(
        self,
        orders: Mapping[int, Iterable[int]] | None = None,
        lines: Mapping[int, OrderLine] | None = None,
    ):
        """
        Args:
            orders: ID заказа → ID его строк
            lines: ID строки → строка заказа
        """
        self.orders: dict[int, list[int]] = {k: list(v) for k, v in (orders or {}).items()}
        self.lines: dict[int, OrderLine] = dict(lines or {})

    def add_order(self, order_id: int, lines: Mapping[int, OrderLine]) -> None:
        """Регистрация заказа со строками"""
        self.orders[order_id] = list(lines)
        self.lines.update(lines)

    async def get_order_lines(self, order_id: int) -> list[OrderLine]:
        if order_id not in self.orders:
            raise ErpError(f"Заказ #{order_id} не найден")
        return await self.get_products_for_lines(self.orders[order_id])

    async def get_products_for_lines(self, line_ids: Sequence[int]) -> list[OrderLine]:
        missing = [line_id for line_id in line_ids if line_id not in self.lines]
        if missing:
            raise ErpError(f"Строки заказа не найдены: {missing}")
        return [self.lines[line_id] for line_id in line_ids]


class OdooOrderLineResolver:
    """
    Строки заказа через XML-RPC API Odoo

    Вызовы xmlrpc блокирующие, поэтому выполняются в отдельном потоке.
    """

    ORDER_MODEL = "sale.order"
    ORDER_LINE_MODEL = "sale.order.line"

    def __init__(self, url: str, database: str, username: str, password: str):
        self.url = url.rstrip("/")
        self.database = database
        self.username = username
        self.password = password
        self._uid: int | None = None

    def _authenticate(self) -> int:
        """Получение UID пользователя ERP (кэшируется)"""
        if self._uid is None:
            common = xmlrpc.client.ServerProxy(f"{self.url}/xmlrpc/2/common", allow_none=True)
            uid = common.authenticate(self.database, self.username, self.password, {})
            if not uid:
                raise ErpError(f"Не удалось авторизоваться в ERP как {self.username}")
            self._uid = int(uid)
            logger.info(f"Авторизация в ERP выполнена (uid={self._uid})")
        return self._uid

    def _search_read(self, model: str, domain: list, fields: list[str]) -> list[dict[str, Any]]:
        """Синхронный search_read через execute_kw"""
        uid = self._authenticate()
        models = xmlrpc.client.ServerProxy(f"{self.url}/xmlrpc/2/object", allow_none=True)
        try:
            return models.execute_kw(
                self.database, uid, self.password, model, "search_read", [domain], {"fields": fields}
            )
        except (xmlrpc.client.Error, OSError) as e:
            raise ErpError(f"Ошибка запроса {model} к ERP: {e}") from e

    async def _call(self, model: str, domain: list, fields: list[str]) -> list[dict[str, Any]]:
        try:
            return await asyncio.to_thread(self._search_read, model, domain, fields)
        except ErpError:
            raise
        except (xmlrpc.client.Error, OSError) as e:
            raise ErpError(f"ERP недоступна: {e}") from e

    @staticmethod
    def _row_to_line(row: dict[str, Any]) -> OrderLine:
        product = row["product_id"]
        # many2one приходит как [id, display_name]
        product_id = product[0] if isinstance(product, (list, tuple)) else product
        return OrderLine(product_id=int(product_id), quantity=float(row["product_uom_qty"]))

    async def get_order_lines(self, order_id: int) -> list[OrderLine]:
        """
        Строки заказа продажи

        Raises:
            ErpError: Если заказ не найден или ERP недоступна
        """
        orders = await self._call(self.ORDER_MODEL, [["id", "=", order_id]], ["order_line"])
        if not orders:
            raise ErpError(f"Заказ #{order_id} не найден в ERP")
        return await self.get_products_for_lines(orders[0]["order_line"])

    async def get_products_for_lines(self, line_ids: Sequence[int]) -> list[OrderLine]:
        """
        Товары и количества для строк заказа

        Порядок результата соответствует порядку line_ids.

        Raises:
            ErpError: Если часть строк не найдена или ERP недоступна
        """
        ids = list(line_ids)
        if not ids:
            return []

        rows = await self._call(
            self.ORDER_LINE_MODEL, [["id", "in", ids]], ["product_id", "product_uom_qty"]
        )
        by_id = {row["id"]: row for row in rows}
        missing = [line_id for line_id in ids if line_id not in by_id]
        if missing:
            raise ErpError(f"Строки заказа не найдены в ERP: {missing}")

        return [self._row_to_line(by_id[line_id]) for line_id in ids]
