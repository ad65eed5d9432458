"""
Тесты получения строк заказа из ERP
"""
import xmlrpc.client

import pytest

from custody.database.models import OrderLine
from custody.services.erp.client import ErpError, OdooOrderLineResolver, StaticOrderLineResolver


class FakeOdoo:
    """Подмена xmlrpc.client.ServerProxy с данными sale.order и sale.order.line"""

    orders = {100: {"id": 100, "order_line": [11, 12]}}
    lines = {
        11: {"id": 11, "product_id": [7, "Chair"], "product_uom_qty": 2.0},
        12: {"id": 12, "product_id": [8, "Table"], "product_uom_qty": 1.5},
    }

    def __init__(self, url, allow_none=False):
        self.url = url
        self.calls = []

    def authenticate(self, database, username, password, context):
        return 2 if password == "secret" else False

    def execute_kw(self, database, uid, password, model, method, args, kwargs):
        (domain,) = args
        field, operator, value = domain[0]
        if model == "sale.order":
            return [self.orders[value]] if value in self.orders else []
        if model == "sale.order.line":
            # ERP возвращает строки в своем порядке
            return [self.lines[line_id] for line_id in sorted(value, reverse=True) if line_id in self.lines]
        raise xmlrpc.client.Fault(1, f"Unknown model {model}")


@pytest.fixture
def odoo(monkeypatch):
    """Фикстура для ERP без сети"""
    monkeypatch.setattr("custody.services.erp.client.xmlrpc.client.ServerProxy", FakeOdoo)
    return OdooOrderLineResolver("http://erp.test/", "erp", "custody", "secret")


class TestOdooOrderLineResolver:
    """Тесты XML-RPC клиента ERP"""

    async def test_get_order_lines(self, odoo):
        """Тест получения строк заказа"""
        lines = await odoo.get_order_lines(100)

        assert lines == [OrderLine(product_id=7, quantity=2.0), OrderLine(product_id=8, quantity=1.5)]

    async def test_get_products_for_lines_keeps_order(self, odoo):
        """Тест: порядок строк соответствует запросу"""
        lines = await odoo.get_products_for_lines([12, 11])

        assert [line.product_id for line in lines] == [8, 7]

    async def test_missing_order(self, odoo):
        """Тест: заказ не найден"""
        with pytest.raises(ErpError, match="не найден"):
            await odoo.get_order_lines(404)

    async def test_missing_lines(self, odoo):
        """Тест: часть строк не найдена"""
        with pytest.raises(ErpError, match="99"):
            await odoo.get_products_for_lines([11, 99])

    async def test_authentication_failure(self, monkeypatch):
        """Тест: неверные учетные данные"""
        monkeypatch.setattr("custody.services.erp.client.xmlrpc.client.ServerProxy", FakeOdoo)
        resolver = OdooOrderLineResolver("http://erp.test", "erp", "custody", "wrong")

        with pytest.raises(ErpError, match="авторизоваться"):
            await resolver.get_order_lines(100)

    async def test_rpc_fault_is_wrapped(self, odoo, monkeypatch):
        """Тест: ошибка XML-RPC оборачивается в ErpError"""
        monkeypatch.setattr(OdooOrderLineResolver, "ORDER_MODEL", "res.partner")

        with pytest.raises(ErpError):
            await odoo.get_order_lines(100)

    async def test_empty_line_ids(self, odoo):
        """Тест: пустой список строк"""
        assert await odoo.get_products_for_lines([]) == []


class TestStaticOrderLineResolver:
    """Тесты строк заказов в памяти"""

    async def test_get_order_lines(self, resolver):
        """Тест получения строк зарегистрированного заказа"""
        lines = await resolver.get_order_lines(100)
        assert lines == [OrderLine(product_id=7, quantity=2), OrderLine(product_id=8, quantity=1.5)]

    async def test_unknown_order(self, resolver):
        """Тест: неизвестный заказ"""
        with pytest.raises(ErpError):
            await resolver.get_order_lines(404)

    async def test_unknown_line(self, resolver):
        """Тест: неизвестная строка заказа"""
        with pytest.raises(ErpError):
            await resolver.get_products_for_lines([1])
