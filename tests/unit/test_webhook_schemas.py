"""Тесты для Pydantic схем вебхуков ERP"""
import pytest
from pydantic import ValidationError

from custody.schemas import CancelOrderEventSchema, SaleOrderEventSchema, StockPickingEventSchema


class TestSaleOrderEventSchema:
    """Тесты вебхука заказа продажи"""

    def test_valid_event(self):
        """Тест валидного вебхука"""
        event = SaleOrderEventSchema(id=100, order_line=[11, 12], state="sale")
        assert event.order_line == [11, 12]

    def test_duplicate_lines(self):
        """Тест: повторяющиеся строки"""
        with pytest.raises(ValidationError, match="повторяются"):
            SaleOrderEventSchema(id=100, order_line=[11, 11], state="draft")

    def test_non_positive_line(self):
        """Тест: некорректный ID строки"""
        with pytest.raises(ValidationError):
            SaleOrderEventSchema(id=100, order_line=[0], state="draft")

    def test_wrong_state(self):
        """Тест: состояние отгрузки в вебхуке заказа"""
        with pytest.raises(ValidationError):
            SaleOrderEventSchema(id=100, order_line=[11], state="done")


class TestStockPickingEventSchema:
    """Тесты вебхука отгрузки"""

    def test_many2one_sale_id(self):
        """Тест: ссылка на заказ в формате [id, name]"""
        event = StockPickingEventSchema(id=5, sale_id=[100, "S00100"], state="assigned")
        assert event.sale_id == 100

    def test_plain_sale_id(self):
        """Тест: ссылка на заказ числом"""
        assert StockPickingEventSchema(id=5, sale_id=100, state="done").sale_id == 100

    def test_missing_sale_id(self):
        """Тест: отгрузка без заказа продажи"""
        with pytest.raises(ValidationError):
            StockPickingEventSchema(id=5, sale_id=False, state="done")


class TestCancelOrderEventSchema:
    """Тесты вебхука отмены"""

    def test_valid_event(self):
        """Тест валидного вебхука отмены"""
        assert CancelOrderEventSchema(id=100, state="cancel").id == 100

    def test_wrong_state(self):
        """Тест: другое состояние"""
        with pytest.raises(ValidationError):
            CancelOrderEventSchema(id=100, state="sale")
