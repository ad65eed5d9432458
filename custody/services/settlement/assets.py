"""
Преобразование строк заказа в активы расчетной сети

Преобразование детерминировано и не имеет побочных эффектов,
поэтому его можно безопасно повторять при повторной отправке проводки.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from custody.core.constants import ASSET_CODE_FILL_CHAR, MAX_AMOUNT_DECIMALS, MAX_ASSET_CODE_LENGTH
from custody.database.models import AssetAmount, OrderLine


AMOUNT_QUANTUM = Decimal(1).scaleb(-MAX_AMOUNT_DECIMALS)


def create_asset_code(product_id: int, prefix: str = "ODOO") -> str:
    """
    Код актива для товара: префикс + ID товара, дополненный нулями слева

    Args:
        product_id: ID товара в ERP
        prefix: Префикс кода актива

    Returns:
        Код актива длиной MAX_ASSET_CODE_LENGTH

    Example:
        >>> create_asset_code(42)
        'ODOO00000042'
    """
    if product_id < 0:
        raise ValueError(f"Некорректный ID товара: {product_id}")

    width = MAX_ASSET_CODE_LENGTH - len(prefix)
    product_code = str(product_id).rjust(width, ASSET_CODE_FILL_CHAR)

    if len(prefix) + len(product_code) > MAX_ASSET_CODE_LENGTH:
        raise ValueError(
            f"ID товара {product_id} не помещается в код актива "
            f"(максимум {MAX_ASSET_CODE_LENGTH} символов с префиксом '{prefix}')"
        )

    return prefix + product_code


def format_quantity(quantity: float | int | str | Decimal) -> str:
    """
    Количество в формате расчетной сети

    Не более MAX_AMOUNT_DECIMALS знаков после запятой, без хвостовых нулей.

    Example:
        >>> format_quantity(10)
        '10'
        >>> format_quantity("2.50")
        '2.5'
    """
    try:
        value = Decimal(str(quantity)).quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"Некорректное количество: {quantity!r}") from e

    if not value.is_finite() or value <= 0:
        raise ValueError(f"Количество должно быть положительным: {quantity!r}")

    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def to_asset_amounts(order_lines: Iterable[OrderLine], prefix: str = "ODOO") -> list[AssetAmount]:
    """
    Преобразование строк заказа в количества активов

    Порядок строк сохраняется.

    Args:
        order_lines: Строки заказа
        prefix: Префикс кода актива

    Returns:
        Список AssetAmount

    Raises:
        ValueError: Если строк нет или строка некорректна
    """
    amounts = [
        AssetAmount(
            asset_code=create_asset_code(line.product_id, prefix),
            quantity=format_quantity(line.quantity),
        )
        for line in order_lines
    ]

    if not amounts:
        raise ValueError("Заказ не содержит строк")

    return amounts
