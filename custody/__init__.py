"""
Учет перемещения заказов по этапам хранения с проводками в расчетной сети
"""

__version__ = "1.0.0"
