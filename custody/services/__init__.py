"""Сервисный слой: расчетная сеть, ERP, очередь заказов"""
