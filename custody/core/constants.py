"""
Константы приложения - этапы, роли хранения, состояния ERP
"""


class Stage:
    """Этапы жизненного цикла заказа"""

    CREATE = "create"  # Заказ создан
    CONFIRM = "confirm"  # Заказ подтвержден
    CONSOLIDATE = "consolidate"  # Заказ собран на складе
    DELIVER = "deliver"  # Заказ доставлен
    CANCEL = "cancel"  # Заказ отменен (боковая ветка)

    @classmethod
    def main_path(cls) -> list[str]:
        """Основной путь в порядке прохождения"""
        return [cls.CREATE, cls.CONFIRM, cls.CONSOLIDATE, cls.DELIVER]

    @classmethod
    def all_stages(cls) -> list[str]:
        """Список всех этапов"""
        return [*cls.main_path(), cls.CANCEL]

    @classmethod
    def is_main_path(cls, stage: str) -> bool:
        """Этап относится к основному пути"""
        return stage in cls.main_path()

    @classmethod
    def get_stage_name(cls, stage: str) -> str:
        """Получение названия этапа на русском"""
        names = {
            cls.CREATE: "Создан",
            cls.CONFIRM: "Подтвержден",
            cls.CONSOLIDATE: "Собран",
            cls.DELIVER: "Доставлен",
            cls.CANCEL: "Отменен",
        }
        return names.get(stage, stage)


class CustodyRole:
    """
    Позиции хранения в расчетной сети

    Между ними перемещаются активы заказа: каждая проводка переводит
    активы из позиции предыдущего этапа в позицию текущего.
    """

    ISSUER = "issuer"
    CREATE = "create"
    CONFIRM = "confirm"
    CONSOLIDATE = "consolidate"
    DELIVER = "deliver"
    CANCEL = "cancel"

    @classmethod
    def all_roles(cls) -> list[str]:
        """Список всех позиций"""
        return [cls.ISSUER, cls.CREATE, cls.CONFIRM, cls.CONSOLIDATE, cls.DELIVER, cls.CANCEL]

    @classmethod
    def for_stage(cls, stage: str) -> str:
        """
        Позиция, в которой оказываются активы после успешного этапа

        Args:
            stage: Этап заказа

        Returns:
            Роль хранения
        """
        roles = {
            Stage.CREATE: cls.CREATE,
            Stage.CONFIRM: cls.CONFIRM,
            Stage.CONSOLIDATE: cls.CONSOLIDATE,
            Stage.DELIVER: cls.DELIVER,
            Stage.CANCEL: cls.CANCEL,
        }
        if stage not in roles:
            raise ValueError(f"Неизвестный этап: {stage}")
        return roles[stage]


class ErpState:
    """Состояния документов ERP, на которые подписаны вебхуки"""

    DRAFT = "draft"  # Черновик заказа продажи
    SALE = "sale"  # Заказ продажи подтвержден
    ASSIGNED = "assigned"  # Отгрузка готова
    DONE = "done"  # Отгрузка выполнена
    CANCEL = "cancel"  # Заказ отменен

    # Состояние документа ERP → этап заказа
    STAGES: dict[str, str] = {
        DRAFT: Stage.CREATE,
        SALE: Stage.CONFIRM,
        ASSIGNED: Stage.CONSOLIDATE,
        DONE: Stage.DELIVER,
        CANCEL: Stage.CANCEL,
    }

    @classmethod
    def all_states(cls) -> list[str]:
        """Список всех отслеживаемых состояний"""
        return list(cls.STAGES)

    @classmethod
    def to_stage(cls, state: str) -> str | None:
        """Этап, соответствующий состоянию ERP (None если состояние не отслеживается)"""
        return cls.STAGES.get(state)


# Параметры кодирования активов расчетной сети
MAX_ASSET_CODE_LENGTH = 12
ASSET_CODE_FILL_CHAR = "0"
MAX_AMOUNT_DECIMALS = 7

# Ссылка на расчетную операцию для неудачной проводки
FAILED_REFERENCE = ""


class ErrorCode:
    """Коды ошибок проводок и переходов"""

    # Ошибки расчетной сети по этапам
    CREATE_ORDER_ERROR = "CREATE_ORDER_ERROR"
    CONFIRM_ORDER_ERROR = "CONFIRM_ORDER_ERROR"
    CONSOLIDATE_ORDER_ERROR = "CONSOLIDATE_ORDER_ERROR"
    DELIVER_ORDER_ERROR = "DELIVER_ORDER_ERROR"
    CANCEL_ORDER_ERROR = "CANCEL_ORDER_ERROR"
    GENERIC_ERROR = "GENERIC_ERROR"

    # Недопустимые переходы
    ORDER_UNABLE_TO_CREATE_ERROR = "ORDER_UNABLE_TO_CREATE_ERROR"
    ORDER_UNABLE_TO_CONFIRM_ERROR = "ORDER_UNABLE_TO_CONFIRM_ERROR"
    ORDER_UNABLE_TO_CONSOLIDATE_ERROR = "ORDER_UNABLE_TO_CONSOLIDATE_ERROR"
    ORDER_UNABLE_TO_DELIVER_ERROR = "ORDER_UNABLE_TO_DELIVER_ERROR"
    ORDER_UNABLE_TO_CANCEL_ERROR = "ORDER_UNABLE_TO_CANCEL_ERROR"
    ORDER_FAILED_ERROR = "ORDER_FAILED_ERROR"
    ORDER_CANCELLED_ERROR = "ORDER_CANCELLED_ERROR"

    @classmethod
    def for_transfer(cls, stage: str) -> str:
        """Код ошибки проводки для этапа"""
        codes = {
            Stage.CREATE: cls.CREATE_ORDER_ERROR,
            Stage.CONFIRM: cls.CONFIRM_ORDER_ERROR,
            Stage.CONSOLIDATE: cls.CONSOLIDATE_ORDER_ERROR,
            Stage.DELIVER: cls.DELIVER_ORDER_ERROR,
            Stage.CANCEL: cls.CANCEL_ORDER_ERROR,
        }
        return codes.get(stage, cls.GENERIC_ERROR)

    @classmethod
    def for_transition(cls, stage: str) -> str:
        """Код ошибки недопустимого перехода на этап"""
        codes = {
            Stage.CREATE: cls.ORDER_UNABLE_TO_CREATE_ERROR,
            Stage.CONFIRM: cls.ORDER_UNABLE_TO_CONFIRM_ERROR,
            Stage.CONSOLIDATE: cls.ORDER_UNABLE_TO_CONSOLIDATE_ERROR,
            Stage.DELIVER: cls.ORDER_UNABLE_TO_DELIVER_ERROR,
            Stage.CANCEL: cls.ORDER_UNABLE_TO_CANCEL_ERROR,
        }
        return codes[stage]


ERROR_MESSAGES: dict[str, str] = {
    ErrorCode.CREATE_ORDER_ERROR: "An error occurred while creating order transaction",
    ErrorCode.CONFIRM_ORDER_ERROR: "An error occurred while confirming order transaction",
    ErrorCode.CONSOLIDATE_ORDER_ERROR: "An error occurred while consolidating order transaction",
    ErrorCode.DELIVER_ORDER_ERROR: "An error occurred while delivering order transaction",
    ErrorCode.CANCEL_ORDER_ERROR: "An error occurred while canceling order transaction",
    ErrorCode.GENERIC_ERROR: "An error occurred in the settlement service",
    ErrorCode.ORDER_UNABLE_TO_CREATE_ERROR: "The order cannot be created",
    ErrorCode.ORDER_UNABLE_TO_CONFIRM_ERROR: "The order cannot be confirmed",
    ErrorCode.ORDER_UNABLE_TO_CONSOLIDATE_ERROR: "The order cannot be consolidated",
    ErrorCode.ORDER_UNABLE_TO_DELIVER_ERROR: "The order cannot be delivered",
    ErrorCode.ORDER_UNABLE_TO_CANCEL_ERROR: "The order cannot be cancelled",
    ErrorCode.ORDER_FAILED_ERROR: "The last transaction of the order failed",
    ErrorCode.ORDER_CANCELLED_ERROR: "The order has already been cancelled",
}
