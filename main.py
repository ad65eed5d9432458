"""
Командная строка сервиса хранения заказов
"""

import argparse
import asyncio
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from tabulate import tabulate

from custody.core.config import Config
from custody.core.constants import Stage
from custody.database import Database, OrderLine
from custody.repositories import InMemoryTransferLedger
from custody.services.erp.client import StaticOrderLineResolver
from custody.services.service_factory import ServiceFactory
from custody.utils.helpers import format_datetime
from custody.utils.sentry import init_sentry


"""
Гибкая настройка логирования:
- Пытаемся писать в файл logs/custody.log с ротацией
- Если нет прав на запись, остаемся только с выводом в консоль
"""

log_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(log_formatter)
if hasattr(console_handler.stream, "reconfigure"):
    console_handler.stream.reconfigure(encoding="utf-8")

handlers: list[logging.Handler] = [console_handler]

logs_dir = os.getenv("LOGS_DIR", "logs")
log_file_path = Path(logs_dir) / "custody.log"
try:
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        str(log_file_path),
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(log_formatter)
    handlers.insert(0, file_handler)
except (PermissionError, OSError) as e:
    sys.stderr.write(f"[logging] WARNING: cannot use file logging at {log_file_path}: {e}\n")

log_level = getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(level=log_level, handlers=handlers)

logger = logging.getLogger(__name__)

logging.getLogger("custody").setLevel(log_level)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# Команда CLI → этап заказа
STAGE_COMMANDS = {
    "create": Stage.CREATE,
    "confirm": Stage.CONFIRM,
    "consolidate": Stage.CONSOLIDATE,
    "deliver": Stage.DELIVER,
    "cancel": Stage.CANCEL,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Журнал хранения заказов в расчетной сети")
    parser.add_argument(
        "--memory",
        action="store_true",
        help="Журнал в памяти и строки заказа без ERP (каждая строка = товар с тем же ID, 1 шт.)",
    )
    parser.add_argument(
        "--database", "-d", type=str, default=None, help="Путь к файлу базы данных (по умолчанию DATABASE_PATH)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init-db", help="Создать схему журнала проводок")

    trace = subparsers.add_parser("trace", help="Показать журнал заказа")
    trace.add_argument("order_id", type=int, help="ID заказа")

    for command in STAGE_COMMANDS:
        stage_parser = subparsers.add_parser(command, help=f"Этап {command}")
        stage_parser.add_argument("order_id", type=int, help="ID заказа")
        if command in ("create", "confirm"):
            stage_parser.add_argument(
                "--lines", type=int, nargs="+", required=True, help="ID строк заказа"
            )

    return parser


def print_trace(order_id: int, records) -> None:
    """Вывод журнала заказа таблицей"""
    if not records:
        print(f"Заказ #{order_id}: записей нет")
        return

    rows = [
        [
            record.id,
            Stage.get_stage_name(record.stage),
            record.reference or "FAILED",
            format_datetime(record.recorded_at),
        ]
        for record in records
    ]
    print(tabulate(rows, headers=["#", "Этап", "Ссылка", "Время (UTC)"], tablefmt="grid"))
    print(f"\nВсего записей: {len(records)}")


def build_memory_factory(line_ids: list[int] | None) -> ServiceFactory:
    """Фабрика для режима --memory"""
    resolver = StaticOrderLineResolver(
        lines={line_id: OrderLine(product_id=line_id, quantity=1) for line_id in line_ids or ()}
    )
    return ServiceFactory(ledger=InMemoryTransferLedger(), resolver=resolver)


async def run(args: argparse.Namespace) -> int:
    db: Database | None = None

    try:
        if args.memory:
            factory = build_memory_factory(getattr(args, "lines", None))
        else:
            Config.validate()
            db = Database(args.database)
            await db.init_db()
            factory = db.services

        if args.command == "init-db":
            logger.info("Журнал проводок готов")
            return 0

        if args.command == "trace":
            print_trace(args.order_id, await factory.custody_service.get_trace(args.order_id))
            return 0

        sequencer = factory.order_sequencer
        reference = await sequencer.submit(
            STAGE_COMMANDS[args.command], args.order_id, getattr(args, "lines", None)
        )
        await sequencer.stop()

        if reference is None:
            print(f"Заказ #{args.order_id}: этап {args.command} не выполнен")
            return 1

        print(f"Заказ #{args.order_id}: этап {args.command} выполнен, ссылка {reference}")
        return 0

    except ValueError as e:
        logger.error("Ошибка конфигурации: %s", e)
        return 2
    finally:
        if db:
            try:
                await db.disconnect()
            except Exception as e:
                logger.error("Ошибка при отключении от БД: %s", e)


def main() -> int:
    args = build_parser().parse_args()
    init_sentry()
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
