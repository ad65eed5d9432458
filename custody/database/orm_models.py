"""
SQLAlchemy ORM модели для миграций Alembic
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Базовый класс для всех моделей"""


class TransferRecord(Base):
    """Запись журнала проводок в SQLAlchemy"""

    __tablename__ = "transfer_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(Integer, nullable=False)
    stage: Mapped[str] = mapped_column(String(20), nullable=False)
    # Пустая строка означает неудачную проводку
    reference: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    recorded_at: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_transfer_records_order_id", "order_id"),
        CheckConstraint(
            "stage IN ('create', 'confirm', 'consolidate', 'deliver', 'cancel')",
            name="chk_transfer_records_stage",
        ),
    )

    def __repr__(self) -> str:
        return f"<TransferRecord(id={self.id}, order_id={self.order_id}, stage='{self.stage}')>"
