"""General ledger transaction model."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, String
from sqlalchemy.orm import Mapped, mapped_column

from farm_payroll.calculators import types
from farm_payroll.models.base import Base, Money, TimestampMixin


class LedgerEntry(Base, TimestampMixin):
    """Append-only financial ledger row."""

    __tablename__ = "ledger_transaction"

    transaction_id: Mapped[UUID] = mapped_column(primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    period: Mapped[str | None] = mapped_column(String(7), nullable=True, index=True)
    reference_id: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ledger_transaction_amount_positive"),
        CheckConstraint("type IN ('INCOME', 'EXPENSE')", name="ledger_transaction_type_check"),
        CheckConstraint(
            "category IN ('SALES', 'FEED', 'MEDICINE', 'LABOR', 'MAINTENANCE', "
            "'UTILITIES', 'LIVESTOCK', 'OTHER')",
            name="ledger_transaction_category_check",
        ),
        CheckConstraint(
            "status IN ('COMPLETED', 'PENDING', 'CANCELLED')",
            name="ledger_transaction_status_check",
        ),
    )

    @classmethod
    def from_domain(cls, txn: types.LedgerTransaction) -> LedgerEntry:
        return cls(
            transaction_id=txn.transaction_id,
            date=txn.date,
            description=txn.description,
            amount=txn.amount,
            type=txn.type.value,
            category=txn.category.value,
            status=txn.status.value,
            period=txn.period,
            reference_id=txn.reference_id,
        )
