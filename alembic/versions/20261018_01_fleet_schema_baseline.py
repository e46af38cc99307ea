"""Fleet schema baseline

Revision ID: 20261018_01
Revises: None
Create Date: 2026-10-18
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_EXPENSE_TYPE_NAMES = ("FUEL", "CAR_WASH", "FINE", "MAINTENANCE", "SERVICE", "OTHER")


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    ]


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "car",
        sa.Column("car_id", sa.Text(), primary_key=True),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("nickname", sa.Text(), nullable=False, server_default=""),
        sa.Column("make", sa.Text(), nullable=False, server_default=""),
        sa.Column("model", sa.Text(), nullable=False, server_default=""),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("license_plate", sa.Text(), nullable=False, server_default=""),
        sa.Column("color", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("installment", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("annual_insurance_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamp_columns(),
        sa.CheckConstraint("installment >= 0", name="ck_car_installment_non_negative"),
        sa.CheckConstraint("annual_insurance_amount >= 0", name="ck_car_insurance_non_negative"),
    )
    op.create_index("ix_car_user_id", "car", ["user_id"])

    op.create_table(
        "driver",
        sa.Column("driver_id", sa.Text(), primary_key=True),
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("salary", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("annual_visa_cost", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("annual_license_cost", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamp_columns(),
    )
    op.create_index("ix_driver_owner_id", "driver", ["owner_id"])

    op.create_table(
        "daily_entry",
        sa.Column("daily_entry_id", sa.Text(), primary_key=True),
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("driver_id", sa.Text(), nullable=True),
        sa.Column("driver_name", sa.Text(), nullable=False),
        sa.Column("vehicle_id", sa.Text(), nullable=True),
        sa.Column("vehicle", sa.Text(), nullable=False),
        sa.Column("uber_earnings", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("yango_earnings", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("private_jobs_earnings", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("photo_urls", sa.Text(), nullable=False, server_default="[]"),
        *_timestamp_columns(),
        sa.CheckConstraint(
            "uber_earnings >= 0 AND yango_earnings >= 0 AND private_jobs_earnings >= 0",
            name="ck_daily_entry_earnings_non_negative",
        ),
    )
    op.create_index("ix_daily_entry_owner_date", "daily_entry", ["owner_id", "entry_date"])

    op.create_table(
        "expense",
        sa.Column("expense_id", sa.Text(), primary_key=True),
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column("expense_type", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("expense_date", sa.Date(), nullable=False),
        sa.Column("driver_id", sa.Text(), nullable=True),
        sa.Column("driver_name", sa.Text(), nullable=False),
        sa.Column("vehicle", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("photo_urls", sa.Text(), nullable=False, server_default="[]"),
        *_timestamp_columns(),
        sa.CheckConstraint(
            "expense_type IN (" + ", ".join(f"'{name}'" for name in _EXPENSE_TYPE_NAMES) + ")",
            name="ck_expense_expense_type",
        ),
        sa.CheckConstraint("amount > 0", name="ck_expense_amount_positive"),
    )
    op.create_index("ix_expense_owner_date", "expense", ["owner_id", "expense_date"])


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_expense_owner_date", table_name="expense")
    op.drop_table("expense")
    op.drop_index("ix_daily_entry_owner_date", table_name="daily_entry")
    op.drop_table("daily_entry")
    op.drop_index("ix_driver_owner_id", table_name="driver")
    op.drop_table("driver")
    op.drop_index("ix_car_user_id", table_name="car")
    op.drop_table("car")
