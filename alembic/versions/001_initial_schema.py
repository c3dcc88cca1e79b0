"""Initial schema: users, flight_records, galley_details, crew_details.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _measure() -> sa.Numeric:
    return sa.Numeric(12, 3)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("provider", sa.String(32), nullable=False, server_default="local"),
        sa.Column("provider_sub", sa.String(256), nullable=False, server_default=""),
        sa.Column("email", sa.String(256), nullable=False, server_default=""),
        sa.Column("display_name", sa.String(256), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "flight_records",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("loading_index_doc", sa.String(64), nullable=False, unique=True),
        sa.Column("weight_report_doc", sa.String(64), nullable=False),
        sa.Column("report_date", sa.Date, nullable=False),
        sa.Column("aircraft_reg", sa.String(32), nullable=True),
        sa.Column("empty_weight", _measure(), nullable=False),
        sa.Column("empty_weight_index", _measure(), nullable=False),
        sa.Column("dow_domestic", _measure(), nullable=False),
        sa.Column("doi_domestic", _measure(), nullable=False),
        sa.Column("dow_international", _measure(), nullable=False),
        sa.Column("doi_international", _measure(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "galley_details",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "flight_record_id",
            sa.Integer,
            sa.ForeignKey("flight_records.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("galley_no", sa.String(32), nullable=False),
        sa.Column("arm_m", _measure(), nullable=False),
        sa.Column("domestic_weight_kg", _measure(), nullable=False),
        sa.Column("domestic_index", _measure(), nullable=False),
        sa.Column("international_weight_kg", _measure(), nullable=False),
        sa.Column("international_index", _measure(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "crew_details",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "flight_record_id",
            sa.Integer,
            sa.ForeignKey("flight_records.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("description", sa.String(128), nullable=False),
        sa.Column("qty", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("arm_m", _measure(), nullable=False),
        sa.Column("weight_kg", _measure(), nullable=False),
        sa.Column("index", _measure(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("crew_details")
    op.drop_table("galley_details")
    op.drop_table("flight_records")
    op.drop_table("users")
