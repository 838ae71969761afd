"""create stocks_history table

Revision ID: 0001_stocks_history
Revises:
Create Date: 2024-06-13
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_stocks_history"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "stocks_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True, nullable=False),
        sa.Column("ticker", sa.String, nullable=False),
        sa.Column("date", sa.BigInteger, nullable=False),
        sa.Column("preco_abertura", sa.Float, nullable=True),
        sa.Column("preco_fechamento", sa.Float, nullable=True),
        sa.Column("preco_maximo", sa.Float, nullable=True),
        sa.Column("preco_minimo", sa.Float, nullable=True),
        sa.Column("preco_medio", sa.Float, nullable=True),
        sa.Column("quantidade_negociada", sa.BigInteger, nullable=True),
        sa.Column("quantidade_negocios", sa.BigInteger, nullable=True),
        sa.Column("volume_negociado", sa.Float, nullable=True),
        sa.Column("fator_ajuste", sa.Float, nullable=True),
        sa.Column("preco_fechamento_ajustado", sa.Float, nullable=True),
        sa.Column("fator_ajuste_desdobramentos", sa.Float, nullable=True),
        sa.Column("preco_fechamento_ajustado_desdobramentos", sa.Float, nullable=True),
        sa.UniqueConstraint("ticker", "date", name="ux_stocks_history_ticker_date"),
    )


def downgrade() -> None:
    op.drop_table("stocks_history")
