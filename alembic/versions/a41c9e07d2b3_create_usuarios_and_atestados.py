"""create usuarios and atestados

Revision ID: a41c9e07d2b3
Revises:
Create Date: 2026-10-17 10:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a41c9e07d2b3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "usuarios",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("nome", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("telefone", sa.String(length=30), nullable=True),
        sa.Column("cargo", sa.String(length=20), nullable=False, server_default="USUARIO"),
        sa.Column("senha", sa.String(length=255), nullable=False),
        sa.Column("ra", sa.String(length=30), nullable=True),
        sa.Column("curso", sa.String(length=120), nullable=True),
        sa.Column("periodo", sa.String(length=30), nullable=True),
        sa.Column("turma", sa.String(length=30), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="ativo"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_usuarios_email", "usuarios", ["email"], unique=True)
    op.create_index("ix_usuarios_ra", "usuarios", ["ra"], unique=True)
    op.create_index("ix_usuarios_cargo", "usuarios", ["cargo"])

    op.create_table(
        "atestados",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("id_usuario", sa.String(length=36), sa.ForeignKey("usuarios.id"), nullable=False),
        sa.Column("data_inicio", sa.Date(), nullable=False),
        sa.Column("data_fim", sa.Date(), nullable=False),
        sa.Column("motivo", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pendente"),
        sa.Column("imagem_atestado", sa.String(length=500), nullable=True),
        sa.Column("observacoes_admin", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_atestados_id_usuario", "atestados", ["id_usuario"])
    op.create_index("ix_atestados_status", "atestados", ["status"])
    op.create_index("ix_atestados_created_at", "atestados", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_atestados_created_at", table_name="atestados")
    op.drop_index("ix_atestados_status", table_name="atestados")
    op.drop_index("ix_atestados_id_usuario", table_name="atestados")
    op.drop_table("atestados")

    op.drop_index("ix_usuarios_cargo", table_name="usuarios")
    op.drop_index("ix_usuarios_ra", table_name="usuarios")
    op.drop_index("ix_usuarios_email", table_name="usuarios")
    op.drop_table("usuarios")
