import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "usuarios"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    nome: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    telefone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # ADMINISTRADOR, FUNCIONARIO, USUARIO
    cargo: Mapped[str] = mapped_column(String(20), nullable=False, default="USUARIO", index=True)

    # hash argon2id
    senha: Mapped[str] = mapped_column(String(255), nullable=False)

    # RA (alunos) ou registro funcional
    ra: Mapped[str | None] = mapped_column(String(30), unique=True, index=True, nullable=True)

    curso: Mapped[str | None] = mapped_column(String(120), nullable=True)
    periodo: Mapped[str | None] = mapped_column(String(30), nullable=True)
    turma: Mapped[str | None] = mapped_column(String(30), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ativo")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
