from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.user import new_id


class Atestado(Base):
    __tablename__ = "atestados"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    id_usuario: Mapped[str] = mapped_column(
        ForeignKey("usuarios.id"), nullable=False, index=True
    )

    data_inicio: Mapped[date] = mapped_column(Date, nullable=False)
    data_fim: Mapped[date] = mapped_column(Date, nullable=False)
    motivo: Mapped[str] = mapped_column(Text, nullable=False)

    # "pendente", "aprovado", "rejeitado"
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pendente", index=True)

    # chave no bucket (ou URL pública)
    imagem_atestado: Mapped[str | None] = mapped_column(String(500), nullable=True)
    observacoes_admin: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
