from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.user import CamelModel

Status = Literal["pendente", "aprovado", "rejeitado"]


class AtestadoReview(CamelModel):
    status: Status
    observacoes_admin: Optional[str] = Field(default=None, max_length=2000)


class Submitter(BaseModel):
    id: str
    nome: str
    email: str
    ra: Optional[str] = None


class AtestadoOut(CamelModel):
    id: str
    id_usuario: str
    data_inicio: date
    data_fim: date
    motivo: str
    status: str
    imagem_atestado: Optional[str] = None
    observacoes_admin: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    usuario: Optional[Submitter] = None
