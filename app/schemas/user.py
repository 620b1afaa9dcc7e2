import re
from datetime import datetime
from typing import Annotated, Literal, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Cargo = Literal["ADMINISTRADOR", "FUNCIONARIO", "USUARIO"]

_SPECIAL = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def _min_len(value: Optional[str], size: int, message: str) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < size:
        raise ValueError(message)
    return value


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _email(value: str) -> str:
    # valida o formato mas grava como digitado; o login compara exatamente
    value = value.strip()
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Email inválido")
    return value


Email = Annotated[str, AfterValidator(_email)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignupIn(CamelModel):
    nome: str
    email: Email
    ra: str
    telefone: str
    senha: str = Field(..., max_length=256)
    confirmar_senha: Optional[str] = None
    curso: Optional[str] = None
    periodo: Optional[str] = None
    turma: Optional[str] = None

    @field_validator("nome")
    @classmethod
    def _nome(cls, v):
        return _min_len(v, 2, "Nome deve ter pelo menos 2 caracteres")

    @field_validator("ra")
    @classmethod
    def _ra(cls, v):
        return _min_len(v, 5, "RA deve ter pelo menos 5 caracteres")

    @field_validator("telefone")
    @classmethod
    def _telefone(cls, v):
        return _min_len(v, 10, "Telefone deve ter pelo menos 10 dígitos")

    @field_validator("senha")
    @classmethod
    def _senha(cls, v):
        if len(v) < 6:
            raise ValueError("Senha deve ter pelo menos 6 caracteres")
        return v

    @field_validator("curso", "periodo", "turma", mode="before")
    @classmethod
    def _optional(cls, v):
        return _blank_to_none(v)

    @model_validator(mode="after")
    def _confirmacao(self):
        if self.confirmar_senha is not None and self.confirmar_senha != self.senha:
            raise ValueError("Senhas não coincidem")
        return self


class UserCreate(CamelModel):
    nome: str
    email: Email
    ra: Optional[str] = None
    telefone: str
    senha: str = Field(..., max_length=256)
    confirmar_senha: str
    cargo: Cargo
    curso: Optional[str] = None
    periodo: Optional[str] = None
    turma: Optional[str] = None
    status: str = "ativo"

    @field_validator("nome")
    @classmethod
    def _nome(cls, v):
        return _min_len(v, 2, "Nome deve ter pelo menos 2 caracteres")

    @field_validator("telefone")
    @classmethod
    def _telefone(cls, v):
        return _min_len(v, 10, "Telefone deve ter pelo menos 10 dígitos")

    @field_validator("ra", "curso", "periodo", "turma", mode="before")
    @classmethod
    def _optional(cls, v):
        return _blank_to_none(v)

    @field_validator("ra")
    @classmethod
    def _ra(cls, v):
        return _min_len(v, 5, "RA deve ter pelo menos 5 caracteres")

    @field_validator("senha")
    @classmethod
    def _senha(cls, v):
        if len(v) < 8:
            raise ValueError("Senha deve ter pelo menos 8 caracteres")
        if not re.search(r"[a-z]", v):
            raise ValueError("Senha deve conter pelo menos uma letra minúscula")
        if not re.search(r"[A-Z]", v):
            raise ValueError("Senha deve conter pelo menos uma letra maiúscula")
        if not re.search(r"\d", v):
            raise ValueError("Senha deve conter pelo menos um número")
        if not _SPECIAL.search(v):
            raise ValueError("Senha deve conter pelo menos um caractere especial")
        return v

    def student_field_errors(self) -> dict:
        """Campos obrigatórios para cargo USUARIO (aluno)."""
        if self.cargo != "USUARIO":
            return {}
        errors = {}
        if not self.ra:
            errors["ra"] = ["RA é obrigatório para alunos"]
        if not self.curso:
            errors["curso"] = ["Curso é obrigatório para alunos"]
        if not self.periodo:
            errors["periodo"] = ["Período é obrigatório para alunos"]
        return errors


class UserOut(CamelModel):
    id: str
    nome: str
    email: str
    cargo: str
    ra: Optional[str] = None
    telefone: Optional[str] = None
    curso: Optional[str] = None
    periodo: Optional[str] = None
    turma: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None
