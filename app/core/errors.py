from typing import Dict, List, Optional


class ConfigurationError(RuntimeError):
    """Required configuration (secret, bucket, ...) is missing."""


class AppError(Exception):
    status_code = 500
    message = "Erro interno do servidor"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> Dict:
        return {"error": self.message}


class ValidationError(AppError):
    status_code = 400
    message = "Dados inválidos"

    def __init__(self, field_errors: Dict[str, List[str]], message: Optional[str] = None):
        super().__init__(message)
        self.field_errors = field_errors

    @property
    def details(self) -> List[str]:
        return [f"{field}: {msg}" for field, msgs in self.field_errors.items() for msg in msgs]

    def to_dict(self) -> Dict:
        return {"error": self.message, "details": self.details, "fieldErrors": self.field_errors}


class InvalidCredentials(AppError):
    status_code = 401
    message = "Email ou senha incorretos"


class InvalidToken(AppError):
    status_code = 401
    message = "Token inválido"


class Forbidden(AppError):
    status_code = 403
    message = "Acesso negado"


class NotFound(AppError):
    status_code = 404
    message = "Registro não encontrado"


class Conflict(AppError):
    status_code = 409
    message = "Registro já existe"


class InternalError(AppError):
    status_code = 500
