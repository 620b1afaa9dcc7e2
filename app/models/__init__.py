from app.models.user import User
from app.models.atestado import Atestado

__all__ = ["User", "Atestado"]
