from typing import Any, Dict

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import InvalidToken
from app.core.security import authorize, verify_token
from app.db.documents import DocumentStore
from app.db.session import get_db
from app.services.users import get_user, public_profile

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


def get_storage(request: Request):
    return request.app.state.storage


def get_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise InvalidToken("Token de autorização necessário")

    return verify_token(
        credentials.credentials,
        settings.AUTH_SECRET,
        issuer=settings.TOKEN_ISSUER,
        audience=settings.TOKEN_AUDIENCE,
    )


def get_current_user(
    claims: Dict[str, Any] = Depends(get_claims),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    # o cargo vem sempre do banco, não do token
    return public_profile(get_user(store, claims["uid"]))


def require_roles(*roles: str):
    def dependency(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        return authorize(user, roles)

    return dependency
