from fastapi import APIRouter, Depends, status

from app.api.deps import get_settings, get_store
from app.core.config import Settings
from app.core.security import issue_token
from app.db.documents import DocumentStore
from app.schemas import LoginIn, SignupIn
from app.services import users
from app.services.auth import authenticate

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(
    payload: LoginIn,
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    user = authenticate(store, payload.email, payload.senha)
    token = issue_token(
        user["id"],
        secret=settings.AUTH_SECRET,
        ttl_seconds=settings.TOKEN_TTL_SECONDS,
        issuer=settings.TOKEN_ISSUER,
        audience=settings.TOKEN_AUDIENCE,
    )
    return {
        "success": True,
        "message": "Login realizado com sucesso",
        "user": user,
        "token": token,
    }


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignupIn, store: DocumentStore = Depends(get_store)):
    data = users.signup(store, payload)
    return {"success": True, "message": "Conta criada com sucesso", "data": data}
