from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_store, require_roles
from app.core.security import ADMINISTRADOR, FUNCIONARIO
from app.db.documents import DocumentStore
from app.services import users

router = APIRouter(tags=["users"])


@router.get("/users/me")
def me(current_user=Depends(get_current_user)):
    return {"success": True, "data": current_user}


@router.get("/profile")
def profile(current_user=Depends(get_current_user)):
    return {"success": True, "data": current_user}


@router.get("/users", dependencies=[Depends(require_roles(ADMINISTRADOR, FUNCIONARIO))])
def list_users(store: DocumentStore = Depends(get_store)):
    return {"success": True, "data": users.list_users(store)}
