from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_store, require_roles
from app.core.security import ADMINISTRADOR, FUNCIONARIO
from app.db.documents import DocumentStore
from app.schemas import AtestadoReview, UserCreate
from app.schemas.atestado import Status
from app.services import atestados, users

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/create-user", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    store: DocumentStore = Depends(get_store),
    current_user=Depends(require_roles(ADMINISTRADOR)),
):
    data = users.create_user(store, payload)
    return {"success": True, "message": "Usuário criado com sucesso", "data": data}


@router.get("/atestados", dependencies=[Depends(require_roles(ADMINISTRADOR, FUNCIONARIO))])
def list_atestados(
    status_: Status | None = Query(None, alias="status"),
    limit: int | None = Query(None, ge=1, le=500),
    offset: int | None = Query(None, ge=0),
    store: DocumentStore = Depends(get_store),
):
    data = atestados.list_all(store, status=status_, limit=limit, offset=offset)
    return {"success": True, "data": data}


@router.patch("/atestados/{atestado_id}")
def review_atestado(
    atestado_id: str,
    payload: AtestadoReview,
    store: DocumentStore = Depends(get_store),
    current_user=Depends(require_roles(ADMINISTRADOR)),
):
    data = atestados.review(store, atestado_id, payload, current_user)
    return {"success": True, "data": data}
