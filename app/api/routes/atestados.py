from datetime import date

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.api.deps import get_current_user, get_settings, get_storage, get_store, require_roles
from app.core.config import Settings
from app.core.security import USUARIO
from app.db.documents import DocumentStore
from app.services import atestados

router = APIRouter(prefix="/atestados", tags=["atestados"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_atestado(
    data_inicio: date = Form(..., alias="dataInicio"),
    data_fim: date = Form(..., alias="dataFim"),
    motivo: str = Form(...),
    imagem: UploadFile = File(...),
    store: DocumentStore = Depends(get_store),
    storage=Depends(get_storage),
    settings: Settings = Depends(get_settings),
    current_user=Depends(require_roles(USUARIO)),
):
    content = imagem.file.read(settings.MAX_UPLOAD_BYTES + 1)
    atestados.validate_submission(
        data_inicio,
        data_fim,
        motivo,
        imagem.content_type,
        len(content),
        settings.MAX_UPLOAD_BYTES,
    )

    uploaded = storage.upload(
        content,
        imagem.filename or "atestado",
        imagem.content_type,
        user_id=current_user["id"],
    )
    try:
        data = atestados.create_atestado(
            store, current_user["id"], data_inicio, data_fim, motivo, uploaded["path"]
        )
    except Exception:
        # não deixa arquivo órfão no bucket
        storage.delete(uploaded["path"])
        raise
    return {"success": True, "message": "Atestado enviado com sucesso", "data": data}


@router.get("")
def list_my_atestados(
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    return {"success": True, "data": atestados.list_for_user(store, current_user["id"])}


@router.get("/{atestado_id}")
def get_atestado(
    atestado_id: str,
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    return {"success": True, "data": atestados.get_atestado(store, atestado_id, current_user)}
