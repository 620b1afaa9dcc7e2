import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from app.core.errors import Forbidden, NotFound, ValidationError
from app.core.security import ADMINISTRADOR, FUNCIONARIO
from app.db.documents import DocumentSnapshot, DocumentStore
from app.schemas.atestado import AtestadoOut, AtestadoReview
from app.services.users import USERS

logger = logging.getLogger(__name__)

ATESTADOS = "atestados"

ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/png",
    "image/webp",
    "application/pdf",
}


def _serialize(doc: DocumentSnapshot, usuario: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    out = AtestadoOut.model_validate({**doc.to_dict(), "usuario": usuario})
    return out.model_dump(by_alias=True, mode="json")


def validate_submission(
    data_inicio: date,
    data_fim: date,
    motivo: str,
    content_type: Optional[str],
    size: int,
    max_bytes: int,
) -> None:
    errors: Dict[str, List[str]] = {}
    if data_fim < data_inicio:
        errors["dataFim"] = ["Data final deve ser igual ou posterior à data inicial"]
    if len((motivo or "").strip()) < 3:
        errors["motivo"] = ["Motivo deve ter pelo menos 3 caracteres"]
    if content_type not in ALLOWED_CONTENT_TYPES:
        errors.setdefault("imagem", []).append("Formato de arquivo não suportado")
    if size == 0:
        errors.setdefault("imagem", []).append("Arquivo vazio")
    elif size > max_bytes:
        errors.setdefault("imagem", []).append("Arquivo excede o tamanho máximo")
    if errors:
        raise ValidationError(errors)


def create_atestado(
    store: DocumentStore,
    user_id: str,
    data_inicio: date,
    data_fim: date,
    motivo: str,
    imagem: str,
) -> Dict[str, Any]:
    if not store.collection(USERS).doc(user_id).get().exists:
        raise NotFound("Usuário não encontrado")

    now = datetime.now(timezone.utc)
    atestado_id = store.collection(ATESTADOS).add(
        {
            "idUsuario": user_id,
            "dataInicio": data_inicio,
            "dataFim": data_fim,
            "motivo": motivo.strip(),
            "status": "pendente",
            "imagemAtestado": imagem,
            "createdAt": now,
            "updatedAt": now,
        }
    )
    logger.info("atestado %s enviado por %s", atestado_id, user_id)
    return _serialize(store.collection(ATESTADOS).doc(atestado_id).get())


def list_for_user(store: DocumentStore, user_id: str) -> List[Dict[str, Any]]:
    docs = (
        store.collection(ATESTADOS)
        .where("idUsuario", "==", user_id)
        .order_by("createdAt", "desc")
        .get()
    )
    return [_serialize(d) for d in docs]


def get_atestado(store: DocumentStore, atestado_id: str, user: Mapping[str, Any]) -> Dict[str, Any]:
    doc = store.collection(ATESTADOS).doc(atestado_id).get()
    if not doc.exists:
        raise NotFound("Atestado não encontrado")
    if user["cargo"] not in (ADMINISTRADOR, FUNCIONARIO) and doc.get("idUsuario") != user["id"]:
        raise Forbidden()
    return _serialize(doc)


def _submitter(store: DocumentStore, user_id: Optional[str], cache: Dict[str, Any]):
    if not user_id:
        return None
    if user_id not in cache:
        doc = store.collection(USERS).doc(user_id).get()
        cache[user_id] = (
            {
                "id": doc.id,
                "nome": doc.get("nome") or "N/A",
                "email": doc.get("email") or "N/A",
                "ra": doc.get("ra") or "N/A",
            }
            if doc.exists
            else None
        )
    return cache[user_id]


def list_all(
    store: DocumentStore,
    status: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Todos os atestados (mais recentes primeiro) com os dados de quem enviou."""
    query = store.collection(ATESTADOS).order_by("createdAt", "desc")
    if status:
        query = query.where("status", "==", status)
    if limit is not None:
        query = query.limit(limit)
    if offset:
        query = query.offset(offset)

    cache: Dict[str, Any] = {}
    return [_serialize(d, _submitter(store, d.get("idUsuario"), cache)) for d in query.get()]


def review(
    store: DocumentStore,
    atestado_id: str,
    payload: AtestadoReview,
    reviewer: Mapping[str, Any],
) -> Dict[str, Any]:
    ref = store.collection(ATESTADOS).doc(atestado_id)
    if not ref.get().exists:
        raise NotFound("Atestado não encontrado")

    changes: Dict[str, Any] = {
        "status": payload.status,
        "updatedAt": datetime.now(timezone.utc),
    }
    if payload.observacoes_admin is not None:
        changes["observacoesAdmin"] = payload.observacoes_admin
    ref.update(changes)

    logger.info("atestado %s -> %s por %s", atestado_id, payload.status, reviewer["email"])
    doc = ref.get()
    return _serialize(doc, _submitter(store, doc.get("idUsuario"), {}))
