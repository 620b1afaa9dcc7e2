import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from app.core.errors import Conflict, NotFound, ValidationError
from app.core.security import USUARIO, hash_password
from app.db.documents import DocumentSnapshot, DocumentStore
from app.schemas.user import SignupIn, UserCreate, UserOut

logger = logging.getLogger(__name__)

USERS = "usuarios"

EMAIL_TAKEN = "Usuário com este email já existe"
RA_TAKEN = "RA já está sendo usado por outro usuário"


def public_profile(doc: DocumentSnapshot) -> Dict[str, Any]:
    """Perfil sem o hash da senha, chaves camelCase."""
    return UserOut.model_validate(doc.to_dict()).model_dump(by_alias=True)


def find_by_email(store: DocumentStore, email: str) -> Optional[DocumentSnapshot]:
    docs = store.collection(USERS).where("email", "==", email).limit(1).get()
    return docs[0] if docs else None


def get_user(store: DocumentStore, user_id: str) -> DocumentSnapshot:
    doc = store.collection(USERS).doc(user_id).get()
    if not doc.exists:
        raise NotFound("Usuário não encontrado")
    return doc


def list_users(store: DocumentStore) -> List[Dict[str, Any]]:
    docs = store.collection(USERS).order_by("createdAt", "desc").get()
    return [public_profile(d) for d in docs]


def _ensure_unique(store: DocumentStore, email: str, ra: Optional[str]) -> None:
    # atalho para a mensagem amigável; a garantia real são os índices únicos
    if find_by_email(store, email):
        raise Conflict(EMAIL_TAKEN)
    if ra and store.collection(USERS).where("ra", "==", ra).limit(1).get():
        raise Conflict(RA_TAKEN)


def insert_user(store: DocumentStore, record: Dict[str, Any]) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    record = {**record, "senha": hash_password(record["senha"]), "createdAt": now, "updatedAt": now}
    try:
        user_id = store.collection(USERS).add(record)
    except IntegrityError:
        logger.info("cadastro duplicado (constraint): %s", record["email"])
        raise Conflict(f"{EMAIL_TAKEN} ou RA já cadastrado")

    logger.info("usuário criado: %s (%s)", record["email"], record["cargo"])
    return public_profile(get_user(store, user_id))


def signup(store: DocumentStore, payload: SignupIn) -> Dict[str, Any]:
    """Cadastro público: sempre cria um aluno (cargo USUARIO)."""
    _ensure_unique(store, payload.email, payload.ra)
    return insert_user(
        store,
        {
            "nome": payload.nome,
            "email": payload.email,
            "cargo": USUARIO,
            "telefone": payload.telefone or "",
            "ra": payload.ra,
            "curso": payload.curso,
            "periodo": payload.periodo,
            "turma": payload.turma,
            "senha": payload.senha,
            "status": "ativo",
        },
    )


def create_user(store: DocumentStore, payload: UserCreate) -> Dict[str, Any]:
    if payload.confirmar_senha != payload.senha:
        raise ValidationError({"confirmarSenha": ["Senhas não coincidem"]})
    errors = payload.student_field_errors()
    if errors:
        raise ValidationError(errors)

    _ensure_unique(store, payload.email, payload.ra)
    return insert_user(
        store,
        {
            "nome": payload.nome,
            "email": payload.email,
            "cargo": payload.cargo,
            "telefone": payload.telefone,
            "ra": payload.ra,
            "curso": payload.curso,
            "periodo": payload.periodo,
            "turma": payload.turma,
            "senha": payload.senha,
            "status": payload.status or "ativo",
        },
    )
