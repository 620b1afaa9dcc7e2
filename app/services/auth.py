import logging
from typing import Any, Dict

from app.core.errors import InvalidCredentials
from app.core.security import verify_password
from app.db.documents import DocumentStore
from app.services.users import find_by_email, public_profile

logger = logging.getLogger(__name__)


def authenticate(store: DocumentStore, email: str, password: str) -> Dict[str, Any]:
    """Confere email/senha. Email desconhecido e senha errada dão o mesmo erro."""
    doc = find_by_email(store, email)
    if doc is None or not verify_password(password, doc.get("senha")):
        logger.info("login recusado: %s", email)
        raise InvalidCredentials()
    return public_profile(doc)
