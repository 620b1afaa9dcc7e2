import time
from typing import Any, Dict, Iterable, Mapping, Optional

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError
from jose import ExpiredSignatureError, JWTError, jwt

from app.core.errors import ConfigurationError, Forbidden, InvalidToken

ALGORITHM = "HS256"
DEFAULT_TTL_SECONDS = 60 * 60 * 24 * 5  # 5 dias
DEFAULT_ISSUER = "atestado-stock-app"
DEFAULT_AUDIENCE = "atestado-stock-users"

ADMINISTRADOR = "ADMINISTRADOR"
FUNCIONARIO = "FUNCIONARIO"
USUARIO = "USUARIO"

# argon2id, 64 MiB / 3 iterações / 1 lane
password_hasher = PasswordHasher(
    time_cost=3,
    memory_cost=2 ** 16,
    parallelism=1,
    type=Type.ID,
)


def hash_password(password: str) -> str:
    return password_hasher.hash(password)


def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not is_password_hash(hashed):
        return False
    try:
        return password_hasher.verify(hashed, password)
    except (VerificationError, InvalidHashError):
        return False


def is_password_hash(value: Optional[str]) -> bool:
    return bool(value) and value.startswith("$argon2")


def issue_token(
    user_id: str,
    secret: Optional[str],
    ttl_seconds: int = DEFAULT_TTL_SECONDS,
    issuer: str = DEFAULT_ISSUER,
    audience: str = DEFAULT_AUDIENCE,
    now: Optional[float] = None,
) -> str:
    """Assina um token de sessão para ``user_id``.

    O ``sessionId`` é derivado do instante de emissão (em ms) e a expiração é
    absoluta: ``iat + ttl_seconds``.
    """
    if not secret:
        raise ConfigurationError("AUTH_SECRET não definido.")

    issued = time.time() if now is None else now
    issued_ms = int(issued * 1000)
    claims = {
        "uid": str(user_id),
        "sessionId": f"session_{issued_ms}",
        "timestamp": issued_ms,
        "iat": int(issued),
        "exp": int(issued) + int(ttl_seconds),
        "iss": issuer,
        "aud": audience,
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def verify_token(
    token: str,
    secret: Optional[str],
    issuer: str = DEFAULT_ISSUER,
    audience: str = DEFAULT_AUDIENCE,
) -> Dict[str, Any]:
    if not secret:
        raise ConfigurationError("AUTH_SECRET não definido.")

    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            issuer=issuer,
            audience=audience,
        )
    except ExpiredSignatureError:
        raise InvalidToken("Token expirado")
    except JWTError:
        raise InvalidToken()

    if not claims.get("uid"):
        raise InvalidToken()
    return claims


def authorize(user: Mapping[str, Any], allowed_roles: Iterable[str]) -> Mapping[str, Any]:
    allowed = set(allowed_roles)
    if user.get("cargo") not in allowed:
        raise Forbidden()
    return user
