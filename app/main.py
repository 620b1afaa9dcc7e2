import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

import app.models  # noqa: F401
from app.api.routes.admin import router as admin_router
from app.api.routes.atestados import router as atestados_router
from app.api.routes.auth import router as auth_router
from app.api.routes.users import router as users_router
from app.core.config import Settings, get_settings
from app.core.errors import AppError, ConfigurationError, InternalError
from app.core.security import ADMINISTRADOR
from app.db.base import Base
from app.db.documents import DocumentStore
from app.db.session import build_engine, build_session_factory
from app.services.storage import R2Storage
from app.services.users import find_by_email, insert_user

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
    "X-XSS-Protection": "0",
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains; preload",
}


def ensure_bootstrap_admin(app: FastAPI) -> None:
    settings: Settings = app.state.settings
    email = (settings.BOOTSTRAP_ADMIN_EMAIL or "").strip()
    if not email or not settings.BOOTSTRAP_ADMIN_PASSWORD:
        return

    db = app.state.session_factory()
    try:
        store = DocumentStore(db)
        if find_by_email(store, email):
            logger.info("[BOOTSTRAP] Admin OK: %s", email)
            return
        insert_user(
            store,
            {
                "nome": settings.BOOTSTRAP_ADMIN_NAME,
                "email": email,
                "cargo": ADMINISTRADOR,
                "telefone": "",
                "ra": None,
                "senha": settings.BOOTSTRAP_ADMIN_PASSWORD,
                "status": "ativo",
            },
        )
        logger.info("[BOOTSTRAP] Admin criado: %s", email)
    finally:
        db.close()


def _field_errors(exc: RequestValidationError) -> dict:
    errors: dict = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "form")]
        field = ".".join(loc) or "body"
        msg = str(err.get("msg", "")).removeprefix("Value error, ")
        errors.setdefault(field, []).append(msg)
    return errors


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        field_errors = _field_errors(exc)
        details = [f"{field}: {msg}" for field, msgs in field_errors.items() for msg in msgs]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Dados inválidos", "details": details, "fieldErrors": field_errors},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("erro não tratado em %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=InternalError().to_dict(),
            # fora do middleware de cabeçalhos: o handler de 500 roda no ServerErrorMiddleware
            headers=SECURITY_HEADERS,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_bootstrap_admin(app)
    yield
    app.state.engine.dispose()


def create_app(settings: Settings | None = None, storage=None) -> FastAPI:
    """Monta a aplicação com engine, sessões e storage explícitos.

    Rodar com: ``uvicorn app.main:create_app --factory``
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not settings.AUTH_SECRET:
        raise ConfigurationError("AUTH_SECRET não definido.")

    app = FastAPI(title="Atestados API", version="0.1.0", lifespan=lifespan)

    engine = build_engine(settings.DATABASE_URL)
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.storage = storage if storage is not None else R2Storage.from_settings(settings)

    register_error_handlers(app)

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(admin_router)
    app.include_router(atestados_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
