import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.security import ADMINISTRADOR, FUNCIONARIO, USUARIO, issue_token
from app.db.documents import DocumentStore
from app.main import create_app
from app.services.users import insert_user

SECRET = "test-secret"
PASSWORD = "Abc12345!"


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.deleted = []

    def upload(self, data, filename, content_type, user_id, folder="atestados"):
        path = f"{folder}/{user_id}/{len(self.objects)}-{filename}"
        self.objects[path] = (data, content_type)
        return {"url": f"r2://test/{path}", "path": path}

    def delete(self, path):
        self.deleted.append(path)
        self.objects.pop(path, None)


@pytest.fixture()
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        AUTH_SECRET=SECRET,
        AUTO_CREATE_TABLES=True,
        MAX_UPLOAD_BYTES=1024,
    )


@pytest.fixture()
def storage():
    return FakeStorage()


@pytest.fixture()
def app(settings, storage):
    application = create_app(settings, storage=storage)
    yield application
    application.state.engine.dispose()


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def db(app):
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture()
def store(db):
    return DocumentStore(db)


@pytest.fixture()
def make_user(store):
    counter = {"n": 0}

    def _make(cargo=USUARIO, email=None, ra=None, senha=PASSWORD, nome="Fulano de Tal"):
        counter["n"] += 1
        n = counter["n"]
        return insert_user(
            store,
            {
                "nome": nome,
                "email": email or f"user{n}@escola.edu.br",
                "cargo": cargo,
                "telefone": "11988887777",
                "ra": ra if ra is not None else (f"RA{n:04d}" if cargo == USUARIO else None),
                "curso": "Informática" if cargo == USUARIO else None,
                "periodo": "3" if cargo == USUARIO else None,
                "senha": senha,
                "status": "ativo",
            },
        )

    return _make


def auth_headers(user):
    return {"Authorization": f"Bearer {issue_token(user['id'], SECRET)}"}


@pytest.fixture()
def admin(make_user):
    return make_user(cargo=ADMINISTRADOR, email="admin@escola.edu.br", nome="Admin")


@pytest.fixture()
def staff(make_user):
    return make_user(cargo=FUNCIONARIO, email="secretaria@escola.edu.br", nome="Secretaria")


@pytest.fixture()
def student(make_user):
    return make_user(cargo=USUARIO, email="aluno@escola.edu.br", ra="RA12345", nome="Aluno")
