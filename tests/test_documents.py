from datetime import date, datetime

import pytest
from sqlalchemy import select

from app.core.errors import NotFound
from app.db.documents import (
    UnknownCollection,
    UnknownField,
    UnsupportedOperator,
    camel_keys,
    snake_keys,
    to_camel,
    to_snake,
)
from app.models import User


def _user(n, **extra):
    data = {
        "nome": f"Pessoa {n}",
        "email": f"p{n}@escola.edu.br",
        "cargo": "USUARIO",
        "telefone": "11999990000",
        "ra": f"RA{n:03d}",
        "senha": "$argon2id$fake",
        "createdAt": datetime(2026, 3, n),
    }
    data.update(extra)
    return data


@pytest.mark.parametrize(
    "camel, snake",
    [
        ("idUsuario", "id_usuario"),
        ("dataInicio", "data_inicio"),
        ("observacoesAdmin", "observacoes_admin"),
        ("createdAt", "created_at"),
        ("ra", "ra"),
    ],
)
def test_case_translation(camel, snake):
    assert to_snake(camel) == snake
    assert to_camel(snake) == camel


def test_key_translation_helpers():
    assert snake_keys({"imagemAtestado": 1, "status": 2}) == {"imagem_atestado": 1, "status": 2}
    assert camel_keys({"data_fim": 1}) == {"dataFim": 1}


def test_add_then_get_keeps_camel_case_fields(store, db):
    users = store.collection("usuarios")
    user_id = users.add(_user(1, nome="Ana Silva", email="ana@x.com"))
    atestado_id = store.collection("atestados").add(
        {
            "idUsuario": user_id,
            "dataInicio": date(2026, 3, 2),
            "dataFim": date(2026, 3, 4),
            "motivo": "Gripe",
            "observacoesAdmin": "ok",
            "createdAt": datetime(2026, 3, 2, 10, 0),
        }
    )

    doc = store.collection("atestados").doc(atestado_id).get()
    assert doc.exists
    assert doc.id == atestado_id
    assert doc.get("idUsuario") == user_id
    assert doc.get("dataInicio") == date(2026, 3, 2)
    assert doc.get("dataFim") == date(2026, 3, 4)
    assert doc.get("observacoesAdmin") == "ok"
    assert doc.get("status") == "pendente"
    assert "id_usuario" not in doc.data()
    assert "id" not in doc.data()

    # a linha no banco está em snake_case
    row = db.execute(select(User).where(User.id == user_id)).scalar_one()
    assert row.nome == "Ana Silva"


def test_where_operators(store):
    users = store.collection("usuarios")
    for n in range(1, 6):
        users.add(_user(n))

    def emails(query):
        return sorted(d.get("email") for d in query.get())

    assert emails(users.where("email", "==", "p2@escola.edu.br")) == ["p2@escola.edu.br"]
    assert emails(users.where("ra", "in", ["RA001", "RA004"])) == ["p1@escola.edu.br", "p4@escola.edu.br"]
    assert len(users.where("createdAt", ">", datetime(2026, 3, 3)).get()) == 2
    assert len(users.where("createdAt", "<", datetime(2026, 3, 3)).get()) == 2
    assert len(users.where("createdAt", ">=", datetime(2026, 3, 3)).get()) == 3
    assert len(users.where("ra", "!=", "RA001").get()) == 4
    assert users.where("email", "==", "nobody@escola.edu.br").get() == []


def test_filters_combine(store):
    users = store.collection("usuarios")
    users.add(_user(1, cargo="FUNCIONARIO", ra=None))
    users.add(_user(2))
    users.add(_user(3))

    docs = users.where("cargo", "==", "USUARIO").where("ra", "==", "RA003").get()
    assert [d.get("email") for d in docs] == ["p3@escola.edu.br"]


def test_unsupported_operator_fails_loudly(store):
    with pytest.raises(UnsupportedOperator):
        store.collection("usuarios").where("email", "array-contains", "x")


def test_in_requires_a_collection_of_values(store):
    users = store.collection("usuarios")
    users.add(_user(1))
    with pytest.raises(UnsupportedOperator):
        users.where("cargo", "in", "USUARIO")
    with pytest.raises(UnsupportedOperator):
        users.where("cargo", "in", b"USUARIO")
    with pytest.raises(UnsupportedOperator):
        users.where("cargo", "in", 5)
    assert len(users.where("cargo", "in", ("USUARIO",)).get()) == 1


def test_unknown_field_and_collection(store):
    with pytest.raises(UnknownField):
        store.collection("usuarios").where("nada", "==", 1)
    with pytest.raises(UnknownField):
        store.collection("usuarios").add({"nome": "x", "campoInexistente": 1})
    with pytest.raises(UnknownCollection):
        store.collection("inexistente")


def test_order_limit_offset(store):
    users = store.collection("usuarios")
    for n in range(1, 7):
        users.add(_user(n))

    ordered = users.order_by("createdAt", "desc")
    assert [d.get("ra") for d in ordered.limit(2).get()] == ["RA006", "RA005"]
    assert [d.get("ra") for d in ordered.limit(2).offset(2).get()] == ["RA004", "RA003"]
    # offset sem limit não tem teto
    assert [d.get("ra") for d in ordered.offset(4).get()] == ["RA002", "RA001"]
    assert [d.get("ra") for d in users.order_by("ra").limit(1).get()] == ["RA001"]


def test_query_builder_is_immutable(store):
    users = store.collection("usuarios")
    users.add(_user(1))
    users.add(_user(2))

    base = users.order_by("ra")
    base.where("ra", "==", "RA001").limit(1)
    assert len(base.get()) == 2


def test_invalid_pagination_and_direction(store):
    users = store.collection("usuarios")
    with pytest.raises(ValueError):
        users.limit(-1)
    with pytest.raises(ValueError):
        users.offset(-1)
    with pytest.raises(ValueError):
        users.order_by("ra", "sideways")


def test_doc_get_missing(store):
    doc = store.collection("usuarios").doc("nao-existe").get()
    assert not doc.exists
    assert doc.id == "nao-existe"
    assert doc.data() is None
    assert doc.get("nome", "padrão") == "padrão"


def test_doc_update(store):
    users = store.collection("usuarios")
    user_id = users.add(_user(1))

    users.doc(user_id).update({"telefone": "11911112222", "curso": "Enfermagem"})

    doc = users.doc(user_id).get()
    assert doc.get("telefone") == "11911112222"
    assert doc.get("curso") == "Enfermagem"
    assert doc.get("nome") == "Pessoa 1"


def test_update_missing_doc_raises(store):
    with pytest.raises(NotFound):
        store.collection("usuarios").doc("nao-existe").update({"nome": "x"})


def test_database_errors_propagate(store):
    users = store.collection("usuarios")
    users.add(_user(1))
    with pytest.raises(Exception):
        users.add(_user(2, email="p1@escola.edu.br"))
    # a sessão continua utilizável depois do rollback
    assert len(users.get()) == 1
