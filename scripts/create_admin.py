#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
create_admin.py

Cria (ou promove) um usuário ADMINISTRADOR direto no banco.

Uso:
  python3 scripts/create_admin.py <email> <senha> [nome]

ENV obrigatórias:
  DATABASE_URL=postgresql+psycopg2://...
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone

from dotenv import load_dotenv

from app.core.config import get_settings
from app.core.security import ADMINISTRADOR, hash_password
from app.db.documents import DocumentStore
from app.db.session import build_engine, build_session_factory
from app.services.users import USERS, find_by_email, insert_user


def die(msg: str, code: int = 1) -> None:
    print(f"[ERRO] {msg}")
    raise SystemExit(code)


def main(argv: list[str]) -> None:
    if len(argv) < 2:
        die("Uso: python3 scripts/create_admin.py <email> <senha> [nome]", 2)

    email, senha = argv[0].strip(), argv[1]
    nome = argv[2] if len(argv) > 2 else "Administrador"
    if len(senha) < 8:
        die("Senha deve ter pelo menos 8 caracteres")

    load_dotenv()
    engine = build_engine(get_settings().DATABASE_URL)
    db = build_session_factory(engine)()
    try:
        store = DocumentStore(db)
        existing = find_by_email(store, email)
        if existing:
            store.collection(USERS).doc(existing.id).update(
                {
                    "cargo": ADMINISTRADOR,
                    "senha": hash_password(senha),
                    "updatedAt": datetime.now(timezone.utc),
                }
            )
            print(f"OK: {email} promovido a ADMINISTRADOR (id={existing.id})")
            return

        user = insert_user(
            store,
            {
                "nome": nome,
                "email": email,
                "cargo": ADMINISTRADOR,
                "telefone": "",
                "ra": None,
                "senha": senha,
                "status": "ativo",
            },
        )
        print(f"OK: admin criado {email} (id={user['id']})")
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    main(sys.argv[1:])
