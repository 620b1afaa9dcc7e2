"""
Camada de compatibilidade "document store" sobre tabelas relacionais.

Os handlers escrevem no formato de documento (chaves camelCase, consultas
``collection().where().order_by().limit().get()``) e cada chamada vira uma
única instrução SQL sobre a tabela correspondente, com colunas snake_case.

    store = DocumentStore(db)
    docs = store.collection("usuarios").where("email", "==", email).limit(1).get()
    if docs:
        docs[0].id, docs[0].get("createdAt")

Cada operação é um round-trip independente com commit próprio; erros do banco
sobem para quem chamou (depois do rollback). Não há retry nem batch.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from sqlalchemy import Table, insert, select, update
from sqlalchemy.orm import Session

import app.models  # noqa: F401  (registra as tabelas em Base.metadata)
from app.core.errors import NotFound
from app.db.base import Base


class UnknownCollection(KeyError):
    pass


class UnknownField(ValueError):
    pass


class UnsupportedOperator(ValueError):
    pass


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def snake_keys(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {to_snake(k): v for k, v in payload.items()}


def camel_keys(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {to_camel(k): v for k, v in row.items()}


_OPERATORS = {
    "==": lambda col, v: col == v,
    "!=": lambda col, v: col != v,
    ">": lambda col, v: col > v,
    ">=": lambda col, v: col >= v,
    "<": lambda col, v: col < v,
    "<=": lambda col, v: col <= v,
    "in": lambda col, v: col.in_(list(v)),
}


class DocumentSnapshot:
    def __init__(self, doc_id: Optional[str], data: Optional[Dict[str, Any]]):
        self.id = doc_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def data(self) -> Optional[Dict[str, Any]]:
        return None if self._data is None else dict(self._data)

    def get(self, field: str, default: Any = None) -> Any:
        if self._data is None:
            return default
        return self._data.get(field, default)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, **(self._data or {})}

    def __repr__(self) -> str:
        return f"DocumentSnapshot(id={self.id!r}, exists={self.exists})"


def _snapshot(table: Table, row: Mapping[str, Any]) -> DocumentSnapshot:
    data = camel_keys(row)
    pk = table.primary_key.columns.values()[0].name
    doc_id = data.pop(to_camel(pk))
    return DocumentSnapshot(None if doc_id is None else str(doc_id), data)


class _TableBound:
    def __init__(self, db: Session, table: Table):
        self._db = db
        self._table = table

    def _column(self, field: str):
        name = to_snake(field)
        if name not in self._table.c:
            raise UnknownField(f"{self._table.name}.{field}")
        return self._table.c[name]

    def _values(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        values = snake_keys(payload)
        unknown = [k for k in values if k not in self._table.c]
        if unknown:
            raise UnknownField(f"{self._table.name}: {', '.join(sorted(unknown))}")
        return values

    def _commit(self, stmt):
        try:
            result = self._db.execute(stmt)
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
        return result


class DocumentReference(_TableBound):
    def __init__(self, db: Session, table: Table, doc_id: str):
        super().__init__(db, table)
        self.id = doc_id

    @property
    def _pk(self):
        return self._table.primary_key.columns.values()[0]

    def get(self) -> DocumentSnapshot:
        row = self._db.execute(
            select(self._table).where(self._pk == self.id)
        ).mappings().first()
        if row is None:
            return DocumentSnapshot(self.id, None)
        return _snapshot(self._table, row)

    def update(self, payload: Mapping[str, Any]) -> None:
        values = self._values(payload)
        values.pop(self._pk.name, None)
        if not values:
            return
        result = self._commit(
            update(self._table).where(self._pk == self.id).values(**values)
        )
        if result.rowcount == 0:
            raise NotFound()


class CollectionQuery(_TableBound):
    def __init__(
        self,
        db: Session,
        table: Table,
        filters: Tuple = (),
        ordering: Tuple = (),
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ):
        super().__init__(db, table)
        self._filters = filters
        self._ordering = ordering
        self._limit = limit
        self._offset = offset

    @property
    def name(self) -> str:
        return self._table.name

    def _copy(self, **changes) -> "CollectionQuery":
        state = {
            "filters": self._filters,
            "ordering": self._ordering,
            "limit": self._limit,
            "offset": self._offset,
        }
        state.update(changes)
        return CollectionQuery(self._db, self._table, **state)

    def where(self, field: str, op: str, value: Any) -> "CollectionQuery":
        build = _OPERATORS.get(op)
        if build is None:
            raise UnsupportedOperator(op)
        if op == "in" and (isinstance(value, (str, bytes)) or not isinstance(value, Iterable)):
            raise UnsupportedOperator(f"in requires a list of values, got {type(value).__name__}")
        return self._copy(filters=self._filters + (build(self._column(field), value),))

    def order_by(self, field: str, direction: str = "asc") -> "CollectionQuery":
        col = self._column(field)
        direction = direction.lower()
        if direction not in ("asc", "desc"):
            raise ValueError(f"invalid direction: {direction}")
        clause = col.desc() if direction == "desc" else col.asc()
        return self._copy(ordering=self._ordering + (clause,))

    def limit(self, n: int) -> "CollectionQuery":
        if n < 0:
            raise ValueError("limit must be >= 0")
        return self._copy(limit=n)

    def offset(self, n: int) -> "CollectionQuery":
        if n < 0:
            raise ValueError("offset must be >= 0")
        return self._copy(offset=n)

    def get(self) -> List[DocumentSnapshot]:
        stmt = select(self._table)
        for clause in self._filters:
            stmt = stmt.where(clause)
        if self._ordering:
            stmt = stmt.order_by(*self._ordering)
        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        if self._offset:
            stmt = stmt.offset(self._offset)
        rows = self._db.execute(stmt).mappings().all()
        return [_snapshot(self._table, row) for row in rows]

    def add(self, payload: Mapping[str, Any]) -> str:
        result = self._commit(insert(self._table).values(**self._values(payload)))
        return str(result.inserted_primary_key[0])

    def doc(self, doc_id: str) -> DocumentReference:
        return DocumentReference(self._db, self._table, doc_id)


class DocumentStore:
    def __init__(self, db: Session):
        self._db = db

    def collection(self, name: str) -> CollectionQuery:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise UnknownCollection(name)
        return CollectionQuery(self._db, table)
