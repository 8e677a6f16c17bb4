"""SQLAlchemy-backed implementation of the record store."""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import create_engine, event, func, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload, sessionmaker

from quizzer.models import (
    AnswerOption,
    AttemptAnswer,
    Question,
    QuizAttempt,
    QuizSet,
    UserProfile,
)

from .base import (
    OrderBy,
    RecordNotFound,
    StoreError,
    StoreUnavailable,
    UnknownEntityType,
)
from .tables import (
    AnswerOptionRow,
    AttemptAnswerRow,
    Base,
    QuestionRow,
    QuizAttemptRow,
    QuizSetRow,
    UserRow,
)

__all__ = [
    "DATABASE_FILENAME",
    "SqlRecordStore",
    "default_database_url",
    "open_store",
]

DATABASE_FILENAME = "quiz.db"

_ROW_TYPES: Mapping[type, type[Base]] = {
    UserProfile: UserRow,
    QuizSet: QuizSetRow,
    Question: QuestionRow,
    AnswerOption: AnswerOptionRow,
    QuizAttempt: QuizAttemptRow,
    AttemptAnswer: AttemptAnswerRow,
}

# Child collections owned by a parent entity: field name -> child type.
_CHILDREN: Mapping[type, tuple[str, type]] = {
    QuizSet: ("questions", Question),
    Question: ("options", AnswerOption),
}


class SqlRecordStore:
    """Record store over a SQLAlchemy engine.

    Each mutating call runs in its own transaction and commits before
    returning. Questions are always loaded together with their options; quiz
    sets are returned as metadata only.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            expire_on_commit=False,
        )

    @property
    def url(self) -> str:
        return self._engine.url.render_as_string(hide_password=True)

    def find(self, entity_type: type, **criteria: Any) -> Optional[Any]:
        stmt = self._select(entity_type, criteria, order_by=None).limit(1)
        with self._session_factory() as session:
            row = session.scalars(stmt).first()
            if row is None:
                return None
            return _to_entity(entity_type, row)

    def query(
        self,
        entity_type: type,
        *,
        order_by: OrderBy = None,
        limit: Optional[int] = None,
        **criteria: Any,
    ) -> list[Any]:
        stmt = self._select(entity_type, criteria, order_by=order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._session_factory() as session:
            rows = session.scalars(stmt).all()
            return [_to_entity(entity_type, row) for row in rows]

    def insert(self, entity: object) -> int:
        row = _to_row(entity)
        with self._session_factory.begin() as session:
            session.add(row)
            session.flush()
            return row.id

    def save(self, entity: object) -> None:
        row_type = _row_type_for(type(entity))
        entity_id = getattr(entity, "id", None)
        if entity_id is None:
            raise RecordNotFound(
                f"{type(entity).__name__} has not been inserted yet."
            )
        with self._session_factory.begin() as session:
            row = session.get(row_type, entity_id)
            if row is None:
                raise RecordNotFound(
                    f"{type(entity).__name__} {entity_id} does not exist."
                )
            for key in _column_keys(row_type):
                if key != "id":
                    setattr(row, key, getattr(entity, key))

    def count(self, entity_type: type, **criteria: Any) -> int:
        row_type = _row_type_for(entity_type)
        stmt = select(func.count(row_type.id)).where(
            *_conditions(row_type, criteria)
        )
        with self._session_factory() as session:
            return int(session.scalar(stmt) or 0)

    def close(self) -> None:
        self._engine.dispose()

    def _select(
        self,
        entity_type: type,
        criteria: Mapping[str, Any],
        *,
        order_by: OrderBy,
    ):
        row_type = _row_type_for(entity_type)
        stmt = select(row_type).where(*_conditions(row_type, criteria))
        stmt = stmt.order_by(*_order_clauses(row_type, order_by))
        if entity_type is Question:
            stmt = stmt.options(selectinload(QuestionRow.options))
        return stmt


def open_store(url: str) -> SqlRecordStore:
    """Connect to ``url`` and ensure the schema exists."""

    try:
        engine = create_engine(url)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        Base.metadata.create_all(engine)
    except SQLAlchemyError as exc:
        raise StoreUnavailable(f"Unable to open database '{url}': {exc}") from exc
    return SqlRecordStore(engine)


def default_database_url(data_dir: Path) -> str:
    """Return the SQLite URL for the database file under ``data_dir``."""

    return f"sqlite:///{Path(data_dir) / DATABASE_FILENAME}"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _row_type_for(entity_type: type) -> type[Base]:
    try:
        return _ROW_TYPES[entity_type]
    except KeyError as exc:
        raise UnknownEntityType(
            f"No storage mapping for {entity_type.__name__}."
        ) from exc


def _column_keys(row_type: type[Base]) -> tuple[str, ...]:
    return tuple(attr.key for attr in sa_inspect(row_type).column_attrs)


def _column(row_type: type[Base], name: str):
    if name not in _column_keys(row_type):
        raise StoreError(f"Unknown field '{name}' for {row_type.__tablename__}.")
    return getattr(row_type, name)


def _conditions(row_type: type[Base], criteria: Mapping[str, Any]) -> list:
    return [_column(row_type, key) == value for key, value in criteria.items()]


def _order_clauses(row_type: type[Base], order_by: OrderBy) -> list:
    if order_by is None:
        names: Iterable[str] = ()
    elif isinstance(order_by, str):
        names = (order_by,)
    else:
        names = tuple(order_by)

    clauses = []
    seen_id = False
    for name in names:
        descending = name.startswith("-")
        key = name.lstrip("-")
        column = _column(row_type, key)
        clauses.append(column.desc() if descending else column.asc())
        seen_id = seen_id or key == "id"
    if not seen_id:
        clauses.append(row_type.id.asc())
    return clauses


def _to_entity(entity_type: type, row: Base) -> Any:
    child = _CHILDREN.get(entity_type)
    values: dict[str, Any] = {}
    for field in fields(entity_type):
        if child is not None and field.name == child[0]:
            continue
        values[field.name] = getattr(row, field.name)
    if entity_type is Question:
        values["options"] = tuple(
            _to_entity(AnswerOption, option) for option in row.options
        )
    return entity_type(**values)


def _to_row(entity: object) -> Base:
    row_type = _row_type_for(type(entity))
    values = {
        key: getattr(entity, key)
        for key in _column_keys(row_type)
        if key != "id"
    }
    row = row_type(**values)
    child = _CHILDREN.get(type(entity))
    if child is not None:
        name, _ = child
        setattr(row, name, [_to_row(item) for item in getattr(entity, name)])
    return row
