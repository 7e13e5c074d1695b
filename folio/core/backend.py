"""
Адаптер хранилища: единственная точка, где код знает про MongoDB.

Сервисы контента работают с протоколом Backend (query / increment / ping),
поэтому в тестах вместо облачной БД подставляется фейк.
Все ошибки драйвера заворачиваются в BackendError.
"""
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import PyMongoError

# (поле, по возрастанию)
Ordering = Sequence[tuple[str, bool]]


class BackendError(Exception):
    """Ошибка хранилища: сеть, авторизация, запрос. code — машинный код ошибки."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class Backend(Protocol):
    """Что сервисам нужно от хранилища."""

    def query(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        ordering: Ordering = (),
    ) -> list[dict]:
        """Строки таблицы, подходящие под фильтры. Список/кортеж/множество в фильтре — «одно из»."""
        ...

    def increment(self, table: str, record_id: str, field: str, amount: int = 1) -> bool:
        """Увеличить числовое поле записи. False — записи нет."""
        ...

    def ping(self) -> None:
        ...


def _is_ref(name: str) -> bool:
    return name == "id" or name.endswith("_id")


def _variants(value: Any) -> list:
    """Ссылка может лежать и строкой, и ObjectId — ищем по обоим вариантам."""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return [value, ObjectId(value)]
    return [value]


def _field(name: str) -> str:
    return "_id" if name == "id" else name


def _condition(name: str, value: Any) -> Any:
    """Значение фильтра -> условие Mongo. Коллекция значений -> $in."""
    if isinstance(value, (list, tuple, set, frozenset)):
        values = list(value)
    elif _is_ref(name):
        values = [value]
    else:
        return value
    if _is_ref(name):
        values = [v for item in values for v in _variants(item)]
    return {"$in": values}


def _doc_to_row(doc: Mapping[str, Any]) -> dict:
    """Документ из Mongo -> строка. _id -> id (строка), ObjectId в ссылках -> строка."""
    row = {}
    for key, value in doc.items():
        if key == "_id":
            row["id"] = str(value)
        elif isinstance(value, ObjectId):
            row[key] = str(value)
        else:
            row[key] = value
    return row


class MongoBackend:
    """Backend поверх pymongo: таблица = коллекция, строка = документ."""

    def __init__(self, client: MongoClient, db_name: str):
        self._client = client
        self._db = client[db_name]

    def query(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        ordering: Ordering = (),
    ) -> list[dict]:
        spec = {_field(k): _condition(k, v) for k, v in (filters or {}).items()}
        try:
            cursor = self._db[table].find(spec)
            if ordering:
                cursor = cursor.sort(
                    [(_field(name), ASCENDING if asc else DESCENDING) for name, asc in ordering]
                )
            return [_doc_to_row(doc) for doc in cursor]
        except PyMongoError as exc:
            raise BackendError(str(exc) or f"Query on {table} failed", code=type(exc).__name__) from exc

    def increment(self, table: str, record_id: str, field: str, amount: int = 1) -> bool:
        try:
            result = self._db[table].update_one(
                {"_id": {"$in": _variants(record_id)}},
                {"$inc": {field: amount}},
            )
        except PyMongoError as exc:
            raise BackendError(str(exc) or f"Update on {table} failed", code=type(exc).__name__) from exc
        return result.matched_count > 0

    def ping(self) -> None:
        try:
            self._client.admin.command("ping")
        except PyMongoError as exc:
            raise BackendError(str(exc) or "Ping failed", code=type(exc).__name__) from exc

    def close(self) -> None:
        self._client.close()
