from __future__ import annotations

from collections.abc import Iterator, Mapping
from datetime import datetime
from typing import Any, Protocol

from sqlalchemy import text
from sqlalchemy.engine import Connection

from search_indexer.services.index_config import FIRM_ALIAS, PERSON_ALIAS


class RecordSource(Protocol):
    def id_bounds(self, conn: Connection) -> tuple[int, int] | None: ...

    def fetch_by_id(self, conn: Connection, from_id: int, to_id: int) -> Iterator[dict[str, Any]]: ...

    def fetch_from_date(self, conn: Connection, since: datetime) -> Iterator[dict[str, Any]]: ...


def _format_datetime(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _address_lines(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(line) for line in value if line]


class _SqlSource:
    table: str
    columns: str
    updated_column: str

    def to_document(self, row: Mapping[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    def id_bounds(self, conn: Connection) -> tuple[int, int] | None:
        row = conn.execute(text(f"SELECT MIN(id) AS min_id, MAX(id) AS max_id FROM {self.table}")).mappings().one()
        if row["min_id"] is None:
            return None
        return int(row["min_id"]), int(row["max_id"])

    def _stream(self, conn: Connection, sql: str, params: dict[str, Any]) -> Iterator[dict[str, Any]]:
        result = conn.execution_options(stream_results=True).execute(text(sql), params)
        for row in result.mappings():
            yield self.to_document(row)

    def fetch_by_id(self, conn: Connection, from_id: int, to_id: int) -> Iterator[dict[str, Any]]:
        sql = f"SELECT {self.columns} FROM {self.table} WHERE id >= :from_id AND id < :to_id ORDER BY id"
        return self._stream(conn, sql, {"from_id": from_id, "to_id": to_id})

    def fetch_from_date(self, conn: Connection, since: datetime) -> Iterator[dict[str, Any]]:
        sql = f"SELECT {self.columns} FROM {self.table} WHERE {self.updated_column} >= :since ORDER BY id"
        return self._stream(conn, sql, {"since": since})


class FirmSource(_SqlSource):
    table = "firm"
    columns = (
        "id, firmname, firmnumber, email, phonenumber, addresslines, town, county, postcode, updateddate"
    )
    updated_column = "updateddate"

    def to_document(self, row: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "id": row["id"],
            "firmName": row["firmname"],
            "firmNumber": row["firmnumber"],
            "email": row["email"],
            "phoneNumber": row["phonenumber"],
            "addressLines": _address_lines(row["addresslines"]),
            "town": row["town"],
            "county": row["county"],
            "postcode": row["postcode"],
            "updatedAt": _format_datetime(row["updateddate"]),
        }


class PersonSource(_SqlSource):
    table = "persons"
    columns = (
        "id, uid, caserecnumber, type, firstname, middlenames, surname, companyname, dob, email, "
        "addresslines, town, county, postcode, updateddate"
    )
    updated_column = "updateddate"

    def to_document(self, row: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "id": row["id"],
            "uId": str(row["uid"]) if row["uid"] is not None else None,
            "caseRecNumber": row["caserecnumber"],
            "personType": row["type"],
            "firstname": row["firstname"],
            "middlenames": row["middlenames"],
            "surname": row["surname"],
            "companyName": row["companyname"],
            "dob": _format_datetime(row["dob"]),
            "email": row["email"],
            "addressLines": _address_lines(row["addresslines"]),
            "town": row["town"],
            "county": row["county"],
            "postcode": row["postcode"],
            "updatedAt": _format_datetime(row["updateddate"]),
        }


_SOURCES: dict[str, RecordSource] = {
    FIRM_ALIAS: FirmSource(),
    PERSON_ALIAS: PersonSource(),
}


def source_for(entity_type: str) -> RecordSource:
    try:
        return _SOURCES[entity_type]
    except KeyError:
        raise ValueError(f"unknown entity type: {entity_type}") from None
