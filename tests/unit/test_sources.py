from datetime import datetime

import pytest

sqlalchemy = pytest.importorskip("sqlalchemy")

from search_indexer.services.sources import FirmSource, PersonSource, source_for


@pytest.fixture()
def conn():
    engine = sqlalchemy.create_engine("sqlite://")
    with engine.connect() as connection:
        connection.execute(
            sqlalchemy.text(
                "CREATE TABLE firm (id INTEGER PRIMARY KEY, firmname TEXT, firmnumber TEXT, email TEXT, "
                "phonenumber TEXT, addresslines TEXT, town TEXT, county TEXT, postcode TEXT, updateddate TIMESTAMP)"
            )
        )
        rows = [
            (3, "Gamma LLP", "F3", "2026-09-01 00:00:00"),
            (1, "Alpha & Co", "F1", "2026-01-01 00:00:00"),
            (2, "Beta Legal", "F2", "2026-10-05 00:00:00"),
        ]
        for row_id, name, number, updated in rows:
            connection.execute(
                sqlalchemy.text(
                    "INSERT INTO firm (id, firmname, firmnumber, email, phonenumber, addresslines, town, county, "
                    "postcode, updateddate) VALUES (:id, :name, :number, NULL, NULL, '1 High St', 'Leeds', NULL, "
                    "'LS1 1AA', :updated)"
                ),
                {"id": row_id, "name": name, "number": number, "updated": updated},
            )
        yield connection
    engine.dispose()


def test_id_bounds(conn):
    assert FirmSource().id_bounds(conn) == (1, 3)


def test_id_bounds_empty_table(conn):
    conn.execute(sqlalchemy.text("DELETE FROM firm"))
    assert FirmSource().id_bounds(conn) is None


def test_fetch_by_id_is_half_open_and_ordered(conn):
    docs = list(FirmSource().fetch_by_id(conn, 1, 3))
    assert [doc["id"] for doc in docs] == [1, 2]
    assert docs[0]["firmName"] == "Alpha & Co"
    assert docs[0]["addressLines"] == ["1 High St"]
    assert docs[0]["postcode"] == "LS1 1AA"


def test_fetch_from_date_includes_boundary(conn):
    docs = list(FirmSource().fetch_from_date(conn, datetime(2026, 9, 1)))
    assert [doc["id"] for doc in docs] == [2, 3]


def test_source_for_known_and_unknown_types():
    assert isinstance(source_for("firm"), FirmSource)
    assert isinstance(source_for("person"), PersonSource)
    with pytest.raises(ValueError, match="unknown entity type"):
        source_for("deputy")


def test_person_document_shape():
    doc = PersonSource().to_document(
        {
            "id": 9,
            "uid": 700000000001,
            "caserecnumber": "12345678",
            "type": "Person",
            "firstname": "Ada",
            "middlenames": None,
            "surname": "Lovelace",
            "companyname": None,
            "dob": None,
            "email": "ada@example.com",
            "addresslines": ["1 Analytical Way", ""],
            "town": "London",
            "county": None,
            "postcode": "N1 1AA",
            "updateddate": datetime(2026, 10, 1, 9, 30),
        }
    )
    assert doc["uId"] == "700000000001"
    assert doc["addressLines"] == ["1 Analytical Way"]
    assert doc["updatedAt"] == "2026-10-01T09:30:00"
