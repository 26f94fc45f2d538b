import csv

import pytest
from sqlalchemy.exc import OperationalError

from db import Monster
from import_engine import CsvShape, ImportFailure, run_import
from import_engine import importer


def test_unreadable_csv_is_a_server_error():
    huge = "x" * (csv.field_size_limit() + 1)

    with pytest.raises(ImportFailure) as exc:
        run_import(f"Nom,Niveau\n{huge},1\n".encode())

    assert exc.value.status == 500
    body = exc.value.to_dict()
    assert body["error"] == "Erreur serveur"
    assert "field larger than field limit" in body["details"]


def test_database_failure_outside_a_row_is_a_server_error(session, monkeypatch):
    def failing_import(db_session, rows, report):
        db_session.add(Monster(name="Fantôme", type="Mort-vivant"))
        db_session.flush()
        raise OperationalError("DELETE FROM monsters", {}, Exception("disk I/O error"))

    monkeypatch.setitem(importer._IMPORTERS, CsvShape.MONSTERS, failing_import)

    with pytest.raises(ImportFailure) as exc:
        run_import(b"name,type,details_json,sections_json\nGobelin,Humanoide,{},[]\n")

    assert exc.value.status == 500
    assert exc.value.message == "Erreur serveur"
    assert "disk I/O error" in exc.value.details
    assert session.query(Monster).count() == 0
