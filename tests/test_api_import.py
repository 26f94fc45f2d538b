import csv
import io

import pytest

SPELLS = "Nom;Niveau;Ecole;Classes\nBouclier;1;Abjuration;Magicien\n".encode("utf-8")


def _upload(client, content: bytes, filename: str = "sorts.csv", url: str = "/api/v1/import"):
    return client.post(
        url,
        data={"csvFile": (io.BytesIO(content), filename)},
        content_type="multipart/form-data",
    )


def test_missing_file(client):
    resp = client.post("/api/v1/import", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Veuillez sélectionner un fichier CSV"}


def test_empty_upload(client):
    resp = _upload(client, b"")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Veuillez sélectionner un fichier CSV"}


@pytest.mark.parametrize("filename", ["sorts.txt", "sorts.csv.xlsx", "sorts"])
def test_non_csv_extension(client, filename):
    resp = _upload(client, SPELLS, filename)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Le fichier doit être au format CSV"}


def test_uppercase_extension_is_accepted(client):
    resp = _upload(client, SPELLS, "SORTS.CSV")
    assert resp.status_code == 200


def test_header_only_file(client):
    resp = _upload(client, b"Nom,Niveau\n")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Le fichier CSV est vide"}


def test_spell_upload(client):
    resp = _upload(client, SPELLS)
    assert resp.status_code == 200

    body = resp.get_json()
    assert body["success"] is True
    assert body["shape"] == "spells"
    assert body["processed"] == 1
    assert body["errors"] == 0
    assert "details" not in body

    spells = client.get("/api/v1/spells").get_json()
    assert spells["total"] == 1
    assert spells["spells"][0]["classes"] == ["Magicien"]


def test_row_errors_are_reported(client):
    content = b"name,type,details_json,sections_json\nGobelin,,{},[]\nKobold,Humano\xc3\xafde,{},[]\n"
    body = _upload(client, content, "monstres.csv").get_json()

    assert body["success"] is True
    assert body["processed"] == 1
    assert body["errors"] == 1
    assert body["details"] == "Exemples d'erreurs: Gobelin: Type manquant"


def test_update_db_form_action(client):
    resp = _upload(client, SPELLS, url="/update-db")
    assert resp.status_code == 200
    assert resp.get_json()["processed"] == 1


def test_unreadable_upload_returns_server_error(client):
    huge = "x" * (csv.field_size_limit() + 1)
    resp = _upload(client, f"Nom,Niveau\n{huge},1\n".encode())

    assert resp.status_code == 500
    body = resp.get_json()
    assert body["error"] == "Erreur serveur"
    assert "field larger than field limit" in body["details"]
