import json

import pytest

from db import CharacterPreparedSpell, Monster, Spell, SpellClass, UserFavoriteMonster
from tests.factories import (
    CharacterClassFactory, CharacterFactory, FavoriteFactory, MonsterFactory,
    SpellFactory,
)


# ── Monsters ───────────────────────────────────────────────────────────

def test_create_monster(client, session):
    resp = client.post("/api/v1/monsters", json={
        "name": "Gobelin",
        "type": "Humanoïde",
        "hp": "7 (2d6)",
        "int": "10",
        "details_json": {"Langues": "Commun"},
        "sections_json": "{not json",
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["abilities"]["int"] == 10
    assert body["details"] == {"Langues": "Commun"}
    assert body["sections"] == []

    goblin = session.query(Monster).one()
    assert goblin.sections_json == "[]"
    assert goblin.links_json == "[]"


@pytest.mark.parametrize("payload", [
    {"type": "Dragon"},
    {"name": "Sans type"},
    {"name": "Gobelin", "type": "Humanoïde", "str": "fort"},
])
def test_create_monster_validation(client, payload):
    resp = client.post("/api/v1/monsters", json=payload)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_monster_names_stay_unique(client):
    MonsterFactory(name="Gobelin")
    kobold = MonsterFactory(name="Kobold")

    assert client.post("/api/v1/monsters", json={"name": "Gobelin", "type": "X"}).status_code == 400
    assert client.put(f"/api/v1/monsters/{kobold.id}", json={"name": "Gobelin"}).status_code == 400
    assert client.put(f"/api/v1/monsters/{kobold.id}", json={"name": "Kobold"}).status_code == 200


def test_update_monster(client, session):
    goblin = MonsterFactory(name="Gobelin", type="Humanoïde", hp="7")

    resp = client.put(f"/api/v1/monsters/{goblin.id}", json={
        "hp": "12 (3d6)",
        "links_json": [{"href": "/gobelin", "text": "Gobelin"}],
    })
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["hp"] == "12 (3d6)"
    assert body["type"] == "Humanoïde"
    assert body["links"] == [{"href": "/gobelin", "text": "Gobelin"}]

    session.expire_all()
    assert json.loads(session.get(Monster, goblin.id).links_json)[0]["href"] == "/gobelin"
    assert client.put("/api/v1/monsters/999", json={"hp": "1"}).status_code == 404


def test_delete_monster_drops_favorites(client, session):
    favorite = FavoriteFactory()
    monster_id = favorite.monster.id

    assert client.delete(f"/api/v1/monsters/{monster_id}").get_json() == {"deleted": monster_id}
    assert client.delete(f"/api/v1/monsters/{monster_id}").status_code == 404

    session.expire_all()
    assert session.query(Monster).count() == 0
    assert session.query(UserFavoriteMonster).count() == 0


# ── Spells ─────────────────────────────────────────────────────────────

def test_create_spell_links_resolved_classes(client, session):
    resp = client.post("/api/v1/spells", json={
        "name": "Bouclier",
        "level": 1,
        "school": "Abjuration",
        "ritual": False,
        "range_value": "18",
        "description": "Effet :\n• Barrière",
        "classes": ["Magicien", "Sorcier (Occultiste)", "Nécromancien"],
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["classes"] == ["Magicien", "Occultiste"]
    assert body["range_value"] == 18
    assert body["description"] == "Effet :\n- Barrière"
    assert session.query(SpellClass).count() == 2


@pytest.mark.parametrize("payload", [
    {"level": 1},
    {"name": "Trop haut", "level": 10},
    {"name": "Rituel texte", "ritual": "Oui"},
    {"name": "Classes", "classes": 3},
])
def test_create_spell_validation(client, payload):
    assert client.post("/api/v1/spells", json=payload).status_code == 400


def test_update_spell_replaces_classes(client, session):
    wizard = CharacterClassFactory(slug="magicien", display_name="Magicien")
    spell = SpellFactory(name="Bouclier", classes=[wizard])
    CharacterClassFactory(slug="barde", display_name="Barde")

    resp = client.put(f"/api/v1/spells/{spell.id}", json={
        "level": 2,
        "classes": "Barde, Rôdeur",
    })
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["level"] == 2
    assert body["name"] == "Bouclier"
    assert body["classes"] == ["Barde", "Rôdeur"]


def test_update_spell_without_classes_keeps_links(client):
    wizard = CharacterClassFactory(slug="magicien", display_name="Magicien")
    spell = SpellFactory(name="Bouclier", classes=[wizard])

    body = client.put(f"/api/v1/spells/{spell.id}", json={"concentration": True}).get_json()
    assert body["concentration"] is True
    assert body["classes"] == ["Magicien"]
    assert client.put("/api/v1/spells/999", json={"level": 1}).status_code == 404


def test_delete_spell_drops_prepared_entries(client, session):
    spell = SpellFactory()
    character = CharacterFactory()
    session.add(CharacterPreparedSpell(character_id=character.id, spell_id=spell.id))
    session.commit()

    assert client.delete(f"/api/v1/spells/{spell.id}").get_json() == {"deleted": spell.id}

    session.expire_all()
    assert session.query(Spell).count() == 0
    assert session.query(CharacterPreparedSpell).count() == 0


def test_levels_for_classes(client):
    wizard = CharacterClassFactory(slug="magicien", display_name="Magicien")
    cleric = CharacterClassFactory(slug="clerc", display_name="Clerc")
    SpellFactory(level=0, classes=[wizard, cleric])
    SpellFactory(level=3, classes=[wizard])
    SpellFactory(level=3, classes=[wizard])
    SpellFactory(level=5, classes=[cleric])

    assert client.get("/api/v1/spells/levels?classes=magicien").get_json() == [0, 3]
    assert client.get("/api/v1/spells/levels?classes=magicien,clerc").get_json() == [0, 3, 5]
    assert client.get("/api/v1/spells/levels").get_json() == list(range(10))
    assert client.get("/api/v1/spells/levels?classes=inconnu").get_json() == list(range(10))
