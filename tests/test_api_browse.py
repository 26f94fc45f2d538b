import json

from tests.factories import (
    CharacterClassFactory, MonsterFactory, SpellFactory, SubclassFactory,
)


def test_spell_listing_filters(client):
    wizard = CharacterClassFactory(slug="magicien", display_name="Magicien")
    cleric = CharacterClassFactory(slug="clerc", display_name="Clerc")
    SpellFactory(name="Lumière", level=0, classes=[cleric, wizard])
    SpellFactory(name="Bouclier", level=1, classes=[wizard])
    SpellFactory(name="Soins", level=1, classes=[cleric])

    body = client.get("/api/v1/spells").get_json()
    assert [s["name"] for s in body["spells"]] == ["Lumière", "Bouclier", "Soins"]

    body = client.get("/api/v1/spells?classes=clerc&levels=1").get_json()
    assert body["total"] == 1
    assert body["spells"][0]["name"] == "Soins"

    body = client.get("/api/v1/spells?q=bouc").get_json()
    assert [s["name"] for s in body["spells"]] == ["Bouclier"]


def test_spell_paging(client):
    for n in range(3):
        SpellFactory(name=f"Sort {n}")

    body = client.get("/api/v1/spells?limit=2&offset=2").get_json()
    assert body["total"] == 3
    assert body["limit"] == 2
    assert [s["name"] for s in body["spells"]] == ["Sort 2"]


def test_spell_detail(client):
    spell = SpellFactory(name="Bouclier")
    assert client.get(f"/api/v1/spells/{spell.id}").get_json()["name"] == "Bouclier"
    assert client.get("/api/v1/spells/999").status_code == 404


def test_classes_and_subclasses(client):
    bard = CharacterClassFactory(slug="barde", display_name="Barde")
    SubclassFactory(character_class=bard, slug="savoir", display_name="Collège du Savoir")

    classes = client.get("/api/v1/classes").get_json()
    assert [c["slug"] for c in classes] == ["barde"]

    body = client.get(f"/api/v1/subclasses?classId={bard.id}").get_json()
    assert [s["display_name"] for s in body["subclasses"]] == ["Collège du Savoir"]
    assert client.get("/api/v1/subclasses").get_json() == {"subclasses": []}


def test_monster_listing_and_detail(client):
    MonsterFactory(name="Gobelin", type="Humanoïde")
    dragon = MonsterFactory(
        name="Dragon rouge",
        type="Dragon",
        sections_json=json.dumps([{"title": "Actions", "entries": [{"name": "Morsure", "text": "..."}, 3]}]),
        links_json=json.dumps([{"href": "/x"}, "bad"]),
        details_json=json.dumps({"FP": 17, "Langues": None}),
    )

    body = client.get("/api/v1/monsters?types=Dragon").get_json()
    assert body["total"] == 1

    assert client.get("/api/v1/monsters/types").get_json() == ["Dragon", "Humanoïde"]

    detail = client.get(f"/api/v1/monsters/{dragon.id}").get_json()
    assert detail["sections"] == [{
        "title": "Actions",
        "entries": [{"kind": "paragraph", "name": "Morsure", "text": "..."}],
    }]
    assert detail["links"] == [{"href": "/x", "text": ""}]
    assert detail["details"] == {"FP": "17", "Langues": ""}
    assert client.get("/api/v1/monsters/999").status_code == 404


def test_unknown_route_is_json(client):
    resp = client.get("/api/v1/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "not found"}
