import pytest

from tests.factories import (
    CharacterClassFactory, CharacterFactory, ClassSpellSlotsFactory,
    MonsterFactory, SpellFactory, SubclassFactory, UserFactory,
)


@pytest.fixture
def user():
    return UserFactory()


@pytest.fixture
def wizard():
    return CharacterClassFactory(slug="magicien", display_name="Magicien")


def test_create_and_list(client, user, wizard):
    resp = client.post(f"/api/v1/users/{user.id}/characters",
                       json={"name": "Elminster", "class_id": wizard.id, "level": 5})
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["class"]["slug"] == "magicien"
    assert created["level"] == 5

    listed = client.get(f"/api/v1/users/{user.id}/characters").get_json()
    assert [c["name"] for c in listed] == ["Elminster"]


@pytest.mark.parametrize("payload", [
    {"class_id": 1},
    {"name": "Sans classe"},
    {"name": "Trop haut", "class_id": 1, "level": 21},
    {"name": "Niveau texte", "class_id": 1, "level": "dix"},
])
def test_create_validation(client, user, wizard, payload):
    resp = client.post(f"/api/v1/users/{user.id}/characters", json=payload)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_create_for_unknown_user(client, wizard):
    resp = client.post("/api/v1/users/999/characters",
                       json={"name": "Personne", "class_id": wizard.id})
    assert resp.status_code == 404


def test_subclass_must_belong_to_class(client, user, wizard):
    druid = CharacterClassFactory(slug="druide", display_name="Druide")
    circle = SubclassFactory(character_class=druid)

    resp = client.post(f"/api/v1/users/{user.id}/characters",
                       json={"name": "Radagast", "class_id": wizard.id, "subclass_id": circle.id})
    assert resp.status_code == 400


def test_characters_are_scoped_to_their_user(client, user):
    other = CharacterFactory()
    assert client.get(f"/api/v1/users/{user.id}/characters/{other.id}").status_code == 404
    assert client.delete(f"/api/v1/users/{user.id}/characters/{other.id}").status_code == 404


def test_update_class_resets_subclass(client, user, wizard):
    school = SubclassFactory(character_class=wizard)
    character = CharacterFactory(user_id=user.id, class_id=wizard.id, subclass_id=school.id)
    cleric = CharacterClassFactory(slug="clerc", display_name="Clerc")

    resp = client.put(f"/api/v1/users/{user.id}/characters/{character.id}",
                      json={"class_id": cleric.id})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["class"]["slug"] == "clerc"
    assert body["subclass"] is None


def test_delete(client, user):
    character = CharacterFactory(user_id=user.id)
    resp = client.delete(f"/api/v1/users/{user.id}/characters/{character.id}")
    assert resp.get_json() == {"deleted": character.id}
    assert client.get(f"/api/v1/users/{user.id}/characters").get_json() == []


def test_slots(client, user, wizard):
    ClassSpellSlotsFactory(class_id=wizard.id, character_level=3, slot_level_1=4, slot_level_2=2)
    character = CharacterFactory(user_id=user.id, class_id=wizard.id, level=3)

    body = client.get(f"/api/v1/users/{user.id}/characters/{character.id}/slots").get_json()
    assert body["slots"] == [4, 2, 0, 0, 0, 0, 0, 0, 0]
    assert body["available_levels"] == [0, 1, 2]


def test_slots_without_progression(client, user):
    character = CharacterFactory(user_id=user.id)
    body = client.get(f"/api/v1/users/{user.id}/characters/{character.id}/slots").get_json()
    assert body == {"slots": None, "available_levels": [0]}


def test_toggle_prepared(client, user):
    character = CharacterFactory(user_id=user.id)
    spell = SpellFactory(name="Bouclier")
    url = f"/api/v1/users/{user.id}/characters/{character.id}/prepared"

    assert client.post(f"{url}/{spell.id}").get_json() == {"spell_id": spell.id, "prepared": True}
    assert [s["name"] for s in client.get(url).get_json()] == ["Bouclier"]
    assert client.get(f"/api/v1/users/{user.id}/characters/{character.id}").get_json()[
        "prepared_spell_ids"] == [spell.id]

    assert client.post(f"{url}/{spell.id}").get_json()["prepared"] is False
    assert client.get(url).get_json() == []
    assert client.post(f"{url}/999").status_code == 404


def test_toggle_favorite(client, user):
    monster = MonsterFactory(name="Tarasque")
    url = f"/api/v1/users/{user.id}/favorites"

    assert client.post(f"{url}/{monster.id}").get_json() == {"monster_id": monster.id, "favorite": True}
    assert [m["name"] for m in client.get(url).get_json()] == ["Tarasque"]

    assert client.post(f"{url}/{monster.id}").get_json()["favorite"] is False
    assert client.get(url).get_json() == []

    assert client.post(f"{url}/999").status_code == 404
    assert client.post(f"/api/v1/users/999/favorites/{monster.id}").status_code == 404
