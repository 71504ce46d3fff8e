import httpx
import pytest
from bson import ObjectId

from recipe_app.services.translate import RecipeTranslator
from recipe_app.services.webhook import WebhookClient

from conftest import OTHER_USER_ID

SPANISH = {
    "title": "Arroz con ajo",
    "ingredients": ["1 taza de arroz", "2 dientes de ajo"],
    "instructions": ["Cocinar el arroz.", "Agregar el ajo."],
}


def translation_webhook(app, handler) -> list:
    calls = []

    def counting(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    client = WebhookClient("https://n8n.example.com/webhook/translate", transport=httpx.MockTransport(counting))
    app.state.translator = RecipeTranslator(client)
    return calls


# ------------------------------
# list / detail
# ------------------------------

def test_list_newest_first_with_pagination(client, store):
    old = store.seed(title="Old", age_minutes=30)
    new = store.seed(title="New", age_minutes=1)
    store.seed(user_id=OTHER_USER_ID, title="Not mine")

    r = client.get("/recipes", params={"page": 1, "limit": 1})
    assert r.status_code == 200
    body = r.json()
    assert [x["id"] for x in body["recipes"]] == [new]
    assert body["pagination"] == {"page": 1, "limit": 1, "totalCount": 2, "totalPages": 2, "hasMore": True}

    body = client.get("/recipes", params={"page": 2, "limit": 1}).json()
    assert [x["id"] for x in body["recipes"]] == [old]
    assert body["pagination"]["hasMore"] is False


def test_list_favorites_filter(client, store):
    store.seed(title="Plain")
    fav = store.seed(title="Fav", isFavorite=True)
    body = client.get("/recipes", params={"filter": "favorites"}).json()
    assert [x["id"] for x in body["recipes"]] == [fav]


def test_list_degrades_to_empty_page(client, store):
    store.seed()
    store.fail_reads = True
    r = client.get("/recipes")
    assert r.status_code == 200
    assert r.json()["recipes"] == []
    assert r.json()["pagination"]["totalCount"] == 0


def test_list_without_store(app, client):
    app.state.store = None
    r = client.get("/recipes")
    assert r.status_code == 200
    assert r.json()["recipes"] == []


def test_list_rejects_bad_paging(client):
    assert client.get("/recipes", params={"page": 0}).status_code == 422
    assert client.get("/recipes", params={"limit": 500}).status_code == 422


def test_get_recipe(client, store):
    rid = store.seed(title="Garlic Rice")
    r = client.get(f"/recipes/{rid}")
    assert r.status_code == 200
    assert r.json()["id"] == rid
    assert r.json()["title"] == "Garlic Rice"


def test_get_other_users_recipe_is_404(client, store):
    rid = store.seed(user_id=OTHER_USER_ID)
    assert client.get(f"/recipes/{rid}").status_code == 404


def test_get_malformed_id_is_400(client):
    assert client.get("/recipes/not-an-object-id").status_code == 400


def test_get_without_store_is_503(app, client):
    app.state.store = None
    assert client.get(f"/recipes/{ObjectId()}").status_code == 503


# ------------------------------
# save / favorite
# ------------------------------

def test_save_marks_recipe(client, store):
    rid = store.seed()
    r = client.post("/recipes/save", json={"recipeId": rid})
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Recipe saved successfully"}
    assert store.recipes[rid]["isSaved"] is True
    assert store.recipes[rid]["savedAt"] is not None


def test_save_requires_id(client):
    r = client.post("/recipes/save", json={})
    assert r.status_code == 400
    assert r.json()["detail"] == "Recipe ID is required"


def test_save_other_users_recipe_is_404(client, store):
    rid = store.seed(user_id=OTHER_USER_ID)
    assert client.post("/recipes/save", json={"recipeId": rid}).status_code == 404
    assert store.recipes[rid]["isSaved"] is False


def test_toggle_twice_restores_state(client, store):
    rid = store.seed()

    first = client.post("/recipes/toggle-favorite", json={"recipeId": rid}).json()
    assert first["isFavorite"] is True
    assert first["message"] == "Added to favorites"

    second = client.post("/recipes/toggle-favorite", json={"recipeId": rid}).json()
    assert second["isFavorite"] is False
    assert second["message"] == "Removed from favorites"
    assert store.recipes[rid]["isFavorite"] is False


def test_toggle_other_users_recipe_is_404(client, store, as_user):
    rid = store.seed()
    as_user(OTHER_USER_ID)
    r = client.post("/recipes/toggle-favorite", json={"recipeId": rid})
    assert r.status_code == 404
    assert store.recipes[rid]["isFavorite"] is False


def test_toggle_unknown_id_is_404(client):
    assert client.post("/recipes/toggle-favorite", json={"recipeId": str(ObjectId())}).status_code == 404


@pytest.mark.parametrize("rid", [None, "", "xyz"])
def test_toggle_bad_id_is_400(client, rid):
    assert client.post("/recipes/toggle-favorite", json={"recipeId": rid}).status_code == 400


# ------------------------------
# translate
# ------------------------------

def test_translate_stores_and_returns_translation(app, client, store):
    rid = store.seed()
    calls = translation_webhook(app, lambda request: httpx.Response(200, json={"translation": SPANISH}))

    r = client.post("/recipes/translate", json={"recipeId": rid, "language": "spanish"})
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "Arroz con ajo"
    assert body["currentLanguage"] == "spanish"
    assert body["originalLanguage"] == "english"
    assert body["translations"]["spanish"]["ingredients"] == SPANISH["ingredients"]
    assert len(calls) == 1

    stored = store.recipes[rid]
    assert stored["translations"]["spanish"]["title"] == "Arroz con ajo"
    # source fields are untouched
    assert stored["title"] == "Garlic Rice"


def test_translate_cache_hit_skips_webhook(app, client, store):
    rid = store.seed(translations={"spanish": SPANISH})
    calls = translation_webhook(app, lambda request: httpx.Response(500))

    r = client.post("/recipes/translate", json={"recipeId": rid, "language": "spanish"})
    assert r.status_code == 200
    assert r.json()["title"] == "Arroz con ajo"
    assert calls == []


def test_translations_accumulate(app, client, store):
    rid = store.seed(translations={"spanish": SPANISH})
    french = {"title": "Riz à l'ail", "ingredients": ["riz", "ail"], "instructions": ["Cuire."]}
    translation_webhook(app, lambda request: httpx.Response(200, json=[{"success": True, "translation": french}]))

    body = client.post("/recipes/translate", json={"recipeId": rid, "language": "french"}).json()
    assert set(body["translations"]) == {"spanish", "french"}
    assert set(store.recipes[rid]["translations"]) == {"spanish", "french"}


def test_translate_not_configured_is_503(client, store):
    rid = store.seed()
    r = client.post("/recipes/translate", json={"recipeId": rid, "language": "spanish"})
    assert r.status_code == 503
    assert "not configured" in r.json()["detail"]


def test_translate_upstream_failure_is_502(app, client, store):
    rid = store.seed()
    translation_webhook(app, lambda request: httpx.Response(200, text="not json"))
    r = client.post("/recipes/translate", json={"recipeId": rid, "language": "spanish"})
    assert r.status_code == 502
    assert store.recipes[rid]["translations"] == {}


@pytest.mark.parametrize("language", [None, "", "  ", "es.mx", "$where"])
def test_translate_rejects_bad_language(client, store, language):
    rid = store.seed()
    r = client.post("/recipes/translate", json={"recipeId": rid, "language": language})
    assert r.status_code == 400


def test_translate_other_users_recipe_is_404(app, client, store):
    rid = store.seed(user_id=OTHER_USER_ID)
    calls = translation_webhook(app, lambda request: httpx.Response(200, json={"translation": SPANISH}))
    r = client.post("/recipes/translate", json={"recipeId": rid, "language": "spanish"})
    assert r.status_code == 404
    assert calls == []
