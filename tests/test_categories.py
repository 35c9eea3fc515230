from dailyspend import categories

from .conftest import category_id, login, register


def test_list_default_categories_ordered(auth_client):
    resp = auth_client.get("/categories")
    assert resp.status_code == 200
    cats = resp.get_json()["categories"]
    assert [(c["type"], c["name"]) for c in cats] == sorted((c["type"], c["name"]) for c in cats)
    assert cats[0]["type"] == "essential"


def test_create_category(auth_client):
    parent = category_id(auth_client, "Essential")
    resp = auth_client.post("/categories", json={"name": "Rent", "type": "essential", "parentId": parent})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True

    cats = auth_client.get("/categories").get_json()["categories"]
    rent = next(c for c in cats if c["id"] == body["categoryId"])
    assert rent["name"] == "Rent"
    assert rent["parent_id"] == parent


def test_create_top_level_category_with_string_parent(auth_client):
    parent = category_id(auth_client, "Non-Essential")
    resp = auth_client.post("/categories", json={"name": "Games", "type": "non-essential", "parentId": str(parent)})
    assert resp.status_code == 201

    resp = auth_client.post("/categories", json={"name": "Savings", "type": "essential"})
    assert resp.status_code == 201


def test_create_category_validation(auth_client):
    assert auth_client.post("/categories", json={"type": "essential"}).status_code == 400
    assert auth_client.post("/categories", json={"name": "X"}).status_code == 400

    resp = auth_client.post("/categories", json={"name": "X", "type": "luxury"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Type must be essential or non-essential"

    resp = auth_client.post("/categories", json={"name": "X", "type": "essential", "parentId": "abc"})
    assert resp.status_code == 400


def test_parent_must_belong_to_user(client):
    register(client, username="alice")
    register(client, username="bob")
    login(client, username="alice")
    alice_food = category_id(client, "Food")

    client.post("/auth/logout")
    login(client, username="bob")
    resp = client.post("/categories", json={"name": "X", "type": "essential", "parentId": alice_food})
    assert resp.status_code == 404


def test_categories_are_scoped_per_user(client):
    register(client, username="alice")
    register(client, username="bob")
    login(client, username="alice")
    client.post("/categories", json={"name": "Alice Only", "type": "essential"})

    client.post("/auth/logout")
    login(client, username="bob")
    names = [c["name"] for c in client.get("/categories").get_json()["categories"]]
    assert "Alice Only" not in names
    assert len(names) == 7


def test_get_category_helper(app, auth_client):
    with app.app_context():
        cats = categories.get_categories(1)
        assert len(cats) == 7
        assert categories.get_category(1, cats[0].id).name == cats[0].name
        assert categories.get_category(2, cats[0].id) is None
