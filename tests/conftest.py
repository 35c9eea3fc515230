import pytest

from dailyspend import create_app

PIN = "123456"
ANSWER = "Blue Whale"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "DB_PATH": str(tmp_path / "test.db"),
        "AUTH_COOKIE_SECURE": False,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, username="alice", pin=PIN, answer=ANSWER):
    return client.post("/auth/register", json={
        "username": username,
        "pin": pin,
        "securityAnswer": answer,
    })


def login(client, username="alice", pin=PIN):
    return client.post("/auth/login", json={"username": username, "pin": pin})


@pytest.fixture
def auth_client(client):
    assert register(client).status_code == 201
    assert login(client).status_code == 200
    return client


def category_id(client, name):
    categories = client.get("/categories").get_json()["categories"]
    return next(c["id"] for c in categories if c["name"] == name)
