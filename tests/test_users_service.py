from types import SimpleNamespace

import pytest
from bson import ObjectId

from practice_kit.users_service import User, UserController, create_app


class FakeCollection:
    def __init__(self):
        self.docs = {}

    def find_one(self, query):
        doc = self.docs.get(query["_id"])
        return dict(doc) if doc is not None else None

    def insert_one(self, doc):
        self.docs[doc["_id"]] = dict(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def delete_one(self, query):
        removed = self.docs.pop(query["_id"], None)
        return SimpleNamespace(deleted_count=0 if removed is None else 1)


@pytest.fixture
def collection():
    return FakeCollection()


def test_create_then_get_round_trip(collection):
    controller = UserController(collection)
    result = controller.create_user({"name": "Ann", "gender": "female", "age": 30})
    user = controller.get_user(result["InsertedID"])
    assert (user.name, user.gender, user.age) == ("Ann", "female", 30)
    assert str(user.id) == result["InsertedID"]


def test_create_ignores_client_id(collection):
    controller = UserController(collection)
    given = "a" * 24
    result = controller.create_user({"id": given, "name": "Bo"})
    assert result["InsertedID"] != given
    assert ObjectId.is_valid(result["InsertedID"])


def test_get_invalid_id_raises(collection):
    with pytest.raises(LookupError):
        UserController(collection).get_user("not-an-id")


def test_get_missing_raises(collection):
    with pytest.raises(LookupError):
        UserController(collection).get_user(str(ObjectId()))


def test_delete_removes_user(collection):
    controller = UserController(collection)
    user_id = controller.create_user({"name": "Cy"})["InsertedID"]
    assert controller.delete_user(user_id) == {"DeletedCount": 1}
    with pytest.raises(LookupError):
        controller.get_user(user_id)
    assert controller.delete_user(user_id) == {"DeletedCount": 0}


def test_delete_invalid_id_raises(collection):
    with pytest.raises(LookupError):
        UserController(collection).delete_user("xyz")


def test_user_to_dict_uses_hex_id():
    user = User(name="Di", gender="x", age=4)
    data = user.to_dict()
    assert data == {"id": "0" * 24, "name": "Di", "gender": "x", "age": 4}


def test_from_payload_skips_wrong_types():
    user = User.from_payload({"name": 5, "gender": "m", "age": "old"})
    assert (user.name, user.gender, user.age) == ("", "m", 0)


def test_app_create_get_delete(collection):
    client = create_app(collection).test_client()
    created = client.post("/user", json={"name": "Ed", "gender": "male", "age": 41})
    assert created.status_code == 201
    user_id = created.get_json()["InsertedID"]

    fetched = client.get(f"/user/{user_id}")
    assert fetched.status_code == 200
    assert fetched.get_json() == {"id": user_id, "name": "Ed", "gender": "male", "age": 41}
    assert fetched.data.endswith(b"\n")

    deleted = client.delete(f"/user/{user_id}")
    assert deleted.status_code == 200
    assert deleted.data == b'{"DeletedCount":1}\n'
    assert client.get(f"/user/{user_id}").status_code == 404


def test_app_not_found_for_bad_id(collection):
    client = create_app(collection).test_client()
    assert client.get("/user/bad").status_code == 404
    assert client.delete("/user/bad").status_code == 404


def test_app_create_with_unparsable_body(collection):
    client = create_app(collection).test_client()
    response = client.post("/user", data="not json")
    assert response.status_code == 201
    stored = collection.docs[ObjectId(response.get_json()["InsertedID"])]
    assert stored["name"] == "" and stored["age"] == 0