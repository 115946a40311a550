import pytest
from fastapi.testclient import TestClient

from around.main import create_app


FIELDS = {"user": "jack", "message": "sunset at the pier", "lat": "37.77", "lon": "-122.42"}
IMAGE = {"image": ("pier.jpg", b"\xff\xd8fakejpeg", "image/jpeg")}


def test_create_post_with_image(client, search_index, blob_storage):
    resp = client.post("/post", data=FIELDS, files=IMAGE)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/json"
    assert resp.json() == {"Status": "succeed", "Message": "sunset at the pier"}

    assert len(search_index.saved) == 1
    post_id, post = next(iter(search_index.saved.items()))
    assert post.user == "jack"
    assert post.location.lat == pytest.approx(37.77)
    assert post.location.lon == pytest.approx(-122.42)

    # the post id doubles as the object name
    assert ("test-media", post_id) in blob_storage.objects
    data, content_type = blob_storage.objects[("test-media", post_id)]
    assert data == b"\xff\xd8fakejpeg"
    assert content_type == "image/jpeg"
    assert post.media_url == f"https://media.example.com/test-media/{post_id}"


def test_post_id_not_returned(client):
    resp = client.post("/post", data=FIELDS, files=IMAGE)
    assert set(resp.json()) == {"Status", "Message"}


def test_each_post_gets_fresh_id(client, search_index):
    client.post("/post", data=FIELDS, files=IMAGE)
    client.post("/post", data=FIELDS, files=IMAGE)
    assert len(search_index.saved) == 2


def test_missing_image_is_bad_request(client, search_index, blob_storage):
    resp = client.post("/post", data=FIELDS)
    assert resp.status_code == 400
    assert resp.text == "Image is not available"
    assert search_index.saved == {}
    assert blob_storage.objects == {}


def test_image_sent_as_plain_field_is_bad_request(client):
    resp = client.post("/post", data={**FIELDS, "image": "not-a-file"})
    assert resp.status_code == 400
    assert resp.text == "Image is not available"


def test_malformed_coordinates_default_to_zero(client, search_index):
    resp = client.post("/post", data={**FIELDS, "lat": "abc", "lon": ""}, files=IMAGE)
    assert resp.status_code == 200
    post = next(iter(search_index.saved.values()))
    assert post.location.lat == 0.0
    assert post.location.lon == 0.0


def test_upload_failure_is_server_error(client, search_index, blob_storage):
    blob_storage.fail = True
    resp = client.post("/post", data=FIELDS, files=IMAGE)
    assert resp.status_code == 500
    assert resp.text == "Failed to save image to storage"
    assert search_index.saved == {}


def test_index_failure_leaves_orphaned_blob(client, search_index, blob_storage):
    search_index.fail_save = True
    resp = client.post("/post", data=FIELDS, files=IMAGE)
    assert resp.status_code == 500
    assert resp.text == "Failed to save post to index"
    assert len(blob_storage.objects) == 1


def test_error_responses_carry_cors_headers(client):
    resp = client.post("/post", data=FIELDS)
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-allow-headers"] == "Content-Type,Authorization"


def test_image_optional_when_not_required(settings, search_index, blob_storage):
    settings.REQUIRE_IMAGE = False
    app = create_app(settings, search_index=search_index, blob_storage=blob_storage)
    with TestClient(app) as c:
        resp = c.post("/post", data=FIELDS)
    assert resp.status_code == 200
    assert resp.json()["Message"] == "sunset at the pier"
    post = next(iter(search_index.saved.values()))
    assert post.media_url == ""
    assert blob_storage.objects == {}


def test_form_fields_are_documented(client):
    schema = client.get("/openapi.json").json()
    body = schema["paths"]["/post"]["post"]["requestBody"]["content"]
    ref = next(iter(body.values()))["schema"]["$ref"]
    fields = schema["components"]["schemas"][ref.rsplit("/", 1)[-1]]["properties"]
    assert {"user", "message", "lat", "lon"} <= set(fields)
