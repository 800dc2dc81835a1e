import base64

from meritjournal.entries import actions
from meritjournal.version import MERITJOURNAL_VERSION

from .conftest import OTHER_USER_ID, auth_headers, make_token

ENTRIES_URL = "/api/journal-entries/"
PNG_BYTES = b"\x89PNG\r\n\x1a\nimage"


def create_entry(client, **fields):
    body = {
        "title": "Morning run",
        "content": "Ran 5k",
        "entryDate": "2024-03-05T15:30:00Z",
    }
    body.update(fields)
    response = client.post(ENTRIES_URL, json=body, headers=auth_headers())
    assert response.status_code == 201, response.text
    return response


def test_ping_and_version(client):
    assert client.get("/ping").json() == {"status": "ok"}
    assert client.get("/version").json() == {"version": MERITJOURNAL_VERSION}


def test_entries_require_bearer_token(client):
    assert client.get(ENTRIES_URL).status_code == 401
    assert (
        client.get(ENTRIES_URL, headers={"Authorization": "Basic abc"}).status_code
        == 401
    )
    wrong_token = make_token(secret="another-secret-for-wrong-tokens-0123")
    assert (
        client.get(
            ENTRIES_URL, headers={"Authorization": f"Bearer {wrong_token}"}
        ).status_code
        == 401
    )
    assert (
        client.get(
            ENTRIES_URL, headers={"Authorization": f"Bearer {make_token(None)}"}
        ).status_code
        == 401
    )


def test_create_entry(client):
    response = create_entry(
        client,
        tags=["health", "health", " sleep "],
        images=[
            {
                "imageDataBase64": base64.b64encode(PNG_BYTES).decode("ascii"),
                "contentType": "image/png",
                "caption": "view",
            }
        ],
    )

    entry = response.json()
    assert response.headers["location"].endswith(f"{ENTRIES_URL}{entry['id']}")
    assert entry["title"] == "Morning run"
    assert entry["entryDate"].startswith("2024-03-05T00:00:00")
    assert entry["modifiedAt"] is None
    assert entry["tags"] == ["health", "sleep"]
    assert len(entry["images"]) == 1
    assert entry["images"][0]["caption"] == "view"
    assert entry["images"][0]["journalEntryId"] == entry["id"]


def test_create_entry_validation(client):
    headers = auth_headers()
    missing_title = {"content": "Ran 5k", "entryDate": "2024-03-05T00:00:00Z"}
    blank_title = dict(missing_title, title="   ")
    missing_date = {"title": "Morning run", "content": "Ran 5k"}

    for body in (missing_title, blank_title, missing_date):
        response = client.post(ENTRIES_URL, json=body, headers=headers)
        assert response.status_code == 400, body

    assert client.get(ENTRIES_URL, headers=headers).json() == []


def test_get_entry(client):
    entry_id = create_entry(client).json()["id"]

    response = client.get(f"{ENTRIES_URL}{entry_id}", headers=auth_headers())
    assert response.status_code == 200
    assert response.json()["id"] == entry_id

    assert (
        client.get(
            f"{ENTRIES_URL}{entry_id}", headers=auth_headers(OTHER_USER_ID)
        ).status_code
        == 404
    )
    assert client.get(f"{ENTRIES_URL}999", headers=auth_headers()).status_code == 404


def test_update_entry(client):
    entry_id = create_entry(client, tags=["tag1", "tag2"]).json()["id"]
    url = f"{ENTRIES_URL}{entry_id}"
    body = {
        "title": "Renamed",
        "content": "Ran 10k",
        "entryDate": "2024-03-06T00:00:00Z",
    }

    response = client.put(url, json=body, headers=auth_headers())
    assert response.status_code == 200
    assert response.json()["title"] == "Renamed"
    assert response.json()["tags"] == ["tag1", "tag2"]
    assert response.json()["modifiedAt"] is not None

    response = client.put(
        url, json=dict(body, tags=["tag2", "tag3"]), headers=auth_headers()
    )
    assert response.json()["tags"] == ["tag2", "tag3"]

    response = client.put(url, json=dict(body, tags=[]), headers=auth_headers())
    assert response.json()["tags"] == []

    assert (
        client.put(url, json=body, headers=auth_headers(OTHER_USER_ID)).status_code
        == 404
    )
    assert (
        client.put(url, json=dict(body, title=""), headers=auth_headers()).status_code
        == 400
    )


def test_delete_entry(client):
    entry_id = create_entry(client).json()["id"]
    url = f"{ENTRIES_URL}{entry_id}"

    assert client.delete(url, headers=auth_headers(OTHER_USER_ID)).status_code == 404

    response = client.delete(url, headers=auth_headers())
    assert response.status_code == 204
    assert client.get(url, headers=auth_headers()).status_code == 404
    assert client.delete(url, headers=auth_headers()).status_code == 404


def test_list_and_search_by_tag(client):
    health_id = create_entry(client, tags=["health"]).json()["id"]
    create_entry(client, tags=["work"], entryDate="2024-04-01T00:00:00Z")

    entries = client.get(ENTRIES_URL, headers=auth_headers()).json()
    assert len(entries) == 2
    assert entries[0]["tags"] == ["work"]

    tagged = client.get(
        ENTRIES_URL, params={"tag": "health"}, headers=auth_headers()
    ).json()
    assert [entry["id"] for entry in tagged] == [health_id]

    searched = client.get(
        f"{ENTRIES_URL}search", params={"tag": "health"}, headers=auth_headers()
    ).json()
    assert [entry["id"] for entry in searched] == [health_id]

    assert (
        client.get(f"{ENTRIES_URL}search", headers=auth_headers()).status_code == 400
    )
    assert client.get(ENTRIES_URL, headers=auth_headers(OTHER_USER_ID)).json() == []


def test_tags(client):
    create_entry(client, tags=["health", "sleep"])
    create_entry(client, tags=["health"])
    entry_id = create_entry(client, tags=["work"]).json()["id"]
    client.put(
        f"{ENTRIES_URL}{entry_id}",
        json={
            "title": "Work",
            "content": "Nothing",
            "entryDate": "2024-03-05T00:00:00Z",
            "tags": [],
        },
        headers=auth_headers(),
    )

    response = client.get(f"{ENTRIES_URL}tags", headers=auth_headers())
    assert response.status_code == 200
    assert [(tag["name"], tag["entriesCount"]) for tag in response.json()] == [
        ("health", 2),
        ("sleep", 1),
        ("work", 0),
    ]


def test_entry_image(client):
    entry = create_entry(
        client,
        images=[
            {
                "imageDataBase64": base64.b64encode(PNG_BYTES).decode("ascii"),
                "contentType": "image/png",
            }
        ],
    ).json()
    url = f"{ENTRIES_URL}{entry['id']}/images/{entry['images'][0]['id']}"

    response = client.get(url, headers=auth_headers())
    assert response.status_code == 200
    assert response.content == PNG_BYTES
    assert response.headers["content-type"] == "image/png"

    assert client.get(url, headers=auth_headers(OTHER_USER_ID)).status_code == 404


def test_unexpected_errors_are_reported_as_500(client, monkeypatch):
    async def failing_get_journal_entries(*args, **kwargs):
        raise RuntimeError("database is gone")

    monkeypatch.setattr(actions, "get_journal_entries", failing_get_journal_entries)

    assert client.get(ENTRIES_URL, headers=auth_headers()).status_code == 500


def test_collection_is_served_without_trailing_slash(client):
    body = {
        "title": "Morning run",
        "content": "Ran 5k",
        "entryDate": "2024-03-05T15:30:00Z",
    }
    collection_url = ENTRIES_URL.rstrip("/")

    response = client.post(
        collection_url, json=body, headers=auth_headers(), follow_redirects=False
    )
    assert response.status_code == 201
    entry_id = response.json()["id"]
    assert response.headers["location"].endswith(f"{ENTRIES_URL}{entry_id}")

    response = client.get(
        collection_url, headers=auth_headers(), follow_redirects=False
    )
    assert response.status_code == 200
    assert [entry["id"] for entry in response.json()] == [entry_id]

    assert client.get(collection_url, follow_redirects=False).status_code == 401


def test_null_and_blank_tag_names_are_dropped(client):
    entry = create_entry(client, tags=["health", None, "  "]).json()

    assert entry["tags"] == ["health"]
