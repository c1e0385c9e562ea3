# tests/test_posts.py
import pytest
from httpx import AsyncClient

from conftest import signup_and_login

pytestmark = pytest.mark.anyio


async def _create_post(client: AsyncClient, headers, title="Hello", content="First post"):
    r = await client.post("/api/posts", json={"title": title, "content": content}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["post"]


# --- Create ---
async def test_create_requires_auth(client: AsyncClient):
    r = await client.post("/api/posts", json={"title": "Hi", "content": "x"})
    assert r.status_code == 401
    assert r.json()["success"] is False


async def test_create_sets_author_to_caller(client: AsyncClient):
    user, headers = await signup_and_login(client)
    post = await _create_post(client, headers)

    assert post["title"] == "Hello"
    assert post["content"] == "First post"
    assert post["author"] == {"id": user["id"], "name": user["name"], "email": user["email"]}
    assert post["created_at"] and post["updated_at"]


async def test_create_ignores_client_supplied_author(client: AsyncClient):
    user_a, headers_a = await signup_and_login(client)
    user_b, _ = await signup_and_login(client)

    r = await client.post(
        "/api/posts",
        json={"title": "Hi", "content": "x", "author": user_b["id"]},
        headers=headers_a,
    )
    assert r.status_code == 201
    assert r.json()["post"]["author"]["id"] == user_a["id"]


@pytest.mark.parametrize("body", [
    {"content": "no title"},
    {"title": "no content"},
    {"title": "x" * 26, "content": "too long title"},
    {"title": "   ", "content": "blank title"},
])
async def test_create_validation(client: AsyncClient, body):
    _, headers = await signup_and_login(client)
    r = await client.post("/api/posts", json=body, headers=headers)
    assert r.status_code == 400, r.text
    assert r.json()["success"] is False


# --- Read ---
async def test_read_single_post(client: AsyncClient):
    _, headers = await signup_and_login(client)
    post = await _create_post(client, headers)

    r = await client.get(f"/api/post/{post['id']}")
    assert r.status_code == 200
    assert r.json()["post"]["id"] == post["id"]


async def test_read_missing_post(client: AsyncClient):
    r = await client.get("/api/post/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Post not found"}


# --- Update / Delete ownership ---
async def test_owner_can_update(client: AsyncClient):
    user, headers = await signup_and_login(client)
    post = await _create_post(client, headers)

    r = await client.put(f"/api/posts/{post['id']}", json={"title": "Edited"}, headers=headers)
    assert r.status_code == 200, r.text
    updated = r.json()["post"]
    assert updated["title"] == "Edited"
    assert updated["content"] == post["content"]
    assert updated["author"]["id"] == user["id"]
    assert updated["updated_at"] >= post["updated_at"]


async def test_update_cannot_change_author(client: AsyncClient):
    user_a, headers_a = await signup_and_login(client)
    user_b, _ = await signup_and_login(client)
    post = await _create_post(client, headers_a)

    r = await client.put(
        f"/api/posts/{post['id']}",
        json={"content": "new body", "author": user_b["id"], "author_id": user_b["id"]},
        headers=headers_a,
    )
    assert r.status_code == 200
    assert r.json()["post"]["author"]["id"] == user_a["id"]


async def test_update_with_nothing_to_change(client: AsyncClient):
    _, headers = await signup_and_login(client)
    post = await _create_post(client, headers)

    r = await client.put(f"/api/posts/{post['id']}", json={}, headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Nothing to update"


async def test_other_user_cannot_update_or_delete(client: AsyncClient):
    _, headers_a = await signup_and_login(client)
    _, headers_b = await signup_and_login(client)
    post = await _create_post(client, headers_a)

    r = await client.put(f"/api/posts/{post['id']}", json={"title": "Hacked"}, headers=headers_b)
    assert r.status_code == 403
    assert r.json()["success"] is False

    r = await client.delete(f"/api/posts/{post['id']}", headers=headers_b)
    assert r.status_code == 403

    # 沒有任何變動
    r = await client.get(f"/api/post/{post['id']}")
    assert r.status_code == 200
    assert r.json()["post"]["title"] == post["title"]


async def test_update_and_delete_require_auth(client: AsyncClient):
    _, headers = await signup_and_login(client)
    post = await _create_post(client, headers)

    r = await client.put(f"/api/posts/{post['id']}", json={"title": "x"})
    assert r.status_code == 401
    r = await client.delete(f"/api/posts/{post['id']}")
    assert r.status_code == 401


async def test_auth_checked_before_body_validation(client: AsyncClient):
    _, headers = await signup_and_login(client)
    post = await _create_post(client, headers)

    r = await client.put(f"/api/posts/{post['id']}", json={"title": "x" * 100})
    assert r.status_code == 401


async def test_update_missing_post(client: AsyncClient):
    _, headers = await signup_and_login(client)
    r = await client.put("/api/posts/does-not-exist", json={"title": "x"}, headers=headers)
    assert r.status_code == 404


async def test_owner_can_delete(client: AsyncClient):
    _, headers = await signup_and_login(client)
    post = await _create_post(client, headers)

    r = await client.delete(f"/api/posts/{post['id']}", headers=headers)
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Post deleted"}

    r = await client.get(f"/api/post/{post['id']}")
    assert r.status_code == 404

    r = await client.delete(f"/api/posts/{post['id']}", headers=headers)
    assert r.status_code == 404
