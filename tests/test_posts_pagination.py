# tests/test_posts_pagination.py
import pytest
from httpx import AsyncClient

from conftest import signup_and_login

pytestmark = pytest.mark.anyio


async def _seed(client: AsyncClient, headers, n: int):
    ids = []
    for i in range(n):
        r = await client.post(
            "/api/posts",
            json={"title": f"Post {i:02d}", "content": f"body {i}"},
            headers=headers,
        )
        assert r.status_code == 201, r.text
        ids.append(r.json()["post"]["id"])
    return ids


async def _page(client: AsyncClient, **params):
    r = await client.get("/api/post", params=params)
    assert r.status_code == 200, r.text
    return r.json()


async def test_second_page_is_11th_to_20th_most_recent(client: AsyncClient):
    user, headers = await signup_and_login(client)
    created = await _seed(client, headers, 25)
    newest_first = list(reversed(created))

    p1 = await _page(client, page=1, limit=10, sort="-createdAt", author=user["id"])
    p2 = await _page(client, page=2, limit=10, sort="-createdAt", author=user["id"])
    p3 = await _page(client, page=3, limit=10, sort="-createdAt", author=user["id"])

    ids1 = [p["id"] for p in p1["posts"]]
    ids2 = [p["id"] for p in p2["posts"]]
    ids3 = [p["id"] for p in p3["posts"]]

    assert ids1 == newest_first[:10]
    assert ids2 == newest_first[10:20]
    assert ids3 == newest_first[20:]
    assert not set(ids1) & set(ids2)

    assert p2["page"] == 2 and p2["limit"] == 10
    assert p2["total"] == 25
    assert p2["total_pages"] == 3
    assert all(p["author"]["id"] == user["id"] for p in p2["posts"])


async def test_sort_ascending_by_title(client: AsyncClient):
    user, headers = await signup_and_login(client)
    await _seed(client, headers, 3)

    data = await _page(client, sort="title", author=user["id"])
    titles = [p["title"] for p in data["posts"]]
    assert titles == sorted(titles)

    data = await _page(client, sort="-title", author=user["id"])
    assert [p["title"] for p in data["posts"]] == sorted(titles, reverse=True)


async def test_default_listing(client: AsyncClient):
    _, headers = await signup_and_login(client)
    await _seed(client, headers, 2)

    data = await _page(client)
    assert data["success"] is True
    assert data["page"] == 1 and data["limit"] == 10
    assert data["total"] >= 2
    stamps = [p["created_at"] for p in data["posts"]]
    assert stamps == sorted(stamps, reverse=True)


async def test_page_past_end_is_empty(client: AsyncClient):
    user, headers = await signup_and_login(client)
    await _seed(client, headers, 1)

    data = await _page(client, page=5, author=user["id"])
    assert data["posts"] == []
    assert data["total"] == 1


async def test_unknown_author_is_empty(client: AsyncClient):
    data = await _page(client, author="nobody")
    assert data["posts"] == [] and data["total"] == 0 and data["total_pages"] == 0


@pytest.mark.parametrize("params", [
    {"page": 0},
    {"limit": 0},
    {"limit": 101},
    {"page": "abc"},
    {"sort": "-password_hash"},
])
async def test_invalid_listing_params(client: AsyncClient, params):
    r = await client.get("/api/post", params=params)
    assert r.status_code == 400, r.text
    assert r.json()["success"] is False
