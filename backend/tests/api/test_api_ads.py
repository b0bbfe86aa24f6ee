"""HTTP tests for the classified ad endpoints."""

from __future__ import annotations

import pytest

from marketplace.core.extensions import get_token_manager
from marketplace.services._shared.ports.ad_directory import MAX_LIMIT, MAX_PAGE
from tests.factories.ad import AdFactory
from tests.factories.user import UserFactory
from tests.helpers.assertions import assert_json_keys, assert_problem
from tests.helpers.http import bearer, build_url

BASE = "/api/v1/ads"

VALID_AD = {
    "title": "Bicycle",
    "description": "Barely used",
    "image_url": "https://img.example.com/bike.jpg",
    "price": 150.5,
}


@pytest.fixture()
def other_header(app, session):
    """``Authorization`` header for a second, unrelated user."""
    other = UserFactory()
    token = get_token_manager().new_access_token(other.id, app.config["ACCESS_TOKEN_TTL"])
    return bearer(token)


# --------------------------------------------------------------------------- #
# Create
# --------------------------------------------------------------------------- #


def test_create_ad(client, user, auth_header):
    resp = client.post(BASE, json=VALID_AD, headers=auth_header)

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert_json_keys(data, {"id", "user_id", "title", "description", "image_url", "price"})
    assert data["user_id"] == user.id
    assert data["title"] == "Bicycle"
    assert data["price"] == 150.5


def test_create_ad_requires_auth(client):
    assert_problem(client.post(BASE, json=VALID_AD), 401, "unauthorized")


def test_create_ad_only_title_required(client, auth_header):
    resp = client.post(BASE, json={"title": "Lamp"}, headers=auth_header)

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["description"] == ""
    assert data["image_url"] == ""
    assert data["price"] == 0


@pytest.mark.parametrize(
    ("override", "field"),
    [
        ({"title": ""}, "title"),
        ({"title": "t" * 101}, "title"),
        ({"description": "d" * 1001}, "description"),
        ({"image_url": "not a url"}, "image_url"),
        ({"price": -1}, "price"),
    ],
)
def test_create_ad_rejects_invalid_fields(client, auth_header, override, field):
    resp = client.post(BASE, json={**VALID_AD, **override}, headers=auth_header)
    body = assert_problem(resp, 400, "invalid_input")
    assert body["details"]["field"] == field


def test_create_ad_wrong_type_is_validation_error(client, auth_header):
    resp = client.post(BASE, json={**VALID_AD, "price": "cheap"}, headers=auth_header)
    body = assert_problem(resp, 400, "validation_error")
    assert "price" in body["details"]["errors"]


# --------------------------------------------------------------------------- #
# Read
# --------------------------------------------------------------------------- #


def test_get_ad_anonymous_has_no_owner_flag(client, session):
    ad = AdFactory()

    resp = client.get(f"{BASE}/{ad.id}")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["author_login"] == ad.owner.login
    assert "is_owner" not in data


def test_get_ad_flags_owner(client, user, auth_header, other_header):
    ad = AdFactory(owner=user)

    mine = client.get(f"{BASE}/{ad.id}", headers=auth_header).get_json()["data"]
    theirs = client.get(f"{BASE}/{ad.id}", headers=other_header).get_json()["data"]

    assert mine["is_owner"] is True
    assert theirs["is_owner"] is False


def test_get_ad_with_invalid_token_is_anonymous(client, session):
    ad = AdFactory()

    resp = client.get(f"{BASE}/{ad.id}", headers=bearer("garbage"))

    assert resp.status_code == 200
    assert "is_owner" not in resp.get_json()["data"]


def test_get_missing_ad(client, session):
    assert_problem(client.get(f"{BASE}/999999"), 404, "not_found")


# --------------------------------------------------------------------------- #
# List
# --------------------------------------------------------------------------- #


def test_list_ads_defaults(client, session):
    AdFactory.create_batch(12)

    resp = client.get(BASE)

    assert resp.status_code == 200
    body = resp.get_json()
    assert len(body["data"]) == 10
    assert body["meta"] == {"page": 1, "limit": 10, "count": 10}
    ids = [item["id"] for item in body["data"]]
    assert ids == sorted(ids, reverse=True)


def test_list_ads_price_window_ascending(client, session):
    for price in (5, 10, 20, 30, 40):
        AdFactory(price=price)

    url = build_url(BASE, sort_by="price", sort_dir="asc", min_price=10, max_price=30)
    body = client.get(url).get_json()

    assert [item["price"] for item in body["data"]] == [10, 20, 30]
    assert body["meta"]["count"] == 3


def test_list_ads_second_page(client, session):
    AdFactory.create_batch(5)

    body = client.get(build_url(BASE, page=2, limit=3)).get_json()

    assert len(body["data"]) == 2
    assert body["meta"] == {"page": 2, "limit": 3, "count": 2}


@pytest.mark.parametrize(
    ("param", "value"),
    [
        ("page", 9223372036854775807),
        ("page", MAX_PAGE + 1),
        ("limit", 99999999999999999999),
        ("limit", MAX_LIMIT + 1),
    ],
)
def test_list_ads_rejects_oversized_window(client, session, param, value):
    body = assert_problem(client.get(build_url(BASE, **{param: value})), 400, "validation_error")
    assert param in body["details"]["errors"]


def test_list_ads_accepts_largest_window(client, session):
    AdFactory()

    body = client.get(build_url(BASE, page=MAX_PAGE, limit=MAX_LIMIT)).get_json()

    assert body["data"] == []
    assert body["meta"] == {"page": MAX_PAGE, "limit": MAX_LIMIT, "count": 0}


def test_list_ads_flags_ownership_for_viewer(client, user, auth_header):
    AdFactory(owner=user)
    AdFactory()

    body = client.get(BASE, headers=auth_header).get_json()

    flags = {item["author_login"] == user.login: item["is_owner"] for item in body["data"]}
    assert flags == {True: True, False: False}


def test_list_ads_anonymous_has_no_owner_flag(client, session):
    AdFactory()
    body = client.get(BASE).get_json()
    assert all("is_owner" not in item for item in body["data"])


# --------------------------------------------------------------------------- #
# Update
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize("method", ["put", "patch"])
def test_update_is_partial(client, user, auth_header, method):
    ad = AdFactory(owner=user, title="Old title", price=10)

    resp = getattr(client, method)(f"{BASE}/{ad.id}", json={"price": 12}, headers=auth_header)

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["price"] == 12
    assert data["title"] == "Old title"
    assert data["user_id"] == user.id


def test_update_by_other_user_is_forbidden(client, user, other_header):
    ad = AdFactory(owner=user)
    resp = client.put(f"{BASE}/{ad.id}", json={"title": "Mine now"}, headers=other_header)
    assert_problem(resp, 403, "forbidden")


def test_update_rejects_invalid_merge(client, user, auth_header):
    ad = AdFactory(owner=user)
    resp = client.patch(f"{BASE}/{ad.id}", json={"title": ""}, headers=auth_header)
    body = assert_problem(resp, 400, "invalid_input")
    assert body["details"]["field"] == "title"


def test_update_missing_ad(client, auth_header):
    resp = client.put(f"{BASE}/999999", json={"title": "x"}, headers=auth_header)
    assert_problem(resp, 404, "not_found")


def test_update_requires_auth(client, session):
    ad = AdFactory()
    assert_problem(client.put(f"{BASE}/{ad.id}", json={"title": "x"}), 401, "unauthorized")


# --------------------------------------------------------------------------- #
# Delete
# --------------------------------------------------------------------------- #


def test_delete_ad_then_gone(client, user, auth_header):
    ad = AdFactory(owner=user)

    resp = client.delete(f"{BASE}/{ad.id}", headers=auth_header)

    assert resp.status_code == 204
    assert resp.get_data() == b""
    assert_problem(client.get(f"{BASE}/{ad.id}"), 404, "not_found")
    assert_problem(client.delete(f"{BASE}/{ad.id}", headers=auth_header), 404, "not_found")


def test_delete_by_other_user_is_forbidden(client, auth_header, other_header):
    # Committed through the API: the refused delete rolls back its own unit of work.
    ad_id = client.post(BASE, json=VALID_AD, headers=auth_header).get_json()["data"]["id"]

    assert_problem(client.delete(f"{BASE}/{ad_id}", headers=other_header), 403, "forbidden")
    assert client.get(f"{BASE}/{ad_id}").status_code == 200
