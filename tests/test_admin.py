"""
Tests for the admin key management endpoints
"""
import asyncio

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from pydantic import SecretStr

from keygate.core.errors import UpstreamError
from keygate.main import create_app
from keygate.models import ProvisionedKey
from keygate.services.admin import KeyAdminService

ADMIN_ROUTES = [
    ("GET", "/api/admin/keys"),
    ("POST", "/api/admin/keys/delete-all"),
    ("POST", "/api/admin/keys/disable-all"),
]


@pytest.fixture
def seeded(fake_openrouter):
    fake_openrouter.add_key("Goose Hacknight - a@example.com", key_hash="a", usage=1.25)
    fake_openrouter.add_key("Goose Hacknight - b@example.com", key_hash="b")
    fake_openrouter.add_key("Goose Hacknight - c@example.com", key_hash="c", disabled=True)
    return fake_openrouter


@pytest.mark.parametrize("method,path", ADMIN_ROUTES)
@pytest.mark.parametrize("headers", [{}, {"x-admin-token": "wrong"}, {"x-admin-token": ""}])
def test_admin_requires_token(client, seeded, method, path, headers):
    response = client.request(method, path, headers=headers)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"success": False, "message": "Unauthorized access"}
    assert seeded.requests == []


@pytest.mark.parametrize("method,path", ADMIN_ROUTES)
def test_admin_rejects_everything_without_configured_token(
    settings, config_provider, keys_client, fake_openrouter, method, path
):
    settings = settings.model_copy(update={"ADMIN_SECRET_TOKEN": SecretStr("")})
    client = TestClient(create_app(settings, config_provider=config_provider, keys_client=keys_client))

    response = client.request(method, path, headers={"x-admin-token": ""})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert fake_openrouter.requests == []


def test_list_keys(client, seeded, admin_headers):
    response = client.get("/api/admin/keys", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert [k["hash"] for k in data] == ["a", "b", "c"]
    # Upstream fields pass through untouched
    assert data[0]["usage"] == 1.25
    assert "key" not in data[0]


def test_list_keys_upstream_failure(client, seeded, admin_headers):
    seeded.list_error = 500

    response = client.get("/api/admin/keys", headers=admin_headers)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {
        "success": False,
        "message": "Failed to list keys",
        "error": "listing unavailable",
    }


def test_delete_all(client, seeded, admin_headers):
    response = client.post("/api/admin/keys/delete-all", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["success"] is True
    assert body["summary"] == {"attempted": 3, "succeeded": 3, "failed": 0, "failures": []}
    assert "data" not in body
    assert seeded.keys == []


def test_delete_all_continues_past_failures(client, seeded, admin_headers):
    seeded.fail_hashes.add("a")

    response = client.post("/api/admin/keys/delete-all", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    summary = response.json()["summary"]
    assert summary["attempted"] == 3
    assert summary["succeeded"] == 2
    assert summary["failures"] == [{"hash": "a", "error": "boom on a"}]
    assert [k["hash"] for k in seeded.keys] == ["a"]


def test_disable_all_continues_past_failures(client, seeded, admin_headers):
    seeded.fail_hashes.add("a")

    response = client.post("/api/admin/keys/disable-all", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    # "c" was already disabled and is not listed for disabling
    assert body["summary"]["attempted"] == 2
    assert body["summary"]["succeeded"] == 1
    assert body["summary"]["failed"] == 1
    assert {k["hash"]: k["disabled"] for k in body["data"]} == {"a": False, "b": True, "c": True}


def test_disable_all_counts_malformed_upstream_record_as_failure(client, seeded, admin_headers):
    seeded.malformed_hashes.add("a")

    response = client.post("/api/admin/keys/disable-all", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["summary"]["attempted"] == 2
    assert body["summary"]["succeeded"] == 1
    assert body["summary"]["failed"] == 1
    assert body["summary"]["failures"][0]["hash"] == "a"
    assert "Unexpected key record" in body["summary"]["failures"][0]["error"]
    assert {k["hash"]: k["disabled"] for k in body["data"]} == {"a": False, "b": True, "c": True}


def test_list_keys_keeps_integer_limits(client, seeded, admin_headers):
    response = client.get("/api/admin/keys", headers=admin_headers)

    limits = [k["limit"] for k in response.json()["data"]]
    assert limits == [5, 5, 5]
    assert all(isinstance(limit, int) for limit in limits)


def test_disable_all_listing_failure(client, seeded, admin_headers):
    seeded.list_error = 502

    response = client.post("/api/admin/keys/disable-all", headers=admin_headers)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "Failed to disable keys"
    assert seeded.calls("PATCH") == []


class SlowKeysClient:
    """Counts how many upstream calls run at once"""

    def __init__(self, count):
        self.keys = [ProvisionedKey(name=f"k{i}", hash=f"h{i}") for i in range(count)]
        self.in_flight = 0
        self.max_in_flight = 0

    async def list_all_keys(self, include_disabled=False):
        return list(self.keys)

    async def delete_key(self, key_hash):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1
        if key_hash == "h3":
            raise UpstreamError("gone")
        return True


@pytest.mark.asyncio
async def test_bulk_fan_out_is_bounded():
    keys_client = SlowKeysClient(10)
    service = KeyAdminService(keys_client, concurrency=3)

    result = await service.delete_all()

    assert keys_client.max_in_flight == 3
    assert result.attempted == 10
    assert result.succeeded == 9
    assert result.failures[0].hash == "h3"
