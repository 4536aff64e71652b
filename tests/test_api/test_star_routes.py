"""
API endpoint tests for the Star Registry HTTP surface.

Every test runs against a FastAPI TestClient bound to a fresh registry with
a frozen clock (see ``tests/conftest.py``), so challenge timestamps are
predictable and nothing leaks between tests.
"""

import inspect

import pytest

# ============================================================================
# HELPERS
# ============================================================================


def _submit(test_client, wallet, star, message=None, signature=None):
    if message is None:
        message = test_client.post("/requestValidation", json={"address": wallet.address}).json()
    return test_client.post(
        "/submitstar",
        json={
            "address": wallet.address,
            "message": message,
            "signature": signature if signature is not None else wallet.sign(message),
            "star": star,
        },
    )


# ============================================================================
# ROOT AND HEALTH
# ============================================================================


@pytest.mark.api
def test_root_identifies_service(test_client):
    response = test_client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Star Registry API"


@pytest.mark.api
def test_health_reports_height(test_client, alice, sample_star):
    assert test_client.get("/health").json() == {"status": "ok", "height": 0}
    _submit(test_client, alice, sample_star)
    assert test_client.get("/health").json()["height"] == 1


# ============================================================================
# BLOCK LOOKUPS
# ============================================================================


@pytest.mark.api
def test_genesis_block_by_height(test_client):
    response = test_client.get("/block/height/0")

    assert response.status_code == 200
    data = response.json()
    assert data["height"] == 0
    assert data["previous_hash"] is None
    assert data["claim"] is None
    assert len(data["hash"]) == 64


@pytest.mark.api
def test_block_by_height_out_of_range_is_404(test_client):
    assert test_client.get("/block/height/5").status_code == 404


@pytest.mark.api
def test_block_by_non_integer_height_is_422(test_client):
    assert test_client.get("/block/height/top").status_code == 422


@pytest.mark.api
def test_block_by_hash(test_client):
    genesis = test_client.get("/block/height/0").json()

    response = test_client.get(f"/block/hash/{genesis['hash']}")

    assert response.status_code == 200
    assert response.json() == genesis


@pytest.mark.api
def test_block_by_unknown_hash_is_404(test_client):
    response = test_client.get(f"/block/hash/{'0' * 64}")
    assert response.status_code == 404
    assert "No block with hash" in response.json()["detail"]


# ============================================================================
# CHALLENGE AND CLAIMS
# ============================================================================


@pytest.mark.api
def test_request_validation_returns_challenge(test_client, alice):
    response = test_client.post("/requestValidation", json={"address": alice.address})

    assert response.status_code == 200
    assert response.json() == f"{alice.address}:1000:starRegistry"


@pytest.mark.api
def test_request_validation_requires_address(test_client):
    assert test_client.post("/requestValidation", json={}).status_code == 422
    assert test_client.post("/requestValidation", json={"address": ""}).status_code == 422


@pytest.mark.api
def test_submit_star_appends_block(test_client, alice, sample_star):
    response = _submit(test_client, alice, sample_star)

    assert response.status_code == 200
    block = response.json()
    assert block["height"] == 1
    assert block["claim"]["address"] == alice.address
    assert block["claim"]["star"] == sample_star

    genesis = test_client.get("/block/height/0").json()
    assert block["previous_hash"] == genesis["hash"]


@pytest.mark.api
def test_submit_star_expired_is_400(test_client, registry, clock, alice, sample_star):
    message = test_client.post("/requestValidation", json={"address": alice.address}).json()
    clock.advance(300)

    response = _submit(test_client, alice, sample_star, message=message)

    assert response.status_code == 400
    assert registry.get_height() == 0


@pytest.mark.api
def test_submit_star_bad_signature_is_401(test_client, registry, alice, bob, sample_star):
    message = test_client.post("/requestValidation", json={"address": alice.address}).json()

    response = _submit(test_client, alice, sample_star, message=message, signature=bob.sign(message))

    assert response.status_code == 401
    assert registry.get_height() == 0


@pytest.mark.api
def test_submit_star_missing_fields_is_422(test_client, alice):
    response = test_client.post("/submitstar", json={"address": alice.address})
    assert response.status_code == 422


@pytest.mark.api
def test_stars_by_address(test_client, alice, bob, sample_star):
    _submit(test_client, alice, sample_star)
    _submit(test_client, bob, {"story": "bob's star"})
    _submit(test_client, alice, {"story": "second"})

    response = test_client.get(f"/blocks/{alice.address}")

    assert response.status_code == 200
    stars = [claim["star"] for claim in response.json()]
    assert stars == [sample_star, {"story": "second"}]


@pytest.mark.api
def test_stars_by_unknown_address_is_empty(test_client):
    response = test_client.get("/blocks/1NobodyHere")
    assert response.status_code == 200
    assert response.json() == []


# ============================================================================
# VALIDATION
# ============================================================================


@pytest.mark.api
def test_validate_intact_chain(test_client, alice, sample_star):
    _submit(test_client, alice, sample_star)

    response = test_client.get("/validate")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "height": 1,
        "corrupted_heights": [],
        "errors": [],
    }


@pytest.mark.api
def test_validate_reports_tampering(test_client, registry, alice, sample_star):
    _submit(test_client, alice, sample_star)
    registry.get_block_by_height(1).time = 1

    response = test_client.get("/validate")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "corrupt"
    assert body["corrupted_heights"] == [1]
    assert body["errors"] == [{"height": 1, "kind": "hash_mismatch"}]


@pytest.mark.api
@pytest.mark.parametrize("star", [None, [], "", 0, ["Orion", "Rigel"], "Betelgeuse"])
def test_submit_star_keeps_any_star_value(test_client, alice, star):
    response = _submit(test_client, alice, star)

    assert response.status_code == 200
    assert response.json()["claim"]["star"] == star
    assert test_client.get(f"/blocks/{alice.address}").json()[0]["star"] == star


@pytest.mark.api
def test_submit_star_handler_runs_in_threadpool(test_client):
    route = next(r for r in test_client.app.routes if getattr(r, "path", None) == "/submitstar")
    assert not inspect.iscoroutinefunction(route.endpoint)
