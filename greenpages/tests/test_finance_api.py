"""
Finance API Tests.

Validates the HTTP surface: roles, status codes, error shapes and payloads.
"""

import pytest
from datetime import timedelta
from decimal import Decimal

from greenpages.app.core.jwt import create_access_token
from greenpages.app.models.enums import UserRole


async def post_debt(client, headers, world, amount=100.0, business_key="business_id", collection_type="SUBSCRIPTION"):
    return await client.post(
        "/v1/finance/debts",
        json={
            "agent_id": world["agent_id"],
            "business_id": world[business_key],
            "amount": amount,
            "type": collection_type,
        },
        headers=headers,
    )


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_agent_records_collection(client, agent_headers, finance_world):
    response = await post_debt(client, agent_headers, finance_world, amount=150.5)

    assert response.status_code == 201
    data = response.json()
    assert data["agent_id"] == finance_world["agent_id"]
    assert data["business_name"] == "مخبز النور"
    assert data["amount"] == 150.5
    assert data["type"] == "SUBSCRIPTION"
    assert "id" in data and "created_at" in data


@pytest.mark.asyncio
async def test_collection_for_untranslated_business(client, admin_headers, finance_world):
    response = await post_debt(
        client, admin_headers, finance_world, amount=20, business_key="untranslated_business_id",
        collection_type="AD_PAYMENT"
    )

    assert response.status_code == 201
    assert response.json()["business_name"] == "Unknown"


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -5, 10.005])
async def test_collection_rejects_bad_amounts(client, agent_headers, finance_world, amount):
    response = await post_debt(client, agent_headers, finance_world, amount=amount)

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_collection_for_unknown_agent(client, agent_headers, finance_world):
    world = dict(finance_world, agent_id="missing-agent")
    response = await post_debt(client, agent_headers, world)

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == "ERR_NOT_FOUND_001"
    assert body["details"] == {"resource": "Agent", "id": "missing-agent"}


@pytest.mark.asyncio
async def test_agent_cannot_settle(client, agent_headers, finance_world):
    response = await client.post(
        "/v1/finance/settlements",
        json={"agent_id": finance_world["agent_id"], "amount": 10},
        headers=agent_headers,
    )

    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_FORBIDDEN"


@pytest.mark.asyncio
async def test_admin_settles_debt(client, admin_headers, agent_headers, finance_world):
    await post_debt(client, agent_headers, finance_world, amount=100)

    response = await client.post(
        "/v1/finance/settlements",
        json={"agent_id": finance_world["agent_id"], "amount": 60, "notes": "Cash handed in"},
        headers=admin_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["accountant_id"] == finance_world["accountant_id"]
    assert data["amount"] == 60.0
    assert data["notes"] == "Cash handed in"

    summary = (await client.get(
        f"/v1/finance/agents/{finance_world['agent_id']}/debt", headers=admin_headers
    )).json()
    assert summary == {
        "agent_id": finance_world["agent_id"],
        "total_debt": 100.0,
        "debt_count": 1,
        "total_settlements": 60.0,
        "current_balance": 40.0,
    }


@pytest.mark.asyncio
async def test_over_settlement_rejected(client, admin_headers, agent_headers, finance_world):
    await post_debt(client, agent_headers, finance_world, amount=50)

    response = await client.post(
        "/v1/finance/settlements",
        json={"agent_id": finance_world["agent_id"], "amount": 50.01},
        headers=admin_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_INVALID_OPERATION"
    assert body["details"]["offered"] == "50.01"
    assert body["details"]["available"] == "50.00"

    history = await client.get(
        f"/v1/finance/agents/{finance_world['agent_id']}/settlements", headers=admin_headers
    )
    assert history.json() == []


@pytest.mark.asyncio
async def test_agent_debt_for_new_agent_is_zero(client, agent_headers, finance_world):
    response = await client.get(
        f"/v1/finance/agents/{finance_world['other_agent_id']}/debt", headers=agent_headers
    )

    assert response.status_code == 200
    assert response.json()["current_balance"] == 0.0
    assert response.json()["debt_count"] == 0


@pytest.mark.asyncio
async def test_ledger_running_balance(client, admin_headers, agent_headers, finance_world):
    await post_debt(client, agent_headers, finance_world, amount=100)
    await client.post(
        "/v1/finance/settlements",
        json={"agent_id": finance_world["agent_id"], "amount": 30},
        headers=admin_headers,
    )
    await post_debt(client, agent_headers, finance_world, amount=50, collection_type="AD_PAYMENT")

    response = await client.get(
        f"/v1/finance/agents/{finance_world['agent_id']}/ledger", headers=agent_headers
    )

    assert response.status_code == 200
    entries = response.json()
    assert [e["type"] for e in entries] == ["DEBT", "SETTLEMENT", "DEBT"]
    assert [e["balance"] for e in entries] == [100.0, 70.0, 120.0]
    assert entries[0]["business_name"] == "مخبز النور"
    assert entries[1]["business_name"] is None
    assert entries[2]["collection_type"] == "AD_PAYMENT"


@pytest.mark.asyncio
async def test_ledger_date_window(client, agent_headers, finance_world):
    await post_debt(client, agent_headers, finance_world, amount=25)

    agent_id = finance_world["agent_id"]
    past = await client.get(
        f"/v1/finance/agents/{agent_id}/ledger",
        params={"start_date": "2000-01-01T00:00:00", "end_date": "2000-12-31T23:59:59"},
        headers=agent_headers,
    )
    assert past.status_code == 200
    assert past.json() == []

    everything = await client.get(
        f"/v1/finance/agents/{agent_id}/ledger",
        params={"start_date": "2000-01-01T00:00:00", "end_date": "2999-12-31T23:59:59"},
        headers=agent_headers,
    )
    assert [e["balance"] for e in everything.json()] == [25.0]


@pytest.mark.asyncio
async def test_ledger_rejects_reversed_window(client, agent_headers, finance_world):
    response = await client.get(
        f"/v1/finance/agents/{finance_world['agent_id']}/ledger",
        params={"start_date": "2026-02-01T00:00:00", "end_date": "2026-01-01T00:00:00"},
        headers=agent_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_INVALID_OPERATION"
    assert body["details"] == {"start_date": "2026-02-01T00:00:00", "end_date": "2026-01-01T00:00:00"}


@pytest.mark.asyncio
async def test_ledger_for_unknown_agent(client, agent_headers, finance_world):
    response = await client.get("/v1/finance/agents/nope/ledger", headers=agent_headers)

    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"


@pytest.mark.asyncio
async def test_agents_overview_is_admin_only(client, admin_headers, agent_headers, finance_world):
    await post_debt(client, agent_headers, finance_world, amount=12.34)

    forbidden = await client.get("/v1/finance/agents", headers=agent_headers)
    assert forbidden.status_code == 403

    response = await client.get("/v1/finance/agents", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    codes = [a["employee_code"] for a in data["agents"]]
    assert codes == ["AG-001", "AG-002"]
    first = data["agents"][0]
    assert first["user"]["email"] == "agent1@test.com"
    assert Decimal(str(first["debt_summary"]["current_balance"])) == Decimal("12.34")


@pytest.mark.asyncio
async def test_missing_token_rejected(client, finance_world):
    response = await client.get(f"/v1/finance/agents/{finance_world['agent_id']}/debt")
    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_unknown_role_rejected(client, finance_world):
    token = create_access_token(
        data={"sub": "intruder", "user_id": finance_world["agent_user_id"], "role": "SUPERUSER"}
    )
    response = await client.get(
        f"/v1/finance/agents/{finance_world['agent_id']}/debt",
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Invalid role in token"


@pytest.mark.asyncio
async def test_token_for_deleted_user_rejected(client, make_headers, finance_world):
    response = await client.get(
        f"/v1/finance/agents/{finance_world['agent_id']}/debt",
        headers=make_headers("ghost-user", UserRole.ADMIN),
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_correlation_id_echoed(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "trace-123"})

    assert response.headers["X-Correlation-ID"] == "trace-123"
    assert "X-Process-Time" in response.headers


@pytest.mark.asyncio
async def test_expired_token_rejected(client, finance_world):
    token = create_access_token(
        data={"sub": "agent", "user_id": finance_world["agent_user_id"], "role": "AGENT"},
        expires_delta=timedelta(minutes=-1),
    )
    response = await client.get(
        f"/v1/finance/agents/{finance_world['agent_id']}/debt",
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_UNAUTHORIZED"


@pytest.mark.asyncio
async def test_tampered_token_rejected(client, agent_headers, finance_world):
    headers = {"Authorization": agent_headers["Authorization"] + "x"}
    response = await client.get(f"/v1/finance/agents/{finance_world['agent_id']}/debt", headers=headers)

    assert response.status_code == 401
