"""
Pre-Deploy and Smoke Test Script.

Validates the configured environment and executes a read-only smoke test:
1. Health Check
2. Admin agent overview
3. Ledger consistency per agent (non-negative balance, ledger ends at balance)

Usage:
    ADMIN_USER_ID=<id of an active ADMIN user> python scripts/validate_deployment.py
"""

import os
import sys
from decimal import Decimal

from fastapi.testclient import TestClient
from greenpages.app.main import app
from greenpages.app.core.jwt import create_access_token


def print_step(step, msg):
    print(f"[{step}] {msg}")


def fail(msg):
    print(f"FAILURE: {msg}")
    sys.exit(1)


def success(msg):
    print(f"OK: {msg}")


def check_agent(client, headers, agent):
    agent_id = agent["id"]
    summary = agent["debt_summary"]
    balance = Decimal(str(summary["current_balance"]))
    if balance < 0:
        fail(f"Agent {agent['employee_code']} has negative balance {balance}")

    res = client.get(f"/v1/finance/agents/{agent_id}/ledger", headers=headers)
    if res.status_code != 200:
        fail(f"Ledger for {agent['employee_code']} failed: {res.status_code} {res.text}")

    entries = res.json()
    ledger_balance = Decimal(str(entries[-1]["balance"])) if entries else Decimal("0")
    if ledger_balance.quantize(Decimal("0.01")) != balance.quantize(Decimal("0.01")):
        fail(
            f"Ledger for {agent['employee_code']} ends at {ledger_balance}, "
            f"summary says {balance}"
        )
    success(f"{agent['employee_code']}: {len(entries)} ledger entries, balance {balance}")


def main():
    print("Starting Deployment Validation...")

    admin_user_id = os.getenv("ADMIN_USER_ID")
    if not admin_user_id:
        fail("ADMIN_USER_ID must be set to an active ADMIN user id")

    with TestClient(app) as client:
        # 1. Health Check
        print_step("PRE-DEPLOY", "Checking /health...")
        response = client.get("/health")
        if response.status_code != 200:
            fail(f"Health check returned {response.status_code}")
        success("Health check passed")

        # 2. Admin Auth
        print_step("AUTH", "Generating Admin Token...")
        admin_token = create_access_token(
            data={"sub": "deploy_bot", "role": "ADMIN", "user_id": admin_user_id}
        )
        headers = {"Authorization": f"Bearer {admin_token}"}

        # 3. Agent overview
        print_step("VERIFY", "Checking agent debt overview...")
        res = client.get("/v1/finance/agents", headers=headers)
        if res.status_code != 200:
            fail(f"Agent overview failed: {res.status_code} {res.text}")
        agents = res.json()["agents"]
        success(f"Found {len(agents)} active agents")

        # 4. Ledger consistency
        print_step("SMOKE", "Checking ledgers against balances...")
        for agent in agents:
            check_agent(client, headers, agent)

    success("Deployment Validation Passed!")


if __name__ == "__main__":
    main()
