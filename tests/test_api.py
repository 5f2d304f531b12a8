"""
test_api.py - HTTP surface

Tests cover:
1. Profile creation and lookup
2. Obligations and scheduler registration
3. Ledger operations and validation errors
4. Time travel profiles and simulation
5. Messaging and lesson management notifications
6. Amount precision and opaque simulation failures
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from classroom_bank.main import create_app
from classroom_bank.modules.time_travel.simulator import TimeTravelService
from tests.conftest import FIXED_NOW


@pytest.fixture
def client(settings):
    app = create_app(settings, clock=lambda: FIXED_NOW)
    with TestClient(app) as test_client:
        yield test_client


def create_profile(client, name="alice", teacher="frizzle"):
    response = client.post("/profiles", json={"memberName": name, "classPeriod": "2", "teacherName": teacher})
    assert response.status_code == 201
    return response.json()


def add_bill(client, name="alice", interval="monthly", amount="-300", label="Rent"):
    return client.post("/bills", json={"parcel": [name, "bill", amount, interval, label, "Housing", None]})


def balances(accounts):
    return {account["accountType"]: Decimal(account["balanceTotal"]) for account in accounts}


def test_create_and_fetch_profile(client):
    created = create_profile(client)

    assert created["memberName"] == "alice"
    assert balances(created["accounts"]) == {"Checking": 0, "Savings": 0}

    fetched = client.get("/profiles/alice")
    assert fetched.status_code == 200
    assert fetched.json()["teacherName"] == "frizzle"


def test_duplicate_profile_conflicts(client):
    create_profile(client)

    assert client.post("/profiles", json={"memberName": "alice"}).status_code == 409


def test_unknown_profile_is_not_found(client):
    assert client.get("/profiles/nobody").status_code == 404


def test_bill_registers_every_obligation_on_the_account(client):
    create_profile(client)
    scheduler = client.app.state.container.scheduler

    assert add_bill(client).status_code == 200
    assert add_bill(client, interval="weekly", amount="-20", label="Phone").status_code == 200

    assert sorted(job.obligation.name for job in scheduler.jobs.values()) == ["Phone", "Rent"]
    checking = client.get("/profiles/alice").json()["accounts"][0]
    assert [bill["Name"] for bill in checking["bills"]] == ["Rent", "Phone"]
    assert checking["transactions"] == []


def test_bill_for_unknown_profile_is_not_found(client):
    assert add_bill(client, name="nobody").status_code == 404


def test_bill_with_bad_interval_is_rejected(client):
    create_profile(client)

    assert add_bill(client, interval="hourly").status_code == 400


def test_transfer_moves_money_between_own_accounts(client):
    create_profile(client)
    client.post("/deposits", json={"memberName": "alice", "amount": "200"})
    client.post("/deposits", json={"memberName": "alice", "amount": "10", "destination": "Savings"})

    response = client.post(
        "/transfer",
        json={"memberName": "alice", "fromAccount": "Checking", "toAccount": "Savings", "amount": "50"},
    )

    assert response.status_code == 200
    assert balances(response.json()) == {"Checking": Decimal("150"), "Savings": Decimal("60")}


def test_transfer_into_same_account_is_rejected(client):
    create_profile(client)

    response = client.post(
        "/transfer",
        json={"memberName": "alice", "fromAccount": "Checking", "toAccount": "Checking", "amount": "5"},
    )

    assert response.status_code == 400


def test_non_positive_amount_is_rejected(client):
    create_profile(client)

    assert client.post("/loans", json={"memberName": "alice", "amount": "0"}).status_code == 400


def test_send_funds_and_loan(client):
    create_profile(client, "alice")
    create_profile(client, "bob")
    client.post("/loans", json={"memberName": "alice", "amount": "100"})

    response = client.post("/sendFunds", json={"senderName": "alice", "recipientName": "bob", "amount": "25"})

    assert response.status_code == 200
    sender, recipient = response.json()
    assert Decimal(sender["balanceTotal"]) == Decimal("75")
    assert Decimal(recipient["balanceTotal"]) == Decimal("25")


def test_reconcile_endpoint(client):
    create_profile(client)
    client.post("/deposits", json={"memberName": "alice", "amount": "40"})

    response = client.post("/reconcile", json={"memberName": "alice"})

    assert response.status_code == 200
    assert Decimal(response.json()["balanceTotal"]) == Decimal("40")
    assert client.post("/reconcile", json={"memberName": "nobody"}).status_code == 404


def test_time_travel_profile_lifecycle(client):
    create_profile(client)
    add_bill(client)

    assert client.get("/timeTravelProfiles/alice").status_code == 404
    assert client.post("/timeTravelProfiles", json={"memberName": "alice"}).status_code == 201
    assert client.post("/timeTravelProfiles", json={"memberName": "alice"}).status_code == 200
    assert client.post("/timeTravelProfiles", json={"memberName": "nobody"}).status_code == 404

    shadows = client.get("/timeTravelProfiles/alice").json()
    assert balances(shadows) == {"Checking": 0, "Savings": 0}
    assert [bill["Name"] for bill in shadows[0]["bills"]] == ["Rent"]


def test_simulate_time_travel(client):
    create_profile(client)
    add_bill(client)
    add_bill(client, interval="weekly", amount="-20", label="Phone")

    response = client.post("/simulateTimeTravel", json={"userName": "alice", "days": 31})

    assert response.status_code == 200
    assert response.json()["success"] is True
    checking = client.get("/timeTravelProfiles/alice").json()[0]
    # monthly fires on days 0 and 30, weekly on 0, 7, 14, 21 and 28
    assert len(checking["transactions"]) == 7
    assert Decimal(checking["balanceTotal"]) == Decimal("-700")
    live = client.get("/profiles/alice").json()["accounts"][0]
    assert live["transactions"] == []

    reset = client.post("/timeTravelProfiles/alice/reset")
    assert reset.status_code == 200
    assert reset.json()[0]["transactions"] == []


def test_simulate_time_travel_errors(client):
    assert client.post("/simulateTimeTravel", json={"userName": "alice"}).status_code == 400
    assert client.post("/simulateTimeTravel", json={"days": 3}).status_code == 400
    assert client.post("/simulateTimeTravel", json={"userName": "nobody", "days": 3}).status_code == 500

    create_profile(client)
    too_long = client.post("/simulateTimeTravel", json={"userName": "alice", "days": 100000})
    assert too_long.status_code == 400


def test_messages_endpoints(client):
    create_profile(client, "alice")

    private = client.post("/messages", json={"senderId": "bob", "recipientId": "alice", "messageContent": "hi"})
    assert private.status_code == 201
    assert private.json()["threadId"] == "alice_bob"

    broadcast = client.post(
        "/messages",
        json={"senderId": "frizzle", "recipientId": "class-message-frizzle", "messageContent": "quiz"},
    )
    assert broadcast.json()["threadId"] == "class-message-frizzle"

    threads = client.get("/messages/alice").json()["threads"]
    assert sorted(thread["threadId"] for thread in threads) == ["alice_bob", "class-message-frizzle"]

    assert client.post("/messages", json={"senderId": "bob", "recipientId": "alice"}).status_code == 400


def test_lesson_management_notifications(client):
    update = client.post(
        "/lesson-management-update",
        json={"teacherName": "frizzle", "action": "unlock", "data": {"lesson": 3}},
    )
    refresh = client.post("/refresh-lesson-management", json={"teacherName": "frizzle"})

    assert update.status_code == 200 and update.json()["success"] is True
    assert refresh.status_code == 200


def test_sub_cent_amounts_are_rejected(client):
    create_profile(client)

    assert client.post("/deposits", json={"memberName": "alice", "amount": "10.005"}).status_code == 400
    assert add_bill(client, amount="-10.005").status_code == 400
    assert client.get("/profiles/alice").json()["accounts"][0]["transactions"] == []


def test_unexpected_simulation_failure_hides_the_cause(client, monkeypatch):
    create_profile(client)

    async def broken(self, member_name, days, now):
        raise RuntimeError("no such table: ledger_accounts")

    monkeypatch.setattr(TimeTravelService, "simulate", broken)
    response = client.post("/simulateTimeTravel", json={"userName": "alice", "days": 3})

    assert response.status_code == 500
    assert response.json()["detail"] == "Time travel simulation failed."


def test_missing_shadow_profile_names_the_member(client):
    response = client.post("/simulateTimeTravel", json={"userName": "nobody", "days": 3})

    assert response.status_code == 500
    assert "nobody" in response.json()["detail"]


def test_message_to_self_is_rejected(client):
    create_profile(client)

    response = client.post("/messages", json={"senderId": "alice", "recipientId": "alice", "messageContent": "hi"})

    assert response.status_code == 400
    assert client.get("/messages/alice").json()["threads"] == []
