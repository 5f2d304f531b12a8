"""
test_websocket.py - Real-time socket protocol

Tests cover:
1. identify and joinLessonManagement acknowledgements
2. sendMessage delivery and acknowledgement
3. Account pushes to an identified socket
4. Malformed frames
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from classroom_bank.main import create_app
from tests.conftest import FIXED_NOW


@pytest.fixture
def client(settings):
    app = create_app(settings, clock=lambda: FIXED_NOW)
    with TestClient(app) as test_client:
        yield test_client


def identify(socket, user_id):
    socket.send_json({"type": "identify", "data": {"userId": user_id}})
    assert socket.receive_json() == {"type": "identified", "data": {"success": True}}


def test_identify_registers_presence(client):
    with client.websocket_connect("/ws") as socket:
        identify(socket, "alice")

        assert client.app.state.container.presence.is_online("alice")


def test_identify_without_user_id_is_an_error(client):
    with client.websocket_connect("/ws") as socket:
        socket.send_json({"type": "identify", "data": {}})

        assert socket.receive_json()["type"] == "error"


def test_unknown_and_malformed_frames_are_errors(client):
    with client.websocket_connect("/ws") as socket:
        socket.send_text("not json")
        assert socket.receive_json()["type"] == "error"

        socket.send_json({"type": "dance"})
        assert socket.receive_json() == {"type": "error", "data": {"message": "unknown message type: dance"}}


def test_join_lesson_management_receives_refresh(client):
    with client.websocket_connect("/ws") as socket:
        socket.send_json({"type": "joinLessonManagement", "data": {"teacherName": "frizzle"}})
        assert socket.receive_json()["type"] == "lessonManagementJoined"

        client.post("/refresh-lesson-management", json={"teacherName": "frizzle", "units": [1]})

        # once from the broadcast, once from the group
        first, second = socket.receive_json(), socket.receive_json()
        assert first["type"] == second["type"] == "lessonManagementCompleteRefresh"
        assert first["data"]["units"] == [1]


def test_send_message_between_two_sockets(client):
    with client.websocket_connect("/ws") as alice, client.websocket_connect("/ws") as bob:
        identify(alice, "alice")
        identify(bob, "bob")

        alice.send_json(
            {
                "type": "sendMessage",
                "data": {"senderId": "alice", "recipientId": "bob", "messageContent": "hi", "ackId": "a1"},
            }
        )

        echoed = alice.receive_json()
        ack = alice.receive_json()
        received = bob.receive_json()

    assert echoed["type"] == "newMessage"
    assert ack == {"type": "sendMessageAck", "data": {"ackId": "a1", "success": True, "threadId": "alice_bob"}}
    assert received["type"] == "newMessage"
    assert received["data"]["senderId"] == "alice"
    assert received["data"]["messageContent"] == "hi"


def test_send_message_failure_is_acknowledged(client):
    with client.websocket_connect("/ws") as socket:
        socket.send_json({"type": "sendMessage", "data": {"senderId": "alice", "ackId": "a2"}})

        ack = socket.receive_json()

    assert ack["type"] == "sendMessageAck"
    assert ack["data"]["success"] is False
    assert ack["data"]["ackId"] == "a2"


def test_identified_socket_receives_account_updates(client):
    client.post("/profiles", json={"memberName": "alice"})
    with client.websocket_connect("/ws") as socket:
        identify(socket, "alice")

        client.post("/deposits", json={"memberName": "alice", "amount": "12.50"})
        update = socket.receive_json()

    assert update["type"] == "checkingAccountUpdate"
    assert update["data"]["accountHolder"] == "alice"
    assert Decimal(update["data"]["balanceTotal"]) == Decimal("12.50")
