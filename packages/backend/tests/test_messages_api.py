"""Chat history API — messages written over the relay, read over HTTP."""

import json

import pytest


async def _chat(relay, conn, receiver_id: int, content: str) -> None:
    await relay.handle_text(
        conn, json.dumps({"type": "chat", "receiverId": receiver_id, "content": content})
    )


@pytest.fixture
async def chatted(client, relay, make_connection, buyer, seller):
    """Alice and Bob exchange three messages; Alice is offline for the last."""
    alice, bob = make_connection(), make_connection()
    await relay.handle_text(alice, json.dumps({"type": "auth", "userId": buyer["id"]}))
    await relay.handle_text(bob, json.dumps({"type": "auth", "userId": seller["id"]}))

    await _chat(relay, alice, seller["id"], "Is Foo still maintained?")
    await _chat(relay, bob, buyer["id"], "Yes, 1.1 ships next week")

    alice.open = False
    relay.disconnect(alice)
    await _chat(relay, bob, buyer["id"], "It's out now")
    return alice, bob


@pytest.mark.asyncio
async def test_offline_message_is_in_inbox(client, chatted, buyer, seller):
    alice, _ = chatted
    assert [e["content"] for e in alice.sent] == ["Yes, 1.1 ships next week"]

    r = await client.get("/api/messages", headers=buyer["headers"])
    assert r.status_code == 200
    inbox = r.json()
    assert [m["content"] for m in inbox] == [
        "It's out now",
        "Yes, 1.1 ships next week",
        "Is Foo still maintained?",
    ]
    assert inbox[0]["sender_id"] == seller["id"]
    assert inbox[0]["sender_name"] == "Bob"
    assert inbox[0]["receiver_id"] == buyer["id"]


@pytest.mark.asyncio
async def test_conversation_is_chronological(client, chatted, buyer, seller):
    r = await client.get(f"/api/messages/{seller['id']}", headers=buyer["headers"])
    assert r.status_code == 200
    assert [m["content"] for m in r.json()] == [
        "Is Foo still maintained?",
        "Yes, 1.1 ships next week",
        "It's out now",
    ]


@pytest.mark.asyncio
async def test_conversation_with_stranger_is_empty(client, chatted, buyer):
    r = await client.get("/api/messages/9999", headers=buyer["headers"])
    assert r.json() == []


@pytest.mark.asyncio
async def test_messages_require_auth(client):
    assert (await client.get("/api/messages")).status_code == 401
