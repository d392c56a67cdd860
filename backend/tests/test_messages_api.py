"""Tests for direct messaging."""

from httpx import AsyncClient


async def _send(client: AsyncClient, sender, receiver_id: str, content: str):
    return await client.post(
        "/api/messages",
        json={"receiverId": receiver_id, "content": content},
        headers=sender.headers,
    )


async def test_send_and_read_conversation(client: AsyncClient, alice, drbob):
    response = await _send(client, alice, drbob.id, "Hi, can we talk about exams?")
    assert response.status_code == 201
    message = response.json()
    assert message["senderId"] == alice.id
    assert message["receiverId"] == drbob.id
    assert message["status"] == "sent"

    await _send(client, drbob, alice.id, "Of course.")

    for viewer, partner in ((alice, drbob), (drbob, alice)):
        response = await client.get(f"/api/messages/{partner.id}", headers=viewer.headers)
        assert response.status_code == 200
        assert [m["content"] for m in response.json()] == ["Hi, can we talk about exams?", "Of course."]


async def test_conversation_excludes_third_parties(client: AsyncClient, make_user, alice, drbob):
    carol = await make_user("carol@example.com", "student")
    await _send(client, alice, drbob.id, "for bob")
    await _send(client, carol, drbob.id, "from carol")

    response = await client.get(f"/api/messages/{drbob.id}", headers=alice.headers)
    assert [m["content"] for m in response.json()] == ["for bob"]


async def test_receiver_is_notified(client: AsyncClient, alice, drbob, notifier):
    message_id = (await _send(client, alice, drbob.id, "hello")).json()["id"]
    (call,) = notifier.of_type("message_received")
    assert call == {"user_id": drbob.id, "message_id": message_id, "sender_name": "Alice Smith"}


async def test_cannot_message_yourself_or_nobody(client: AsyncClient, alice):
    assert (await _send(client, alice, alice.id, "me")).status_code == 400
    assert (await _send(client, alice, "ghost", "boo")).status_code == 400


async def test_empty_content_is_rejected(client: AsyncClient, alice, drbob):
    response = await _send(client, alice, drbob.id, "")
    assert response.status_code == 400


async def test_only_receiver_marks_read(client: AsyncClient, alice, drbob):
    message_id = (await _send(client, alice, drbob.id, "hello")).json()["id"]

    response = await client.patch(f"/api/messages/{message_id}/read", headers=alice.headers)
    assert response.status_code == 403

    response = await client.patch(f"/api/messages/{message_id}/read", headers=drbob.headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Message marked as read"}

    response = await client.get(f"/api/messages/{alice.id}", headers=drbob.headers)
    assert response.json()[0]["status"] == "read"

    response = await client.patch("/api/messages/9999/read", headers=drbob.headers)
    assert response.status_code == 404


async def test_conversation_summaries(client: AsyncClient, make_user, alice, drbob):
    carol = await make_user("carol@example.com", "student", first_name="Carol", last_name="King")
    await _send(client, alice, drbob.id, "one")
    await _send(client, alice, drbob.id, "two")
    await _send(client, carol, drbob.id, "from carol")

    response = await client.get("/api/messages/conversations", headers=drbob.headers)
    assert response.status_code == 200
    summaries = {c["partnerId"]: c for c in response.json()}
    assert set(summaries) == {alice.id, carol.id}
    assert summaries[alice.id]["partnerName"] == "Alice Smith"
    assert summaries[alice.id]["lastMessage"]["content"] == "two"
    assert summaries[alice.id]["unreadCount"] == 2
    assert summaries[carol.id]["unreadCount"] == 1

    response = await client.get("/api/messages/conversations", headers=alice.headers)
    (only,) = response.json()
    assert only["partnerId"] == drbob.id
    assert only["unreadCount"] == 0
