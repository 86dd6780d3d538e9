"""Integration tests exercising the chat endpoints via FastAPI's TestClient."""

from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient


def sync_user(client: TestClient, uid: str, name: str, **profile: Any) -> dict[str, Any]:
    response = client.post(
        "/api/users",
        json={"externalUid": uid, "email": f"{uid}@campus.test", "name": name},
    )
    assert response.status_code == 201, response.text
    user = response.json()["user"]
    if profile:
        response = client.put(f"/api/users/{uid}", json=profile)
        assert response.status_code == 200, response.text
        user = response.json()["user"]
    return user


def send_dm(client: TestClient, sender: dict, recipient: dict, content: str):
    return client.post(
        "/api/messages",
        json={
            "content": content,
            "senderId": str(sender["id"]),
            "scope": "dm",
            "recipientId": str(recipient["id"]),
        },
    )


def inbox(client: TestClient, viewer: dict) -> dict[str, Any]:
    response = client.get(
        "/api/messages", params={"scope": "conversations", "viewerId": viewer["id"]}
    )
    assert response.status_code == 200, response.text
    return response.json()


def test_universal_chat_round_trip(client: TestClient):
    asha = sync_user(client, "asha", "Asha")

    response = client.post(
        "/api/messages",
        json={"content": "Hello campus!", "senderId": str(asha["id"]), "scope": "universal"},
    )
    assert response.status_code == 201, response.text
    created = response.json()
    assert created["senderName"] == "Asha"
    assert created["reactions"] == []
    assert created["replyTo"] is None

    response = client.get(
        "/api/messages", params={"scope": "universal", "viewerId": asha["id"]}
    )
    assert response.status_code == 200
    feed = response.json()
    assert [message["content"] for message in feed["messages"]] == ["Hello campus!"]
    assert feed["totalMessages"] == 1
    assert feed["totalUsers"] == 1
    assert feed["onlineCount"] == 1


def test_missing_scope_is_a_validation_error(client: TestClient):
    response = client.get("/api/messages")
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"

    response = client.get("/api/messages", params={"scope": "galaxy"})
    assert response.status_code == 400


def test_branch_chat_enforces_membership(client: TestClient):
    ravi = sync_user(client, "ravi", "Ravi", branch="CSE", year=2)

    response = client.post(
        "/api/messages",
        json={"content": "hi", "senderId": str(ravi["id"]), "scope": "branch", "branch": "ECE"},
    )
    assert response.status_code == 403
    assert response.json() == {
        "detail": "You can only post in your own branch chat",
        "error": "forbidden",
    }

    response = client.post(
        "/api/messages",
        json={"content": "hi", "senderId": str(ravi["id"]), "scope": "branch", "qualifier": "CSE"},
    )
    assert response.status_code == 201

    response = client.get("/api/messages", params={"scope": "branch", "qualifier": "CSE"})
    assert [message["branch"] for message in response.json()["messages"]] == ["CSE"]


def test_branch_post_without_branch_is_rejected(client: TestClient):
    ravi = sync_user(client, "ravi", "Ravi")
    response = client.post(
        "/api/messages",
        json={"content": "hi", "senderId": str(ravi["id"]), "scope": "branch"},
    )
    assert response.status_code == 400


def test_moderation_rejection_is_reported_verbatim(client: TestClient):
    asha = sync_user(client, "asha", "Asha")
    response = client.post(
        "/api/messages",
        json={"content": "what a moron", "senderId": str(asha["id"]), "scope": "universal"},
    )
    assert response.status_code == 400
    assert response.json() == {
        "detail": "Your message contains inappropriate language.",
        "error": "moderation_rejected",
    }


def test_reaction_toggle_scenario(client: TestClient):
    first = sync_user(client, "first", "First")
    second = sync_user(client, "second", "Second")
    response = client.post(
        "/api/messages",
        json={"content": "Results are out", "senderId": str(first["id"]), "scope": "universal"},
    )
    message_id = response.json()["id"]

    def react(user: dict) -> list[dict]:
        response = client.patch(
            f"/api/messages/{message_id}",
            json={"action": "react", "userId": str(user["id"]), "emoji": "😮"},
        )
        assert response.status_code == 200, response.text
        return response.json()["reactions"]

    react(first)
    reactions = react(second)
    assert reactions == [
        {"userId": first["id"], "emoji": "😮"},
        {"userId": second["id"], "emoji": "😮"},
    ]
    assert react(first) == [{"userId": second["id"], "emoji": "😮"}]


def test_unknown_action_is_rejected(client: TestClient):
    first = sync_user(client, "first", "First")
    response = client.post(
        "/api/messages",
        json={"content": "Hi", "senderId": str(first["id"]), "scope": "universal"},
    )
    response = client.patch(
        f"/api/messages/{response.json()['id']}",
        json={"action": "edit", "userId": str(first["id"]), "emoji": "👍"},
    )
    assert response.status_code == 400


def test_delete_message_statuses(client: TestClient):
    owner = sync_user(client, "owner", "Owner")
    other = sync_user(client, "other", "Other")
    response = client.post(
        "/api/messages",
        json={"content": "oops", "senderId": str(owner["id"]), "scope": "universal"},
    )
    message_id = response.json()["id"]

    assert client.delete(f"/api/messages/{message_id}").status_code == 401
    assert (
        client.delete(f"/api/messages/{message_id}", params={"userId": other["id"]}).status_code
        == 403
    )
    assert client.delete("/api/messages/9999", params={"userId": owner["id"]}).status_code == 404

    response = client.delete(f"/api/messages/{message_id}", params={"userId": owner["id"]})
    assert response.status_code == 200
    assert response.json() == {"message": "Message deleted"}


def test_dm_inbox_unread_and_read_flow(client: TestClient):
    viewer = sync_user(client, "viewer", "Viewer")
    bob = sync_user(client, "bob", "Bob")
    carol = sync_user(client, "carol", "Carol")

    assert send_dm(client, bob, viewer, "hey").status_code == 201
    assert send_dm(client, bob, viewer, "you there?").status_code == 201
    assert send_dm(client, carol, viewer, "lab notes?").status_code == 201

    data = inbox(client, viewer)
    assert data["totalUnread"] == 3
    assert data["totalUnread"] == sum(c["unreadCount"] for c in data["conversations"])
    assert [c["peerId"] for c in data["conversations"]] == [carol["id"], bob["id"]]
    assert data["conversations"][0]["peer"]["name"] == "Carol"
    assert data["conversations"][1]["lastMessage"]["content"] == "you there?"

    response = client.get(
        "/api/messages",
        params={"scope": "dm", "viewerId": viewer["id"], "peerId": bob["id"]},
    )
    assert response.status_code == 200
    assert [m["content"] for m in response.json()["messages"]] == ["hey", "you there?"]

    data = inbox(client, viewer)
    unread = {c["peerId"]: c["unreadCount"] for c in data["conversations"]}
    assert unread == {carol["id"]: 1, bob["id"]: 0}
    assert data["totalUnread"] == 1


def test_blocking_via_preferences_stops_dms_both_ways(client: TestClient):
    alice = sync_user(client, "alice", "Alice")
    bob = sync_user(client, "bob", "Bob")

    response = client.post(
        "/api/conversation-preferences",
        json={"userId": str(alice["id"]), "targetId": str(bob["id"]), "action": "block"},
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "User blocked"}

    response = send_dm(client, alice, bob, "hi")
    assert response.status_code == 403
    assert response.json()["detail"] == "You have blocked this user. Unblock them to send messages."

    response = send_dm(client, bob, alice, "hi")
    assert response.status_code == 403
    assert response.json()["detail"] == "You cannot message this user"

    profile = client.get("/api/users/alice").json()["user"]
    assert profile["blockedUsers"] == [bob["id"]]


def test_pin_capacity_and_delete_via_preferences(client: TestClient):
    viewer = sync_user(client, "viewer", "Viewer")
    peers = [sync_user(client, f"peer{index}", f"Peer {index}") for index in range(4)]
    for peer in peers:
        assert send_dm(client, peer, viewer, f"hello from {peer['name']}").status_code == 201

    def prefer(target: dict, action: str):
        return client.post(
            "/api/conversation-preferences",
            json={"userId": str(viewer["id"]), "targetId": str(target["id"]), "action": action},
        )

    for peer in peers[:3]:
        assert prefer(peer, "pin").status_code == 200
    response = prefer(peers[3], "pin")
    assert response.status_code == 400
    assert response.json() == {
        "detail": "You can pin up to 3 conversations.",
        "error": "capacity_exceeded",
    }

    data = inbox(client, viewer)
    assert [c["peerId"] for c in data["conversations"][:3]] == [p["id"] for p in peers[:3]]
    assert all(c["pinned"] for c in data["conversations"][:3])

    assert prefer(peers[0], "delete").json()["message"] == "Conversation deleted"
    data = inbox(client, viewer)
    assert peers[0]["id"] not in [c["peerId"] for c in data["conversations"]]

    profile = client.get("/api/users/viewer").json()["user"]
    assert profile["pinnedDms"] == [peers[1]["id"], peers[2]["id"]]

    assert prefer(viewer, "pin").status_code == 400
    response = client.post(
        "/api/conversation-preferences",
        json={"userId": str(viewer["id"]), "targetId": str(peers[1]["id"]), "action": "archive"},
    )
    assert response.status_code == 400


def test_reply_is_snapshotted(client: TestClient):
    asha = sync_user(client, "asha", "Asha")
    ravi = sync_user(client, "ravi", "Ravi")
    original = client.post(
        "/api/messages",
        json={"content": "Who has the notes?", "senderId": str(asha["id"]), "scope": "universal"},
    ).json()

    response = client.post(
        "/api/messages",
        json={
            "content": "I do",
            "senderId": str(ravi["id"]),
            "scope": "universal",
            "replyTo": {"_id": original["id"], "content": "forged", "senderName": "Nobody"},
        },
    )
    assert response.status_code == 201
    assert response.json()["replyTo"] == {
        "id": original["id"],
        "content": "Who has the notes?",
        "senderName": "Asha",
    }


def test_chat_config_and_stats(client: TestClient):
    sync_user(client, "asha", "Asha")

    config = client.get("/api/config/chat").json()
    assert config["maxPinnedConversations"] == 3
    assert config["historyLimit"] == 100
    assert "👍" in config["reactionEmojis"]

    stats = client.get("/api/stats").json()
    assert stats == {"users": 1, "messages": 0, "discussions": 0}


def test_health_reports_database(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["database"] == "connected"


def test_dm_fetch_with_unknown_peer_is_not_found(client: TestClient):
    viewer = sync_user(client, "viewer", "Viewer")

    response = client.get(
        "/api/messages", params={"scope": "dm", "viewerId": viewer["id"], "peerId": 999}
    )

    assert response.status_code == 404
    assert response.json() == {"detail": "Peer not found", "error": "not_found"}


def test_malformed_viewer_id_only_skips_presence_on_group_feeds(client: TestClient):
    asha = sync_user(client, "asha", "Asha")
    client.post(
        "/api/messages",
        json={"content": "morning", "senderId": str(asha["id"]), "scope": "universal"},
    )

    response = client.get("/api/messages", params={"scope": "universal", "viewerId": "abc"})
    assert response.status_code == 200
    assert [m["content"] for m in response.json()["messages"]] == ["morning"]
    assert response.json()["onlineCount"] == 0

    response = client.get(
        "/api/messages", params={"scope": "dm", "viewerId": "abc", "peerId": asha["id"]}
    )
    assert response.status_code == 400
    response = client.get("/api/messages", params={"scope": "conversations", "viewerId": "abc"})
    assert response.status_code == 400
