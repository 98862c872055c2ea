"""Integration tests for friend request and direct message endpoints."""


def send_request(client, headers, recipient_id):
    return client.post(
        "/api/friend-requests", json={"recipient_id": recipient_id}, headers=headers
    )


class TestFriendsRouter:
    """Test cases for friend requests and friend lists."""

    def test_request_and_accept(
        self, client, auth_headers, other_auth_headers, test_user, other_user
    ):
        sent = send_request(client, auth_headers, other_user.id)
        assert sent.status_code == 201
        assert sent.json()["status"] == "pending"

        incoming = client.get("/api/friend-requests", headers=other_auth_headers)
        assert incoming.json()[0]["sender_name"] == "Test User"

        accepted = client.post(
            f"/api/friend-requests/{sent.json()['id']}/accept",
            headers=other_auth_headers,
        )
        assert accepted.status_code == 200
        assert accepted.json()["status"] == "accepted"

        friends = client.get("/api/friends", headers=auth_headers).json()
        assert [f["friend_id"] for f in friends] == [other_user.id]
        assert friends[0]["friend_name"] == "Other User"

        reverse = client.get("/api/friends", headers=other_auth_headers).json()
        assert [f["friend_id"] for f in reverse] == [test_user.id]

    def test_duplicate_request_either_direction(
        self, client, auth_headers, other_auth_headers, test_user, other_user
    ):
        send_request(client, auth_headers, other_user.id)

        again = send_request(client, auth_headers, other_user.id)
        reverse = send_request(client, other_auth_headers, test_user.id)

        assert again.status_code == 409
        assert reverse.status_code == 409

    def test_request_to_self(self, client, auth_headers, test_user):
        response = send_request(client, auth_headers, test_user.id)

        assert response.status_code == 422

    def test_request_to_unknown_user(self, client, auth_headers):
        assert send_request(client, auth_headers, 999).status_code == 404

    def test_sender_cannot_accept(self, client, auth_headers, other_user):
        request_id = send_request(client, auth_headers, other_user.id).json()["id"]

        response = client.post(
            f"/api/friend-requests/{request_id}/accept", headers=auth_headers
        )

        assert response.status_code == 403

    def test_reject_then_respond_again(
        self, client, auth_headers, other_auth_headers, other_user
    ):
        request_id = send_request(client, auth_headers, other_user.id).json()["id"]

        rejected = client.post(
            f"/api/friend-requests/{request_id}/reject", headers=other_auth_headers
        )
        again = client.post(
            f"/api/friend-requests/{request_id}/accept", headers=other_auth_headers
        )

        assert rejected.json()["status"] == "rejected"
        assert again.status_code == 400
        assert client.get("/api/friends", headers=auth_headers).json() == []


class TestMessagesRouter:
    """Test cases for direct messages."""

    def test_send_and_read_conversation(
        self, client, auth_headers, other_auth_headers, test_user, other_user
    ):
        sent = client.post(
            "/api/messages",
            json={"receiver_id": other_user.id, "content": "Lecture notes?"},
            headers=auth_headers,
        )
        assert sent.status_code == 201
        assert sent.json()["is_read"] is False

        client.post(
            "/api/messages",
            json={"receiver_id": test_user.id, "content": "Sending now"},
            headers=other_auth_headers,
        )

        response = client.get(
            f"/api/messages/{test_user.id}", headers=other_auth_headers
        )

        assert response.status_code == 200
        messages = response.json()
        assert [m["content"] for m in messages] == ["Lecture notes?", "Sending now"]
        assert messages[0]["is_read"] is True

    def test_query_form_requires_participant(
        self, client, auth_headers, other_user, user_factory
    ):
        third = user_factory("thirduser")

        response = client.get(
            f"/api/messages?user_id={other_user.id}&friend_id={third.id}",
            headers=auth_headers,
        )

        assert response.status_code == 403

    def test_message_to_self(self, client, auth_headers, test_user):
        response = client.post(
            "/api/messages",
            json={"receiver_id": test_user.id, "content": "note to self"},
            headers=auth_headers,
        )

        assert response.status_code == 422

    def test_message_content_sanitized(self, client, auth_headers, other_user):
        response = client.post(
            "/api/messages",
            json={
                "receiver_id": other_user.id,
                "content": "<script>alert(1)</script>hi",
            },
            headers=auth_headers,
        )

        assert "<script>" not in response.json()["content"]
