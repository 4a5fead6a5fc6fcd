"""End-to-end tests for the comment thread endpoints."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from commentary.config import Settings
from commentary.domain.value import Role
from commentary.interface.api.app import create_app
from commentary.util.jwt import create_token
from tests.di import build_test_container


@pytest.fixture
def client():
    """Create test client with test container."""
    app_instance = create_app(build_test_container())
    return TestClient(app_instance)


def auth(role: Role = Role.USER) -> dict[str, str]:
    """Cookie header for a freshly minted user."""
    token = create_token(str(uuid4()), role.value, Settings().auth)
    return {"Cookie": f"auth_token={token}"}


class TestCommentThreadEndpoints:
    """End-to-end tests for the comment thread API.

    Note: These tests focus on the HTTP contract (status codes and
    projections). Thread semantics are covered by the unit tests.
    """

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200

    def test_hello_hi_walkthrough(self, client):
        """Submit, approve, reply, hide and delete through the API."""
        content_item_id = uuid4()
        user_a, user_b, moderator = auth(), auth(), auth(Role.MODERATOR)

        # A submits "hello" and sees it as pending
        response = client.post(
            f"/content/{content_item_id}/comments",
            json={"body": "hello"},
            headers=user_a,
        )
        assert response.status_code == 201
        hello = response.json()
        assert hello["approval_state"] == "pending"
        assert hello["reply_count"] == 0

        # B cannot see it until a moderator approves it
        listing = client.get(f"/content/{content_item_id}/comments", headers=user_b)
        assert listing.json()["nodes"] == []
        approved = client.post(
            f"/comments/{hello['comment_id']}/approve", headers=moderator
        )
        assert approved.status_code == 200
        listing = client.get(f"/content/{content_item_id}/comments", headers=user_b)
        nodes = listing.json()["nodes"]
        assert [c["id"] for c in nodes] == [hello["id"]]
        assert "approval_state" not in nodes[0]
        assert "total_reply_count" not in nodes[0]

        # B replies "hi"; A does not see the pending reply
        response = client.post(
            f"/content/{content_item_id}/comments",
            json={"body": "hi", "parent_id": hello["id"]},
            headers=user_b,
        )
        assert response.status_code == 201
        hi = response.json()
        assert hi["depth"] == 1
        replies = client.get(f"/comments/{hello['comment_id']}/replies", headers=user_a)
        assert replies.json()["nodes"] == []

        # B deletes the reply; the parent's public count never moved
        deleted = client.delete(f"/comments/{hi['comment_id']}", headers=user_b)
        assert deleted.status_code == 204
        listing = client.get(f"/content/{content_item_id}/comments", headers=moderator)
        parent = listing.json()["nodes"][0]
        assert parent["reply_count"] == 0
        assert parent["total_reply_count"] == 0

    def test_anonymous_submission_forbidden(self, client):
        response = client.post(
            f"/content/{uuid4()}/comments", json={"body": "drive-by"}
        )

        assert response.status_code == 403

    def test_invalid_token_treated_as_anonymous(self, client):
        response = client.post(
            f"/content/{uuid4()}/comments",
            json={"body": "hello"},
            headers={"Cookie": "auth_token=invalid-token"},
        )

        assert response.status_code == 403

    def test_empty_body_rejected(self, client):
        response = client.post(
            f"/content/{uuid4()}/comments", json={"body": "   "}, headers=auth()
        )

        assert response.status_code == 400

    def test_malformed_content_item_id_rejected(self, client):
        response = client.get("/content/not-a-uuid/comments")

        assert response.status_code == 400

    def test_replies_of_unknown_comment_not_found(self, client):
        response = client.get(f"/comments/{uuid4()}/replies")

        assert response.status_code == 404

    def test_delete_twice_not_found(self, client):
        user = auth()
        created = client.post(
            f"/content/{uuid4()}/comments", json={"body": "once"}, headers=user
        ).json()

        first = client.delete(f"/comments/{created['comment_id']}", headers=user)
        second = client.delete(f"/comments/{created['comment_id']}", headers=user)

        assert first.status_code == 204
        assert second.status_code == 404

    def test_delete_by_other_user_forbidden(self, client):
        created = client.post(
            f"/content/{uuid4()}/comments", json={"body": "mine"}, headers=auth()
        ).json()

        response = client.delete(f"/comments/{created['comment_id']}", headers=auth())

        assert response.status_code == 403

    def test_moderating_twice_conflicts(self, client):
        moderator = auth(Role.MODERATOR)
        created = client.post(
            f"/content/{uuid4()}/comments", json={"body": "judge me"}, headers=auth()
        ).json()

        first = client.post(
            f"/comments/{created['comment_id']}/reject", headers=moderator
        )
        second = client.post(
            f"/comments/{created['comment_id']}/approve", headers=moderator
        )

        assert first.status_code == 200
        assert first.json()["approval_state"] == "rejected"
        assert second.status_code == 409

    def test_user_cannot_moderate(self, client):
        created = client.post(
            f"/content/{uuid4()}/comments", json={"body": "self-approve"}, headers=auth()
        ).json()

        response = client.post(
            f"/comments/{created['comment_id']}/approve", headers=auth()
        )

        assert response.status_code == 403

    def test_edit_comment(self, client):
        user = auth()
        created = client.post(
            f"/content/{uuid4()}/comments", json={"body": "teh"}, headers=user
        ).json()

        response = client.patch(
            f"/comments/{created['comment_id']}", json={"body": "the"}, headers=user
        )

        assert response.status_code == 200
        assert response.json()["body"] == "the"

    def test_moderation_queue(self, client):
        moderator = auth(Role.MODERATOR)
        content_item_id = uuid4()
        created = client.post(
            f"/content/{content_item_id}/comments", json={"body": "queued"}, headers=auth()
        ).json()

        queue = client.get(
            "/moderation/comments",
            params={"content_item_id": str(content_item_id)},
            headers=moderator,
        )
        forbidden = client.get("/moderation/comments", headers=auth())

        assert queue.status_code == 200
        assert [c["id"] for c in queue.json()["nodes"]] == [
            created["id"]
        ]
        assert forbidden.status_code == 403

    def test_pagination_cursor(self, client):
        moderator = auth(Role.MODERATOR)
        content_item_id = uuid4()
        for i in range(3):
            client.post(
                f"/content/{content_item_id}/comments",
                json={"body": f"comment {i}"},
                headers=moderator,
            )

        first = client.get(
            f"/content/{content_item_id}/comments", params={"limit": 2}
        ).json()
        second = client.get(
            f"/content/{content_item_id}/comments",
            params={"limit": 2, "cursor": first["next_cursor"]},
        ).json()

        assert len(first["nodes"]) == 2
        assert first["next_cursor"] is not None
        assert len(second["nodes"]) == 1
        assert second["next_cursor"] is None

    def test_limit_above_maximum_rejected(self, client):
        response = client.get(f"/content/{uuid4()}/comments", params={"limit": 1000})

        assert response.status_code == 400

    def test_listing_response_shape_for_ordinary_user(self, client):
        content_item_id = uuid4()
        moderator = auth(Role.MODERATOR)
        client.post(
            f"/content/{content_item_id}/comments",
            json={"body": "visible"},
            headers=moderator,
        )

        response = client.get(f"/content/{content_item_id}/comments", headers=auth())

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"nodes", "next_cursor"}
        node = body["nodes"][0]
        assert "id" in node
        assert node["parent_id"] is None
        assert "approval_state" not in node
        assert "total_reply_count" not in node

    def test_author_sees_own_approval_state_in_listing(self, client):
        content_item_id = uuid4()
        author = auth()
        created = client.post(
            f"/content/{content_item_id}/comments",
            json={"body": "mine"},
            headers=author,
        ).json()

        listing = client.get(f"/content/{content_item_id}/comments", headers=author)

        node = listing.json()["nodes"][0]
        assert node["id"] == created["id"]
        assert node["approval_state"] == "pending"
        assert "total_reply_count" not in node

    def test_non_integer_limit_rejected(self, client):
        response = client.get(f"/content/{uuid4()}/comments", params={"limit": "abc"})

        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == "query.limit"

    def test_missing_body_rejected(self, client):
        response = client.post(
            f"/content/{uuid4()}/comments", json={}, headers=auth()
        )

        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == "body.body"
