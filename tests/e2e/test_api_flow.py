"""End-to-end tests for the HTTP and websocket API."""

import time
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from forum.config import AuthSettings
from forum.domain.service import JWTService
from forum.interface.api.app import create_app
from forum.persistence.cache import InMemoryTokenBlacklist
from tests.di import build_test_container


def issue_token(user_id: str, username: str) -> str:
    """Token signed with the default test secret, as the app verifies it."""
    return JWTService(AuthSettings(), InMemoryTokenBlacklist()).create_token(user_id, username)


def wait_for(check, timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while not check():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        time.sleep(0.01)


@pytest.fixture
def client():
    """Test client serving the app from an all-mock container."""
    app = create_app(container=build_test_container(with_fastapi=True))
    with TestClient(app) as test_client:
        yield test_client


class TestAuthFlow:
    """Authentication through the auth_token cookie."""

    def test_me_requires_token(self, client):
        response = client.get("/auth/me")

        assert response.status_code == 200
        assert response.json()["authenticated"] is False

    def test_logout_revokes_token(self, client):
        # Arrange
        user_id = str(uuid4())
        token = issue_token(user_id, "alice")
        client.cookies.set("auth_token", token)

        # Act
        before = client.get("/auth/me")
        logout = client.post("/auth/logout")
        # The response clears the cookie; replay the revoked token
        client.cookies.set("auth_token", token)
        after = client.get("/auth/me")

        # Assert
        assert before.json()["user"]["user_id"] == user_id
        assert logout.status_code == 200
        assert after.json()["authenticated"] is False

    def test_create_post_requires_authentication(self, client):
        response = client.post(
            "/posts",
            json={
                "title": "Hello",
                "content": "World",
                "community_id": str(uuid4()),
                "community_name": "physics",
            },
        )

        assert response.status_code == 401


class TestPostAndVoteFlow:
    """Posting, listing and voting against a running app."""

    def test_post_vote_and_listing(self, client):
        # Arrange
        author_token = issue_token(str(uuid4()), "alice")
        voter_token = issue_token(str(uuid4()), "bob")

        # Act
        client.cookies.set("auth_token", author_token)
        created = client.post(
            "/posts",
            json={
                "title": "Hello",
                "content": "World",
                "community_id": str(uuid4()),
                "community_name": "physics",
            },
        )
        post_id = created.json()["post_id"]

        client.cookies.set("auth_token", voter_token)
        vote = client.post(f"/posts/{post_id}/vote")

        # Assert
        assert created.status_code == 201
        assert vote.status_code == 202
        assert vote.json()["accepted"] is True

        wait_for(lambda: client.get(f"/posts/{post_id}/votes").json()["vote_count"] == 1)

        listing = client.get("/posts", params={"order": "hot"})
        assert listing.status_code == 200
        assert [p["post_id"] for p in listing.json()["posts"]] == [post_id]

    def test_unknown_post_is_404(self, client):
        response = client.get(f"/posts/{uuid4()}")

        assert response.status_code == 404

    def test_health_reports_running_pipeline(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["vote_workers_running"] is True


class TestReadRoutes:
    """Community listing and comment threads over HTTP."""

    def test_community_listing_and_comment_thread(self, client):
        # Arrange
        community_id = str(uuid4())
        client.cookies.set("auth_token", issue_token(str(uuid4()), "alice"))
        created = client.post(
            "/posts",
            json={
                "title": "Hello",
                "content": "World",
                "community_id": community_id,
                "community_name": "physics",
            },
        )
        post_id = created.json()["post_id"]
        top = client.post(f"/posts/{post_id}/comments", json={"content": "top"})
        comment_id = top.json()["comment_id"]
        reply = client.post(
            f"/posts/{post_id}/comments",
            json={"content": "reply", "parent_id": comment_id},
        )

        # Act
        community = client.get(f"/posts/community/{community_id}")
        comments = client.get(f"/posts/{post_id}/comments")
        replies = client.get(f"/comments/{comment_id}/replies")

        # Assert
        assert community.status_code == 200
        assert [p["post_id"] for p in community.json()["posts"]] == [post_id]
        assert comments.status_code == 200
        assert [c["comment_id"] for c in comments.json()["comments"]] == [comment_id]
        assert replies.status_code == 200
        assert [r["comment_id"] for r in replies.json()["replies"]] == [
            reply.json()["comment_id"]
        ]

    def test_comments_of_unknown_post_is_404(self, client):
        assert client.get(f"/posts/{uuid4()}/comments").status_code == 404
        assert client.get(f"/comments/{uuid4()}/replies").status_code == 404


class TestNotificationSocket:
    """Notification websocket handshake and keepalive."""

    def test_ping_is_answered_with_pong(self, client):
        user_id = str(uuid4())
        token = issue_token(user_id, "alice")

        with client.websocket_connect(f"/ws/notifications?token={token}") as websocket:
            websocket.send_text('{"kind": "ping"}')
            frame = websocket.receive_json()

        assert frame["kind"] == "pong"
        assert frame["to_user_id"] == user_id
