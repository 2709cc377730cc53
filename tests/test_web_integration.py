"""
Web integration tests for the permissions, user and comment routes.
"""
import json

import pytest

from app.main import create_app
from app.permissions.models import User
from app.user_management.loader import InMemoryUserLoader
from config_manager import ConfigManager

ADMIN_ID = 100


def auth(uid):
    return {"Cookie": f"uid={uid}"}


@pytest.fixture
def loader():
    return InMemoryUserLoader([
        User(id=1, reputation=42),
        User(id=2, reputation=-42),
        User(id=3, reputation=120),
        User(id=4, reputation=-10),
        User(id=ADMIN_ID, reputation=500),
    ])


@pytest.fixture
def app(tmp_path, loader):
    config_file = tmp_path / "web_app_config.json"
    config_file.write_text(json.dumps({
        "app": {"admin_user_ids": [str(ADMIN_ID)]},
        "paths": {"user_data_dir": str(tmp_path / "user_data")},
    }))
    app = create_app(ConfigManager(str(config_file)), user_loader=loader)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client(use_cookies=False)


class TestPermissionRoutes:
    """Test permission information routes."""

    def test_limitations(self, client):
        response = client.get("/permissions/limitations")
        assert response.status_code == 200
        data = response.get_json()
        assert data["min_reputations"]["flag_comment"] == 40
        assert data["limitations"]["add_video"] == [0, 3, 10]
        assert data["confirmed_user_threshold"] == 50

    def test_quota_requires_login(self, client):
        assert client.get("/permissions/quota").status_code == 401

    def test_quota_unknown_user(self, client):
        assert client.get("/permissions/quota", headers=auth(999)).status_code == 404

    def test_quota(self, client, app):
        app.extensions["permissions"].record(1, "add_comment")

        response = client.get("/permissions/quota", headers=auth(1))
        assert response.status_code == 200
        data = response.get_json()
        assert data["tier"] == "new_user"
        assert data["quota"]["add_comment"]["used"] == 1
        assert data["quota"]["add_comment"]["remaining"] == 9

    def test_reset_admin_only(self, client, app):
        permissions = app.extensions["permissions"]
        permissions.record(1, "flag_comment")

        assert client.post("/permissions/reset", headers=auth(1)).status_code == 403
        assert permissions.occurrences(1, "flag_comment") == 1

        assert client.post("/permissions/reset", headers=auth(ADMIN_ID)).status_code == 200
        assert permissions.occurrences(1, "flag_comment") == 0

    def test_usage_admin_only(self, client, app):
        app.extensions["permissions"].record(1, "vote_up")
        assert client.get("/permissions/usage", headers=auth(1)).status_code == 403

        data = client.get("/permissions/usage", headers=auth(ADMIN_ID)).get_json()
        assert data["tracked_users"] == 1
        assert data["usage"] == {"1": {"vote_up": 1}}


class TestUserRoutes:

    def test_me(self, client):
        data = client.get("/me", headers=auth(3)).get_json()
        assert data == {"id": 3, "reputation": 120, "is_admin": False, "tier": "confirmed"}

    def test_me_requires_login(self, client):
        assert client.get("/me").status_code == 401
        assert client.get("/me", headers=auth("abc")).status_code == 401


class TestCommentRoutes:
    """Test permission-gated comment routes."""

    def post_comment(self, client, uid, text="Source please"):
        return client.post("/comments", json={"statement_id": 7, "text": text}, headers=auth(uid))

    def test_add_comment(self, client):
        response = self.post_comment(client, 1)
        assert response.status_code == 201
        assert response.get_json()["comment"]["statement_id"] == 7

        listed = client.get("/statements/7/comments").get_json()["comments"]
        assert len(listed) == 1

    def test_add_comment_limit_reached(self, client):
        # Negative reputation users may comment 3 times a day
        for _ in range(3):
            assert self.post_comment(client, 4).status_code == 201

        response = self.post_comment(client, 4)
        assert response.status_code == 403
        assert response.get_json() == {
            "error": "forbidden",
            "message": "limit reached",
            "reason": "limit reached",
        }

    def test_add_comment_bad_request(self, client):
        assert client.post("/comments", json={"text": "x"}, headers=auth(1)).status_code == 400
        assert self.post_comment(client, 1, text="   ").status_code == 400

    def test_flag_comment(self, client):
        comment_id = self.post_comment(client, 3).get_json()["comment"]["id"]

        response = client.post(f"/comments/{comment_id}/flag", headers=auth(1))
        assert response.status_code == 200
        assert response.get_json()["comment"]["flags"] == 1

        # New users may flag once a day
        other_id = self.post_comment(client, 3).get_json()["comment"]["id"]
        response = client.post(f"/comments/{other_id}/flag", headers=auth(1))
        assert response.status_code == 403
        assert response.get_json()["reason"] == "limit reached"

    def test_flag_not_enough_reputation(self, client):
        comment_id = self.post_comment(client, 3).get_json()["comment"]["id"]
        response = client.post(f"/comments/{comment_id}/flag", headers=auth(2))
        assert response.status_code == 403
        assert response.get_json()["reason"] == "not enough reputation"

    def test_vote(self, client, app):
        comment_id = self.post_comment(client, 1).get_json()["comment"]["id"]

        response = client.post(f"/comments/{comment_id}/vote", json={"value": 1}, headers=auth(3))
        assert response.status_code == 200
        assert response.get_json()["vote_type"] == "comment_vote_up"
        assert app.extensions["permissions"].occurrences(3, "vote_up") == 1

    def test_vote_down_needs_reputation(self, client):
        comment_id = self.post_comment(client, 3).get_json()["comment"]["id"]
        response = client.post(f"/comments/{comment_id}/vote", json={"value": -1}, headers=auth(1))
        assert response.status_code == 403

    def test_vote_missing_value(self, client):
        comment_id = self.post_comment(client, 1).get_json()["comment"]["id"]
        response = client.post(f"/comments/{comment_id}/vote", json={}, headers=auth(3))
        assert response.status_code == 400

    def test_unknown_user(self, client):
        response = self.post_comment(client, 999)
        assert response.status_code == 404


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}
