"""End-to-end API tests with AUTH_MODE=session (http-only session cookie)."""

import unittest
from datetime import UTC, datetime, timedelta

from linkshare.models import AuthSession, User
from helpers import ApiTestCase


class SessionApiTestCase(ApiTestCase):
    auth_mode = "session"

    @property
    def cookie_name(self) -> str:
        return self.settings.SESSION_COOKIE_NAME


class TestSessionRegisterAndLogin(SessionApiTestCase):
    def test_register_logs_the_user_in(self) -> None:
        resp = self.register("alice", "password123")
        self.assertEqual(resp.status_code, 201)
        set_cookie = resp.headers["set-cookie"]
        self.assertIn(self.cookie_name, set_cookie)
        self.assertIn("HttpOnly", set_cookie)
        me = self.client.get("/me")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["username"], "alice")

    def test_login_sets_cookie_and_hides_reference(self) -> None:
        self.register("alice", "password123", client=self.other_client())
        resp = self.login("alice", "password123")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertIsNone(body["assertion"])
        self.assertEqual(body["token_type"], "session")
        self.assertEqual(body["username"], "alice")
        self.assertIn(self.cookie_name, resp.headers["set-cookie"])
        self.assertEqual(self.client.get("/me").status_code, 200)

    def test_bad_login_is_generic_401(self) -> None:
        self.register("alice", "password123", client=self.other_client())
        wrong_pw = self.login("alice", "nope-nope")
        no_user = self.login("zed", "password123")
        self.assertEqual(wrong_pw.status_code, 401)
        self.assertEqual(wrong_pw.json(), no_user.json())
        self.assertNotIn("set-cookie", wrong_pw.headers)

    def test_bearer_header_is_ignored_in_session_mode(self) -> None:
        resp = self.client.get("/me", headers={"Authorization": "Bearer whatever"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Authentication required.")
        self.assertNotIn("www-authenticate", resp.headers)


class TestSessionLogout(SessionApiTestCase):
    def test_logout_revokes_server_side(self) -> None:
        self.register("alice", "password123")
        reference = self.client.cookies.get(self.cookie_name)
        self.assertTrue(reference)

        resp = self.client.post("/logout")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/me").status_code, 401)

        # Replaying the old reference from another client also fails.
        replay = self.other_client()
        replay.cookies.set(self.cookie_name, reference)
        resp = replay.get("/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid credentials.")

        db = self.app.state.session_factory()
        try:
            self.assertEqual(db.query(AuthSession).count(), 0)
        finally:
            db.close()

    def test_logout_requires_session(self) -> None:
        self.assertEqual(self.client.post("/logout").status_code, 401)


class TestSessionExpiry(SessionApiTestCase):
    def test_expired_session_is_rejected(self) -> None:
        db = self.app.state.session_factory()
        try:
            self.register("alice", "password123", client=self.other_client())
            user = db.query(User).filter(User.username == "alice").one()
            issued = self.app.state.identity_provider.issue(
                db, user, now=datetime.now(UTC) - timedelta(days=2)
            )
        finally:
            db.close()
        self.client.cookies.set(self.cookie_name, issued.value)
        resp = self.client.get("/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid credentials.")


class TestSessionArticleScenario(SessionApiTestCase):
    def test_owner_admin_and_stranger(self) -> None:
        alice = self.register("alice", "password123").json()
        resp = self.client.post("/articles", json={"url": "https://example.com"})
        self.assertEqual(resp.status_code, 201)
        article = resp.json()
        self.assertEqual(article["owner_id"], alice["id"])

        bob = self.other_client()
        self.assertEqual(self.register("bob", "password123", client=bob).status_code, 201)
        self.assertEqual(bob.delete(f"/articles/{article['id']}").status_code, 403)

        anonymous = self.other_client()
        self.assertEqual(anonymous.delete(f"/articles/{article['id']}").status_code, 401)
        self.assertEqual(bob.delete("/articles/424242").status_code, 404)

        admin = self.other_client()
        self.assertEqual(self.login("admin", "admin", client=admin).status_code, 200)
        self.assertEqual(admin.delete(f"/articles/{article['id']}").status_code, 200)
        self.assertEqual(self.client.get("/articles").json()["articles"], [])


if __name__ == "__main__":
    unittest.main()
