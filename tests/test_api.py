"""Integration tests for the HTTP API against an in-memory SQLite database."""

import base64
import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from humpswiki.core.security import create_access_token, is_legacy_hash, verify_token
from humpswiki.models import Post, User
from humpswiki.schemas.post_rules import encode_title_param
from support import add_user, auth_header, make_client, post_body


def _database_down(*args: object, **kwargs: object) -> None:
    raise OperationalError("SELECT", {}, Exception("database is down"))


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.client, self.database, self.settings = make_client()

    def tearDown(self) -> None:
        self.database.dispose()

    def headers(self, username: str = "alice", role: str = "contributor") -> dict[str, str]:
        return auth_header(username, role, self.settings)

    def create(self, title: str = "Randy", username: str = "alice", role: str = "contributor", **overrides: object):
        return self.client.post(
            "/api/createPost",
            json=post_body(title, **overrides),
            headers=self.headers(username, role),
        )

    def count_posts(self) -> int:
        db = self.database.session()
        try:
            return db.query(Post).count()
        finally:
            db.close()


class TestLogin(ApiTestCase):
    """POST /login issues a token for valid credentials and 401 otherwise."""

    def setUp(self) -> None:
        super().setUp()
        add_user(self.database, "randy", "hunter22", "humper")

    def test_valid_credentials(self) -> None:
        resp = self.client.post("/api/login", json={"username": "randy", "password": "hunter22"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["message"], "Login successful")
        payload = verify_token(data["token"], ["humper"], self.settings)
        self.assertEqual(payload.username, "randy")
        self.assertEqual(payload.role, "humper")

    def test_username_is_case_insensitive(self) -> None:
        resp = self.client.post("/api/login", json={"username": "RaNdY", "password": "hunter22"})
        self.assertEqual(resp.status_code, 200)

    def test_wrong_password_and_unknown_user_look_the_same(self) -> None:
        wrong = self.client.post("/api/login", json={"username": "randy", "password": "nope"})
        unknown = self.client.post("/api/login", json={"username": "nobody", "password": "hunter22"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())

    def test_legacy_password_upgraded(self) -> None:
        db = self.database.session()
        try:
            db.add(User(username="matt", password_hash=base64.b64encode(b"oldpass").decode(), role="contributor"))
            db.commit()
        finally:
            db.close()
        resp = self.client.post("/api/login", json={"username": "matt", "password": "oldpass"})
        self.assertEqual(resp.status_code, 200)
        db = self.database.session()
        try:
            stored = db.query(User).filter(User.username == "matt").one().password_hash
        finally:
            db.close()
        self.assertFalse(is_legacy_hash(stored))
        again = self.client.post("/api/login", json={"username": "matt", "password": "oldpass"})
        self.assertEqual(again.status_code, 200)

    def test_long_legacy_password_logs_in(self) -> None:
        password = "camel-" * 40
        db = self.database.session()
        try:
            db.add(User(username="matt", password_hash=base64.b64encode(password.encode()).decode(), role="humper"))
            db.commit()
        finally:
            db.close()
        resp = self.client.post("/api/login", json={"username": "matt", "password": password})
        self.assertEqual(resp.status_code, 200)
        again = self.client.post("/api/login", json={"username": "matt", "password": password})
        self.assertEqual(again.status_code, 200)

    def test_missing_fields_is_bad_request(self) -> None:
        resp = self.client.post("/api/login", json={"username": "randy"})
        self.assertEqual(resp.status_code, 400)

    def test_wrong_method(self) -> None:
        resp = self.client.get("/api/login")
        self.assertEqual(resp.status_code, 405)
        self.assertIn("POST", resp.headers["allow"])


class TestCreatePost(ApiTestCase):
    def test_create_then_read(self) -> None:
        resp = self.create()
        self.assertEqual(resp.status_code, 201)
        created = resp.json()
        self.assertEqual(created["postTitle"], "Randy")
        self.assertIsInstance(created["postId"], int)

        got = self.client.get("/api/getPost", params={"title": "Randy"})
        self.assertEqual(got.status_code, 200)
        post = got.json()
        self.assertEqual(post["author"], "alice")
        self.assertEqual(post["sections"], [{"title": "Bio", "body": "A humper.", "imageURL": ""}])
        self.assertEqual(post["details"], [])
        self.assertIsNotNone(post["createdDate"])
        self.assertIsNone(post["modifiedAuthor"])

    def test_duplicate_title_conflicts(self) -> None:
        self.assertEqual(self.create().status_code, 201)
        resp = self.create(username="bob", role="humper")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Post title must be unique")
        self.assertEqual(self.count_posts(), 1)

    def test_validation_failure_writes_nothing(self) -> None:
        resp = self.create(sections=[{"title": "Bio", "body": "x" * 1501, "imageURL": ""}])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.count_posts(), 0)

    def test_malformed_body_is_bad_request(self) -> None:
        resp = self.client.post("/api/createPost", json={"postTitle": "X", "sections": "nope"}, headers=self.headers())
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.count_posts(), 0)

    def test_requires_token(self) -> None:
        resp = self.client.post("/api/createPost", json=post_body())
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "No token provided.")

    def test_guest_role_rejected(self) -> None:
        resp = self.create(username="visitor", role="guest")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(self.count_posts(), 0)

    def test_expired_token_rejected(self) -> None:
        past = datetime.now(UTC) - timedelta(days=8)
        token = create_access_token("alice", "admin", self.settings, now=past)
        resp = self.client.post(
            "/api/createPost", json=post_body(), headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(resp.status_code, 401)

    def test_store_failure_is_internal_error(self) -> None:
        from humpswiki.services.post_store import PostStoreError

        with patch(
            "humpswiki.services.posts.post_store.insert_post",
            side_effect=PostStoreError("Failed to create post"),
        ):
            resp = self.create()
        self.assertEqual(resp.status_code, 500)


class TestEditPost(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.assertEqual(self.create().status_code, 201)

    def edit(self, title: str, body: dict, username: str = "alice", role: str = "contributor"):
        return self.client.put(
            f"/api/editPost?title={encode_title_param(title)}",
            json=body,
            headers=self.headers(username, role),
        )

    def test_author_edits(self) -> None:
        body = post_body(
            "Randy",
            details=[{"title": "Species", "body": "Camel"}],
            imageURL="https://example.com/randy.png",
        )
        resp = self.edit("Randy", body)
        self.assertEqual(resp.status_code, 200)
        post = self.client.get("/api/getPost", params={"title": "Randy"}).json()
        self.assertEqual(post["details"], [{"title": "Species", "body": "Camel"}])
        self.assertEqual(post["imageURL"], "https://example.com/randy.png")
        self.assertEqual(post["modifiedAuthor"], "alice")
        self.assertIsNotNone(post["modifiedDate"])
        self.assertEqual(post["author"], "alice")

    def test_rename(self) -> None:
        resp = self.edit("Randy", post_body("Randy the Camel"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/api/getPost", params={"title": "Randy"}).status_code, 404)
        self.assertEqual(self.client.get("/api/getPost", params={"title": "Randy the Camel"}).status_code, 200)

    def test_rename_onto_existing_title_conflicts(self) -> None:
        self.assertEqual(self.create("Matt").status_code, 201)
        resp = self.edit("Matt", post_body("Randy"))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.client.get("/api/getPost", params={"title": "Matt"}).status_code, 200)

    def test_missing_title_not_found(self) -> None:
        resp = self.edit("Nobody", post_body("Nobody"))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self.count_posts(), 1)

    def test_missing_title_param(self) -> None:
        resp = self.client.put("/api/editPost", json=post_body(), headers=self.headers())
        self.assertEqual(resp.status_code, 400)

    def test_invalid_payload_leaves_post_unchanged(self) -> None:
        resp = self.edit("Randy", post_body("Randy", sections=[{"title": "", "body": "x", "imageURL": ""}]))
        self.assertEqual(resp.status_code, 400)
        post = self.client.get("/api/getPost", params={"title": "Randy"}).json()
        self.assertEqual(post["sections"][0]["title"], "Bio")

    def test_other_contributor_forbidden(self) -> None:
        resp = self.edit("Randy", post_body("Randy"), username="bob")
        self.assertEqual(resp.status_code, 403)

    def test_subject_may_edit_own_page(self) -> None:
        resp = self.edit("Randy", post_body("Randy"), username="randy")
        self.assertEqual(resp.status_code, 200)

    def test_humper_edits_any_post(self) -> None:
        resp = self.edit("Randy", post_body("Randy"), username="hank", role="humper")
        self.assertEqual(resp.status_code, 200)

    def test_store_failure_on_lookup_is_internal_error(self) -> None:
        with patch("sqlalchemy.orm.Session.query", _database_down):
            resp = self.edit("Randy", post_body("Randy"))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["detail"], "Failed to update post.")

    def test_title_with_percent(self) -> None:
        self.assertEqual(self.create("100% Humper").status_code, 201)
        resp = self.edit("100% Humper", post_body("100% Humper", imageURL="x"))
        self.assertEqual(resp.status_code, 200)
        got = self.client.get(f"/api/getPost?title={encode_title_param('100% Humper')}")
        self.assertEqual(got.json()["imageURL"], "x")

    def test_wrong_method(self) -> None:
        resp = self.client.post("/api/editPost?title=Randy", json=post_body())
        self.assertEqual(resp.status_code, 405)
        self.assertIn("PUT", resp.headers["allow"])


class TestDeletePost(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        resp = self.create()
        self.post_id = resp.json()["postId"]

    def delete(self, post_id: object, username: str = "alice", role: str = "contributor"):
        return self.client.delete(
            "/api/deletePost", params={"id": post_id}, headers=self.headers(username, role)
        )

    def test_author_deletes(self) -> None:
        resp = self.delete(self.post_id)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.count_posts(), 0)
        self.assertEqual(self.delete(self.post_id).status_code, 404)
        self.assertEqual(self.client.get("/api/getPost", params={"title": "Randy"}).status_code, 404)

    def test_missing_id_not_found(self) -> None:
        self.assertEqual(self.delete(self.post_id + 100).status_code, 404)
        self.assertEqual(self.count_posts(), 1)

    def test_invalid_id(self) -> None:
        self.assertEqual(self.delete("abc").status_code, 400)
        resp = self.client.delete("/api/deletePost", headers=self.headers())
        self.assertEqual(resp.status_code, 400)

    def test_id_outside_integer_range(self) -> None:
        for post_id in ("9" * 30, str(2**31), "0", "-1"):
            resp = self.delete(post_id)
            self.assertEqual(resp.status_code, 400, post_id)
            self.assertEqual(resp.json()["detail"], "Invalid ID format")
        self.assertEqual(self.count_posts(), 1)

    def test_store_failure_on_lookup_is_internal_error(self) -> None:
        with patch("sqlalchemy.orm.Session.get", _database_down):
            resp = self.delete(self.post_id)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["detail"], "Failed to delete post")
        self.assertEqual(self.count_posts(), 1)

    def test_requires_token(self) -> None:
        resp = self.client.delete("/api/deletePost", params={"id": self.post_id})
        self.assertEqual(resp.status_code, 401)

    def test_non_author_forbidden_admin_allowed(self) -> None:
        self.assertEqual(self.delete(self.post_id, username="bob", role="humper").status_code, 403)
        self.assertEqual(self.delete(self.post_id, username="root", role="admin").status_code, 200)


class TestReads(ApiTestCase):
    def test_get_post_requires_title(self) -> None:
        self.assertEqual(self.client.get("/api/getPost").status_code, 400)

    def test_get_posts_lists_all(self) -> None:
        for title in ("A", "B", "C"):
            self.create(title)
        posts = self.client.get("/api/getPosts").json()
        self.assertEqual([p["postTitle"] for p in posts], ["A", "B", "C"])

    def test_random_posts_sample_three(self) -> None:
        for title in ("A", "B", "C", "D", "E"):
            self.create(title)
        posts = self.client.get("/api/getRandomPosts").json()
        self.assertEqual(len(posts), 3)
        self.assertEqual(len({p["id"] for p in posts}), 3)

    def test_random_posts_with_fewer_posts(self) -> None:
        self.create("A")
        self.assertEqual(len(self.client.get("/api/getRandomPosts").json()), 1)

    def test_members_filter(self) -> None:
        self.create("Randy")
        self.create("Visitor")
        db = self.database.session()
        try:
            db.query(Post).filter(Post.post_title == "Randy").one().is_member = True
            db.commit()
        finally:
            db.close()
        members = self.client.get("/api/getMembers").json()
        self.assertEqual([m["postTitle"] for m in members], ["Randy"])
        self.assertTrue(members[0]["isMember"])

    def test_store_failure_on_reads_is_internal_error(self) -> None:
        with patch("sqlalchemy.orm.Session.query", _database_down):
            self.assertEqual(self.client.get("/api/getPosts").status_code, 500)
            self.assertEqual(self.client.get("/api/getPost", params={"title": "Randy"}).status_code, 500)
            self.assertEqual(self.client.get("/api/getMembers").status_code, 500)

    def test_reads_reject_other_methods(self) -> None:
        resp = self.client.post("/api/getPosts")
        self.assertEqual(resp.status_code, 405)
        self.assertIn("GET", resp.headers["allow"])


class TestConnect(ApiTestCase):
    def test_connected(self) -> None:
        resp = self.client.get("/api/connect")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Connected to database!")

    def test_disconnected(self) -> None:
        with patch.object(self.database, "check_connected", return_value=False):
            resp = self.client.get("/api/connect")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["detail"], "Failed to connect to database.")


if __name__ == "__main__":
    unittest.main()
