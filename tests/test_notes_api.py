"""API tests for /notes: auth gating, owner scoping, ordering, and field limits."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from notekeeper.core.config import settings
from notekeeper.core.security import create_access_token
from notekeeper.models import Note
from tests.support import ApiTestCase


class NotesTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.token = self.token_for("owner@mail.com")
        self.headers = self.bearer(self.token)

    def create(self, title: str = "Groceries", content: str = "Milk, eggs", headers=None):
        return self.client.post(
            "/notes",
            json={"title": title, "content": content},
            headers=headers or self.headers,
        )


class TestAuthentication(NotesTestCase):
    def test_missing_token(self) -> None:
        response = self.client.get("/notes")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers["WWW-Authenticate"], "Bearer")
        self.assertIn("message", response.json())

    def test_create_without_token(self) -> None:
        response = self.client.post("/notes", json={"title": "t", "content": "c"})
        self.assertEqual(response.status_code, 401)

    def test_garbage_token(self) -> None:
        response = self.client.get("/notes", headers=self.bearer("garbage"))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Token is not valid"})

    def test_expired_token(self) -> None:
        old = create_access_token(sub=1, now=datetime.now(UTC) - timedelta(days=8))
        response = self.client.get("/notes", headers=self.bearer(old))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Token is not valid"})

    def test_non_numeric_subject(self) -> None:
        token = jwt.encode(
            {"sub": "abc", "exp": datetime.now(UTC) + timedelta(hours=1)},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        self.assertEqual(self.client.get("/notes", headers=self.bearer(token)).status_code, 401)

    def test_token_for_deleted_user(self) -> None:
        token = create_access_token(sub=9999)
        self.assertEqual(self.client.get("/notes", headers=self.bearer(token)).status_code, 401)


class TestCreateAndList(NotesTestCase):
    def test_empty_list(self) -> None:
        response = self.client.get("/notes", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["notes"], [])

    def test_create_note(self) -> None:
        response = self.create("  Groceries  ", "Milk, eggs")
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "Note created successfully")
        self.assertEqual(body["note"]["title"], "Groceries")
        self.assertEqual(body["note"]["content"], "Milk, eggs")
        self.assertIn("created_at", body["note"])

    def test_missing_title(self) -> None:
        response = self.client.post("/notes", json={"content": "c"}, headers=self.headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual([e["field"] for e in response.json()["errors"]], ["title"])

    def test_blank_content(self) -> None:
        response = self.create("Title", "   ")
        self.assertEqual(response.status_code, 400)
        self.assertEqual([e["field"] for e in response.json()["errors"]], ["content"])

    def test_length_limits(self) -> None:
        self.assertEqual(self.create("t" * 200, "c" * 5000).status_code, 201)
        self.assertEqual(self.create("t" * 201, "c").status_code, 400)
        self.assertEqual(self.create("t", "c" * 5001).status_code, 400)

    def test_list_newest_first(self) -> None:
        first = self.create("first").json()["note"]["id"]
        second = self.create("second").json()["note"]["id"]
        third = self.create("third").json()["note"]["id"]
        # Spread created_at so ordering does not rely on the id tie-break.
        base = datetime.now(UTC)
        for offset, note_id in enumerate((first, second, third)):
            note = self.db.get(Note, note_id)
            note.created_at = base + timedelta(minutes=offset)
        self.db.commit()

        notes = self.client.get("/notes", headers=self.headers).json()["notes"]
        self.assertEqual([n["title"] for n in notes], ["third", "second", "first"])

    def test_notes_are_private(self) -> None:
        self.create("mine")
        other = self.bearer(self.token_for("other@mail.com"))
        response = self.client.get("/notes", headers=other)
        self.assertEqual(response.json()["notes"], [])


class TestUpdateAndDelete(NotesTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.note_id = self.create("Original", "Body").json()["note"]["id"]
        self.other = self.bearer(self.token_for("other@mail.com"))

    def test_update_title_only(self) -> None:
        response = self.client.put(
            f"/notes/{self.note_id}", json={"title": "Renamed"}, headers=self.headers
        )
        self.assertEqual(response.status_code, 200)
        note = response.json()["note"]
        self.assertEqual(note["title"], "Renamed")
        self.assertEqual(note["content"], "Body")

    def test_update_rejects_blank_title(self) -> None:
        response = self.client.put(
            f"/notes/{self.note_id}", json={"title": "  "}, headers=self.headers
        )
        self.assertEqual(response.status_code, 400)

    def test_update_foreign_note_is_not_found(self) -> None:
        response = self.client.put(
            f"/notes/{self.note_id}", json={"title": "Hijacked"}, headers=self.other
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "Note not found"})
        self.db.expire_all()
        self.assertEqual(self.db.get(Note, self.note_id).title, "Original")

    def test_update_missing_note_is_not_found(self) -> None:
        response = self.client.put("/notes/424242", json={"title": "x"}, headers=self.headers)
        self.assertEqual(response.status_code, 404)

    def test_invalid_id(self) -> None:
        response = self.client.put("/notes/abc", json={"title": "x"}, headers=self.headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"message": "Invalid note ID"})
        response = self.client.delete("/notes/abc", headers=self.headers)
        self.assertEqual(response.status_code, 400)

    def test_out_of_range_id(self) -> None:
        for note_id in ("99999999999999999999999", "2147483648", "0", "-1"):
            response = self.client.put(f"/notes/{note_id}", json={"title": "x"}, headers=self.headers)
            self.assertEqual(response.status_code, 400, note_id)
            self.assertEqual(response.json(), {"message": "Invalid note ID"})
            response = self.client.delete(f"/notes/{note_id}", headers=self.headers)
            self.assertEqual(response.status_code, 400, note_id)
            self.assertEqual(response.json(), {"message": "Invalid note ID"})
        response = self.client.get("/notes", headers=self.headers)
        self.assertEqual(len(response.json()["notes"]), 1)

    def test_delete_note(self) -> None:
        response = self.client.delete(f"/notes/{self.note_id}", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Note deleted successfully"})
        notes = self.client.get("/notes", headers=self.headers).json()["notes"]
        self.assertEqual(notes, [])

    def test_delete_foreign_note_is_not_found(self) -> None:
        response = self.client.delete(f"/notes/{self.note_id}", headers=self.other)
        self.assertEqual(response.status_code, 404)
        self.db.expire_all()
        self.assertIsNotNone(self.db.get(Note, self.note_id))

    def test_delete_twice(self) -> None:
        self.client.delete(f"/notes/{self.note_id}", headers=self.headers)
        response = self.client.delete(f"/notes/{self.note_id}", headers=self.headers)
        self.assertEqual(response.status_code, 404)


if __name__ == "__main__":
    unittest.main()
