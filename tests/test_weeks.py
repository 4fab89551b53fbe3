# tests/test_weeks.py
"""
Tests for the weeks API.

Covers multipart week creation (validation order, file categorization,
partial upload failures), listing order, update and deletion with
storage cleanup.
"""

import pytest

BUCKET_URL = "https://test.supabase.co/storage/v1/object/public/week-files"

PHOTO = ("files", ("photo.jpg", b"\xff\xd8\xff\xe0jpeg", "image/jpeg"))
PDF = ("files", ("guide.pdf", b"%PDF-1.4 guide", "application/pdf"))
VIDEO = ("files", ("intro.mp4", b"\x00\x00\x00\x18ftyp", "video/mp4"))
TEXT = ("files", ("notes.txt", b"plain notes", "text/plain"))


def week_form(number="1", title="Career Foundations", description="Getting started"):
    return {"week_number": number, "title": title, "description": description}


@pytest.fixture
def seeded_weeks(mock_supabase):
    mock_supabase.seed_data("weeks", [
        {"id": "week-3", "week_number": 3, "title": "Interviews", "description": "Practice",
         "created_at": "2024-03-03T10:00:00+00:00"},
        {"id": "week-1", "week_number": 1, "title": "Intro", "description": "Welcome",
         "created_at": "2024-03-01T10:00:00+00:00"},
        {"id": "week-2", "week_number": 2, "title": "Resumes", "description": "Writing",
         "created_at": "2024-03-02T10:00:00+00:00"},
    ])
    mock_supabase.seed_data("week_files", [
        {"id": "file-1", "week_id": "week-1", "file_name": "welcome.jpg", "file_type": "photo",
         "file_url": f"{BUCKET_URL}/week-1/1700000000000-welcome.jpg", "file_size": 10},
        {"id": "file-2", "week_id": "week-1", "file_name": "welcome.pdf", "file_type": "pdf",
         "file_url": f"{BUCKET_URL}/week-1/1700000000001-welcome.pdf", "file_size": 20},
    ])
    mock_supabase.storage_objects[("week-files", "week-1/1700000000000-welcome.jpg")] = {"content": b"x"}
    mock_supabase.storage_objects[("week-files", "week-1/1700000000001-welcome.pdf")] = {"content": b"y"}
    return mock_supabase


class TestCreateWeek:
    """POST /api/weeks"""

    def test_create_week_with_photo_and_pdf(self, client, mock_supabase, admin_headers):
        response = client.post("/api/weeks", data=week_form(), files=[PHOTO, PDF], headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Week created successfully"
        assert data["week"]["id"]
        assert data["week"]["week_number"] == 1
        assert sorted(f["file_type"] for f in data["files"]) == ["pdf", "photo"]
        assert data["skipped"] == []

        assert len(mock_supabase.rows("weeks")) == 1
        rows = mock_supabase.rows("week_files")
        assert len(rows) == 2
        assert all(r["week_id"] == data["week"]["id"] for r in rows)
        assert all(r["uploaded_by"] == "admin-1" for r in rows)

    def test_files_stored_under_week_prefix(self, client, mock_supabase, admin_headers):
        client.post("/api/weeks", data=week_form(number="4"), files=[PHOTO, PDF], headers=admin_headers)

        paths = [path for (bucket, path) in mock_supabase.storage_objects]
        assert len(paths) == 2
        assert all(p.startswith("week-4/") for p in paths)
        assert any(p.endswith("-photo.jpg") for p in paths)
        urls = [r["file_url"] for r in mock_supabase.rows("week_files")]
        assert all(u.startswith(f"{BUCKET_URL}/week-4/") for u in urls)

    def test_video_is_accepted(self, client, admin_headers):
        response = client.post("/api/weeks", data=week_form(), files=[PHOTO, PDF, VIDEO], headers=admin_headers)

        assert response.status_code == 200
        assert sorted(f["file_type"] for f in response.json()["files"]) == ["pdf", "photo", "video"]

    def test_unsupported_file_is_skipped(self, client, mock_supabase, admin_headers):
        response = client.post("/api/weeks", data=week_form(), files=[PHOTO, PDF, TEXT], headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data["files"]) == 2
        assert data["skipped"] == [{"file_name": "notes.txt", "reason": "Unsupported file type"}]
        assert len(mock_supabase.storage_objects) == 2

    def test_generic_content_type_falls_back_to_filename(self, client, admin_headers):
        pdf_as_octets = ("files", ("handout.pdf", b"%PDF-1.4", "application/octet-stream"))
        response = client.post("/api/weeks", data=week_form(), files=[PHOTO, pdf_as_octets], headers=admin_headers)

        assert response.status_code == 200
        assert sorted(f["file_type"] for f in response.json()["files"]) == ["pdf", "photo"]

    def test_duplicate_week_number_rejected(self, client, seeded_weeks, admin_headers):
        response = client.post("/api/weeks", data=week_form(number="1"), files=[PHOTO, PDF], headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Week number already exists"}
        assert len(seeded_weeks.rows("weeks")) == 3

    def test_missing_pdf_rejected_before_writes(self, client, mock_supabase, admin_headers):
        response = client.post("/api/weeks", data=week_form(), files=[PHOTO], headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "At least one PDF file is required"}
        assert mock_supabase.rows("weeks") == []
        assert mock_supabase.storage_objects == {}

    def test_missing_photo_rejected_before_writes(self, client, mock_supabase, admin_headers):
        response = client.post("/api/weeks", data=week_form(), files=[PDF, VIDEO], headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "At least one photo is required"}
        assert mock_supabase.rows("weeks") == []

    def test_no_files_rejected(self, client, mock_supabase, admin_headers):
        response = client.post("/api/weeks", data=week_form(), headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "At least one photo is required"}

    @pytest.mark.parametrize("form", [
        week_form(title=""),
        week_form(description="   "),
        {"title": "No number", "description": "D"},
    ])
    def test_required_fields(self, client, form, admin_headers):
        response = client.post("/api/weeks", data=form, files=[PHOTO, PDF], headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Week number, title, and description are required"}

    @pytest.mark.parametrize("number", ["0", "-2", "abc", "3abc", "1_0", "+5", "\u0663"])
    def test_week_number_must_be_positive_integer(self, client, number, admin_headers):
        response = client.post("/api/weeks", data=week_form(number=number), files=[PHOTO, PDF], headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Week number must be a positive number"}

    def test_failed_upload_is_skipped_not_fatal(self, client, mock_supabase, admin_headers):
        mock_supabase.failing_uploads.add("intro.mp4")

        response = client.post("/api/weeks", data=week_form(), files=[PHOTO, PDF, VIDEO], headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert sorted(f["file_type"] for f in data["files"]) == ["pdf", "photo"]
        assert len(data["skipped"]) == 1
        assert data["skipped"][0]["file_name"] == "intro.mp4"
        assert data["skipped"][0]["reason"].startswith("Upload failed")
        assert len(mock_supabase.rows("week_files")) == 2

    def test_failed_record_insert_removes_uploaded_object(self, client, mock_supabase, admin_headers):
        mock_supabase.fail("week_files", "insert")

        response = client.post("/api/weeks", data=week_form(), files=[PHOTO, PDF], headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["files"] == []
        assert {s["file_name"] for s in data["skipped"]} == {"photo.jpg", "guide.pdf"}
        assert len(mock_supabase.rows("weeks")) == 1
        assert mock_supabase.storage_objects == {}

    def test_same_name_files_are_all_stored(self, client, mock_supabase, admin_headers):
        second_photo = ("files", ("photo.jpg", b"\xff\xd8\xff\xe0other", "image/jpeg"))

        response = client.post("/api/weeks", data=week_form(), files=[PHOTO, second_photo, PDF], headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["skipped"] == []
        assert len(mock_supabase.rows("week_files")) == 3
        assert len(mock_supabase.storage_objects) == 3

    def test_student_cannot_create_week(self, client, mock_supabase, student_headers):
        response = client.post("/api/weeks", data=week_form(), files=[PHOTO, PDF], headers=student_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Insufficient permissions. Required: weeks:create"}
        assert mock_supabase.rows("weeks") == []

    def test_requires_authentication(self, client):
        response = client.post("/api/weeks", data=week_form(), files=[PHOTO, PDF])

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}


class TestReadWeeks:
    """GET /api/weeks and GET /api/weeks/{id}"""

    def test_list_ordered_by_week_number(self, client, seeded_weeks):
        response = client.get("/api/weeks")

        assert response.status_code == 200
        weeks = response.json()["weeks"]
        assert [w["week_number"] for w in weeks] == [1, 2, 3]
        assert len(weeks[0]["week_files"]) == 2
        assert weeks[1]["week_files"] == []

    def test_list_empty(self, client):
        response = client.get("/api/weeks")

        assert response.status_code == 200
        assert response.json() == {"weeks": []}

    def test_get_week(self, client, seeded_weeks):
        response = client.get("/api/weeks/week-1")

        assert response.status_code == 200
        week = response.json()["week"]
        assert week["title"] == "Intro"
        assert {f["file_name"] for f in week["week_files"]} == {"welcome.jpg", "welcome.pdf"}

    def test_get_missing_week(self, client):
        response = client.get("/api/weeks/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Week not found"}


class TestUpdateAndDeleteWeek:
    """PUT/DELETE /api/weeks/{id}"""

    def test_update_week(self, client, seeded_weeks, admin_headers):
        response = client.put(
            "/api/weeks/week-2",
            json={"title": "Resume Workshop", "description": "Bring a draft"},
            headers=admin_headers
        )

        assert response.status_code == 200
        week = response.json()["week"]
        assert week["title"] == "Resume Workshop"
        assert week["description"] == "Bring a draft"
        assert week["updated_at"] is not None

    def test_update_requires_title(self, client, seeded_weeks, admin_headers):
        response = client.put("/api/weeks/week-2", json={"title": " "}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Title is required"}

    def test_update_missing_week(self, client, admin_headers):
        response = client.put("/api/weeks/nope", json={"title": "X"}, headers=admin_headers)

        assert response.status_code == 404

    def test_student_cannot_update(self, client, seeded_weeks, student_headers):
        response = client.put("/api/weeks/week-2", json={"title": "X"}, headers=student_headers)

        assert response.status_code == 403

    def test_delete_week_removes_files_and_objects(self, client, seeded_weeks, admin_headers):
        response = client.delete("/api/weeks/week-1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert [w["id"] for w in seeded_weeks.rows("weeks")] == ["week-3", "week-2"]
        assert seeded_weeks.rows("week_files") == []
        assert seeded_weeks.storage_objects == {}

    def test_delete_missing_week(self, client, admin_headers):
        response = client.delete("/api/weeks/nope", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Week not found"}

    def test_delete_single_file(self, client, seeded_weeks, admin_headers):
        response = client.delete("/api/weeks/week-1/files/file-1", headers=admin_headers)

        assert response.status_code == 200
        assert [f["id"] for f in seeded_weeks.rows("week_files")] == ["file-2"]
        assert ("week-files", "week-1/1700000000000-welcome.jpg") not in seeded_weeks.storage_objects

    def test_delete_file_of_other_week(self, client, seeded_weeks, admin_headers):
        response = client.delete("/api/weeks/week-2/files/file-1", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "File not found"}

    def test_student_cannot_delete_week(self, client, seeded_weeks, student_headers):
        response = client.delete("/api/weeks/week-1", headers=student_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Insufficient permissions. Required: weeks:delete"}
        assert len(seeded_weeks.rows("weeks")) == 3
        assert len(seeded_weeks.rows("week_files")) == 2
        assert len(seeded_weeks.storage_objects) == 2

    def test_student_cannot_delete_file(self, client, seeded_weeks, student_headers):
        response = client.delete("/api/weeks/week-1/files/file-1", headers=student_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Insufficient permissions. Required: week_files:delete"}
        assert [f["id"] for f in seeded_weeks.rows("week_files")] == ["file-1", "file-2"]
        assert ("week-files", "week-1/1700000000000-welcome.jpg") in seeded_weeks.storage_objects
