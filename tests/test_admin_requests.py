# tests/test_admin_requests.py
"""
Tests for the admin request workflow.

A request moves pending -> approved or pending -> denied exactly once;
approval promotes the requester to admin.
"""

import pytest


def role_of(mock_supabase, user_id):
    return next(p["role"] for p in mock_supabase.rows("profiles") if p["id"] == user_id)


@pytest.fixture
def pending_request(mock_supabase):
    for profile in mock_supabase.rows("profiles"):
        if profile["id"] == "student-1":
            profile["role"] = "pending_admin"
    mock_supabase.seed_data("admin_requests", [
        {"id": "req-1", "user_id": "student-1", "reason": "I run the robotics club",
         "status": "pending", "created_at": "2024-04-01T10:00:00+00:00"},
    ])
    return "req-1"


class TestSubmitRequest:
    """POST /api/admin/requests"""

    def test_student_submits_request(self, client, mock_supabase, student_headers):
        response = client.post("/api/admin/requests", json={"reason": "I mentor juniors"}, headers=student_headers)

        assert response.status_code == 201
        request = response.json()["request"]
        assert request["status"] == "pending"
        assert request["user_id"] == "student-1"
        assert request["reason"] == "I mentor juniors"
        assert role_of(mock_supabase, "student-1") == "pending_admin"

    def test_reason_required(self, client, mock_supabase, student_headers):
        response = client.post("/api/admin/requests", json={"reason": "  "}, headers=student_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Reason is required"}
        assert mock_supabase.rows("admin_requests") == []

    def test_second_pending_request_rejected(self, client, mock_supabase, pending_request, student_headers):
        response = client.post("/api/admin/requests", json={"reason": "Again"}, headers=student_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "You already have a pending admin request"}
        assert len(mock_supabase.rows("admin_requests")) == 1

    def test_admin_cannot_submit(self, client, admin_headers):
        response = client.post("/api/admin/requests", json={"reason": "More power"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "You already have admin privileges"}


class TestListRequests:
    """GET /api/admin/requests"""

    @pytest.fixture
    def seeded_requests(self, mock_supabase):
        mock_supabase.seed_data("admin_requests", [
            {"id": "req-1", "user_id": "student-1", "reason": "First", "status": "denied",
             "reviewed_by": "admin-1", "created_at": "2024-04-01T10:00:00+00:00"},
            {"id": "req-2", "user_id": "student-2", "reason": "Second", "status": "pending",
             "created_at": "2024-04-02T10:00:00+00:00"},
        ])

    def test_admin_sees_all_newest_first(self, client, seeded_requests, admin_headers):
        response = client.get("/api/admin/requests", headers=admin_headers)

        assert response.status_code == 200
        listed = response.json()["requests"]
        assert [r["id"] for r in listed] == ["req-2", "req-1"]
        assert listed[0]["profiles"] == {"full_name": "Kim Student", "email": "kim@example.com"}
        assert listed[1]["reviewer"] == {"full_name": "Ada Admin", "email": "admin@example.com"}
        assert listed[0]["reviewer"] is None

    def test_student_sees_own_only(self, client, seeded_requests, student_headers):
        response = client.get("/api/admin/requests", headers=student_headers)

        assert response.status_code == 200
        assert [r["id"] for r in response.json()["requests"]] == ["req-1"]


class TestReviewRequest:
    """PATCH /api/admin/requests/{id}"""

    def test_approve_promotes_requester(self, client, mock_supabase, pending_request, admin_headers):
        response = client.patch(f"/api/admin/requests/{pending_request}", json={"action": "approve"}, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Request approved successfully"
        assert data["request"]["status"] == "approved"
        assert data["request"]["reviewed_by"] == "admin-1"
        assert data["request"]["reviewed_at"] is not None
        assert role_of(mock_supabase, "student-1") == "admin"

    def test_approved_user_is_admin_on_next_request(self, client, pending_request, admin_headers, student_headers):
        client.patch(f"/api/admin/requests/{pending_request}", json={"action": "approve"}, headers=admin_headers)

        response = client.get("/api/auth/me", headers=student_headers)

        assert response.json()["role"] == "admin"
        assert response.json()["is_admin"] is True

    def test_deny_resets_requester_to_student(self, client, mock_supabase, pending_request, admin_headers):
        response = client.patch(f"/api/admin/requests/{pending_request}", json={"action": "deny"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Request denied successfully"
        assert response.json()["request"]["status"] == "denied"
        assert role_of(mock_supabase, "student-1") == "student"

    @pytest.mark.parametrize("second_action", ["approve", "deny"])
    def test_request_reviewed_only_once(self, client, mock_supabase, pending_request, admin_headers, second_action):
        client.patch(f"/api/admin/requests/{pending_request}", json={"action": "approve"}, headers=admin_headers)

        response = client.patch(f"/api/admin/requests/{pending_request}", json={"action": second_action}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Request has already been processed"}
        assert mock_supabase.rows("admin_requests")[0]["status"] == "approved"
        assert role_of(mock_supabase, "student-1") == "admin"

    def test_invalid_action(self, client, pending_request, admin_headers):
        response = client.patch(f"/api/admin/requests/{pending_request}", json={"action": "escalate"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": 'Invalid action. Must be "approve" or "deny"'}

    def test_missing_request(self, client, admin_headers):
        response = client.patch("/api/admin/requests/nope", json={"action": "approve"}, headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Request not found"}

    def test_student_cannot_review(self, client, mock_supabase, pending_request, other_student_headers):
        response = client.patch(f"/api/admin/requests/{pending_request}", json={"action": "approve"}, headers=other_student_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Insufficient permissions. Required: admin_requests:review"}
        assert mock_supabase.rows("admin_requests")[0]["status"] == "pending"

    def test_failed_promotion_reverts_request(self, client, mock_supabase, pending_request, admin_headers):
        mock_supabase.fail("profiles", "update")

        response = client.patch(f"/api/admin/requests/{pending_request}", json={"action": "approve"}, headers=admin_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to update user role"}
        request = mock_supabase.rows("admin_requests")[0]
        assert request["status"] == "pending"
        assert request["reviewed_by"] is None
