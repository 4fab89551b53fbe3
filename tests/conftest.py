# tests/conftest.py
"""
Pytest configuration and fixtures for the career-guidance backend.

Provides:
- In-memory Supabase client (tables, storage bucket, auth)
- FastAPI test client wired to it through dependency overrides
- Seeded admin/student profiles with bearer tokens
- Fake Gemini client

Tests never reach a real Supabase project or the Gemini API.
"""

import os
import uuid
import pytest
from types import SimpleNamespace
from typing import Any, Dict, Generator, List, Optional
from datetime import datetime, timezone
from fastapi.testclient import TestClient

# Set test environment before imports
os.environ["ENVIRONMENT"] = "test"
os.environ["SUPABASE_URL"] = "https://test.supabase.co"
os.environ["SUPABASE_KEY"] = "test-key"
os.environ["SEEDED_ADMIN_EMAILS"] = ""
os.environ["RATE_LIMIT"] = "100/minute"
os.environ.pop("GEMINI_API_KEY", None)
os.environ.pop("SUPABASE_SERVICE_ROLE_KEY", None)

from app.main import app, limiter
from app.database.supabase_client import get_supabase, get_service_supabase
from app.modules.ai_chat.routes import get_gemini_client
from app.modules.auth.service import clear_auth_cache


# ============== Supabase Mock ==============

class MockSupabaseResponse:
    """Mock response from Supabase operations."""
    def __init__(self, data: List[Dict] = None, count: int = None):
        self.data = data or []
        self.count = count


def _split_columns(columns: str) -> List[str]:
    """Split a select string on top-level commas ("*, week_files(*)")."""
    parts, depth, current = [], 0, ""
    for ch in columns:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += ch
    if current.strip():
        parts.append(current.strip())
    return parts


class MockSupabaseTable:
    """Mock Supabase table with chainable methods."""

    def __init__(self, table_name: str, client: "MockSupabaseClient"):
        self.table_name = table_name
        self._client = client
        self._operation = "select"
        self._payload = None
        self._columns = "*"
        self._count = None
        self._filters = []
        self._orders = []
        self._limit = None

    @property
    def _rows(self) -> List[Dict]:
        return self._client._data_store.setdefault(self.table_name, [])

    def select(self, columns: str = "*", count: Optional[str] = None):
        self._columns = columns
        self._count = count
        return self

    def insert(self, data):
        self._operation = "insert"
        self._payload = data
        return self

    def upsert(self, data):
        self._operation = "upsert"
        self._payload = data
        return self

    def update(self, data: Dict):
        self._operation = "update"
        self._payload = data
        return self

    def delete(self):
        self._operation = "delete"
        return self

    def eq(self, column: str, value: Any):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value: Any):
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column: str, values: List[Any]):
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def gt(self, column: str, value: Any):
        self._filters.append(lambda row: row.get(column) is not None and row.get(column) > value)
        return self

    def order(self, column: str, desc: bool = False):
        self._orders.append((column, desc))
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    def _matching(self) -> List[Dict]:
        return [row for row in self._rows if all(f(row) for f in self._filters)]

    def _new_row(self, item: Dict) -> Dict:
        row = dict(item)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        return row

    def _lookup(self, table: str, row_id: Any, fields: List[str]) -> Optional[Dict]:
        for related in self._client._data_store.get(table, []):
            if row_id is not None and related.get("id") == row_id:
                if fields == ["*"]:
                    return dict(related)
                return {f: related.get(f) for f in fields}
        return None

    def _embed(self, row: Dict, embed: str):
        head, fields = embed[:-1].split("(", 1)
        fields = [f.strip() for f in fields.split(",") if f.strip()]
        alias, _, target = head.partition(":")
        if not target:
            alias, target = None, alias
        if "!" in target:
            # profiles!admin_requests_user_id_fkey -> user_id
            table, fkey = target.split("!", 1)
            column = fkey[len(self.table_name) + 1:-len("_fkey")]
            return alias or table, self._lookup(table, row.get(column), fields)
        if target.endswith("_id"):
            # profiles:sender_id -> many-to-one through the column
            return alias or target, self._lookup("profiles", row.get(target), fields)
        # week_files -> child rows pointing back at this table
        back_ref = f"{self.table_name.rstrip('s')}_id"
        children = [
            dict(child) for child in self._client._data_store.get(target, [])
            if child.get(back_ref) == row.get("id")
        ]
        return alias or target, children

    def _shape(self, row: Dict) -> Dict:
        shaped = dict(row)
        for part in _split_columns(self._columns):
            if "(" in part:
                key, value = self._embed(row, part)
                shaped[key] = value
        return shaped

    def execute(self) -> MockSupabaseResponse:
        """Execute the query and return results."""
        self._client._maybe_fail(self.table_name, self._operation)

        if self._operation in ("insert", "upsert"):
            items = self._payload if isinstance(self._payload, list) else [self._payload]
            written = []
            for item in items:
                existing = None
                if self._operation == "upsert" and "id" in item:
                    existing = next((r for r in self._rows if r.get("id") == item["id"]), None)
                if existing is not None:
                    existing.update(item)
                    written.append(dict(existing))
                else:
                    row = self._new_row(item)
                    self._rows.append(row)
                    written.append(dict(row))
            return MockSupabaseResponse(data=written)

        matched = self._matching()

        if self._operation == "update":
            for row in matched:
                row.update(self._payload)
            return MockSupabaseResponse(data=[dict(r) for r in matched])

        if self._operation == "delete":
            matched_ids = {id(r) for r in matched}
            remaining = [r for r in self._rows if id(r) not in matched_ids]
            self._client._data_store[self.table_name] = remaining
            return MockSupabaseResponse(data=[dict(r) for r in matched])

        # last key first; sorted() is stable, so earlier .order() calls win
        for column, desc in reversed(self._orders):
            matched = sorted(
                matched,
                key=lambda r, c=column: (r.get(c) is None, r.get(c) if r.get(c) is not None else ""),
                reverse=desc
            )
        total = len(matched)
        if self._limit is not None:
            matched = matched[:self._limit]
        return MockSupabaseResponse(
            data=[self._shape(r) for r in matched],
            count=total if self._count == "exact" else None
        )


class MockStorageBucket:
    """Mock storage bucket; objects live in the client's storage dict."""

    def __init__(self, name: str, client: "MockSupabaseClient"):
        self.name = name
        self._client = client

    def upload(self, path: str, file: bytes, file_options: Dict = None):
        for marker in self._client.failing_uploads:
            if marker in path:
                raise Exception(f"simulated upload failure for {path}")
        if (self.name, path) in self._client.storage_objects:
            raise Exception("The resource already exists")
        self._client.storage_objects[(self.name, path)] = {
            "content": file,
            "content_type": (file_options or {}).get("content-type")
        }
        return {"path": path}

    def get_public_url(self, path: str) -> str:
        return f"https://test.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths: List[str]):
        for path in paths:
            self._client.storage_objects.pop((self.name, path), None)
        return [{"name": p} for p in paths]


class MockStorage:
    def __init__(self, client: "MockSupabaseClient"):
        self._client = client

    def from_(self, bucket: str) -> MockStorageBucket:
        return MockStorageBucket(bucket, self._client)


class MockSupabaseAuth:
    """Mock Supabase Auth: tokens map to users, emails map to passwords."""

    def __init__(self):
        self._users_by_token: Dict[str, SimpleNamespace] = {}
        self._accounts: Dict[str, tuple] = {}
        self.sign_out_calls = 0

    def add_user(self, user_id: str, email: str, password: str, token: str, full_name: str = None):
        user = SimpleNamespace(
            id=user_id,
            email=email,
            user_metadata={"full_name": full_name} if full_name else {},
            app_metadata={}
        )
        self._users_by_token[token] = user
        self._accounts[email] = (password, token)
        return user

    def get_user(self, jwt: str = None):
        user = self._users_by_token.get(jwt)
        if user is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)

    def sign_in_with_password(self, credentials: Dict):
        account = self._accounts.get(credentials["email"])
        if account is None or account[0] != credentials["password"]:
            raise Exception("Invalid login credentials")
        token = account[1]
        return SimpleNamespace(
            user=self._users_by_token[token],
            session=SimpleNamespace(access_token=token)
        )

    def sign_up(self, credentials: Dict):
        email = credentials["email"]
        if email in self._accounts:
            raise Exception("User already registered")
        user_id = str(uuid.uuid4())
        full_name = credentials.get("options", {}).get("data", {}).get("full_name")
        user = self.add_user(user_id, email, credentials["password"], f"token-{user_id}", full_name)
        return SimpleNamespace(user=user, session=None)

    def sign_out(self):
        self.sign_out_calls += 1


class MockSupabaseClient:
    """Mock Supabase client for testing."""

    def __init__(self):
        self._data_store: Dict[str, List[Dict]] = {}
        self._failures = set()
        self.failing_uploads = set()
        self.storage_objects: Dict[tuple, Dict] = {}
        self.storage = MockStorage(self)
        self.auth = MockSupabaseAuth()

    def table(self, name: str) -> MockSupabaseTable:
        return MockSupabaseTable(name, self)

    def seed_data(self, table_name: str, data: List[Dict]):
        """Seed test data into a table."""
        self._data_store[table_name] = [dict(row) for row in data]

    def rows(self, table_name: str) -> List[Dict]:
        return self._data_store.get(table_name, [])

    def fail(self, table_name: str, operation: str):
        """Make every <operation> on <table_name> raise."""
        self._failures.add((table_name, operation))

    def _maybe_fail(self, table_name: str, operation: str):
        if (table_name, operation) in self._failures:
            raise Exception(f"simulated {operation} failure on {table_name}")


# ============== Fake Gemini ==============

class FakeGeminiClient:
    def __init__(self, reply: str = "Consider a career in data science.", error: Exception = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    def generate(self, prompt: str, timeout: float = None) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


# ============== Fixtures ==============

ADMIN = {"id": "admin-1", "email": "admin@example.com", "full_name": "Ada Admin", "role": "admin"}
STUDENT = {"id": "student-1", "email": "sam@example.com", "full_name": "Sam Student", "role": "student"}
OTHER_STUDENT = {"id": "student-2", "email": "kim@example.com", "full_name": "Kim Student", "role": "student"}

TOKENS = {
    ADMIN["id"]: "admin-token",
    STUDENT["id"]: "student-token",
    OTHER_STUDENT["id"]: "student2-token",
}


@pytest.fixture(autouse=True)
def reset_auth_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture(scope="function")
def mock_supabase() -> MockSupabaseClient:
    """In-memory Supabase with an admin and two students."""
    mock = MockSupabaseClient()
    mock.seed_data("profiles", [
        dict(p, created_at=f"2024-01-0{i + 1}T10:00:00+00:00")
        for i, p in enumerate([ADMIN, STUDENT, OTHER_STUDENT])
    ])
    for profile in (ADMIN, STUDENT, OTHER_STUDENT):
        mock.auth.add_user(
            profile["id"], profile["email"], "password123",
            TOKENS[profile["id"]], profile["full_name"]
        )
    return mock


@pytest.fixture(scope="function")
def fake_gemini() -> FakeGeminiClient:
    return FakeGeminiClient()


@pytest.fixture(scope="function")
def client(mock_supabase, fake_gemini) -> Generator[TestClient, None, None]:
    """
    FastAPI test client with mocked Supabase.

    Overrides the Supabase and Gemini dependencies with the fakes above.
    """
    app.dependency_overrides[get_supabase] = lambda: mock_supabase
    app.dependency_overrides[get_service_supabase] = lambda: mock_supabase
    app.dependency_overrides[get_gemini_client] = lambda: fake_gemini
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _bearer(user_id: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {TOKENS[user_id]}"}


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return _bearer(ADMIN["id"])


@pytest.fixture
def student_headers() -> Dict[str, str]:
    return _bearer(STUDENT["id"])


@pytest.fixture
def other_student_headers() -> Dict[str, str]:
    return _bearer(OTHER_STUDENT["id"])


@pytest.fixture
def seed_group(mock_supabase):
    """Factory: add a group, optionally with members."""
    def _seed(name: str = "Careers in Tech", members: List[str] = (), created_at: str = "2024-02-01T10:00:00+00:00"):
        group_id = f"group-{len(mock_supabase.rows('groups')) + 1}"
        mock_supabase._data_store.setdefault("groups", []).append({
            "id": group_id,
            "name": name,
            "description": f"{name} discussion",
            "created_by": ADMIN["id"],
            "created_at": created_at
        })
        for user_id in members:
            mock_supabase._data_store.setdefault("group_members", []).append({
                "id": str(uuid.uuid4()),
                "group_id": group_id,
                "user_id": user_id,
                "joined_at": created_at
            })
        return group_id
    return _seed
