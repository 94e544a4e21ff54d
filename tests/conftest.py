import json
import threading
import time
from types import SimpleNamespace

import azure.functions as func
import jwt
import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from shared import supabase_client, database
from assessments import model as assessment_model

JWT_SECRET = "dottie-test-secret-0123456789abcdef0123456789"


class FakeQuery:
    """Minimal stand-in for the Supabase/PostgREST query builder."""

    def __init__(self, db, table):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.row_limit = None

    def select(self, *columns, count=None):
        self.op = "select"
        return self

    def insert(self, data):
        self.op, self.payload = "insert", data
        return self

    def update(self, data):
        self.op, self.payload = "update", data
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        if self.table_name in self.db.failing_tables:
            raise RuntimeError(f"{self.table_name} unavailable")

        with self.db.lock:
            rows = self.db.tables.setdefault(self.table_name, [])

            if self.op == "insert":
                new_rows = self.payload if isinstance(self.payload, list) else [self.payload]
                new_rows = [dict(row) for row in new_rows]
                rows.extend(new_rows)
                return SimpleNamespace(data=[dict(r) for r in new_rows], count=None)

            matched = [row for row in rows if self._matches(row)]

            if self.op == "update":
                for row in matched:
                    row.update(self.payload)
                return SimpleNamespace(data=[dict(r) for r in matched], count=None)

            if self.op == "delete":
                self.db.tables[self.table_name] = [r for r in rows if not self._matches(r)]
                return SimpleNamespace(data=[dict(r) for r in matched], count=None)

            if self.order_by:
                column, desc = self.order_by
                matched = sorted(matched, key=lambda r: r.get(column) or "", reverse=desc)
            if self.row_limit is not None:
                matched = matched[:self.row_limit]
            return SimpleNamespace(data=[dict(r) for r in matched], count=len(matched))


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failing_tables = set()
        self.lock = threading.Lock()

    def table(self, name):
        return FakeQuery(self, name)

    def rows(self, name):
        return self.tables.get(name, [])


@pytest.fixture(autouse=True)
def test_mode(monkeypatch):
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.delenv("TEST_MODE", raising=False)
    monkeypatch.setenv("SUPABASE_JWT_SECRET", JWT_SECRET)
    assessment_model.reset_test_store()
    yield
    assessment_model.reset_test_store()


@pytest.fixture
def fake_supabase():
    fake = FakeSupabase()
    supabase_client.set_supabase_client(fake)
    yield fake
    supabase_client.set_supabase_client(None)


@pytest.fixture
def sql_engine(monkeypatch):
    """SQLite engine with the assessment tables, database mode enabled."""
    monkeypatch.delenv("APP_ENV", raising=False)

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE assessments (id TEXT PRIMARY KEY, user_id TEXT NOT NULL, "
            "assessment_data TEXT NOT NULL, age TEXT, cycle_length TEXT, period_duration TEXT, "
            "flow_heaviness TEXT, pain_level TEXT, created_at TEXT, updated_at TEXT)"
        ))
        conn.execute(text(
            "CREATE TABLE symptoms (id TEXT PRIMARY KEY, assessment_id TEXT NOT NULL, "
            "name TEXT NOT NULL, type TEXT NOT NULL)"
        ))

    database.set_engine(engine)
    yield engine
    database.set_engine(None)
    engine.dispose()


def make_token(user_id="user-1", expires_in=3600):
    return jwt.encode(
        {
            "sub": user_id,
            "email": f"{user_id}@example.com",
            "aud": "authenticated",
            "exp": int(time.time()) + expires_in,
        },
        JWT_SECRET,
        algorithm="HS256",
    )


def make_request(method, url, body=None, route_params=None, user_id="user-1"):
    headers = {}
    if user_id:
        headers["Authorization"] = f"Bearer {make_token(user_id)}"

    if body is None:
        raw = b""
    elif isinstance(body, bytes):
        raw = body
    else:
        raw = json.dumps(body).encode("utf-8")

    return func.HttpRequest(
        method=method,
        url=url,
        headers=headers,
        params={},
        route_params=route_params or {},
        body=raw,
    )


def response_json(response):
    return json.loads(response.get_body())


@pytest.fixture
def sample_assessment_data():
    return {
        "age": "18-24",
        "cycle_length": "26-30",
        "period_duration": "4-5",
        "flow_heaviness": "moderate",
        "pain_level": "mild",
        "symptoms": {
            "physical": ["Bloating", "Headaches"],
            "emotional": ["Irritability"],
        },
    }
