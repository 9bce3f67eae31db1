from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
import itertools

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.supabase import public_supabase_client

SUPER_ADMIN_ID = "admin-id"
MEMBER_ID = "member-id"
OTHER_MEMBER_ID = "other-member-id"

TOKENS = {
    "admin-token": SimpleNamespace(id=SUPER_ADMIN_ID, email="admin@example.com"),
    "member-token": SimpleNamespace(id=MEMBER_ID, email="member@example.com"),
    "other-token": SimpleNamespace(id=OTHER_MEMBER_ID, email="other@example.com"),
}

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class BackendError(Exception):
    pass


class FakeQuery:
    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.max_rows = None

    def select(self, columns="*", count=None):
        self.op = "select"
        return self

    def insert(self, data):
        self.op = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
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

    def limit(self, n):
        self.max_rows = n
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.backend.calls.append((self.table, self.op, self.payload))
        if (self.table, self.op) in self.backend.fail_on:
            raise BackendError(f"{self.op} on {self.table} rejected")
        if self.op == "select" and self.table in self.backend.fail_reads_after_write \
                and self.backend.writes(self.table):
            raise BackendError(f"select on {self.table} timed out")

        rows = self.backend.tables.setdefault(self.table, [])

        if self.op == "insert":
            row = dict(self.payload)
            row.setdefault("created_at", self.backend.next_timestamp())
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])

        matched = [row for row in rows if self._matches(row)]

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matched])

        if self.op == "delete":
            self.backend.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=[dict(row) for row in matched])

        result = [dict(row) for row in matched]
        if self.order_by:
            column, desc = self.order_by
            result.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
        if self.max_rows is not None:
            result = result[:self.max_rows]
        return SimpleNamespace(data=result)


class FakeBucket:
    def __init__(self, backend, bucket):
        self.backend = backend
        self.bucket = bucket

    def upload(self, path, contents, options=None):
        if ("storage", "upload") in self.backend.fail_on:
            raise BackendError("upload rejected")
        self.backend.uploads.append((self.bucket, path, contents))
        self.backend.upload_auth.append(self.backend.options.headers.get("Authorization"))
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://storage.example.com/{self.bucket}/{path}"


class FakeAuth:
    def __init__(self, backend):
        self.backend = backend
        self.admin = SimpleNamespace(sign_out=self._sign_out)

    def get_user(self, token):
        user = TOKENS.get(token)
        if user is None:
            raise BackendError("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)

    def sign_in_with_password(self, credentials):
        if self.backend.login_error is not None:
            raise self.backend.login_error
        token = {
            "admin@example.com": "admin-token",
            "member@example.com": "member-token",
        }[credentials["email"]]
        return SimpleNamespace(
            user=TOKENS[token],
            session=SimpleNamespace(access_token=token, refresh_token="refresh"),
        )

    def _sign_out(self, jwt, scope="global"):
        self.backend.signed_out.append(jwt)


class FakeSupabase:
    """In-memory stand-in for the Supabase client used by the routes."""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.uploads = []
        self.upload_auth = []
        self.fail_reads_after_write = set()
        self.options = SimpleNamespace(headers={"Authorization": "Bearer anon-key"})
        self.signed_out = []
        self.fail_on = set()
        self.login_error = None
        self._clock = itertools.count(1000)
        self.auth = FakeAuth(self)
        self.postgrest = SimpleNamespace(auth=lambda token: None)
        self.storage = SimpleNamespace(from_=lambda bucket: FakeBucket(self, bucket))

    def table(self, name):
        return FakeQuery(self, name)

    def next_timestamp(self):
        return (BASE_TIME + timedelta(minutes=next(self._clock))).isoformat()

    def seed(self, table, *rows):
        for i, row in enumerate(rows):
            row = dict(row)
            row.setdefault("created_at", (BASE_TIME + timedelta(minutes=i)).isoformat())
            self.tables.setdefault(table, []).append(row)

    def writes(self, table=None):
        return [
            call for call in self.calls
            if call[1] in ("insert", "update", "delete") and (table is None or call[0] == table)
        ]


@pytest.fixture
def backend(monkeypatch):
    fake = FakeSupabase()
    monkeypatch.setenv("SUPER_ADMIN_USER_ID", SUPER_ADMIN_ID)
    monkeypatch.setattr("app.dependencies.auth.create_supabase_client", lambda: fake)
    monkeypatch.setattr("app.routes.auth.create_supabase_client", lambda: fake)
    app.dependency_overrides[public_supabase_client] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client(backend):
    return TestClient(app)


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


ADMIN = auth_header("admin-token")
MEMBER = auth_header("member-token")
OTHER = auth_header("other-token")
