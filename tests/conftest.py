import uuid
from datetime import datetime, timezone

import pytest

from showcase.schemas.auth import Actor, ANONYMOUS
from showcase.services.entity_store import EntityStore

ADMIN_ID = "admin-1"
STUDENT_ID = "student-1"
OTHER_STUDENT_ID = "student-2"


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Just enough of the PostgREST query builder for the entity store."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_key = None
        self.desc = False
        self.row_limit = None
        self.count = None
        self.minimal = False

    def select(self, *columns, count=None):
        self.op = "select"
        self.count = count
        return self

    def insert(self, row, returning=None):
        self.op = "insert"
        self.payload = row
        self.minimal = returning is not None and getattr(returning, "value", returning) == "minimal"
        return self

    def upsert(self, row):
        self.op = "upsert"
        self.payload = row
        return self

    def update(self, fields):
        self.op = "update"
        self.payload = fields
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, key, value):
        self.filters.append(lambda row: row.get(key) == value)
        return self

    def in_(self, key, values):
        self.filters.append(lambda row: row.get(key) in values)
        return self

    def order(self, key, desc=False):
        self.order_key = key
        self.desc = desc
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def execute(self):
        self.db.calls.append((self.table, self.op))
        failure = self.db.failures.get((self.table, self.op))
        if failure is not None:
            raise failure

        rows = self.db.tables.setdefault(self.table, [])
        if self.op == "insert":
            row = dict(self.payload)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            rows.append(row)
            return FakeResponse([] if self.minimal else [dict(row)])

        if self.op == "upsert":
            existing = next((r for r in rows if r.get("id") == self.payload.get("id")), None)
            if existing is None:
                existing = {"created_at": datetime.now(timezone.utc).isoformat()}
                rows.append(existing)
            existing.update(self.payload)
            return FakeResponse([dict(existing)])

        matched = [row for row in rows if all(f(row) for f in self.filters)]

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResponse([dict(row) for row in matched])

        if self.op == "delete":
            self.db.tables[self.table] = [row for row in rows if row not in matched]
            return FakeResponse([dict(row) for row in matched])

        if self.order_key:
            matched = sorted(matched, key=lambda row: row.get(self.order_key) or "", reverse=self.desc)
        total = len(matched)
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        return FakeResponse([dict(row) for row in matched], count=total if self.count else None)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failures = {}
        self.calls = []

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, op, error):
        self.failures[(table, op)] = error

    def rows(self, table):
        return self.tables.get(table, [])

    def seed(self, table, **row):
        row.setdefault("id", str(uuid.uuid4()))
        self.tables.setdefault(table, []).append(row)
        return row


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def store(db):
    return EntityStore(db)


@pytest.fixture
def admin():
    return Actor(id=ADMIN_ID, roles=frozenset({"admin"}))


@pytest.fixture
def student():
    return Actor(id=STUDENT_ID, roles=frozenset({"student"}))


@pytest.fixture
def other_student():
    return Actor(id=OTHER_STUDENT_ID, roles=frozenset({"student"}))


@pytest.fixture
def anonymous():
    return ANONYMOUS
