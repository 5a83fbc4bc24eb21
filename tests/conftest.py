"""
Shared fixtures: an in-memory stand-in for the PostgreSQL execution layer.
It understands the statements docstore emits and fails with real asyncpg error classes.
"""

import asyncio
import json
import re
from datetime import datetime, timedelta, timezone

import asyncpg
import pytest

IDENTIFIER = r'"((?:[^"]|"")+)"'


def _unquote(name):
    return name.replace('""', '"')


def contains(target, pattern):
    """jsonb @> semantics for the JSON shapes used in tests."""
    if isinstance(pattern, dict):
        return isinstance(target, dict) and all(
            key in target and contains(target[key], value) for key, value in pattern.items()
        )
    if isinstance(pattern, list):
        return isinstance(target, list) and all(
            any(contains(item, wanted) for item in target) for wanted in pattern
        )
    return target == pattern


class FakeExecutor:
    """Minimal PostgreSQL double driven by docstore's statement text."""

    def __init__(self):
        self.tables = {}
        self.indexes = set()
        self.sequences = {}
        self.calls = []
        self.create_table_calls = 0
        self.fail_next_create = None
        self.rival_creates_table = False
        self.skip_creation = False
        self.closed = False
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _now(self):
        self._clock += timedelta(seconds=1)
        return self._clock

    def _table(self, query):
        match = re.search(r'(?:from|into|update)\s+' + IDENTIFIER, query)
        name = _unquote(match.group(1))
        if name not in self.tables:
            raise asyncpg.exceptions.UndefinedTableError(f'relation "{name}" does not exist')
        return name, self.tables[name]

    async def execute(self, query, *args):
        self.calls.append((" ".join(query.split()), args))
        await asyncio.sleep(0)

        if "create table" in query:
            self.create_table_calls += 1
            name = _unquote(re.search(r'create table if not exists\s+' + IDENTIFIER, query).group(1))
            if self.fail_next_create is not None:
                error, self.fail_next_create = self.fail_next_create, None
                if self.rival_creates_table:
                    # Another session committed the table first
                    self.tables.setdefault(name, [])
                    self.sequences.setdefault(name, 0)
                raise error
            if not self.skip_creation:
                self.tables.setdefault(name, [])
                self.sequences.setdefault(name, 0)
            return "CREATE TABLE"

        if "create index" in query:
            name = _unquote(re.search(r'create index if not exists\s+' + IDENTIFIER, query).group(1))
            self.indexes.add(name)
            return "CREATE INDEX"

        raise AssertionError(f"unexpected statement: {query}")

    async def fetch(self, query, *args):
        self.calls.append((" ".join(query.split()), args))
        await asyncio.sleep(0)
        text = " ".join(query.split())

        if text == "select 1 as ok":
            return [{"ok": 1}]

        name, rows = self._table(text)

        if text.startswith("insert into"):
            self.sequences[name] += 1
            now = self._now()
            row = {"id": self.sequences[name], "body": json.loads(args[0]), "created": now, "updated": now}
            rows.append(row)
            return [self._as_record(row)]

        if text.startswith("update"):
            for row in rows:
                if row["id"] == args[0]:
                    row["body"] = json.loads(args[1])
                    row["updated"] = self._now()
                    return [self._as_record(row)]
            return []

        matches = sorted(rows, key=lambda r: r["id"])
        if "where id = $1" in text:
            matches = [r for r in matches if r["id"] == args[0]]
        if "body @> $1::jsonb" in text:
            pattern = json.loads(args[0])
            matches = [r for r in matches if contains(r["body"], pattern)]
        if "limit 1" in text:
            matches = matches[:1]

        if "body ->> 'name'" in text:
            return [{"id": r["id"], "name": _name_text(r["body"])} for r in matches]

        if "jsonb_build_object" in text:
            keys = args[1:]
            return [
                dict(self._as_record(r), body=json.dumps({k: r["body"].get(k) for k in keys}))
                for r in matches
            ]

        return [self._as_record(r) for r in matches]

    @staticmethod
    def _as_record(row):
        # asyncpg hands jsonb back as text
        return {"id": row["id"], "body": json.dumps(row["body"]), "created": row["created"], "updated": row["updated"]}

    async def close(self):
        self.closed = True


def _name_text(body):
    value = body.get("name") if isinstance(body, dict) else None
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


@pytest.fixture
def executor():
    """Fresh in-memory executor for each test."""
    return FakeExecutor()


@pytest.fixture
def store(executor):
    """Document store over the in-memory executor."""
    from docstore.core.store import DocumentStore
    return DocumentStore(executor)
