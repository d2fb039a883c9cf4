"""In-memory stand-ins for Gemini and the tabular store."""
from datetime import datetime, timezone

from smsflow.store.base import TabularStore
from smsflow.utils.exceptions import StoreError


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error:
            raise self.error
        return FakeResponse(self.text)


class FakeGenaiClient:
    """Mimics google.genai.Client.models.generate_content."""

    def __init__(self, text=None, error=None):
        self.models = FakeModels(text, error)


class FakeClassifier:
    """Returns a fixed TransactionData and records calls."""

    def __init__(self, transaction):
        self.transaction = transaction
        self.calls = []

    def classify(self, sms_text, sender):
        self.calls.append((sms_text, sender))
        return self.transaction


class InMemoryStore(TabularStore):
    """List-backed store with exact-equality filters."""

    def __init__(self, records=None, fail_on=()):
        self.records = [dict(r) for r in (records or [])]
        self.fail_on = set(fail_on)
        self.created = []
        self.queries = []

    def _check(self, operation):
        if operation in self.fail_on:
            raise StoreError(operation, ConnectionError("store unreachable"))

    def _matching(self, where):
        return [r for r in self.records if all(r.get(k) == v for k, v in where.items())]

    def find_one(self, where):
        self._check("findOne")
        matches = self._matching(where)
        return matches[0] if matches else None

    def find_all(self, where):
        self._check("findAll")
        self.queries.append(dict(where))
        return self._matching(where)

    def create(self, values):
        self._check("create")
        self.records.append(dict(values))
        self.created.append(dict(values))
        return {"ok": True}

    def update(self, where, new_values):
        self._check("update")
        matches = self._matching(where)
        for record in matches:
            record.update(new_values)
        return {"updated": len(matches)}


class FixedClock:
    """Callable clock that can be moved forward in tests."""

    def __init__(self, now=None):
        self.now = now or datetime(2025, 8, 27, 10, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now
