import json
import itertools

import pytest

from app import create_app
from services.quiz_service import submissions


class FakeDoc:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    def to_dict(self):
        return dict(self._data)


class FakeRef:
    def __init__(self, doc_id):
        self.id = doc_id


class FakeQuery:
    def __init__(self, docs, filters=()):
        self._docs = docs
        self._filters = list(filters)

    def where(self, field, op, value):
        assert op == "=="
        return FakeQuery(self._docs, self._filters + [(field, value)])

    def stream(self):
        for doc in self._docs:
            if all(doc.to_dict().get(f) == v for f, v in self._filters):
                yield doc


class FakeCollection(FakeQuery):
    _ids = itertools.count(1)

    def __init__(self):
        super().__init__([])

    def add(self, data):
        ref = FakeRef(f"doc{next(self._ids)}")
        self._docs.append(FakeDoc(ref.id, data))
        return None, ref


class FakeFirestore:
    """Just enough of the Firestore client for the submissions collection."""

    def __init__(self):
        self.collections = {}
        self.fail = False

    def collection(self, name):
        if self.fail:
            raise RuntimeError("firestore unavailable")
        return self.collections.setdefault(name, FakeCollection())

    def seed(self, day, *counts, name="submissions"):
        col = self.collection(name)
        for n in counts:
            col.add({"numberOfCorrect": n, "answers": [], "submissionDate": day})


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeFirestore()
    monkeypatch.setattr(submissions, "get_db", lambda: db)
    return db


@pytest.fixture
def questions_dir(tmp_path):
    d = tmp_path / "questions"
    d.mkdir()
    (d / "20240306.json").write_text(json.dumps([
        {"question": "Hovedstaden i Norge?", "answer": "Oslo"},
    ]), encoding="utf-8")
    (d / "20240307.json").write_text(json.dumps({
        "theme": "Musikk",
        "announcement": "Ny rekord i går!",
        "questions": [
            {"question": "Tryllefløyten?", "answer": "Mozart", "aliases": ["Wolfgang Amadeus Mozart"]},
            {"question": "Den døve?", "answer": "Beethoven"},
        ],
    }), encoding="utf-8")
    (d / "notes.txt").write_text("ignored", encoding="utf-8")
    return d


@pytest.fixture
def app(questions_dir, fake_db):
    return create_app({"TESTING": True, "QUESTIONS_DIR": str(questions_dir)})


@pytest.fixture
def client(app):
    return app.test_client()
