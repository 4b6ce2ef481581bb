import json
from datetime import date

import pytest
import requests

from services.quiz_service.evaluator import AnswerEvaluator
from services.quiz_service.local_state import MemoryStore, StorageError, decode_slot, find_correct_count
from services.quiz_service.questions import QuizData
from services.quiz_service.session import (
    IncompleteAnswersError, QuizSession,
    VERDICT_ALIAS, VERDICT_CORRECT, VERDICT_OVERTURNED, VERDICT_WRONG,
)

TODAY = date(2024, 3, 7)  # a Thursday

QUIZ = {
    "theme": "Musikk",
    "questions": [
        {"question": "Tryllefløyten?", "answer": "Mozart", "aliases": ["Wolfgang Amadeus Mozart"]},
        {"question": "Den døve?", "answer": "Beethoven"},
        {"question": "Peer Gynt?", "answer": "Grieg"},
    ],
}


class FakeApi:
    def __init__(self, quiz=QUIZ, dates=("20240306", "20240307", "20240308")):
        self.quiz = quiz
        self.dates = list(dates)
        self.submitted = []
        self.fail_submit = False
        self.summary_calls = 0

    def fetch_questions(self, quiz_date=None):
        return QuizData.from_json(self.quiz) if self.quiz is not None else None

    def available_dates(self):
        return self.dates

    def submit(self, answers, number_of_correct):
        if self.fail_submit:
            raise requests.ConnectionError("offline")
        self.submitted.append((answers, number_of_correct))
        return {"id": "doc1"}

    def summary(self):
        self.summary_calls += 1
        return {"averageCorrect": 0.6, "totalSubmissions": 10}

    def weekly_summary(self):
        return {"dailyAverageStats": {"2024-03-04": 2.0, "2024-03-05": 4.0}}


class FailingStore(MemoryStore):
    def set(self, key, value):
        raise StorageError("disk full")


class FlakyStore(MemoryStore):
    """Fails the n-th `set` after `arm(n)`; earlier writes go through."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_at = None

    def arm(self, n):
        self.fail_at = n

    def set(self, key, value):
        if self.fail_at is not None:
            self.fail_at -= 1
            if self.fail_at == 0:
                raise StorageError("disk full")
        super().set(key, value)


def make_session(api=None, store=None, quiz_date=None, today=TODAY):
    return QuizSession(api or FakeApi(), store or MemoryStore(), AnswerEvaluator(2),
                       quiz_date=quiz_date, today=today, share_url="https://example.no").load()


def test_load_fresh_quiz():
    s = make_session()
    assert len(s.questions) == 3
    assert s.theme == "Musikk"
    assert not s.submitted
    assert (s.prev_date, s.next_date) == ("20240306", "20240308")


def test_no_quiz_today():
    s = make_session(api=FakeApi(quiz=None))
    assert s.questions == []


def test_unknown_date_neighbours():
    s = make_session(api=FakeApi(dates=["20240301", "20240302"]))
    assert (s.prev_date, s.next_date) == ("20240302", None)


def test_submit_scores_saves_and_reports():
    store = MemoryStore()
    api = FakeApi()
    s = make_session(api=api, store=store)

    n = s.submit(["mozart", "beethooven", "Sibelius"])

    assert n == 2
    assert s.submitted
    assert api.submitted == [(["mozart", "beethooven", "Sibelius"], 2)]
    assert decode_slot(store.get("20240307-correct")) == [True, True, False]
    assert decode_slot(store.get("20240307-answers")) == ["mozart", "beethooven", "Sibelius"]
    assert s.average_correct == 0.6


@pytest.mark.parametrize("answers", [["a", "b"], ["a", " ", "c"], ["a", None, "c"]])
def test_submit_rejects_incomplete(answers):
    s = make_session()
    with pytest.raises(IncompleteAnswersError):
        s.submit(answers)
    assert not s.submitted


def test_submit_network_failure_keeps_local_result():
    api = FakeApi()
    api.fail_submit = True
    store = MemoryStore()
    s = make_session(api=api, store=store)
    assert s.submit(["Mozart", "x", "y"]) == 1
    assert s.submitted
    assert decode_slot(store.get("20240307-answers")) == ["Mozart", "x", "y"]


def test_submit_storage_failure_leaves_state():
    s = make_session(store=FailingStore())
    with pytest.raises(StorageError):
        s.submit(["Mozart", "x", "y"])
    assert not s.submitted
    assert s.answers == []


def test_reload_uses_saved_and_migrated_state():
    store = MemoryStore({
        "7.3.2024-answers": json.dumps(["Wolfgang Amadeus Mozart", "nope", "Grieg"]),
        "7.3.2024-correct": json.dumps([True, False, True]),
    })
    api = FakeApi()
    s = make_session(api=api, store=store)
    assert s.submitted
    assert s.answers[0] == "Wolfgang Amadeus Mozart"
    assert api.summary_calls == 1
    assert [s.result_for(i) for i in range(3)] == [VERDICT_ALIAS, VERDICT_WRONG, VERDICT_CORRECT]


def test_summary_skipped_for_older_quiz():
    api = FakeApi()
    s = make_session(api=api, quiz_date="20240306")
    s.submit(["Mozart", "Beethoven", "Grieg"])
    assert api.summary_calls == 0
    assert s.average_correct is None


def test_overturn_toggles_and_merges_correctness():
    store = MemoryStore()
    s = make_session(store=store)
    s.submit(["Mozart", "nope", "nope"])

    assert s.toggle_overturn(1) is True
    assert s.result_for(1) == VERDICT_OVERTURNED
    assert decode_slot(store.get("20240307-overturns")) == [False, True, False]
    assert decode_slot(store.get("20240307-correct")) == [True, True, False]

    assert s.toggle_overturn(1) is False
    assert decode_slot(store.get("20240307-correct")) == [True, False, False]


def test_overturn_out_of_range():
    s = make_session()
    with pytest.raises(IndexError):
        s.toggle_overturn(7)


def test_share_text_today():
    s = make_session()
    s.submit(["Mozart", "nope", "nope"])
    s.toggle_overturn(2)
    assert s.share_text() == (
        "🟩🟥🟨\n🟨 = rettet selv\nSpill fem kjappe på: https://example.no Dagens tema: Musikk"
    )


def test_share_text_older_quiz_links_date():
    s = make_session(quiz_date="20240306")
    s.submit(["Mozart", "Beethoven", "Grieg"])
    assert s.share_text().endswith("https://example.no?date=20240306 Dagens tema: Musikk")
    assert s.share_text().startswith("🟩🟩🟩\n")


def test_weekly_summary_only_on_fridays():
    s = make_session()
    s.submit(["Mozart", "Beethoven", "Grieg"])
    assert s.weekly_summary() is None

    friday = make_session(today=date(2024, 3, 8))
    friday.submit(["Mozart", "Beethoven", "Grieg"])
    weekly = friday.weekly_summary()
    assert weekly.streak == 1
    assert weekly.user_average == 3
    assert weekly.server_average == 3.0


def test_submit_second_write_failure_saves_nothing():
    store = FlakyStore()
    s = make_session(store=store)
    store.arm(2)
    with pytest.raises(StorageError):
        s.submit(["Mozart", "x", "Grieg"])
    assert not s.submitted
    assert store.data == {}
    assert find_correct_count(store, TODAY) is None
    assert make_session(store=store).submitted is False


def test_overturn_second_write_failure_keeps_old_flags():
    store = FlakyStore()
    s = make_session(store=store)
    s.submit(["Mozart", "x", "y"])
    before = dict(store.data)

    store.arm(2)
    assert s.toggle_overturn(1) is False
    assert s.overturns == []
    assert store.data == before
    assert decode_slot(store.get("20240307-correct")) == [True, False, False]
    assert make_session(store=store).overturns == []
