"""Service-level tests for owner stats and the activity feed."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from traderfm.core.errors import Forbidden
from traderfm.models import User
from traderfm.services import answer_service, question_service, stats_service


class TestOwnerStats:
    def test_counts_for_fresh_handle(self, db_session: Session, test_user: User):
        stats = stats_service.get_owner_stats(db_session, "alice", test_user)
        assert stats == {
            "handle": "alice",
            "total_questions": 0,
            "total_answers": 0,
            "unanswered_questions": 0,
            "pending_questions": 0,
        }

    def test_total_questions_survives_answer_and_discard(
        self, db_session: Session, test_user: User, make_question
    ):
        answered = make_question(text="Question one?").id
        discarded = make_question(text="Question two?").id
        make_question(text="Question three?")

        question_service.answer_question(db_session, answered, "Done.", test_user)
        question_service.discard_question(db_session, discarded, test_user)

        stats = stats_service.get_owner_stats(db_session, "alice", test_user)
        assert stats["total_questions"] == 3
        assert stats["total_answers"] == 1
        assert stats["unanswered_questions"] == 2
        assert stats["pending_questions"] == 1

    def test_deleting_answer_does_not_restore_question(
        self, db_session: Session, test_user: User, make_answer
    ):
        make_answer(test_user)
        answer = make_answer(test_user, question_text="Second one?")
        answer_service.delete_answer(db_session, answer.id, test_user)
        stats = stats_service.get_owner_stats(db_session, "alice", test_user)
        assert stats["total_questions"] == 2
        assert stats["total_answers"] == 1
        assert stats["unanswered_questions"] == 1
        assert stats["pending_questions"] == 0

    def test_other_handle_forbidden(self, db_session: Session, test_user: User, other_user: User):
        with pytest.raises(Forbidden):
            stats_service.get_owner_stats(db_session, "bob", test_user)


class TestActivity:
    def test_default_window_includes_recent_rows(
        self, db_session: Session, test_user: User, make_question, make_answer
    ):
        make_question(text="Pending question?")
        make_answer(test_user)
        feed = stats_service.get_activity(db_session)
        assert [q["text"] for q in feed["questions"]] == ["Pending question?"]
        assert [a["answer_text"] for a in feed["answers"]] == ["Shorting the top in 2021."]
        assert [u.handle for u in feed["users"]] == ["alice"]
        assert feed["answers"][0]["user_handle"] == "alice"

    def test_adjacent_windows_do_not_overlap(self, db_session: Session, test_user: User, make_question):
        make_question(text="Before the poll?")
        first = stats_service.get_activity(db_session)
        make_question(text="After the poll?")
        second = stats_service.get_activity(db_session, since=first["timestamp"])

        assert [q["text"] for q in first["questions"]] == ["Before the poll?"]
        assert [q["text"] for q in second["questions"]] == ["After the poll?"]
        assert second["users"] == []

    def test_naive_since_treated_as_utc(self, db_session: Session, test_user: User):
        since = (datetime.now(UTC) - timedelta(minutes=1)).replace(tzinfo=None)
        feed = stats_service.get_activity(db_session, since=since)
        assert [u.handle for u in feed["users"]] == ["alice"]

    def test_future_since_is_empty(self, db_session: Session, test_user: User, make_question):
        make_question()
        feed = stats_service.get_activity(db_session, since=datetime.now(UTC) + timedelta(hours=1))
        assert feed["questions"] == feed["answers"] == feed["users"] == []

    def test_page_size_caps_each_kind(self, db_session: Session, test_user: User, make_question):
        for i in range(4):
            make_question(text=f"Question number {i}?")
        feed = stats_service.get_activity(db_session, page_size=2)
        assert [q["text"] for q in feed["questions"]] == [
            "Question number 3?",
            "Question number 2?",
        ]
