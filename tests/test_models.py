"""Tests for trivia_quiz.models — Question parsing and the answer transition."""

import pytest

from trivia_quiz.models import UNANSWERED, FailureKind, Question, SessionState
from tests.conftest import SAMPLE_QUESTIONS, recount_score


class TestQuestionFromDict:

    def test_parses_wire_object(self):
        q = Question.from_dict(SAMPLE_QUESTIONS[0])
        assert q.question == "¿Cuál es la capital de Colombia?"
        assert q.options == ["Medellín", "Bogotá", "Cali", "Cartagena"]
        assert q.correct_option == 1

    def test_accepts_integral_float(self):
        data = dict(SAMPLE_QUESTIONS[0], correctOption=3.0)
        assert Question.from_dict(data).correct_option == 3

    def test_round_trips_to_wire_keys(self):
        q = Question.from_dict(SAMPLE_QUESTIONS[1])
        assert q.to_dict() == SAMPLE_QUESTIONS[1]

    @pytest.mark.parametrize(
        "patch",
        [
            {"correctOption": 4},
            {"correctOption": -1},
            {"correctOption": 1.5},
            {"correctOption": True},
            {"correctOption": "1"},
            {"options": ["only one"], "correctOption": 0},
            {"options": "Bogotá"},
            {"options": ["a", 2]},
            {"question": ""},
            {"question": None},
        ],
    )
    def test_rejects_invalid_fields(self, patch):
        data = dict(SAMPLE_QUESTIONS[0], **patch)
        with pytest.raises(ValueError):
            Question.from_dict(data)

    def test_rejects_missing_key(self):
        data = dict(SAMPLE_QUESTIONS[0])
        del data["correctOption"]
        with pytest.raises(ValueError):
            Question.from_dict(data)

    def test_rejects_non_object(self):
        with pytest.raises(ValueError):
            Question.from_dict(["question", "options"])


class TestSessionState:

    def test_from_questions_resets_progress(self, sample_questions):
        state = SessionState.from_questions(sample_questions)
        assert len(state.questions) == 3
        assert state.selected_answers == [UNANSWERED] * 3
        assert state.current_index == 0
        assert state.score == 0
        assert state.is_loading is False
        assert state.failure is None

    def test_empty_session(self):
        state = SessionState.empty(FailureKind.SHAPE)
        assert state.is_empty
        assert state.current_question is None
        assert state.selected_answers == []
        assert state.failure is FailureKind.SHAPE
        assert not state.is_complete
        assert not state.can_advance
        assert not state.can_retreat

    def test_commit_correct_answer_scores(self, sample_questions):
        state = SessionState.from_questions(sample_questions)
        assert state.commit_answer(0, 1) is True
        assert state.selected_answers[0] == 1
        assert state.score == 1

    def test_commit_wrong_answer_does_not_score(self, sample_questions):
        state = SessionState.from_questions(sample_questions)
        assert state.commit_answer(0, 0) is True
        assert state.selected_answers[0] == 0
        assert state.score == 0

    def test_first_answer_is_final(self, sample_questions):
        state = SessionState.from_questions(sample_questions)
        state.commit_answer(0, 0)
        assert state.commit_answer(0, 1) is False
        assert state.selected_answers[0] == 0
        assert state.score == 0

    def test_out_of_range_option_is_ignored(self, sample_questions):
        state = SessionState.from_questions(sample_questions)
        assert state.commit_answer(0, 4) is False
        assert state.commit_answer(0, -1) is False
        assert state.selected_answers[0] == UNANSWERED

    def test_commit_on_empty_session_is_ignored(self):
        state = SessionState.empty()
        assert state.commit_answer(0, 0) is False
        assert state.score == 0

    def test_is_complete_requires_last_question_answered(self, sample_questions):
        state = SessionState.from_questions(sample_questions)
        state.current_index = 2
        assert not state.is_complete
        state.commit_answer(2, 3)
        assert state.is_complete

    def test_answering_last_question_first_is_complete(self, sample_questions):
        state = SessionState.from_questions(sample_questions)
        state.current_index = 2
        state.commit_answer(2, 0)
        assert state.is_complete
        assert state.answered_count == 1

    def test_score_matches_recount(self, sample_questions):
        state = SessionState.from_questions(sample_questions)
        for index, option in [(0, 1), (1, 0), (2, 0), (1, 2)]:
            state.commit_answer(index, option)
        assert state.score == recount_score(state) == 2
