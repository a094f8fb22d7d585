"""Unit tests for answer evaluation (marking rules and aggregates)."""
import pytest

from portal.services.evaluator import evaluate_answers, negative_mark, normalize_answer, score_question
from portal.utils.errors import ValidationError


@pytest.mark.unit
class TestMCQ:
    def test_correct_answer_case_insensitive(self):
        assert score_question("MCQ", "B", 1, normalize_answer("  b ")) == (True, 1.0)

    def test_wrong_answer_without_negative_marking(self):
        assert score_question("MCQ", "b", 1, "c", negative_marking=False) == (False, 0.0)

    def test_wrong_answer_one_mark_costs_a_third(self):
        ok, gained = score_question("MCQ", "b", 1, "c", negative_marking=True)
        assert not ok
        assert gained == pytest.approx(-1 / 3)

    def test_wrong_answer_two_marks_costs_two_thirds(self):
        _, gained = score_question("MCQ", "b", 2, "a", negative_marking=True)
        assert gained == pytest.approx(-2 / 3)

    def test_blank_never_penalized(self):
        assert score_question("MCQ", "b", 1, "", negative_marking=True) == (False, 0.0)

    def test_negative_mark_table(self):
        assert negative_mark(1) == pytest.approx(-0.3333, abs=1e-4)
        assert negative_mark(2) == pytest.approx(-0.6667, abs=1e-4)


@pytest.mark.unit
class TestMSQ:
    def test_exact_set_any_order(self):
        assert score_question("MSQ", "acd", 2, "dca") == (True, 2.0)

    def test_separators_ignored(self):
        assert score_question("MSQ", "a,c,d", 2, "d, c a") == (True, 2.0)

    def test_duplicate_letters_collapse(self):
        assert score_question("MSQ", "ab", 1, "aab") == (True, 1.0)

    def test_partial_selection_scores_zero(self):
        assert score_question("MSQ", "acd", 2, "ac", negative_marking=True) == (False, 0.0)

    def test_superset_scores_zero(self):
        assert score_question("MSQ", "ac", 2, "acd", negative_marking=True) == (False, 0.0)

    def test_empty_selection_scores_zero(self):
        assert score_question("MSQ", "a", 1, "") == (False, 0.0)


@pytest.mark.unit
class TestNAT:
    def test_numeric_equality(self):
        assert score_question("NAT", "10", 2, "10.0") == (True, 2.0)

    def test_mismatch_scores_zero(self):
        assert score_question("NAT", "10", 2, "9", negative_marking=True) == (False, 0.0)

    @pytest.mark.parametrize("answer", ["abc", "", "nan", "inf"])
    def test_unparseable_scores_zero(self, answer):
        assert score_question("NAT", "10", 2, answer) == (False, 0.0)


@pytest.mark.unit
class TestEvaluateAnswers:
    def test_wrong_mcq_and_right_nat_passes(self, question):
        questions = [question(1, "MCQ", "b", 1), question(2, "NAT", "10", 2)]
        ev = evaluate_answers(questions, {1: "c", 2: "10"}, negative_marking=True, threshold_percentage=50)
        assert ev.results[0].gained_marks == -0.33
        assert ev.results[1].gained_marks == 2.0
        assert ev.scored_marks == 1.67
        assert ev.total_marks == 3
        assert ev.threshold_marks == 1.5
        assert ev.passed is True

    def test_blank_and_wrong_nat_fails(self, question):
        questions = [question(1, "MCQ", "b", 1), question(2, "NAT", "10", 2)]
        ev = evaluate_answers(questions, {1: "", 2: "9"}, negative_marking=True, threshold_percentage=50)
        assert [r.gained_marks for r in ev.results] == [0.0, 0.0]
        assert ev.scored_marks == 0.0
        assert ev.passed is False
        assert ev.results[0].user_answer is None

    def test_missing_answers_are_blank(self, question):
        ev = evaluate_answers([question(1, "MCQ", "a")], {}, negative_marking=True)
        assert ev.scored_marks == 0.0
        assert ev.results[0].is_correct is False

    def test_unknown_question_ids_ignored(self, question):
        ev = evaluate_answers([question(1, "MCQ", "a")], {1: "a", 99: "b"})
        assert len(ev.results) == 1
        assert ev.scored_marks == 1.0

    def test_scored_marks_can_be_negative(self, question):
        questions = [question(1, "MCQ", "a", 1), question(2, "MCQ", "a", 2)]
        ev = evaluate_answers(questions, {1: "b", 2: "b"}, negative_marking=True, threshold_percentage=0)
        assert ev.scored_marks == -1.0
        assert ev.passed is False

    def test_default_threshold_is_half(self, question):
        ev = evaluate_answers([question(1, "NAT", "1", 4)], {1: "1"})
        assert ev.threshold_percentage == 50.0
        assert ev.threshold_marks == 2.0

    def test_pass_at_exact_threshold(self, question):
        questions = [question(1, "MCQ", "a"), question(2, "MCQ", "b")]
        ev = evaluate_answers(questions, {1: "a"}, threshold_percentage=50)
        assert ev.scored_marks == ev.threshold_marks == 1.0
        assert ev.passed is True

    def test_empty_question_list_rejected(self):
        with pytest.raises(ValidationError):
            evaluate_answers([], {1: "a"})

    def test_unsupported_type_rejected(self, question):
        with pytest.raises(ValidationError):
            evaluate_answers([question(1, "ESSAY", "x")], {1: "x"})

    def test_result_reports_canonical_answer(self, question):
        ev = evaluate_answers([question(7, "msq", "AC", 2)], {7: "c a"})
        result = ev.results[0]
        assert result.question_type == "MSQ"
        assert result.correct_answer == "AC"
        assert result.user_answer == "c a"
        assert result.is_correct is True
