"""
Tests for quiz grading rules

Tests cover:
- Answer parsing per question type
- Grading rule of each question type
- Score rounding and pass threshold
"""

import itertools

import pytest

from coursestack_app.modules.quiz.logics.grading import (
    AnswerKey,
    BooleanAnswer,
    ChoiceAnswer,
    InvalidAnswerError,
    MatchingAnswer,
    QuestionType,
    TextAnswer,
    answer_to_json,
    compute_score,
    grade_answer,
    is_passing,
    keyword_threshold_count,
    parse_answer,
)


def mc_key(*option_ids, points=10):
    return AnswerKey(
        question_id=1,
        question_type=QuestionType.MULTIPLE_CHOICE,
        points=points,
        option_ids=frozenset(option_ids),
        has_correct_answer=bool(option_ids),
    )


def text_key(question_type, *texts, points=1):
    return AnswerKey(
        question_id=2,
        question_type=question_type,
        points=points,
        texts=tuple(texts),
        has_correct_answer=bool(texts),
    )


class TestParseAnswer:
    """Raw JSON values become the variant of their question type."""

    def test_multiple_choice_list(self):
        assert parse_answer(QuestionType.MULTIPLE_CHOICE, [3, 1]) == ChoiceAnswer((3, 1))

    def test_true_false(self):
        assert parse_answer(QuestionType.TRUE_FALSE, False) == BooleanAnswer(False)

    def test_text_types(self):
        assert parse_answer(QuestionType.FILL_BLANK, 'Paris') == TextAnswer('Paris')
        assert parse_answer(QuestionType.SHORT_ANSWER, 'an essay') == TextAnswer('an essay')

    def test_matching_pairs(self):
        answer = parse_answer(QuestionType.MATCHING, [{'itemId': 1, 'matchId': 2}])
        assert answer == MatchingAnswer(((1, 2),))

    def test_accepts_type_value_string(self):
        assert parse_answer('TRUE_FALSE', True) == BooleanAnswer(True)

    @pytest.mark.parametrize('question_type, raw', [
        (QuestionType.MULTIPLE_CHOICE, 'not a list'),
        (QuestionType.FILL_BLANK, ['Paris']),
        (QuestionType.SHORT_ANSWER, 42),
        (QuestionType.MATCHING, [{'itemId': 1}]),
        (QuestionType.TRUE_FALSE, None),
    ])
    def test_wrong_shape_is_rejected(self, question_type, raw):
        with pytest.raises(InvalidAnswerError) as exc_info:
            parse_answer(question_type, raw)
        assert exc_info.value.question_type is question_type
        assert exc_info.value.errors

    @pytest.mark.parametrize('question_type, raw', [
        (QuestionType.TRUE_FALSE, 'true'),
        (QuestionType.TRUE_FALSE, 'no'),
        (QuestionType.TRUE_FALSE, 0),
        (QuestionType.MULTIPLE_CHOICE, ['7']),
        (QuestionType.MULTIPLE_CHOICE, [True]),
        (QuestionType.MATCHING, [{'itemId': '1', 'matchId': 2}]),
    ])
    def test_no_type_coercion(self, question_type, raw):
        with pytest.raises(InvalidAnswerError):
            parse_answer(question_type, raw)

    def test_answer_to_json_echoes_wire_shape(self):
        assert answer_to_json(ChoiceAnswer((1, 2))) == [1, 2]
        assert answer_to_json(BooleanAnswer(True)) is True
        assert answer_to_json(TextAnswer('x')) == 'x'
        assert answer_to_json(MatchingAnswer(((1, 2),))) == [{'itemId': 1, 'matchId': 2}]


class TestMultipleChoice:

    def test_order_independent(self):
        key = mc_key(1, 2, 3)
        for permutation in itertools.permutations([1, 2, 3]):
            assert grade_answer(key, ChoiceAnswer(permutation)).is_correct

    def test_subset_gets_nothing(self):
        grade = grade_answer(mc_key(1, 2), ChoiceAnswer((1,)))
        assert not grade.is_correct
        assert grade.points_earned == 0

    def test_superset_is_wrong(self):
        assert not grade_answer(mc_key(1), ChoiceAnswer((1, 2))).is_correct

    def test_duplicate_ids_do_not_pad_the_selection(self):
        assert not grade_answer(mc_key(1, 2), ChoiceAnswer((1, 1))).is_correct

    def test_correct_earns_full_points(self):
        grade = grade_answer(mc_key(5, points=10), ChoiceAnswer((5,)))
        assert grade.is_correct
        assert grade.points_earned == 10


class TestTrueFalse:

    def test_true_when_correct_row_exists(self):
        key = AnswerKey(question_id=3, question_type=QuestionType.TRUE_FALSE, points=1, has_correct_answer=True)
        assert grade_answer(key, BooleanAnswer(True)).is_correct
        assert not grade_answer(key, BooleanAnswer(False)).is_correct

    def test_false_when_no_correct_row(self):
        key = AnswerKey(question_id=3, question_type=QuestionType.TRUE_FALSE, points=1)
        assert grade_answer(key, BooleanAnswer(False)).is_correct
        assert not grade_answer(key, BooleanAnswer(True)).is_correct


class TestFillBlank:

    @pytest.mark.parametrize('submitted', [' Paris ', 'paris', 'PARIS'])
    def test_whitespace_and_case_insensitive(self, submitted):
        key = text_key(QuestionType.FILL_BLANK, 'Paris')
        assert grade_answer(key, TextAnswer(submitted)).is_correct

    def test_any_alternative_matches(self):
        key = text_key(QuestionType.FILL_BLANK, 'colour', 'color')
        assert grade_answer(key, TextAnswer('Color')).is_correct

    def test_partial_text_is_wrong(self):
        key = text_key(QuestionType.FILL_BLANK, 'Paris')
        assert not grade_answer(key, TextAnswer('Paris, France')).is_correct


class TestShortAnswer:

    def test_two_of_three_keywords_pass(self):
        key = text_key(QuestionType.SHORT_ANSWER, 'recursion base case')
        answer = TextAnswer('Recursion needs a stopping CASE.')
        assert grade_answer(key, answer).is_correct

    def test_one_of_three_keywords_fail(self):
        key = text_key(QuestionType.SHORT_ANSWER, 'recursion base case')
        assert not grade_answer(key, TextAnswer('It uses recursion')).is_correct

    def test_repeated_submitted_keyword_counts_each_time(self):
        key = text_key(QuestionType.SHORT_ANSWER, 'recursion base case')
        assert grade_answer(key, TextAnswer('recursion recursion')).is_correct

    def test_repeated_reference_keyword_raises_the_bar(self):
        # 5 keywords in the bag, so 3 hits are needed
        key = text_key(QuestionType.SHORT_ANSWER, 'base case', 'base case recursion')
        assert not grade_answer(key, TextAnswer('base case')).is_correct
        assert grade_answer(key, TextAnswer('base case and recursion')).is_correct

    def test_keywords_pooled_across_reference_texts(self):
        key = text_key(QuestionType.SHORT_ANSWER, 'stack', 'heap memory')
        assert grade_answer(key, TextAnswer('the heap and the stack')).is_correct

    def test_custom_threshold(self):
        key = text_key(QuestionType.SHORT_ANSWER, 'alpha beta gamma delta')
        answer = TextAnswer('alpha beta')
        assert not grade_answer(key, answer).is_correct
        assert grade_answer(key, answer, keyword_threshold=0.5).is_correct

    @pytest.mark.parametrize('count, expected', [(0, 0), (1, 1), (3, 2), (5, 3), (10, 6)])
    def test_threshold_count(self, count, expected):
        assert keyword_threshold_count(count, 0.6) == expected


class TestMatching:

    def key(self):
        return AnswerKey(
            question_id=4,
            question_type=QuestionType.MATCHING,
            points=2,
            pairs=frozenset({(1, 3), (2, 4)}),
            has_correct_answer=True,
        )

    def test_same_pairs_any_order(self):
        assert grade_answer(self.key(), MatchingAnswer(((2, 4), (1, 3)))).is_correct

    def test_missing_pair_is_wrong(self):
        assert not grade_answer(self.key(), MatchingAnswer(((1, 3),))).is_correct

    def test_swapped_pair_is_wrong(self):
        assert not grade_answer(self.key(), MatchingAnswer(((1, 4), (2, 3)))).is_correct

    def test_extra_pair_is_wrong(self):
        answer = MatchingAnswer(((1, 3), (2, 4), (1, 3)))
        assert not grade_answer(self.key(), answer).is_correct


class TestGradeDispatch:

    def test_mismatched_variant_raises(self):
        with pytest.raises(TypeError):
            grade_answer(mc_key(1), TextAnswer('1'))


class TestScore:

    def test_half_correct_is_fifty(self):
        assert compute_score(10, 20) == 50

    def test_rounds_half_up(self):
        assert compute_score(1, 8) == 13  # 12.5
        assert compute_score(1, 3) == 33
        assert compute_score(2, 3) == 67

    def test_zero_total_scores_zero(self):
        assert compute_score(0, 0) == 0

    def test_full_marks(self):
        assert compute_score(6, 6) == 100

    def test_pass_threshold_inclusive(self):
        assert is_passing(70, 70)
        assert not is_passing(69, 70)
        assert is_passing(0, 0)
