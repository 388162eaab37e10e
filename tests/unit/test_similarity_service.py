"""
Unit tests for QuestionSimilarityService and text normalization.
"""

import pytest
from questionbank.services.interfaces import IBatchSimilarityService
from questionbank.services.similarity_service import (
    QuestionSimilarityService,
    jaccard,
    prepare_question,
)
from questionbank.utils.text_normalization import (
    normalize_question,
    strip_terminal_punctuation,
    tokenize,
)


@pytest.fixture
def similarity():
    return QuestionSimilarityService(threshold=0.6)


class TestNormalization:
    """Tests for question normalization."""

    def test_case_and_terminal_punctuation_ignored(self):
        assert normalize_question("What is X??") == normalize_question("what is x")

    def test_whitespace_collapsed(self):
        assert normalize_question("  What   is\n X ? ") == "what is x"

    def test_inner_punctuation_kept(self):
        assert normalize_question("What is 2.5 + x?") == "what is 2.5 + x"

    def test_unicode_compatibility_forms(self):
        # Full-width letters and question mark
        assert normalize_question("Ｗｈａｔ ｉｓ Ｘ？") == "what is x"

    def test_empty_input(self):
        assert normalize_question("") == ""
        assert strip_terminal_punctuation("") == ""

    def test_tokenize_drops_punctuation(self):
        assert tokenize("what is x, really") == ["what", "is", "x", "really"]


class TestQuestionSimilarityService:
    """Tests for QuestionSimilarityService."""

    def test_identical_after_normalization_scores_one(self, similarity):
        assert similarity.similarity("What is X?", "what is x??") == 1.0

    def test_score_is_symmetric(self, similarity):
        a, b = "What is X again?", "What is X?"
        assert similarity.similarity(a, b) == pytest.approx(similarity.similarity(b, a))

    def test_score_in_unit_range(self, similarity):
        score = similarity.similarity("Define Y", "What is X?")
        assert 0.0 <= score <= 1.0

    def test_blank_scores_zero(self, similarity):
        assert similarity.similarity("", "What is X?") == 0.0
        assert similarity.similarity("???", "What is X?") == 0.0

    def test_weighted_average_of_both_measures(self, similarity):
        # Words: 3 shared of 4 -> 0.75; edit: 6 edits over 15 chars -> 0.6
        score = similarity.similarity("What is X again?", "What is X?")
        assert score == pytest.approx(0.675)

    def test_threshold_separates_variants_from_other_questions(self, similarity):
        assert similarity.similarity("What is X again?", "What is X?") >= similarity.threshold
        assert similarity.similarity("Define Y", "What is X?") < similarity.threshold

    def test_unrelated_questions_are_not_similar(self, similarity):
        score = similarity.similarity(
            "Explain the process of photosynthesis.",
            "Name three causes of the French Revolution.",
        )
        assert score < similarity.threshold

    def test_token_only_weighting(self):
        service = QuestionSimilarityService(threshold=0.5, token_weight=1.0, edit_weight=0.0)
        assert service.similarity("x is what", "what is x") == 1.0

    def test_weights_are_normalized(self):
        service = QuestionSimilarityService(token_weight=2.0, edit_weight=2.0)
        assert service.token_weight == pytest.approx(0.5)
        assert service.edit_weight == pytest.approx(0.5)

    @pytest.mark.parametrize("threshold", [-0.1, 1.5])
    def test_invalid_threshold_rejected(self, threshold):
        with pytest.raises(ValueError):
            QuestionSimilarityService(threshold=threshold)

    def test_zero_weights_rejected(self):
        with pytest.raises(ValueError):
            QuestionSimilarityService(token_weight=0.0, edit_weight=0.0)

    def test_find_best_match_prefers_higher_score(self, similarity):
        match = similarity.find_best_match("what is x", ["Define Y", "What is X again?", "What is X?"])

        assert match == (2, 1.0)

    def test_find_best_match_first_wins_ties(self, similarity):
        match = similarity.find_best_match("what is x", ["What is X?", "WHAT IS X"])

        assert match[0] == 0

    def test_find_best_match_below_threshold(self, similarity):
        assert similarity.find_best_match("what is x", ["Define Y"]) is None
        assert similarity.find_best_match("what is x", []) is None

    def test_find_first_match_respects_order_and_skip(self, similarity):
        candidates = ["What is X again?", "What is X?"]

        first = similarity.find_first_match("what is x", candidates)
        skipped = similarity.find_first_match("what is x", candidates, skip={0})

        assert first[0] == 0
        assert skipped == (1, 1.0)

    def test_prepare_question_is_cached(self):
        assert prepare_question("What is X?") is prepare_question("What is X?")

    def test_jaccard(self):
        assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
        assert jaccard(set(), {"a"}) == 0.0

    def test_satisfies_batch_protocol(self, similarity):
        assert isinstance(similarity, IBatchSimilarityService)
