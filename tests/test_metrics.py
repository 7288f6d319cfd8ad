import pytest

from textscan.services.text_metrics import EMPTY_STATS, TextStats, _syllables, compute_stats


def test_compute_stats_empty_is_all_zero():
    stats = compute_stats("")

    assert stats == EMPTY_STATS
    assert all(value == 0 for value in stats.to_dict().values())


def test_compute_stats_whitespace_only_is_all_zero():
    assert compute_stats("   ") == TextStats()


def test_compute_stats_without_terminal_punctuation_counts_one_sentence():
    stats = compute_stats("no punctuation at all here")

    assert stats.sentences == 1
    assert stats.words == 5
    assert stats.avg_words_per_sentence == 5


def test_compute_stats_counts_runs_of_terminators_once():
    stats = compute_stats("Really?! Yes... Fine.")

    assert stats.sentences == 3


def test_compute_stats_basic_fields():
    stats = compute_stats("I love my dog. We walk daily!")

    assert stats.words == 7
    assert stats.sentences == 2
    assert stats.avg_words_per_sentence == pytest.approx(3.5)
    assert stats.personal_pronouns == 3
    assert stats.long_words == 0
    assert stats.lexical_diversity == 1.0


def test_compute_stats_readability_grade():
    # 3 words, 1 sentence, 2 syllables: 0.39*3 + 11.8*2/3 - 15.59
    stats = compute_stats("The cat sat.")

    assert stats.readability_score == -6.6


def test_compute_stats_long_words_and_diversity():
    stats = compute_stats("wonderful wonderful wonderful day")

    assert stats.long_words == 3
    assert stats.lexical_diversity == 0.5


def test_pronouns_match_whole_words_case_insensitively():
    stats = compute_stats("OUR team met us. Mine is mine. Wealth and music are not pronouns.")

    assert stats.personal_pronouns == 4


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        ("cat", 1),
        ("made", 1),
        ("able", 2),
        ("tables", 1),
        ("loved", 1),
        ("rhythm", 1),
    ],
)
def test_syllable_estimate(word, expected):
    assert _syllables([word]) == expected


def test_syllable_total_is_floored_at_one():
    assert _syllables(["the"]) == 1


@pytest.mark.parametrize(
    "text",
    [
        "A.",
        "Short text without ending",
        "Same same same same same same.",
        "Mixed CASE case Case. Another one! And a question?",
    ],
)
def test_invariants_hold_for_non_empty_text(text):
    stats = compute_stats(text)

    assert stats.sentences >= 1
    assert 0.0 <= stats.lexical_diversity <= 1.0
