import pytest

from textscan.schemas.analyze import RemoteScore
from textscan.services.scoring import HYBRID_MODEL, combine_results, interpret, validation_score, verdict_label
from textscan.services.text_metrics import TextStats


def _score(probability: float, confidence: float, factors: list[str], model: str) -> RemoteScore:
    return RemoteScore(
        ai_probability=probability,
        confidence=confidence,
        factors=factors,
        likely_source="ai" if probability > 60 else "human",
        reasoning=f"{model} reasoning.",
        model=model,
    )


def _stats(**values) -> TextStats:
    base = {
        "words": 40,
        "sentences": 4,
        "avg_words_per_sentence": 10.0,
        "long_words": 5,
        "personal_pronouns": 2,
        "readability_score": 8.0,
        "lexical_diversity": 0.7,
    }
    base.update(values)
    return TextStats(**base)


def test_combine_results_weights_completion_higher(settings):
    completion = _score(80, 90, ["Formal tone"], "gpt-4o")
    embedding = _score(40, 70, ["Embedding similarity analysis"], "text-embedding-ada-002")

    combined = combine_results(embedding, completion, settings)

    assert combined.ai_probability == 68
    assert combined.confidence == 84
    assert combined.factors == ["Embedding similarity analysis", "Formal tone"]
    assert combined.likely_source == "ai"
    assert combined.model == HYBRID_MODEL
    assert combined.reasoning.startswith("Combined analysis: gpt-4o reasoning.")
    assert "suggests a 40% probability" in combined.reasoning


def test_combine_results_source_uses_strict_threshold(settings):
    combined = combine_results(_score(60, 50, [], "e"), _score(60, 50, [], "c"), settings)

    assert combined.ai_probability == 60
    assert combined.likely_source == "human"


def test_combine_results_stays_in_range(settings):
    combined = combine_results(_score(100, 100, [], "e"), _score(100, 100, [], "c"), settings)

    assert combined.ai_probability == 100
    assert combined.confidence == 100


def test_validation_score_formula():
    # 0.4*80 + 0.2*80 + 0.2*70 + 0.2*40
    assert validation_score(80, _stats()) == 70


def test_validation_score_caps_length_and_pronouns():
    capped = validation_score(50, _stats(words=50, personal_pronouns=5))

    assert validation_score(50, _stats(words=500, personal_pronouns=50)) == capped


@pytest.mark.parametrize(
    ("field", "low", "high"),
    [
        ("words", 10, 30),
        ("lexical_diversity", 0.3, 0.9),
        ("personal_pronouns", 1, 4),
    ],
)
def test_validation_score_is_monotonic_in_stats(field, low, high):
    assert validation_score(60, _stats(**{field: low})) <= validation_score(60, _stats(**{field: high}))


def test_validation_score_is_monotonic_in_confidence():
    stats = _stats()
    scores = [validation_score(confidence, stats) for confidence in range(0, 101, 10)]

    assert scores == sorted(scores)


@pytest.mark.parametrize(
    ("probability", "expected"),
    [
        (10, "likely human-written"),
        (29, "likely human-written"),
        (30, "mixed indicators"),
        (59, "mixed indicators"),
        (60, "consistent with AI-generated"),
        (95, "consistent with AI-generated"),
    ],
)
def test_interpret_bands(probability, expected):
    assert expected in interpret(probability, _stats())


def test_interpret_short_sample_caveat():
    assert interpret(50, _stats(words=10)).startswith("This sample is very short")
    assert interpret(50, _stats(words=15)).startswith("Based on our comprehensive analysis")


def test_interpret_conditional_notes():
    text = interpret(70, _stats(words=60, lexical_diversity=0.4, personal_pronouns=0, readability_score=13.2))

    assert "low lexical diversity" in text
    assert "absence of personal pronouns" in text
    assert "high readability score" in text


def test_interpret_notes_need_enough_words():
    text = interpret(70, _stats(words=25, lexical_diversity=0.4, personal_pronouns=0, readability_score=12))

    assert "lexical diversity" not in text
    assert "personal pronouns" not in text
    assert "readability" not in text


@pytest.mark.parametrize(
    ("probability", "label"),
    [(0, "Likely Human"), (40, "Likely Human"), (41, "Uncertain"), (70, "Uncertain"), (71, "Likely AI")],
)
def test_verdict_label(probability, label):
    assert verdict_label(probability) == label
