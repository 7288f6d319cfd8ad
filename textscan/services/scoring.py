from __future__ import annotations

from textscan.core.config import Settings, get_settings
from textscan.schemas.analyze import RemoteScore
from textscan.services.text_metrics import TextStats
from textscan.utils.text import clamp, round_half_up

HYBRID_MODEL = "hybrid-approach"


def combine_results(
    embedding: RemoteScore,
    completion: RemoteScore,
    settings: Settings | None = None,
) -> RemoteScore:
    """Merge an embedding score and a completion score into one weighted score.

    Factors keep the embedding's entries first and the completion's last. The
    source label is re-derived from the weighted probability rather than taken
    from either input.
    """
    settings = settings or get_settings()
    w_embed = settings.embedding_weight
    w_comp = settings.completion_weight

    probability = round_half_up(embedding.ai_probability * w_embed + completion.ai_probability * w_comp)
    confidence = round_half_up(embedding.confidence * w_embed + completion.confidence * w_comp)
    probability = clamp(probability, 0.0, 100.0)
    confidence = clamp(confidence, 0.0, 100.0)

    return RemoteScore(
        ai_probability=probability,
        confidence=confidence,
        factors=[*embedding.factors, *completion.factors],
        likely_source="ai" if probability > 60 else "human",
        reasoning=(
            f"Combined analysis: {completion.reasoning} Additionally, embedding similarity analysis "
            f"suggests a {embedding.ai_probability:g}% probability of AI generation."
        ),
        model=HYBRID_MODEL,
    )


def validation_score(confidence: float, stats: TextStats) -> float:
    length_score = min(100, stats.words * 2)
    diversity_score = stats.lexical_diversity * 100
    pronoun_score = min(100, stats.personal_pronouns * 20)
    score = confidence * 0.4 + length_score * 0.2 + diversity_score * 0.2 + pronoun_score * 0.2
    return round_half_up(score)


def interpret(ai_probability: float, stats: TextStats) -> str:
    if stats.words < 15:
        parts = ["This sample is very short, which typically affects certainty, but our analysis suggests: "]
    else:
        parts = ["Based on our comprehensive analysis: "]

    if ai_probability < 30:
        parts.append("This text is likely human-written with natural speech patterns.")
    elif ai_probability < 60:
        parts.append("This text has mixed indicators that could suggest either human or AI authorship.")
    else:
        parts.append("This text shows patterns consistent with AI-generated content.")

    if stats.lexical_diversity < 0.5 and stats.words > 50:
        parts.append(
            " The low lexical diversity (repetitive vocabulary) is a common indicator of AI-generated text."
        )
    if stats.personal_pronouns == 0 and stats.words > 30:
        parts.append(" The absence of personal pronouns is unusual for human writing.")
    if stats.readability_score > 12:
        parts.append(" The high readability score suggests formal, well-structured writing typical of AI.")

    return "".join(parts)


def verdict_label(ai_probability: float) -> str:
    if ai_probability > 70:
        return "Likely AI"
    if ai_probability > 40:
        return "Uncertain"
    return "Likely Human"
