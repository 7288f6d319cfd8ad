from __future__ import annotations

import asyncio

from textscan.core.config import Settings, get_settings
from textscan.core.errors import ValidationError
from textscan.core.logging import get_logger
from textscan.schemas.analyze import AnalysisMode, AnalysisResult, ApiDetails, RemoteScore
from textscan.services.openai_client import OpenAIClient, client_scope
from textscan.services.remote_scorer import score_completion, score_embedding
from textscan.services.scoring import combine_results, interpret, validation_score, verdict_label
from textscan.services.text_metrics import TextStats, compute_stats
from textscan.utils.text import is_header_safe, normalize_text, preprocess_text

logger = get_logger(__name__)


def check_credential(api_key: str | None, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    key = (api_key or "").strip()
    if not key:
        raise ValidationError("An API key is required")
    if not key.startswith(settings.credential_prefix):
        raise ValidationError(f"API key must start with {settings.credential_prefix!r}")
    if not is_header_safe(key):
        raise ValidationError("API key may only contain printable ASCII characters")
    return key


def uses_hybrid(stats: TextStats, mode: AnalysisMode, settings: Settings) -> bool:
    return mode == "enhanced" and settings.hybrid_scoring_enabled and stats.words >= settings.hybrid_min_words


async def _hybrid_score(text: str, client: OpenAIClient, settings: Settings) -> RemoteScore:
    outcomes = await asyncio.gather(
        score_embedding(text, client, settings),
        score_completion(text, client, settings),
        return_exceptions=True,
    )
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    embedding, completion = outcomes
    return combine_results(embedding, completion, settings)


async def analyze_text(
    text: str | None,
    api_key: str | None,
    *,
    mode: AnalysisMode = "enhanced",
    settings: Settings | None = None,
    client: OpenAIClient | None = None,
) -> AnalysisResult:
    """Score one text for likely AI authorship.

    ``enhanced`` mode strips URLs, emails and stray symbols, adds the embedding
    path for long texts and attaches a validation score. ``standard`` mode only
    normalizes whitespace and always uses the completion path alone.

    Raises ValidationError before any remote call when the text or key is
    unusable, and RemoteCallError when the language-model API fails.
    """
    settings = settings or get_settings()
    if not text or not text.strip():
        raise ValidationError("Text is required")
    key = check_credential(api_key, settings)

    processed = preprocess_text(text) if mode == "enhanced" else normalize_text(text)
    if not processed:
        raise ValidationError("Text is empty after preprocessing")
    stats = compute_stats(processed)

    async with client_scope(key, settings=settings, client=client) as active:
        if uses_hybrid(stats, mode, settings):
            score = await _hybrid_score(processed, active, settings)
        else:
            score = await score_completion(processed, active, settings)

    enhanced = mode == "enhanced"
    result = AnalysisResult(
        ai_probability=score.ai_probability,
        confidence=score.confidence,
        verdict=verdict_label(score.ai_probability),
        text_stats=stats,
        interpretation=interpret(score.ai_probability, stats),
        api_details=ApiDetails(
            model=score.model,
            confidence_factors=list(score.factors),
            reasoning=score.reasoning,
        ),
        source_model="enhanced-openai" if enhanced else "standard-openai",
        validation_score=validation_score(score.confidence, stats) if enhanced else None,
    )
    logger.info(
        "analysis_complete",
        mode=mode,
        words=stats.words,
        model=score.model,
        ai_probability=result.ai_probability,
        validation_score=result.validation_score,
    )
    return result
