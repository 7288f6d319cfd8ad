from __future__ import annotations

import json
import math
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import numpy as np

from textscan.core.config import Settings, get_settings
from textscan.core.errors import ConfigurationError, MalformedResponseError
from textscan.core.logging import get_logger
from textscan.schemas.analyze import RemoteScore
from textscan.services.openai_client import OpenAIClient
from textscan.utils.text import clamp, round_half_up

logger = get_logger(__name__)

SYSTEM_INSTRUCTION = (
    "You are an AI detection expert that analyzes text to determine if it was written by an AI."
)

HUMAN_EXAMPLE = (
    "I went to the store yesterday and bought some milk. It was pretty expensive, but I needed it "
    "for my cereal. I also picked up some bread and eggs. The cashier was really friendly and helped "
    "me bag my groceries."
)

AI_EXAMPLE = (
    "The implementation of artificial intelligence systems has revolutionized numerous industries, "
    "from healthcare to transportation. These advanced algorithms can process vast amounts of data "
    "with remarkable efficiency, enabling more informed decision-making processes. Furthermore, "
    "machine learning models continue to evolve, demonstrating increasingly sophisticated "
    "capabilities in natural language processing and computer vision applications."
)

FACTOR_CHECKLIST = (
    "Natural language patterns (filler words, hesitations, informal phrasing)",
    "Consistency and formality of tone",
    "Sentence structure variety vs. repetitive patterns",
    "Personal pronouns and references to personal experiences",
    "Human-like inconsistencies or errors",
    "Contextual coherence and fluency",
    "Vocabulary diversity and complexity",
    "Emotional authenticity and personal voice",
)

EMBEDDING_CONFIDENCE = 70.0
EMBEDDING_FACTOR = "Embedding similarity analysis"


def build_completion_prompt(text: str) -> str:
    checklist = "\n".join(f"{idx}. {item}" for idx, item in enumerate(FACTOR_CHECKLIST, start=1))
    return f"""You are an AI text analysis expert specializing in detecting AI-generated content. Your task is to evaluate whether the following text was written by a human or generated by AI.

Here are examples to guide your analysis:

EXAMPLE 1 (Human-written):
"{HUMAN_EXAMPLE}"

EXAMPLE 2 (AI-generated):
"{AI_EXAMPLE}"

Now, analyze the following text:

"{text}"

Consider these factors:
{checklist}

Provide your assessment in the following JSON format:

{{
"aiProbability": number,       // Likelihood (0-100) that the content was generated by AI
"confidence": number,          // Confidence level (0-100) in your assessment
"factors": string[],           // Key reasons influencing your assessment
"likelySource": "human" | "ai",// Most probable source of the content
"reasoning": string            // Summary explanation of your assessment
}}"""


def _require_number(payload: dict[str, Any], key: str) -> float:
    value = payload.get(key)
    # bool is an int subclass; the model sometimes answers true/false here.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedResponseError(f"Completion field {key!r} must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError as exc:
        raise MalformedResponseError(f"Completion field {key!r} is out of range") from exc
    if not math.isfinite(number):
        raise MalformedResponseError(f"Completion field {key!r} must be finite")
    return clamp(number, 0.0, 100.0)


def parse_completion_payload(content: str, model: str) -> RemoteScore:
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"Completion response is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise MalformedResponseError("Completion response must be a JSON object")

    missing = [key for key in ("aiProbability", "confidence", "factors", "likelySource", "reasoning") if key not in payload]
    if missing:
        raise MalformedResponseError(f"Completion response is missing fields: {', '.join(missing)}")

    factors = payload["factors"]
    if not isinstance(factors, list) or not all(isinstance(item, str) for item in factors):
        raise MalformedResponseError("Completion field 'factors' must be a list of strings")

    source = payload["likelySource"]
    if not isinstance(source, str) or source.strip().lower() not in {"human", "ai"}:
        raise MalformedResponseError(f"Completion field 'likelySource' must be 'human' or 'ai', got {source!r}")

    reasoning = payload["reasoning"]
    if not isinstance(reasoning, str):
        raise MalformedResponseError("Completion field 'reasoning' must be a string")

    return RemoteScore(
        ai_probability=_require_number(payload, "aiProbability"),
        confidence=_require_number(payload, "confidence"),
        factors=factors,
        likely_source=source.strip().lower(),
        reasoning=reasoning,
        model=model,
    )


async def score_completion(text: str, client: OpenAIClient, settings: Settings | None = None) -> RemoteScore:
    settings = settings or get_settings()
    content = await client.chat_completion(
        [
            {"role": "system", "content": SYSTEM_INSTRUCTION},
            {"role": "user", "content": build_completion_prompt(text)},
        ],
        model=settings.completion_model,
        json_mode=True,
    )
    score = parse_completion_payload(content, settings.completion_model)
    logger.info(
        "completion_scored",
        model=settings.completion_model,
        ai_probability=score.ai_probability,
        confidence=score.confidence,
    )
    return score


def cosine_similarity(vec1: Any, vec2: Any) -> float:
    a = np.asarray(vec1, dtype=np.float64).reshape(-1)
    b = np.asarray(vec2, dtype=np.float64).reshape(-1)
    if a.shape != b.shape:
        return 0.0

    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


@dataclass(frozen=True)
class ReferenceVectors:
    ai: np.ndarray
    human: np.ndarray
    placeholder: bool = False


@lru_cache(maxsize=8)
def _load_reference_vectors(path: str, dimensions: int, ai_fill: float, human_fill: float) -> ReferenceVectors:
    if path:
        try:
            with np.load(Path(path)) as bundle:
                ai = np.asarray(bundle["ai"], dtype=np.float64).reshape(-1)
                human = np.asarray(bundle["human"], dtype=np.float64).reshape(-1)
        except (OSError, KeyError, ValueError) as exc:
            logger.error("embedding_references_unreadable", path=path, error=str(exc))
            raise ConfigurationError(f"Cannot load embedding references from {path}: {exc}") from exc
        logger.info("embedding_references_loaded", path=path, ai_dims=ai.shape[0], human_dims=human.shape[0])
        return ReferenceVectors(ai=ai, human=human)

    # Constant vectors all point the same way, so both similarities are equal
    # and every text scores 50 until real references are supplied.
    logger.warning("embedding_references_placeholder", dimensions=dimensions)
    return ReferenceVectors(
        ai=np.full(dimensions, ai_fill, dtype=np.float64),
        human=np.full(dimensions, human_fill, dtype=np.float64),
        placeholder=True,
    )


def reference_vectors(settings: Settings | None = None) -> ReferenceVectors:
    settings = settings or get_settings()
    return _load_reference_vectors(
        settings.embedding_reference_path,
        settings.embedding_dimensions,
        settings.ai_reference_fill,
        settings.human_reference_fill,
    )


def embedding_probability(vector: Any, references: ReferenceVectors) -> float:
    sim_ai = cosine_similarity(vector, references.ai)
    sim_human = cosine_similarity(vector, references.human)
    total = sim_ai + sim_human
    if total == 0 or not math.isfinite(total):
        return 50.0
    return float(clamp(round_half_up(100 * sim_ai / total), 0.0, 100.0))


async def score_embedding(
    text: str,
    client: OpenAIClient,
    settings: Settings | None = None,
    references: ReferenceVectors | None = None,
) -> RemoteScore:
    settings = settings or get_settings()
    references = references or reference_vectors(settings)

    vector = await client.create_embedding(text, model=settings.embedding_model)
    probability = embedding_probability(vector, references)
    logger.info("embedding_scored", model=settings.embedding_model, ai_probability=probability)

    return RemoteScore(
        ai_probability=probability,
        confidence=EMBEDDING_CONFIDENCE,
        factors=[EMBEDDING_FACTOR],
        likely_source="ai" if probability > 60 else "human",
        reasoning=(
            f"Based on embedding similarity, this text has a {probability:g}% probability of being AI-generated."
        ),
        model=settings.embedding_model,
    )
