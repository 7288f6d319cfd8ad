from __future__ import annotations

import re
from dataclasses import asdict, dataclass

from textscan.utils.text import round_half_up, tokens

_SENTENCE_END_RE = re.compile(r"[.!?]+")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]+")
_PRONOUN_RE = re.compile(r"\b(?:i|me|my|mine|myself|we|us|our|ours|ourselves)\b", flags=re.IGNORECASE)


@dataclass(frozen=True)
class TextStats:
    words: int = 0
    sentences: int = 0
    avg_words_per_sentence: float = 0.0
    long_words: int = 0
    personal_pronouns: int = 0
    readability_score: float = 0.0
    lexical_diversity: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


EMPTY_STATS = TextStats()


def _syllables(toks: list[str]) -> int:
    count = 0
    for token in toks:
        word = token.lower()
        count += len(_VOWEL_GROUP_RE.findall(word))
        if word.endswith("e") and not word.endswith("le"):
            count -= 1
        if word.endswith("es") or word.endswith("ed"):
            count -= 1
    return max(1, count)


def compute_stats(text: str) -> TextStats:
    if not text:
        return EMPTY_STATS

    toks = tokens(text)
    wc = len(toks)
    if wc == 0:
        return EMPTY_STATS

    sc = max(1, len(_SENTENCE_END_RE.findall(text)))
    asl = wc / sc
    asw = _syllables(toks) / wc
    # Flesch-Kincaid grade level.
    grade = 0.39 * asl + 11.8 * asw - 15.59

    unique = len({token.lower() for token in toks})

    return TextStats(
        words=wc,
        sentences=sc,
        avg_words_per_sentence=asl,
        long_words=sum(1 for token in toks if len(token) > 6),
        personal_pronouns=len(_PRONOUN_RE.findall(text)),
        readability_score=round_half_up(grade, 1),
        lexical_diversity=round_half_up(unique / wc, 2),
    )
