from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Sequence

from textscan.core.config import Settings, get_settings
from textscan.core.errors import DetectorError
from textscan.core.logging import get_logger
from textscan.schemas.analyze import AnalysisMode, BatchItem, FailedAnalysis
from textscan.services.detector import analyze_text, check_credential
from textscan.services.openai_client import OpenAIClient, client_scope

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]
ProgressCallback = Callable[[int, int], None]


def chunked(items: Sequence[str], size: int) -> list[list[str]]:
    if size < 1:
        raise ValueError("size must be >= 1")
    return [list(items[start : start + size]) for start in range(0, len(items), size)]


async def _analyze_item(
    text: str,
    api_key: str,
    mode: AnalysisMode,
    settings: Settings,
    client: OpenAIClient,
) -> BatchItem:
    try:
        result = await analyze_text(text, api_key, mode=mode, settings=settings, client=client)
    except DetectorError as exc:
        logger.warning("batch_item_failed", error=str(exc), error_type=type(exc).__name__)
        return FailedAnalysis(text=text, error=str(exc))
    return result.model_copy(update={"text": text})


async def analyze_batch(
    texts: Iterable[str],
    api_key: str | None,
    *,
    mode: AnalysisMode = "enhanced",
    settings: Settings | None = None,
    client: OpenAIClient | None = None,
    sleep: Sleep = asyncio.sleep,
    on_progress: ProgressCallback | None = None,
) -> list[BatchItem]:
    """Analyze many texts in fixed-size concurrent groups, pausing between groups.

    Blank entries are dropped. A failure inside one item becomes a
    ``FailedAnalysis`` in that item's slot; results keep input order.
    """
    settings = settings or get_settings()
    key = check_credential(api_key, settings)

    items = [text for text in texts if text.strip()]
    if not items:
        return []

    groups = chunked(items, settings.batch_group_size)
    results: list[BatchItem] = []
    logger.info("batch_started", items=len(items), groups=len(groups), mode=mode)

    async with client_scope(key, settings=settings, client=client) as active:
        for index, group in enumerate(groups):
            outcomes = await asyncio.gather(
                *(_analyze_item(text, key, mode, settings, active) for text in group)
            )
            results.extend(outcomes)
            if on_progress is not None:
                on_progress(len(results), len(items))

            if index < len(groups) - 1:
                await sleep(settings.batch_group_delay_seconds)

    failed = sum(1 for item in results if isinstance(item, FailedAnalysis))
    logger.info("batch_complete", items=len(results), failed=failed)
    return results
