from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from textscan.api.deps import get_api_key
from textscan.core.config import Settings, get_settings
from textscan.schemas.analyze import (
    AnalysisResult,
    AnalyzeRequest,
    BatchAnalyzeRequest,
    BatchAnalyzeResponse,
    FailedAnalysis,
)
from textscan.services.batch import analyze_batch
from textscan.services.detector import analyze_text
from textscan.utils.text import split_lines

router = APIRouter()


@router.post("/analyze", response_model=AnalysisResult)
async def analyze_content(
    payload: AnalyzeRequest,
    api_key: str = Depends(get_api_key),
    settings: Settings = Depends(get_settings),
) -> AnalysisResult:
    return await analyze_text(payload.text, api_key, mode=payload.mode, settings=settings)


@router.post("/analyze/batch", response_model=BatchAnalyzeResponse)
async def analyze_content_batch(
    payload: BatchAnalyzeRequest,
    api_key: str = Depends(get_api_key),
    settings: Settings = Depends(get_settings),
) -> BatchAnalyzeResponse:
    if payload.texts is not None and payload.text is not None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Use either text or texts, not both")

    texts = payload.texts if payload.texts is not None else split_lines(payload.text or "")
    if not any(text.strip() for text in texts):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="text or texts is required")

    results = await analyze_batch(texts, api_key, mode=payload.mode, settings=settings)
    return BatchAnalyzeResponse(
        results=results,
        total=len(results),
        failed=sum(1 for item in results if isinstance(item, FailedAnalysis)),
    )
