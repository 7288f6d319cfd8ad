from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from textscan.services.text_metrics import TextStats

AnalysisMode = Literal["enhanced", "standard"]
SourceModel = Literal["enhanced-openai", "standard-openai"]


class RemoteScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    ai_probability: float = Field(ge=0, le=100)
    confidence: float = Field(ge=0, le=100)
    factors: list[str]
    likely_source: Literal["human", "ai"]
    reasoning: str
    model: str


class ApiDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    model: str
    confidence_factors: list[str] = Field(default_factory=list)
    reasoning: str = ""


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str | None = None
    ai_probability: float
    confidence: float
    verdict: str
    text_stats: TextStats
    interpretation: str
    api_details: ApiDetails
    source_model: SourceModel
    validation_score: float | None = None


class FailedAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    error: str
    ai_probability: float = 50
    confidence: float = 10
    interpretation: str = "Analysis failed"


BatchItem = AnalysisResult | FailedAnalysis


class AnalyzeRequest(BaseModel):
    text: str | None = None
    mode: AnalysisMode = "enhanced"


class BatchAnalyzeRequest(BaseModel):
    text: str | None = Field(default=None, description="Newline-separated texts, one per line")
    texts: list[str] | None = None
    mode: AnalysisMode = "enhanced"


class BatchAnalyzeResponse(BaseModel):
    results: list[BatchItem]
    total: int
    failed: int


class CredentialValidationResponse(BaseModel):
    valid: bool
