"""
Pydantic models for crosscheck requests, provider outputs and the consensus.
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum


class ProviderId(str, Enum):
    """Provider kinds the orchestrator fans out to."""
    OPENAI = "openai"
    OPENROUTER = "openrouter"
    GEMINI = "gemini"


class ProviderStatus(str, Enum):
    """Outcome of a single provider invocation."""
    OK = "ok"
    ERROR = "error"
    TIMEOUT = "timeout"


class Confidence(str, Enum):
    """Coarse self-assessment emitted by the synthesizer."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ============== Input ==============

class CrosscheckRequest(BaseModel):
    """A single question to be cross-checked across providers."""
    model_config = ConfigDict(frozen=True)

    question: str = Field(..., description="The question to answer")
    jurisdiction: Optional[str] = Field(default=None, description="Jurisdiction focus")
    facts: Optional[str] = Field(default=None, description="Known facts, free text")
    constraints: Optional[str] = Field(default=None, description="Tone/format guidance")
    max_tokens: Optional[int] = Field(default=None, description="Requested completion budget")
    timeout_ms: Optional[int] = Field(default=None, description="Requested per-call deadline")

    @field_validator("question")
    @classmethod
    def _question_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("question must not be empty")
        return value


# ============== Provider Calls ==============

class ProviderCall(BaseModel):
    """Identity of one attempted provider invocation."""
    model_config = ConfigDict(frozen=True)

    provider: ProviderId = Field(..., description="Provider kind")
    model: str = Field(..., description="Model identifier sent to the provider")

    @property
    def label(self) -> str:
        return f"{self.provider.value}:{self.model}"


class ProviderOutput(BaseModel):
    """Result of one provider invocation. Exactly one of text/error is meaningful."""
    provider: ProviderId = Field(..., description="Provider kind")
    model: str = Field(..., description="Model identifier")
    status: ProviderStatus = Field(..., description="ok, error or timeout")
    elapsed_ms: int = Field(..., ge=0, description="Wall-clock time of the call")
    text: Optional[str] = Field(default=None, description="Answer text when status is ok")
    error: Optional[str] = Field(default=None, description="Error message otherwise")
    usage: Optional[Dict[str, Any]] = Field(default=None, description="Vendor token usage")

    @property
    def call(self) -> ProviderCall:
        return ProviderCall(provider=self.provider, model=self.model)

    @property
    def ok(self) -> bool:
        return self.status == ProviderStatus.OK


# ============== Consensus ==============

class ConsensusResult(BaseModel):
    """Synthesized verdict across all provider outputs."""
    answer: str = Field(default="", description="Conservative best answer")
    caveats: List[str] = Field(default_factory=list, description="Caveats and assumptions")
    followups: List[str] = Field(default_factory=list, description="Facts still needed")
    disagreements: List[str] = Field(default_factory=list, description="Where providers differ")
    confidence: Confidence = Field(default=Confidence.LOW, description="low, medium or high")


# ============== Complete Result ==============

class CrosscheckMeta(BaseModel):
    """Call manifest and timing for one run."""
    attempted: List[ProviderCall] = Field(..., description="Every call that was issued")
    succeeded: List[ProviderCall] = Field(..., description="Calls with status ok")
    failed: List[ProviderCall] = Field(..., description="Calls with status error or timeout")
    runtime_ms: int = Field(..., ge=0, description="Total wall-clock time of the run")


class CrosscheckResult(BaseModel):
    """Complete response of one crosscheck run."""
    ok: bool = Field(..., description="True when at least one provider succeeded")
    meta: CrosscheckMeta = Field(..., description="Call manifest")
    consensus: ConsensusResult = Field(..., description="Synthesized or fallback consensus")
    providers: List[ProviderOutput] = Field(..., description="Raw per-provider outputs")
