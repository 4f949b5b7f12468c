"""Pydantic models for requests, provider outputs and results."""

from .schemas import (
    ProviderId,
    ProviderStatus,
    Confidence,
    CrosscheckRequest,
    ProviderCall,
    ProviderOutput,
    ConsensusResult,
    CrosscheckMeta,
    CrosscheckResult
)

__all__ = [
    "ProviderId",
    "ProviderStatus",
    "Confidence",
    "CrosscheckRequest",
    "ProviderCall",
    "ProviderOutput",
    "ConsensusResult",
    "CrosscheckMeta",
    "CrosscheckResult"
]
