"""
Result assembly: manifest, timing, consensus and raw outputs in one response.
"""

from typing import Sequence

from crosscheck.models.schemas import (
    ConsensusResult,
    CrosscheckMeta,
    CrosscheckResult,
    ProviderCall,
    ProviderOutput
)
from crosscheck.stages.fallback import pick_best
from crosscheck.stages.fan_out import partition_calls
from crosscheck.stages.synthesizer import uniq_strings

TOTAL_FAILURE_CAVEAT = (
    "No providers returned a successful answer; check credentials/model names/connectivity."
)


def no_answer_message(attempted: Sequence[ProviderCall]) -> str:
    labels = ", ".join(call.label for call in attempted) or "none"
    return f"I couldn't get a successful provider response yet. Providers attempted: {labels}"


def assemble_result(
    attempted: Sequence[ProviderCall],
    outputs: Sequence[ProviderOutput],
    consensus: ConsensusResult,
    runtime_ms: int
) -> CrosscheckResult:
    """
    Build the final response of a run.

    The answer falls back from the synthesized text to the best raw provider
    text to a message naming every attempted call. A total-failure caveat is
    appended when nothing succeeded.

    Args:
        attempted: Calls issued by the fan-out, in attempt order
        outputs: One output per attempted call
        consensus: The synthesizer's result
        runtime_ms: Wall-clock time since the run began

    Returns:
        CrosscheckResult with ok set iff at least one provider succeeded
    """
    succeeded, failed = partition_calls(outputs)

    answer = consensus.answer.strip()
    if not answer:
        best = pick_best(outputs)
        answer = (best.text or "").strip() if best else ""
    if not answer:
        answer = no_answer_message(attempted)

    caveats = list(consensus.caveats)
    if not succeeded:
        caveats.append(TOTAL_FAILURE_CAVEAT)

    return CrosscheckResult(
        ok=bool(succeeded),
        meta=CrosscheckMeta(
            attempted=list(attempted),
            succeeded=succeeded,
            failed=failed,
            runtime_ms=runtime_ms
        ),
        consensus=ConsensusResult(
            answer=answer,
            caveats=uniq_strings(caveats),
            followups=uniq_strings(consensus.followups),
            disagreements=uniq_strings(consensus.disagreements),
            confidence=consensus.confidence
        ),
        providers=list(outputs)
    )
