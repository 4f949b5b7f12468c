"""
Fallback selector: picks one raw provider answer when synthesis yields nothing.
"""

from typing import Optional, Sequence

from crosscheck.models.schemas import ProviderOutput

MIN_TEXT_LENGTH = 50
LOW_INFORMATION_PENALTY = 400
LOW_INFORMATION_PHRASES = ("i don't know", "cannot", "unable", "no information")


def score_text(text: str) -> int:
    """Length of the text, minus a flat penalty for refusal-style wording."""
    lowered = text.lower()
    penalty = LOW_INFORMATION_PENALTY if any(p in lowered for p in LOW_INFORMATION_PHRASES) else 0
    return len(text) - penalty


def pick_best(outputs: Sequence[ProviderOutput]) -> Optional[ProviderOutput]:
    """
    Choose the best successful output by a crude length/keyword score.

    Only ok outputs whose trimmed text is longer than 50 characters qualify.
    Ties go to the earliest output.

    Args:
        outputs: All provider outputs of a run

    Returns:
        The highest-scoring output, or None if nothing qualifies
    """
    candidates = [
        o for o in outputs
        if o.ok and len((o.text or "").strip()) > MIN_TEXT_LENGTH
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda o: score_text(o.text or ""))
