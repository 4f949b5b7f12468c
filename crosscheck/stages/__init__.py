"""Stage implementations for the crosscheck workflow."""

from .deadline import with_deadline, timeout_output
from .fan_out import FanOutExecutor, PlannedCall, partition_calls
from .fallback import pick_best, score_text
from .synthesizer import Synthesizer, normalize_consensus, uniq_strings
from .assembler import assemble_result, TOTAL_FAILURE_CAVEAT

__all__ = [
    "with_deadline",
    "timeout_output",
    "FanOutExecutor",
    "PlannedCall",
    "partition_calls",
    "pick_best",
    "score_text",
    "Synthesizer",
    "normalize_consensus",
    "uniq_strings",
    "assemble_result",
    "TOTAL_FAILURE_CAVEAT"
]
