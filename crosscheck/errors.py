"""
Exceptions raised by the crosscheck orchestrator.

Provider-level failures are never raised; adapters turn them into
ProviderOutput entries. Only invalid input and impossible configuration
escape a run.
"""


class CrosscheckError(Exception):
    """Base class for crosscheck errors."""


class InvalidRequestError(CrosscheckError):
    """The request cannot be run, e.g. the question is empty."""


class ConfigurationError(CrosscheckError):
    """Orchestrator bounds are inconsistent."""


class SynthesisParseError(CrosscheckError):
    """The synthesis model did not return a parseable JSON object."""
