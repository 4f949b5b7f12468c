"""
Crosscheck Orchestrator

Poses one factual/legal question to several LLM providers in parallel and
reconciles their answers into a single conservative consensus with caveats,
missing facts, disagreements and a confidence level.
"""

__version__ = "1.0.0"
