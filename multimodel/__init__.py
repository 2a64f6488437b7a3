"""Multi-provider LLM query router: tiered credentials, per-provider adapters and parallel fan-out."""

__version__ = "1.0.0"
