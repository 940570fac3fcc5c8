"""
Resilience Package - Retry for Pre-Stream Access.

    - ErrorHandler: Retry with exponential backoff

Retries only guard work done before the first byte is written (form lookup,
cursor opening). Reads in the middle of a stream are never retried: a
replayed cursor would duplicate records already sent.
"""

from record_exporter.resilience.error_handler import ErrorHandler, RetryExhausted

__all__ = ["ErrorHandler", "RetryExhausted"]
