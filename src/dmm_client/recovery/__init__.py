"""
Error recovery components for the DMM client.

Provides the retry policies used to back off between transient failures.
"""

from .retry import RetryPolicy, ExponentialBackoff

__all__ = [
    "RetryPolicy",
    "ExponentialBackoff",
]
