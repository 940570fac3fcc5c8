"""
Validation Package - Request Validation.

    - RequestValidator: Validate export requests before any store access

Design Principles:
    - Fail fast on invalid input
    - Clear, actionable error messages
"""

from record_exporter.validation.request_validator import RequestValidator

__all__ = ["RequestValidator"]
