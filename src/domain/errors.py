"""
Error codes shared by the repository, service and use case layers.
"""

from enum import Enum


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    DISPATCH_FAILURE = "DISPATCH_FAILURE"
