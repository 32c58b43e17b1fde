from enum import Enum
from typing import Optional

class ErrorKind(str, Enum):
    INVALID_THRESHOLD = "InvalidThreshold"
    THRESHOLD_EXCEEDS_KEYS = "ThresholdExceedsKeys"
    DUPLICATE_PUBLIC_KEY = "DuplicatePublicKey"
    BALANCE_MISMATCH = "BalanceMismatch"
    INSUFFICIENT_SIGNATURES = "InsufficientSignatures"
    INVALID_SIGNER = "InvalidSigner"
    INDEX_OUT_OF_BOUNDS = "IndexOutOfBounds"
    UNAUTHORIZED_SIGNER = "UnauthorizedSigner"
    INVALID_SIGNATURE = "InvalidSignature"
    ENCODING_ERROR = "EncodingError"

class TransactionError(ValueError):
    """
    Base error for every failure the core reports.
    The message is meant for humans, `kind` for programs.
    """
    kind: ErrorKind

    def __init__(self, message: str, spend_index: Optional[int] = None):
        self.message = message
        self.spend_index = spend_index
        if spend_index is not None:
            message = f"Spend {spend_index}: {message}"
        super().__init__(message)

    def at_spend(self, spend_index: int) -> "TransactionError":
        """Return a copy of this error tagged with the failing spend index."""
        return type(self)(self.message, spend_index=spend_index)

class InvalidThreshold(TransactionError):
    kind = ErrorKind.INVALID_THRESHOLD

class ThresholdExceedsKeys(TransactionError):
    kind = ErrorKind.THRESHOLD_EXCEEDS_KEYS

class DuplicatePublicKey(TransactionError):
    kind = ErrorKind.DUPLICATE_PUBLIC_KEY

class BalanceMismatch(TransactionError):
    kind = ErrorKind.BALANCE_MISMATCH

class InsufficientSignatures(TransactionError):
    kind = ErrorKind.INSUFFICIENT_SIGNATURES

class InvalidSigner(TransactionError):
    kind = ErrorKind.INVALID_SIGNER

class IndexOutOfBounds(TransactionError):
    kind = ErrorKind.INDEX_OUT_OF_BOUNDS

class UnauthorizedSigner(TransactionError):
    kind = ErrorKind.UNAUTHORIZED_SIGNER

class InvalidSignature(TransactionError):
    kind = ErrorKind.INVALID_SIGNATURE

class EncodingError(TransactionError):
    kind = ErrorKind.ENCODING_ERROR
