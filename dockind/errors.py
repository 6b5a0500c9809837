# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   Typed failures raised by the inference core and by the
#   MongoDB-facing orchestration.
#
# CLASSES:
# --------
# - InferenceInputError(ValueError)
#     Inference was handed something that is not a sequence of documents.
#
# - FlavorParseError(ValueError)
#     An external flavor string held no parseable "key = value" assignment.
#
# - ErrorCode(IntEnum)
#     Numeric codes for the stage of reverse engineering that failed.
#
# - ReverseEngineeringError(Exception)
#     A database-side failure, tagged with an ErrorCode.
#
# ==============================================

from enum import IntEnum
from typing import Any, Optional


class InferenceInputError(ValueError):
    """Raised when schema inference receives malformed input."""


class FlavorParseError(ValueError):
    """Raised when a flavor string contains no parseable assignment."""


class ErrorCode(IntEnum):
    CONNECTION = 1
    DB_LIST = 2
    DB_CONNECTION = 3
    LIST_COLLECTION = 4
    GET_DATA = 5
    HANDLE_BUCKET = 6
    COLLECTION_DATA = 7


class ReverseEngineeringError(Exception):
    """
    A failure while talking to the database, tagged with the stage it happened in.

    The message is pulled from the underlying driver error when one is given,
    so callers see the server's own explanation rather than a wrapper repr.
    """

    def __init__(self, code: ErrorCode, message: Any, cause: Optional[BaseException] = None):
        self.code = code
        self.message = self._extract_message(message)
        self.cause = cause
        super().__init__(f"[{int(code)}] {self.message}")

    @staticmethod
    def _extract_message(message: Any) -> str:
        # pymongo errors expose the server text on .details["errmsg"]
        details = getattr(message, "details", None)
        if isinstance(details, dict) and details.get("errmsg"):
            return str(details["errmsg"])
        return str(message)

    def to_dict(self) -> dict:
        return {"code": int(self.code), "message": self.message}
