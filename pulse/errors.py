"""
Service-level errors.

Services raise ServiceError with a stable machine-readable code; the
entrypoints convert it to the {"error", "code"} result dictionaries
returned to callers.
"""

# HTTP status for each error code surfaced by the entrypoints
STATUS_BY_CODE = {
    "MISSING_USER_ID": 400,
    "MISSING_PARAMS": 400,
    "PROFILE_NOT_FOUND": 404,
    "USER_NOT_FOUND": 404,
    "NO_PLAN": 404,
    "WORKOUT_NOT_FOUND": 404,
    "AI_ERROR": 502,
    "AI_EMPTY": 502,
    "PARSE_ERROR": 500,
    "INVALID_FORMAT": 500,
    "DB_ERROR": 500,
    "INTERNAL_ERROR": 500,
}


class ServiceError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def status(self) -> int:
        return STATUS_BY_CODE.get(self.code, 500)

    def to_dict(self, include_success: bool = False) -> dict:
        result = {"error": self.message, "code": self.code}
        if include_success:
            result = {"success": False, **result}
        return result
