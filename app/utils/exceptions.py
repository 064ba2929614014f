"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Business-rule violations of the shift lifecycle are HTTPException subclasses
so they propagate unchanged from services to the client. Database errors are
never wrapped here; they surface as-is.

Usage:
    from app.utils.exceptions import NotFoundError, AlreadyOpenError
    raise NotFoundError("Shift record not found")
    raise AlreadyOpenError()
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a referenced shift record, branch, or employee does not exist.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용 (e.g. duplicate branch name)."""

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    Raised for business validation beyond what Pydantic catches
    (e.g. an hourly rate below the minimum wage).
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ValidationError(HTTPException):
    """422 예외 — 근태 기록 값이 유효하지 않을 때 사용.

    Raised when an edited or backfilled shift is malformed: missing check-in,
    check-out not after check-in, more than one open break, zero-length break.
    """

    def __init__(self, detail: str = "Invalid shift record") -> None:
        super().__init__(status_code=422, detail=detail)


class ShiftStateError(HTTPException):
    """409 예외 — 현재 근무 상태에서 허용되지 않는 동작.

    Base class for clock-in/break/clock-out attempts that are illegal in the
    employee's current shift state.
    """

    default_detail: str = "Action not allowed in current shift state"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail or self.default_detail)


class AlreadyOpenError(ShiftStateError):
    default_detail = "이미 출근 상태입니다 (Already clocked in, clock out first)"


class NotClockedInError(ShiftStateError):
    default_detail = "출근 기록이 없습니다 (Not clocked in)"


class AlreadyOnBreakError(ShiftStateError):
    default_detail = "이미 휴게 중입니다 (Already on break)"


class NotOnBreakError(ShiftStateError):
    default_detail = "휴게 중이 아닙니다 (Not on break)"
