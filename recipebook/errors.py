"""Error taxonomy for recipe operations.

Every error a core operation can surface to its caller is an ``HTTPException``
subclass, so services raise them directly and FastAPI renders them without
extra handlers. ``PartialMediaFailure`` is the exception: it never leaves the
writer/editor, which log it and move on to the next media file.
"""

from typing import Any

from fastapi import HTTPException, status


class Unauthenticated(HTTPException):
    """No valid acting-user identity."""

    def __init__(self, detail: str = "Vui lòng đăng nhập lại!"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ValidationFailure(HTTPException):
    """One or more business-rule violations, all reported together."""

    def __init__(self, errors: list[str], submitted: dict[str, Any] | None = None):
        self.errors = list(errors)
        self.submitted = submitted or {}
        super().__init__(
            status_code=422,
            detail={
                "message": "Vui lòng điền đầy đủ thông tin!",
                "errors": self.errors,
                "input": self.submitted,
            },
        )


class NotFound(HTTPException):
    """Referenced recipe (or user) does not exist."""

    def __init__(self, detail: str = "Không tìm thấy công thức"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Forbidden(HTTPException):
    """Acting user does not own the recipe."""

    def __init__(self, detail: str = "Bạn không có quyền chỉnh sửa công thức này"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class PersistenceFailure(HTTPException):
    """The row or blob store rejected an operation.

    The underlying message is kept verbatim in both ``reason`` and the
    response detail.
    """

    def __init__(self, reason: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.reason = reason
        super().__init__(status_code=status_code, detail=f"Có lỗi xảy ra: {reason}")


class DuplicateRow(PersistenceFailure):
    """A uniqueness constraint rejected an insert."""

    def __init__(self, reason: str):
        super().__init__(reason, status_code=status.HTTP_409_CONFLICT)


class PartialMediaFailure(Exception):
    """A single media upload or its link insert failed."""

    def __init__(self, filename: str, step: int | None, reason: str):
        self.filename = filename
        self.step = step
        self.reason = reason
        where = f"step {step}" if step is not None else "thumbnail"
        super().__init__(f"{filename} ({where}): {reason}")
