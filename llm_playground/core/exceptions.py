"""HTTP-facing errors raised by API routes and services."""

from fastapi import HTTPException


class AppError(HTTPException):
    status_code: int = 500

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class BadRequestError(AppError):
    status_code = 400


class UnauthorizedError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404
