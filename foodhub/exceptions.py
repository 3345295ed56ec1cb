import logging
from typing import Any, Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from foodhub.config import settings

logger = logging.getLogger(__name__)


class APIException(Exception):
    """ Base class for all domain errors raised by the Foodhub services. """
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(APIException):
    """ Raised when a cart line or a coordinate pair is out of bounds. Nothing is written. """
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"


class IntegrityError(APIException):
    """ Raised when a product does not belong to the vendor that owns the merchant. """
    status_code = status.HTTP_409_CONFLICT
    code = "INTEGRITY_ERROR"


class NotFoundException(APIException):
    """ Raised when a referenced record does not exist. """
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


def error_response(status_code: int, message: str, code: str, details: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": {"code": code, "details": jsonable_encoder(details)}
        }
    )


def create_exception_handler() -> Callable[[Request, APIException], JSONResponse]:
    async def exception_handler(request: Request, exception: APIException):
        return error_response(exception.status_code, exception.message, exception.code, exception.details)

    return exception_handler


async def request_validation_handler(request: Request, exception: RequestValidationError):
    # Input may hold bytes or Decimals, the encoder turns them into JSON-safe values
    details = [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exception.errors()
    ]
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error", "VALIDATION_ERROR", details)


async def unhandled_exception_handler(request: Request, exception: Exception):
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exception)
    details = str(exception) if settings.DEBUG else "An error occurred"
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "SERVER_ERROR", details)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIException, create_exception_handler())
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
