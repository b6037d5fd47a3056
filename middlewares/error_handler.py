import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse
from services.exceptions import FeesUnpaidError, GradingError, StorageError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, detail: ErrorDetail) -> JSONResponse:
    body = ErrorResponse(error=detail, latency_ms=0)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def add_error_handlers(app: FastAPI):
    # ✅ 등록금 미납: 프론트가 결제 안내를 띄울 수 있도록 별도 코드 + 학기 정보
    @app.exception_handler(FeesUnpaidError)
    async def fees_unpaid_handler(request: Request, exc: FeesUnpaidError):
        detail = ErrorDetail(code=exc.code, message=str(exc), term=exc.term, year=exc.year)
        return _error_response(exc.status_code, detail)

    @app.exception_handler(GradingError)
    async def grading_error_handler(request: Request, exc: GradingError):
        if isinstance(exc, StorageError):
            logger.error(f"저장소 오류: {request.method} {request.url.path} - {exc}")
        return _error_response(exc.status_code, ErrorDetail(code=exc.code, message=str(exc)))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
        return _error_response(500, ErrorDetail(code="INTERNAL_ERROR", message=str(exc)))
