# Run from project root: uvicorn app.main:app --reload --port 8080

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.routes import router
from app.core.config import UPLOAD_DIR, UPLOAD_URL_PREFIX, resolve_path
from app.core.errors import AppError, UpstreamError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

INVALID_REQUEST_MESSAGE = "Dữ liệu gửi lên không hợp lệ"


app = FastAPI(title="Municipal Info Backend")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
app.include_router(router)

_upload_dir = resolve_path(UPLOAD_DIR)
_upload_dir.mkdir(parents=True, exist_ok=True)
app.mount(UPLOAD_URL_PREFIX.rstrip("/"), StaticFiles(directory=_upload_dir), name="uploads")


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, UpstreamError):
        logger.error("[api] %s %s failed: %r", request.method, request.url.path, exc.__cause__)
    else:
        logger.info("[api] %s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("[api] %s %s unhandled error", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": UpstreamError().message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("[api] %s %s invalid body: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": INVALID_REQUEST_MESSAGE})


if __name__ == "__main__":
    print("Municipal info backend booting...")
