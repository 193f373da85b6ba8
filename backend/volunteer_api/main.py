import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from volunteer_api.core.config import settings
from volunteer_api.core.database import init_db
from volunteer_api.core.logging_config import setup_logging
from volunteer_api.routes.posts import router as posts_router
from volunteer_api.routes.volunteer_requests import router as requests_router

logger = logging.getLogger(__name__)

setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A dead store must keep the server from accepting traffic at all.
    try:
        init_db()
    except SQLAlchemyError:
        logger.exception("Database unavailable at startup; refusing to serve")
        raise
    yield


app = FastAPI(title="Volunteer Hub API", lifespan=lifespan)
logger.info(
    "Startup config: ENV=%s FIREBASE_PROJECT_ID=%s CORS_ORIGINS=%s",
    settings.ENV,
    settings.FIREBASE_PROJECT_ID or "<unset>",
    ",".join(settings.CORS_ORIGINS),
)

_ERROR_CODE_BY_STATUS: dict[int, str] = {
    400: "INVALID_REQUEST",
    401: "UNAUTHENTICATED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
}


def _error_code(status_code: int) -> str:
    return _ERROR_CODE_BY_STATUS.get(int(status_code), "HTTP_ERROR")


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException):  # noqa: ARG001
    detail = exc.detail
    error = _error_code(exc.status_code)
    message: str
    details: dict | None = None

    if isinstance(detail, str):
        message = detail
    elif isinstance(detail, dict):
        # HTTPException(detail={"error": "...", "message": "...", "details": {...}})
        msg = detail.get("message")
        message = msg if isinstance(msg, str) and msg else "Request failed"
        code = detail.get("error")
        if isinstance(code, str) and code:
            error = code
        det = detail.get("details")
        details = det if isinstance(det, dict) else None
    else:
        message = str(detail) if detail is not None else "Request failed"

    payload: dict = {"error": error, "message": message}
    if details:
        payload["details"] = details
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request payload",
            "details": {"errors": jsonable_errors(exc)},
        },
    )


@app.exception_handler(SQLAlchemyError)
def store_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("%s %s failed on the store", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": "Database operation failed"},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may carry exception objects (e.g. from ge= constraints).
    out: list[dict] = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        out.append(err)
    return out


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(posts_router)
app.include_router(requests_router)


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Volunteer Management Server Running"


@app.get("/health")
def health_check():
    return {"status": "ok"}
