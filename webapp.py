import config

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mergeverse.api import get_api_routers
from mergeverse.logger import logger
from mergeverse.utils.exceptions import ErrorKind, ServiceError

STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_STATE: 400,
    ErrorKind.INSUFFICIENT_RESOURCE: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UPSTREAM: 502,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.UNAUTHORIZED: 401,
}


async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(
        status_code=STATUS_CODES.get(exc.kind, 400),
        content={"error": exc.kind.value, "message": exc.message},
    )


async def catch_unhandled(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {e}")
        return JSONResponse(status_code=500, content={"error": "INTERNAL", "message": "Internal server error"})


def create_app(services) -> FastAPI:
    app = FastAPI(title="MergeVerse API")
    app.state.services = services

    app.add_exception_handler(ServiceError, service_error_handler)
    app.middleware("http")(catch_unhandled)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.WEBAPP_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in get_api_routers():
        app.include_router(router)

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    return app
