import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import db, settings
from core.errors import DispatchError
from dispatch import router as dispatch_router
from operations import router as operations_router

logging.basicConfig(
    level=settings.log_level(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="Zoo Operations API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DispatchError)
async def dispatch_error_handler(request: Request, exc: DispatchError) -> JSONResponse:
    if exc.status_code < 500:
        logger.info("request_rejected path=%s error=%s", request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


def _describe_validation_error(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        problems.append(f"{location}: {message}" if location else message)
    return "; ".join(problems) or "Invalid request."


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation_error(exc)
    logger.info("request_invalid path=%s error=%s", request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message})


app.include_router(dispatch_router.router, prefix="/api", tags=["dispatch"])
app.include_router(operations_router.router, prefix="/api", tags=["operations"])


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


@app.get("/")
def root() -> dict:
    return {"message": "zoo operations api"}


def run() -> None:
    uvicorn.run(app, host=settings.host(), port=settings.port(), log_level=settings.log_level().lower())


if __name__ == "__main__":
    run()
