from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from core.config import settings
from core.errors import ExtractionError, StoreError
from core.logging import configure_logging
from db.session import init_db
from services.scheduler import get_scheduler, start_scheduler, shutdown_scheduler
from app.api.v1.endpoints.reminders import router as reminders_router
from app.api.v1.routes import api_router

configure_logging()

app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    docs_url="/docs",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Reminder routes stay at the root paths the browser client calls
app.include_router(reminders_router, tags=["reminders"])
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.opt(exception=exc).error("Store failure on {} {}", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal storage error"})


@app.exception_handler(ExtractionError)
async def extraction_error_handler(request: Request, exc: ExtractionError) -> JSONResponse:
    logger.warning("Extraction failed ({}): {}", exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("startup")
async def on_startup() -> None:
    init_db()
    scheduler = get_scheduler()
    start_scheduler(scheduler)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    scheduler = get_scheduler()
    shutdown_scheduler(scheduler)


def main() -> None:
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
