from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.config import get_settings
from app.routers import calendar
from app.routers import publication_locks
from app.routers import user_calendar_events
from app.services.errors import CalendarError

settings = get_settings()

# Create FastAPI app FIRST
app = FastAPI(title="Content Calendar API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CalendarError)
async def handle_calendar_error(req: Request, exc: CalendarError):
    logger.info(f"{req.method} {req.url.path} -> {exc.status_code}: {exc.message}")
    body = {"detail": exc.message}
    if exc.details is not None:
        body["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


# Register routers
app.include_router(calendar.router)
app.include_router(user_calendar_events.router)
app.include_router(publication_locks.router)


# Health check
@app.get("/")
def health_check():
    return {"status": "ok"}
