"""FastAPI application entry point."""
from fastapi import FastAPI

from app.exception_handlers import setup_exception_handlers
from app.logging_config import configure_logging
from app.routers import auth, events, expenses, gallery, health, meetings, members, notifications


configure_logging()

app = FastAPI(title="Club Portal API")
setup_exception_handlers(app)


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Simple health probe for liveness checks."""
    return {"status": "ok"}


# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(members.router)
app.include_router(events.router)
app.include_router(meetings.router)
app.include_router(expenses.router)
app.include_router(gallery.router)
app.include_router(notifications.router)
