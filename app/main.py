import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.v1.bookings import router as bookings_router
from app.api.v1.chat import router as chat_router
from app.core.config import settings
from app.wiring.dependencies import get_session_factory


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in (
            "user_id",
            "intent",
            "action",
            "booking_id",
            "resource_id",
            "resource_type_id",
            "date",
            "time_slot",
            "outcome",
            "replaced",
            "resources_created",
            "error",
        ):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # create tables and seed resources before the first request
    get_session_factory()
    logging.getLogger(__name__).info("Booking assistant ready", extra={"action": "startup"})
    yield


app = FastAPI(title=f"{settings.HUB_NAME} Booking Assistant", version="1.0.0", lifespan=lifespan)

app.include_router(chat_router, tags=["chat"])
app.include_router(bookings_router, tags=["bookings"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
