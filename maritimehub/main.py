import logging

from fastapi import FastAPI

from maritimehub.api.v1.flows import router as flows_router
from maritimehub.api.v1.session import router as session_router
from maritimehub.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("flow_id", "booking_id", "status", "outcome", "endpoint", "reason", "error"):
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

app = FastAPI(title="MaritimeHub Booking Flow", version="1.0.0")

app.include_router(flows_router, prefix="/api/v1", tags=["flows"])
app.include_router(session_router, prefix="/api/v1", tags=["session"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
