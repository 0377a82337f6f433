import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from slot_scheduler.core.config import settings
from slot_scheduler.routers.businesses import router as businesses_router
from slot_scheduler.routers.shift_templates import router as shift_templates_router
from slot_scheduler.routers.roster import router as roster_router
from slot_scheduler.routers.slots import router as slots_router

logging.basicConfig(
  level=settings.log_level.upper(),
  format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Slot Scheduler API")

# Comma-separated list, e.g.:
# CORS_ORIGINS="http://localhost:5173,https://dashboard.example.com"
allow_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]

# Safe fallback for local dev if env var not set
if not allow_origins:
  allow_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
  ]

app.add_middleware(
  CORSMiddleware,
  allow_origins=allow_origins,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)

app.include_router(businesses_router, prefix="/businesses", tags=["businesses"])
app.include_router(shift_templates_router, prefix="/businesses", tags=["shift-templates"])
app.include_router(roster_router, prefix="/businesses", tags=["roster"])
app.include_router(slots_router, prefix="/businesses", tags=["slots"])

@app.get("/health")
def health():
  return {"status": "ok"}
