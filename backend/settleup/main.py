"""FastAPI app entrypoint."""
import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from settleup.database import engine, Base
from settleup.routers import auth, groups, expenses, settlements
from settleup.services.validation import ValidationError

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

_origins_env = os.getenv("ALLOWED_ORIGINS", "")
allowed_origins = [o.strip() for o in _origins_env.split(",") if o.strip()] if _origins_env else ["*"]

app = FastAPI(
    title="SettleUp API",
    description="Log shared expenses in a group and work out who owes whom with as few transfers as possible.",
    version="1.0.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api")
app.include_router(groups.router, prefix="/api")
app.include_router(expenses.router, prefix="/api")
app.include_router(settlements.router, prefix="/api")


@app.exception_handler(ValidationError)
async def settlement_validation_error(request: Request, exc: ValidationError):
    logger.info("Rejected settlement input on %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "reason": exc.reason.value},
    )


@app.get("/")
def root():
    return {"message": "SettleUp API", "docs": "/docs"}


@app.get("/api/health")
def health():
    return {"status": "ok"}
