import logging
import sys

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api.goals import router as goals_router
from app.api.activities import router as activities_router
from app.api.strava import router as strava_router
from app.api.account import router as account_router
from app.db import Base, engine
from app.models.goal import Goal  # noqa: F401  (import ensures table is registered)
from app.models.activity import Activity  # noqa: F401
from app.models.strava_token import StravaToken  # noqa: F401
from app.core.config import settings

# Send app logs (sync, import, token refresh) to stdout
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stdout,
)

app = FastAPI(title="Yearly Goals")


async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    # The rejected input may be NaN/Infinity, which JSON cannot carry; send loc/msg/type only
    detail = [{k: err[k] for k in ("type", "loc", "msg") if k in err} for err in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(detail)})


app.add_exception_handler(RequestValidationError, _validation_exception_handler)

# Allow CORS for local frontend
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables (goals, activities, strava tokens) on startup
Base.metadata.create_all(bind=engine)

app.include_router(goals_router)
app.include_router(activities_router)
app.include_router(strava_router)
app.include_router(account_router)


@app.get("/")
def root():
    return {"message": "Yearly Goals backend is running"}
