import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

from timetrack.errors import TimesheetError, field_errors
from timetrack.routers.timesheets import router as timesheets_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Timetrack API")

# --- Routers ---
app.include_router(timesheets_router)


CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in CORS_ORIGINS],
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error responses ---

@app.exception_handler(TimesheetError)
async def timesheet_error_handler(request: Request, exc: TimesheetError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"message": "The given data was invalid.", "errors": field_errors(exc.errors())},
    )


@app.get("/health")
def health():
    return {"ok": True}
