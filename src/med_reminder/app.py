from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from med_reminder.api.routers import checks, diagnostics, email
from med_reminder.exceptions import AuthError
from med_reminder.utils.logger import logger

app = FastAPI(title="Medication Reminder Alerts")
app.include_router(checks.router)
app.include_router(email.router)
app.include_router(diagnostics.router)


# === Exception Handlers ===
@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


@app.exception_handler(AuthError)
async def auth_exception_handler(request: Request, exc: AuthError):
    logger.warning(f"⚠️ Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=401, content={"success": False, "message": "Unauthorized"}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.errors()})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# === Routes ===
@app.get("/health")
def health():
    return {"status": "ok"}


# uvicorn med_reminder.app:app --host 0.0.0.0 --port 8000
