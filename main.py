import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from errors import AppError

# Routers
from routers.auth import router as auth_router
from routers.exam import router as exam_router
from routers.health import router as health_router

logger = logging.getLogger("exam-portal")
logging.basicConfig(level=logging.INFO)

DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", DEFAULT_ORIGINS).split(",") if o.strip()]

app = FastAPI(title="Exam Portal API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "authorization"],
)


# ---------- Error rendering: every failure is {"error": message} ----------


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errs = exc.errors()
    msg = "Invalid request body"
    if errs:
        loc = ".".join(p for p in errs[0].get("loc", ()) if isinstance(p, str) and p != "body")
        msg = f"Invalid request body: {loc}" if loc else msg
    return JSONResponse(status_code=400, content={"error": msg})


@app.exception_handler(SQLAlchemyError)
async def datastore_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("datastore error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
def health_root():
    return {"ok": True}


# Register routers
app.include_router(auth_router)  # /api/auth/register, /api/auth/login
app.include_router(exam_router)  # /api/exam/questions, /submit, /results/{id}
app.include_router(health_router)  # /health/...


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "5000"))
    logger.info("Server running on port %d", port)
    uvicorn.run(app, host="0.0.0.0", port=port)
