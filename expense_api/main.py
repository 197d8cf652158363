from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from expense_api.core.config import settings
from expense_api.core.exceptions import AppError
from expense_api.core.logging_config import get_logger, setup_logging
from expense_api.db.base import Base
from expense_api.db.session import engine

from expense_api.api.auth import router as auth_router
from expense_api.api.users import router as users_router
from expense_api.api.expense_reports import router as expense_reports_router
from expense_api.api.expenses import router as expenses_router
from expense_api.api.reference_data import router as reference_data_router

setup_logging()
logger = get_logger(__name__)

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# DEV ONLY
Base.metadata.create_all(bind=engine)


# ERRORS
@app.exception_handler(AppError)
def handle_app_error(request: Request, exc: AppError):
    logger.info(
        "request_failed",
        path=request.url.path,
        error=type(exc).__name__,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


# ROUTERS
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(users_router, prefix="/users", tags=["users"])
app.include_router(expense_reports_router, prefix="/expense-reports", tags=["expense-reports"])
app.include_router(expenses_router, prefix="/expenses", tags=["expenses"])
app.include_router(reference_data_router, tags=["reference-data"])


@app.get("/health")
def health():
    return {"status": "ok"}
