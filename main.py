import time
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from env import DATABASE_URL, HOST, PORT, missing_env_vars
from exceptions import FieldError, ProductInsightError, ValidationError
from logger_manager import log_error, log_info
from routers.dashboard import router as dashboard_router
from routers.product import router as product_router
from services.product_service import ProductService
from services.productAnalyzerAgent import ProductImageAnalyzer
from services.storage import MemStorage, ProductStorage

BASE_DIR = Path(__file__).resolve().parent


def build_storage(database_url: Optional[str] = DATABASE_URL) -> ProductStorage:
    """In-memory storage unless a DATABASE_URL selects the SQL backend."""
    if not database_url:
        log_info("Using in-memory product storage, products are lost on restart")
        return MemStorage()

    from db.database import build_engine, build_session_factory, init_db
    from db.repositories import ProductRepository

    engine = build_engine(database_url)
    init_db(engine)
    log_info(f"Using database product storage at {engine.url.render_as_string(hide_password=True)}")
    return ProductRepository(build_session_factory(engine))


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(ProductInsightError)
    async def product_insight_error_handler(request: Request, exc: ProductInsightError):
        if exc.status_code >= 500:
            log_error(f"{request.method} {request.url.path} failed: {exc}", exc)
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            FieldError(field=".".join(str(part) for part in error["loc"]), message=error["msg"])
            for error in exc.errors()
        ]
        error = ValidationError("Invalid request", errors)
        return JSONResponse(error.to_dict(), status_code=error.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log_error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc)
        return JSONResponse({"error": "Internal Server Error"}, status_code=500)


def create_app(
    storage: Optional[ProductStorage] = None,
    analyzer: Optional[ProductImageAnalyzer] = None,
) -> FastAPI:
    app = FastAPI(title="ProductInsight API")

    # Storage and the analysis client live for the whole process
    app.state.storage = storage if storage is not None else build_storage()
    app.state.analyzer = analyzer if analyzer is not None else ProductImageAnalyzer()
    app.state.product_service = ProductService(app.state.storage, app.state.analyzer)

    if not app.state.analyzer.is_configured:
        for var in missing_env_vars() or ["GEMINI_API_KEY"]:
            log_error(f"Environment variable {var} is not set. Product analysis will fail until it is set in the .env file.")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            duration = int((time.perf_counter() - start) * 1000)
            log_info(f"{request.method} {request.url.path} {response.status_code} in {duration}ms")
        return response

    register_exception_handlers(app)

    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
    app.include_router(product_router, prefix="/api/products")
    app.include_router(dashboard_router)

    return app


app = create_app()

# To run the FastAPI app, use the command: uvicorn main:app --reload
if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT)
