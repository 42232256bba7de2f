from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from marketplace.core.config import settings
from marketplace.core.errors import MarketplaceError
from marketplace.api import bookings, financials, merchants, users
from marketplace.core.logger import setup_logging, logger
from marketplace.services.marketplace import build_marketplace
from contextlib import asynccontextmanager
from datetime import datetime

setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one set of stores per process
    logger.info("🚀 Starting marketplace backend")
    app.state.marketplace = build_marketplace()
    yield
    # Shutdown
    logger.info("🛑 Shutting down backend")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan
)

@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    logger.warning(f"⚠️ {request.method} {request.url.path} rejected: {type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": type(exc).__name__, "detail": exc.message}
    )

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"message": "Internal Server Error", "detail": "An unexpected error occurred. Please contact support."}
    )

# Include routers
app.include_router(users.router, prefix=settings.API_PREFIX, tags=["Users"])
app.include_router(merchants.router, prefix=settings.API_PREFIX, tags=["Merchants"])
app.include_router(bookings.router, prefix=settings.API_PREFIX, tags=["Bookings"])
app.include_router(financials.router, prefix=settings.API_PREFIX, tags=["Financials"])

@app.get("/")
async def health_check():
    return {'status': 'active', 'time': datetime.now().isoformat()}

@app.get("/health")
async def health_check_std():
    return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("marketplace.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
