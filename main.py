import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vehicle_inventory.api.routes import inventory, locations, manufacturers, stock
from vehicle_inventory.core.config import settings
from vehicle_inventory.core.database import SessionLocal, engine
from vehicle_inventory.core.exceptions import InventoryError
from vehicle_inventory.core.seed import seed_database
from vehicle_inventory.models.database import Base

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    if settings.SEED_SAMPLE_DATA:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Vehicle inventory management API",
    version="1.0.0",
    lifespan=lifespan,
)

# Include routers
api = settings.API_PREFIX
app.include_router(inventory.router, prefix=f"{api}/inventory", tags=["inventory"])
app.include_router(manufacturers.router, prefix=f"{api}/manufacturers", tags=["manufacturers"])
app.include_router(locations.router, prefix=f"{api}/locations", tags=["locations"])
app.include_router(locations.transfers_router, prefix=f"{api}/location-transfers", tags=["locations"])
app.include_router(stock.settings_router, prefix=f"{api}/stock-settings", tags=["stock"])
app.include_router(stock.alerts_router, prefix=f"{api}/low-stock-alerts", tags=["stock"])


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    """Translate domain errors raised by the services into HTTP responses"""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies, path ids and query parameters are reported as 400"""
    logger.warning(f"Rejected invalid request to {request.url.path}")
    return JSONResponse(
        status_code=400,
        content={"detail": {"message": "Invalid data", "errors": jsonable_encoder(exc.errors())}},
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Internal server error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": {"message": "Internal server error"}})


@app.get("/")
async def root():
    return {"message": "Vehicle Inventory API"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
