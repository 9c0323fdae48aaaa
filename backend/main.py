# backend/main.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from dotenv import load_dotenv

from config import settings
from database import init_db
from utils.errors import InventoryError, StorageError

load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Router imports
from routes.products import router as products_router
from routes.reports import router as reports_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Exits the process if the tables cannot be created
    init_db()
    yield


app = FastAPI(title="Retail Inventory API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error mapping
@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    # Detail is already logged where it was raised
    return JSONResponse(status_code=exc.status_code, content={"detail": "Internal storage error"})

@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Unhandled database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal storage error"})


# Router registration
app.include_router(products_router)
app.include_router(reports_router)

@app.get("/api")
def read_root():
    return {"message": "Retail Inventory API is running"}

# Web UI - mounted last so the API routes take precedence
static_dir = Path(settings.STATIC_DIR)
if static_dir.is_dir():
    app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
