from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from app.api.v1.router import api_router
from app.config import settings
from app.database import Base, engine
from app.services.storage_service import THUMBNAIL_BUCKET, VIDEO_BUCKET
from app import models  # noqa: F401  регистрирует таблицы в Base.metadata
import os
import logging

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

# Создаем таблицы в базе данных
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG
)

# Настройка CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Создаем каталоги хранилища
os.makedirs(os.path.join(settings.UPLOAD_DIR, THUMBNAIL_BUCKET), exist_ok=True)
os.makedirs(os.path.join(settings.UPLOAD_DIR, VIDEO_BUCKET), exist_ok=True)

# Загруженные файлы раздаются как статика
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# Подключаем роутеры
app.include_router(api_router, prefix="/api/v1")

logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)

@app.get("/")
async def root():
    return {
        "message": "Welcome to Course Marketplace API",
        "version": settings.APP_VERSION,
        "docs": "/docs"
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy"}
