from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Настройки приложения
    APP_NAME: str = "Course Marketplace"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    
    # Настройки базы данных
    DATABASE_URL: str = "sqlite:///./marketplace.db"
    
    # Настройки безопасности
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    
    # Настройки хранилища файлов
    MAX_UPLOAD_SIZE: int = 500 * 1024 * 1024  # 500MB, видео уроков
    UPLOAD_DIR: str = "./uploads"
    
    # Базовый адрес фронтенда для ссылок на сертификаты
    PUBLIC_BASE_URL: str = "http://localhost:5173"
    
    # Настройки CORS
    ALLOWED_ORIGINS: list = ["http://localhost:3000", "http://localhost:5173"]
    
    class Config:
        env_file = ".env"

settings = Settings()
