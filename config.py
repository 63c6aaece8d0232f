# config.py

import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()


def _env_flag(name, default="False"):
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


class Config:
    """
    Clase de configuración base.
    Las variables críticas no tienen valor por defecto para forzar su definición
    en los entornos, lo cual es una práctica de seguridad recomendada.
    """
    SECRET_KEY = os.environ.get("SECRET_KEY")
    REFRESH_SECRET_KEY = os.environ.get("REFRESH_SECRET_KEY")

    # Vigencia de los tokens (segundos)
    ACCESS_TOKEN_MAX_AGE = int(timedelta(minutes=30).total_seconds())
    REFRESH_TOKEN_MAX_AGE = int(timedelta(days=7).total_seconds())

    # Registro abierto deshabilitado salvo que se indique lo contrario
    ALLOW_OPEN_REG = _env_flag("ALLOW_OPEN_REG")

    # Cookie del refresh token
    COOKIE_SECURE = _env_flag("COOKIE_SECURE")
    COOKIE_SAMESITE = os.environ.get("COOKIE_SAMESITE", "Lax")
    COOKIE_DOMAIN = os.environ.get("COOKIE_DOMAIN") or None

    # Orígenes permitidos para CORS, separados por coma
    CORS_ORIGIN = os.environ.get("CORS_ORIGIN", "http://localhost:5173")

    # Flask-Limiter
    RATELIMIT_DEFAULT = os.environ.get("RATELIMIT_DEFAULT", "120 per minute")
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_HEADERS_ENABLED = True

    # Paginación de listados
    REPORTS_PAGE_LIMIT = 200
    REPORTS_MAX_LIMIT = 500

    LOG_DIR = os.environ.get("LOG_DIR", "logs")

    # Configuración de MongoDB
    # Flask-PyMongo espera la URI en la variable 'MONGO_URI'
    MONGO_URI = os.environ.get("MONGO_URI")


class DevelopmentConfig(Config):
    """Configuración para el entorno de desarrollo."""
    DEBUG = True
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-cambia-esto"
    REFRESH_SECRET_KEY = os.environ.get("REFRESH_SECRET_KEY") or "dev-refresh-cambia-esto"
    # En desarrollo, si MONGO_URI no está definida, usamos una local.
    MONGO_URI = (
        os.environ.get("MONGO_URI") or "mongodb://localhost:27017/desviaciones"
    )


class ProductionConfig(Config):
    """Configuración para el entorno de producción."""
    DEBUG = False
    COOKIE_SECURE = _env_flag("COOKIE_SECURE", "True")
    COOKIE_SAMESITE = os.environ.get("COOKIE_SAMESITE", "None")
    # En producción, MONGO_URI y las claves DEBEN definirse como variables de entorno.


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    REFRESH_SECRET_KEY = "test-refresh-secret-key"
    ALLOW_OPEN_REG = False
    RATELIMIT_ENABLED = False
    WTF_CSRF_ENABLED = False
    MONGO_URI = (
        os.environ.get("TEST_MONGO_URI")
        or "mongodb://localhost:27017/desviaciones_test"
    )
