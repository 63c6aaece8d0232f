# app/__init__.py

from flask import Flask, current_app, jsonify
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_pymongo import PyMongo
from pymongo.errors import ConnectionFailure, ConfigurationError
import logging
from logging.handlers import RotatingFileHandler
from config import DevelopmentConfig, ProductionConfig, TestingConfig
import os
import sys

# --- Instancias de Extensiones ---
login_manager = LoginManager()
mongo = PyMongo()
limiter = Limiter(key_func=get_remote_address)
cors = CORS()


# --- Funciones Auxiliares para Modularizar la Configuración ---

def init_app_extensions(app):
    """
    Inicializa las extensiones de Flask y configura la conexión a la BD.
    """
    limiter.init_app(app)
    origins = [o.strip() for o in (app.config.get("CORS_ORIGIN") or "").split(",") if o.strip()]
    cors.init_app(app, resources={r"/api/*": {"origins": origins}}, supports_credentials=True)

    mongo_uri = app.config.get("MONGO_URI")
    if not mongo_uri:
        raise RuntimeError("FATAL: La variable de entorno MONGO_URI no está configurada.")
    if not app.config.get("SECRET_KEY") or not app.config.get("REFRESH_SECRET_KEY"):
        raise RuntimeError("FATAL: SECRET_KEY y REFRESH_SECRET_KEY deben estar configuradas.")

    app.logger.info("Intentando conectar a MongoDB...")

    try:
        mongo.init_app(app)
        mongo.cx.server_info() # Fuerza la conexión para verificarla
        app.logger.info("Conexión a MongoDB establecida exitosamente.")
    except (ConnectionFailure, ConfigurationError) as e:
        app.logger.error(f"Error al conectar o configurar MongoDB: {e}")
        raise RuntimeError(f"No se pudo conectar a la base de datos: {e}")

    from app.repositories import ensure_indexes
    ensure_indexes(mongo.db)

    login_manager.init_app(app)

    from app.auth.models import User
    from app.exceptions import UnauthenticatedError
    from app.repositories import MongoUserRepository

    @login_manager.request_loader
    def load_user_from_request(request):
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return None
        payload = User.verify_access_token(header[len("Bearer "):].strip())
        if not payload:
            return None
        user_data = MongoUserRepository().find_by_id(payload.get("id"))
        if user_data:
            return User(**user_data)
        return None

    @login_manager.unauthorized_handler
    def unauthorized():
        raise UnauthenticatedError()

def register_app_blueprints(app):
    """
    Registra todos los Blueprints de la aplicación.
    """
    from app.main import main_bp
    app.register_blueprint(main_bp)

    from app.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    from app.reports import reports_bp
    app.register_blueprint(reports_bp, url_prefix='/api/reports')

    from app.summaries import summaries_bp
    app.register_blueprint(summaries_bp, url_prefix='/api/summaries')

    from app.users import users_bp
    app.register_blueprint(users_bp, url_prefix='/api/users')

def configure_app_logging(app):
    """
    Configura el sistema de logging de la aplicación.
    """
    log_dir = app.config.get("LOG_DIR", "logs")
    if not os.path.exists(log_dir):
        os.mkdir(log_dir)

    for handler in app.logger.handlers[:]:
        app.logger.removeHandler(handler)

    file_handler = RotatingFileHandler(os.path.join(log_dir, "app.log"), maxBytes=10240, backupCount=10)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'))

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    if not app.debug and not app.testing:
        file_handler.setLevel(logging.INFO)
        stream_handler.setLevel(logging.INFO)
        app.logger.setLevel(logging.INFO)
    else:
        file_handler.setLevel(logging.DEBUG)
        stream_handler.setLevel(logging.DEBUG)
        app.logger.setLevel(logging.DEBUG)

    app.logger.addHandler(file_handler)
    app.logger.addHandler(stream_handler)
    app.logger.info("Logging inicializado")

def register_app_error_handlers(app):
    """
    Registra los manejadores de errores globales. Todas las respuestas son JSON.
    """
    from app.exceptions import BaseAppException

    @app.errorhandler(BaseAppException)
    def app_exception(error):
        if error.status_code >= 500:
            current_app.logger.error(f"{error.kind}: {error.message}", exc_info=error.original_exception)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(400)
    def bad_request_error(error):
        return jsonify({"error": "validation_error", "message": "Petición inválida."}), 400

    @app.errorhandler(404)
    def page_not_found_error(error):
        return jsonify({"error": "not_found", "message": "No encontrado."}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"error": "method_not_allowed", "message": "Método no permitido."}), 405

    @app.errorhandler(429)
    def rate_limited(error):
        return jsonify({"error": "rate_limited", "message": "Demasiadas peticiones.", "retry_after": error.description}), 429

    @app.errorhandler(500)
    def internal_server_error(error):
        current_app.logger.error(f"Internal Server Error: {error}", exc_info=True)
        return jsonify({"error": "internal_error", "message": "Error interno."}), 500

# --- Función de Fábrica de Aplicación (create_app) ---
def create_app(config_class="development"):
    """
    Función de fábrica para crear y configurar la instancia de la aplicación Flask.
    """
    app = Flask(__name__)

    config_map = {
        'testing': TestingConfig,
        'production': ProductionConfig,
        'development': DevelopmentConfig
    }
    app.config.from_object(config_map.get(config_class, DevelopmentConfig))

    configure_app_logging(app)
    init_app_extensions(app)
    register_app_blueprints(app)
    register_app_error_handlers(app)

    from app.utils import MongoJSONProvider
    app.json = MongoJSONProvider(app)

    from app import commands as commands
    app.cli.add_command(commands.init_db_command)
    app.cli.add_command(commands.create_admin_command)

    return app
