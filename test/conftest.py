import pytest
from app import create_app, mongo
from app.auth.models import User
from unittest.mock import patch
import logging
import mongomock

# Desactivar la propagación de logs para evitar duplicados en la consola de pytest
logging.getLogger("werkzeug").setLevel(logging.ERROR)
logging.getLogger("flask_limiter").setLevel(logging.ERROR)

PASSWORD = "ThisIsA-Valid-Password123!"


@pytest.fixture(scope="function")
def app():
    """Crea y configura una instancia de la aplicación Flask para cada test."""
    with patch('flask_pymongo.MongoClient', mongomock.MongoClient), \
            patch('pymongo.MongoClient', mongomock.MongoClient):
        app = create_app('testing')
        yield app


@pytest.fixture(scope="function")
def client(app):
    """Cliente de prueba simple para la aplicación Flask."""
    return app.test_client()


@pytest.fixture(scope="function")
def db(app):
    """
    Fixture que proporciona acceso a la BD y la limpia antes de cada test.
    No deja un contexto de aplicación abierto: cada petición del cliente
    de prueba debe cargar su propio usuario.
    """
    with app.app_context():
        mongo.db.client.drop_database(mongo.db.name)
        from app.repositories import ensure_indexes
        ensure_indexes(mongo.db)
    yield mongo.db


def seed_user(db, username, role="user", fullName=""):
    """Inserta un usuario con la contraseña de prueba y devuelve el objeto User."""
    user = User(username=username, role=role, fullName=fullName, password=PASSWORD)
    user_doc = user.to_document()
    user_doc["_id"] = db.users.insert_one(user_doc).inserted_id
    return User(**user_doc)


@pytest.fixture(scope="function")
def seed_test_user(db):
    """Crea un usuario de prueba (rol: user)."""
    return seed_user(db, "testuser", fullName="Test User")


@pytest.fixture(scope="function")
def seed_other_user(db):
    """Crea un segundo usuario normal, dueño de otros recursos."""
    return seed_user(db, "otheruser")


@pytest.fixture(scope="function")
def seed_test_admin(db):
    """Crea un usuario administrador de prueba."""
    return seed_user(db, "admin", role="admin", fullName="Admin User")


@pytest.fixture
def auth_headers(app):
    """Devuelve una función que construye la cabecera Bearer de un usuario."""
    def _headers(user):
        with app.app_context():
            return {"Authorization": f"Bearer {user.get_access_token()}"}
    return _headers


@pytest.fixture
def user_headers(auth_headers, seed_test_user):
    return auth_headers(seed_test_user)


@pytest.fixture
def admin_headers(auth_headers, seed_test_admin):
    return auth_headers(seed_test_admin)


def valid_report(**overrides):
    """Cuerpo mínimo válido para crear un reporte."""
    payload = {
        "fecha": "2025-01-05",
        "hora": "08:30",
        "tipo": "Seguridad",
        "severidad": "Media",
        "descripcion": "Fuga de aceite en la bomba principal",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_user(db):
    """Fábrica de usuarios adicionales para un test."""
    def _make(username, role="user", fullName=""):
        return seed_user(db, username, role=role, fullName=fullName)
    return _make


@pytest.fixture
def report_payload():
    return valid_report
