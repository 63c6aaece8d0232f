from datetime import datetime, timezone
from dataclasses import dataclass

from flask import current_app
from flask_login import UserMixin
from itsdangerous import BadSignature, URLSafeTimedSerializer as TimedSerializer
from werkzeug.security import generate_password_hash, check_password_hash

ROLES = ("admin", "user")

_ACCESS_SALT = "access-token"
_REFRESH_SALT = "refresh-token"


@dataclass(frozen=True)
class AuthContext:
    """
    Identidad autenticada de la petición en curso.
    Se construye por petición a partir del token y se pasa explícitamente
    a las operaciones de negocio.
    """
    id: str
    username: str
    role: str
    fullName: str = ""

    @property
    def is_admin(self):
        return self.role == "admin"

    @property
    def display_name(self):
        return self.fullName.strip() if self.fullName and self.fullName.strip() else self.username


class User(UserMixin):
    def __init__(self, username, role="user", fullName="", photoUrl="", password="",
                 passHash=None, _id=None, createdAt=None, updatedAt=None, **kwargs):
        self.username = username
        self.role = role
        self.fullName = fullName or ""
        self.photoUrl = photoUrl or ""
        self.createdAt = createdAt
        self.updatedAt = updatedAt

        # Flask-Login requiere que el atributo 'id' sea un string.
        self.id = str(_id) if _id else None

        if passHash:
            self.password_hash = passHash
        elif password:
            self.set_password(password)
        else:
            self.password_hash = None

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if self.password_hash:
            return check_password_hash(self.password_hash, password)
        return False

    # --- Tokens ---
    def get_access_token(self):
        s = TimedSerializer(current_app.config["SECRET_KEY"], salt=_ACCESS_SALT)
        return s.dumps({"id": self.id, "username": self.username, "role": self.role})

    def get_refresh_token(self):
        s = TimedSerializer(current_app.config["REFRESH_SECRET_KEY"], salt=_REFRESH_SALT)
        return s.dumps({"id": self.id})

    @staticmethod
    def verify_access_token(token):
        """Devuelve el payload del token de acceso o None si es inválido o expiró."""
        s = TimedSerializer(current_app.config["SECRET_KEY"], salt=_ACCESS_SALT)
        try:
            return s.loads(token, max_age=current_app.config["ACCESS_TOKEN_MAX_AGE"])
        except BadSignature:
            return None

    @staticmethod
    def verify_refresh_token(token):
        s = TimedSerializer(current_app.config["REFRESH_SECRET_KEY"], salt=_REFRESH_SALT)
        try:
            data = s.loads(token, max_age=current_app.config["REFRESH_TOKEN_MAX_AGE"])
        except BadSignature:
            return None
        return data.get("id")

    # --- Persistencia ---
    def to_document(self):
        now = datetime.now(timezone.utc)
        return {
            "username": self.username,
            "passHash": self.password_hash,
            "role": self.role,
            "fullName": self.fullName,
            "photoUrl": self.photoUrl,
            "createdAt": self.createdAt or now,
            "updatedAt": now,
        }

    def to_public(self):
        """Representación pública: nunca incluye el hash de la contraseña."""
        return {
            "id": self.id,
            "username": self.username,
            "fullName": self.fullName,
            "photoUrl": self.photoUrl,
            "role": self.role,
            "createdAt": self.createdAt,
            "updatedAt": self.updatedAt,
        }

    def auth_context(self):
        return AuthContext(id=self.id, username=self.username, role=self.role, fullName=self.fullName)

    # --- MÉTODOS DE PROPIEDAD PARA ROLES ---
    @property
    def is_admin(self):
        return self.role == "admin"

    def __repr__(self):
        return f"<User {self.username} (Rol: {self.role})>"
