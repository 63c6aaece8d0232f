from flask import current_app, jsonify, request
from flask_login import current_user, login_required
import logging

from app import limiter
from app.auth import auth_bp
from app.auth.accounts import create_account
from app.auth.forms import CredentialsForm
from app.auth.models import User
from app.exceptions import ForbiddenError, UnauthenticatedError, ValidationError
from app.repositories import MongoUserRepository

logger = logging.getLogger(__name__)

REFRESH_COOKIE = "refreshToken"
REFRESH_COOKIE_PATH = "/api/auth"


def _session_response(user):
    """Respuesta de inicio de sesión: token de acceso y cookie de refresco."""
    response = jsonify({
        "user": {"id": user.id, "username": user.username, "role": user.role},
        "access": user.get_access_token(),
    })
    response.set_cookie(
        REFRESH_COOKIE,
        user.get_refresh_token(),
        max_age=current_app.config["REFRESH_TOKEN_MAX_AGE"],
        httponly=True,
        secure=current_app.config["COOKIE_SECURE"],
        samesite=current_app.config["COOKIE_SAMESITE"],
        domain=current_app.config["COOKIE_DOMAIN"],
        path=REFRESH_COOKIE_PATH,
    )
    return response


@auth_bp.route("/status", methods=["GET"])
def status():
    return jsonify({"usersExist": MongoUserRepository().count() > 0})


@auth_bp.route("/setup-admin", methods=["POST"])
def setup_admin():
    """Crea el primer administrador. Solo disponible con la colección vacía."""
    repo = MongoUserRepository()
    if repo.count() > 0:
        raise ValidationError("Ya existe al menos un usuario.")
    form = CredentialsForm.from_payload(request.get_json(silent=True))
    user = create_account(repo, form.username.data, form.password.data, role="admin")
    logger.info(f"Administrador inicial '{user.username}' creado.")
    return _session_response(user)


@auth_bp.route("/register", methods=["POST"])
def register():
    if not current_app.config["ALLOW_OPEN_REG"]:
        raise ForbiddenError("Registro cerrado.")
    form = CredentialsForm.from_payload(request.get_json(silent=True))
    user = create_account(MongoUserRepository(), form.username.data, form.password.data)
    return jsonify({"ok": True, "id": user.id, "username": user.username}), 201


@auth_bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    form = CredentialsForm.from_payload(request.get_json(silent=True))
    user_data = MongoUserRepository().find_by_username(form.username.data)
    user = User(**user_data) if user_data else None

    if user is None or not user.check_password(form.password.data):
        logger.warning(f"Intento de inicio de sesión fallido para el usuario '{form.username.data}'")
        raise UnauthenticatedError("Credenciales inválidas.")

    logger.info(f"Usuario '{user.username}' inició sesión.")
    return _session_response(user)


@auth_bp.route("/refresh", methods=["POST"])
def refresh():
    token = request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise UnauthenticatedError("Sin token de refresco.")
    user_id = User.verify_refresh_token(token)
    user_data = MongoUserRepository().find_by_id(user_id) if user_id else None
    if not user_data:
        raise UnauthenticatedError("Token de refresco inválido.")
    user = User(**user_data)
    return jsonify({
        "access": user.get_access_token(),
        "user": {"id": user.id, "username": user.username, "role": user.role},
    })


@auth_bp.route("/logout", methods=["POST"])
def logout():
    response = jsonify({"ok": True})
    response.delete_cookie(REFRESH_COOKIE, path=REFRESH_COOKIE_PATH, domain=current_app.config["COOKIE_DOMAIN"])
    return response


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify(current_user.to_public())
