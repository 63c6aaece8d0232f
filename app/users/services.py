"""Administración de usuarios y perfil propio."""

import logging

from app.auth.forms import ChangePasswordForm, ProfileForm, UserCreateForm, UserUpdateForm
from app.auth.accounts import USERNAME_TAKEN, create_account
from app.auth.models import User
from app.auth.permissions import ensure_can_access
from app.exceptions import (
    ConflictError, DuplicateKeyError, NotFoundError, UnauthenticatedError, ValidationError,
)
from app.models import utcnow

logger = logging.getLogger(__name__)


def _load(repo, user_id):
    user_doc = repo.find_by_id(user_id)
    if user_doc is None:
        raise NotFoundError("Usuario no encontrado.")
    return User(**user_doc)


def _present(payload, names):
    return [name for name in names if payload.get(name) is not None]


def _save(repo, user_id, changes):
    changes["updatedAt"] = utcnow()
    try:
        updated = repo.update(user_id, changes)
    except DuplicateKeyError as e:
        if e.field == "username":
            raise ConflictError(USERNAME_TAKEN)
        raise
    if updated is None:
        raise NotFoundError("Usuario no encontrado.")
    return User(**updated)


def get_user(actor, user_id, repo):
    user = _load(repo, user_id)
    ensure_can_access(actor, {"_id": user.id}, "consultar")
    return user


def list_users(repo):
    return [User(**doc) for doc in repo.get_all()]


def create_user(payload, repo):
    form = UserCreateForm.from_payload(payload)
    data = form.cleaned_data()
    return create_account(repo, data["username"], data["password"], data["role"] or "user", data["fullName"])


def update_profile(actor, payload, repo):
    form = ProfileForm.from_payload(payload, partial=True)
    fields = _present(payload, ("fullName", "photoUrl"))
    if not fields:
        raise ValidationError("Nada para actualizar.")
    _load(repo, actor.id)
    return _save(repo, actor.id, form.cleaned_data(only=fields))


def change_own_password(actor, payload, repo):
    form = ChangePasswordForm.from_payload(payload)
    user = _load(repo, actor.id)
    if not user.check_password(form.currentPassword.data):
        raise UnauthenticatedError("Contraseña actual incorrecta.")
    user.set_password(form.newPassword.data)
    _save(repo, actor.id, {"passHash": user.password_hash})


def update_user(actor, user_id, payload, repo):
    """
    Actualización parcial por un administrador.
    Un administrador no puede quitarse a sí mismo el rol de admin.
    """
    form = UserUpdateForm.from_payload(payload, partial=True)
    fields = _present(payload, ("username", "fullName", "photoUrl", "role", "password"))
    if not fields:
        raise ValidationError("Nada para actualizar.")
    user = _load(repo, user_id)
    data = form.cleaned_data(only=fields)

    changes = {}
    username = data.get("username")
    if username and username != user.username:
        if repo.find_by_username(username):
            raise ConflictError(USERNAME_TAKEN)
        changes["username"] = username

    for key in ("fullName", "photoUrl"):
        if key in data:
            changes[key] = data[key]

    role = data.get("role")
    if role and role != user.role:
        if user.id == str(actor.id) and role != "admin":
            raise ValidationError("No puedes quitarte rol de admin a ti mismo.")
        changes["role"] = role

    if data.get("password"):
        user.set_password(data["password"])
        changes["passHash"] = user.password_hash

    updated = _save(repo, user.id, changes)
    logger.info(f"Usuario '{updated.username}' actualizado por '{actor.username}'.")
    return updated


def delete_user(actor, user_id, repo):
    user = _load(repo, user_id)
    if user.id == str(actor.id):
        raise ValidationError("No puedes eliminar tu propia cuenta.")
    repo.delete(user.id)
    logger.info(f"Usuario '{user.username}' eliminado por '{actor.username}'.")

