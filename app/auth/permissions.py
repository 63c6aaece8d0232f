"""
Comprobación única de capacidades sobre recursos.

Todos los recursos (reportes, novedades y usuarios) usan la misma regla:
un administrador puede actuar sobre cualquiera; un usuario normal solo
sobre los que le pertenecen.
"""

import logging

from bson.objectid import ObjectId

from app.exceptions import ForbiddenError

logger = logging.getLogger(__name__)


def resource_owner_id(resource):
    """
    Identificador del dueño de un recurso.
    Reportes y novedades guardan ``ownerId``; un documento de usuario es su
    propio dueño.
    """
    if "ownerId" in resource:
        owner = resource.get("ownerId")
    else:
        owner = resource.get("_id", resource.get("id"))
    return str(owner) if owner is not None else None


def can_access(actor, resource):
    if actor is None:
        return False
    if actor.is_admin:
        return True
    return resource_owner_id(resource) == str(actor.id)


def ensure_can_access(actor, resource, action="acceder a"):
    if not can_access(actor, resource):
        logger.warning(
            f"Acceso denegado: '{getattr(actor, 'username', None)}' intentó {action} el recurso {resource.get('_id')}."
        )
        raise ForbiddenError()


def owner_scope(actor, owner=None):
    """
    Filtro de dueño para listados.

    Un usuario normal siempre ve solo lo suyo, sin importar el parámetro.
    Un administrador ve todo salvo que pida ``me`` o el id de un usuario.
    """
    if not actor.is_admin or owner == "me":
        return ObjectId(actor.id)
    if owner and owner != "all" and ObjectId.is_valid(owner):
        return ObjectId(owner)
    return None
