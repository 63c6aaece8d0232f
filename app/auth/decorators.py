# app/auth/decorators.py

from functools import wraps
from flask_login import current_user, login_required

from app.exceptions import ForbiddenError


# Decorador general para requerir uno o varios roles
def role_required(roles):
    """
    Decorador que verifica si el usuario actual tiene alguno de los roles especificados.

    Uso:
    @role_required('admin')
    @role_required(['admin', 'user'])
    """

    def decorator(f):
        @wraps(f)
        @login_required  # Asegura que el usuario esté autenticado antes de comprobar el rol
        def decorated_function(*args, **kwargs):
            # Convertir 'roles' a una lista si se pasó un solo rol como cadena
            if isinstance(roles, str):
                allowed_roles = [roles]
            else:
                allowed_roles = roles

            if current_user.role not in allowed_roles:
                raise ForbiddenError("Solo administradores.")
            return f(*args, **kwargs)

        return decorated_function

    return decorator


def admin_required(f):
    """Solo permite acceso a usuarios con el rol 'admin'."""
    return role_required("admin")(f)
