import logging

from app.auth.models import User
from app.exceptions import ConflictError, DuplicateKeyError

logger = logging.getLogger(__name__)

USERNAME_TAKEN = "Nombre de usuario en uso."


def create_account(repo, username, password, role="user", fullName=""):
    """Inserta un usuario nuevo; un nombre repetido es ConflictError."""
    if repo.find_by_username(username):
        raise ConflictError(USERNAME_TAKEN)
    user = User(username=username, role=role, fullName=fullName, password=password)
    try:
        user_doc = repo.add(user.to_document())
    except DuplicateKeyError:
        raise ConflictError(USERNAME_TAKEN)
    logger.info(f"Usuario '{username}' creado con rol '{role}'.")
    return User(**user_doc)
