from bson.objectid import ObjectId
import pytest

from app.auth.models import AuthContext
from app.auth.permissions import can_access, ensure_can_access, owner_scope
from app.exceptions import ForbiddenError

OWNER_ID = ObjectId()
OTHER_ID = ObjectId()

owner = AuthContext(id=str(OWNER_ID), username="owner", role="user")
other = AuthContext(id=str(OTHER_ID), username="other", role="user")
admin = AuthContext(id=str(ObjectId()), username="admin", role="admin")


def test_owner_and_admin_can_access_report():
    report = {"_id": ObjectId(), "ownerId": OWNER_ID}
    assert can_access(owner, report) is True
    assert can_access(admin, report) is True
    assert can_access(other, report) is False


def test_user_document_is_its_own_owner():
    assert can_access(owner, {"_id": OWNER_ID}) is True
    assert can_access(owner, {"id": str(OWNER_ID)}) is True
    assert can_access(other, {"_id": OWNER_ID}) is False


def test_anonymous_actor_has_no_access():
    assert can_access(None, {"ownerId": OWNER_ID}) is False


def test_ensure_can_access_raises_forbidden():
    with pytest.raises(ForbiddenError):
        ensure_can_access(other, {"_id": ObjectId(), "ownerId": OWNER_ID}, "editar")


def test_owner_scope():
    """
    GIVEN un usuario normal o un administrador
    WHEN se calcula el filtro de dueño de un listado
    THEN el usuario normal siempre ve solo lo suyo
    """
    assert owner_scope(owner) == OWNER_ID
    assert owner_scope(owner, str(OTHER_ID)) == OWNER_ID
    assert owner_scope(admin) is None
    assert owner_scope(admin, "all") is None
    assert owner_scope(admin, "me") == ObjectId(admin.id)
    assert owner_scope(admin, str(OTHER_ID)) == OTHER_ID
    assert owner_scope(admin, "no-es-id") is None


def test_ensure_can_access_without_actor_is_forbidden():
    with pytest.raises(ForbiddenError):
        ensure_can_access(None, {"_id": ObjectId(), "ownerId": OWNER_ID}, "consultar")
