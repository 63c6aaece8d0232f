import logging
import re
from functools import wraps

import pymongo
from bson.errors import InvalidId
from bson.objectid import ObjectId
from pymongo import errors as mongo_errors

from app import mongo
from app.exceptions import DatabaseQueryError, DuplicateKeyError
from app.models import Report, ShiftSummary

logger = logging.getLogger(__name__)

_INDEX_FIELD_RE = re.compile(r"index:\s+(\w+?)_-?1")


def to_object_id(value):
    """Convierte a ObjectId; devuelve None si el identificador no es válido."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def _duplicate_field(error, default):
    details = getattr(error, "details", None) or {}
    key_pattern = details.get("keyPattern") or details.get("keyValue")
    if key_pattern:
        return next(iter(key_pattern))
    match = _INDEX_FIELD_RE.search(str(error))
    if match:
        return match.group(1)
    return default


def translate_errors(unique_field=None):
    """
    Traduce las excepciones de PyMongo a excepciones de la aplicación.
    Una violación de índice único se convierte en DuplicateKeyError con el
    campo violado; cualquier otro error en DatabaseQueryError.
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except mongo_errors.DuplicateKeyError as e:
                raise DuplicateKeyError(_duplicate_field(e, unique_field), original_exception=e)
            except mongo_errors.PyMongoError as e:
                logger.error(f"Error de base de datos en {f.__qualname__}: {e}", exc_info=True)
                raise DatabaseQueryError(original_exception=e)
        return wrapper
    return decorator


# -----------------------------------------------
# INTERFACES DE REPOSITORIO
# -----------------------------------------------

class UserRepository:
    """Define el contrato para operaciones de datos de usuario."""
    def count(self):
        raise NotImplementedError

    def find_by_id(self, user_id):
        raise NotImplementedError

    def find_by_username(self, username):
        raise NotImplementedError

    def find_by_ids(self, user_ids):
        raise NotImplementedError

    def get_all(self):
        raise NotImplementedError

    def add(self, user_doc):
        raise NotImplementedError

    def update(self, user_id, changes):
        raise NotImplementedError

    def delete(self, user_id):
        raise NotImplementedError


class ReportRepository:
    """Define el contrato para operaciones de datos de reportes."""
    def add(self, report_doc):
        raise NotImplementedError

    def find_by_id(self, report_id):
        raise NotImplementedError

    def find_folio_suffixes(self, prefix):
        raise NotImplementedError

    def find(self, query, limit):
        raise NotImplementedError

    def count(self, query):
        raise NotImplementedError

    def update(self, report_id, changes):
        raise NotImplementedError

    def delete(self, report_id):
        raise NotImplementedError


class ShiftSummaryRepository:
    """Define el contrato para operaciones de datos de novedades de turno."""
    def add(self, summary_doc):
        raise NotImplementedError

    def find_by_id(self, summary_id):
        raise NotImplementedError

    def find(self, query, limit):
        raise NotImplementedError

    def update(self, summary_id, changes):
        raise NotImplementedError

    def delete(self, summary_id):
        raise NotImplementedError


# -----------------------------------------------
# IMPLEMENTACIONES MONGODB
# -----------------------------------------------

class _MongoRepository:
    collection_name = None

    def __init__(self, db=None):
        self._db = db

    @property
    def collection(self):
        db = self._db if self._db is not None else mongo.db
        return db[self.collection_name]

    def _find_one_by_id(self, doc_id):
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def _update_by_id(self, doc_id, changes):
        return self.collection.find_one_and_update(
            {"_id": to_object_id(doc_id)},
            {"$set": changes},
            return_document=pymongo.ReturnDocument.AFTER,
        )

    def _delete_by_id(self, doc_id):
        result = self.collection.delete_one({"_id": to_object_id(doc_id)})
        return result.deleted_count == 1


class MongoUserRepository(_MongoRepository, UserRepository):
    """Implementación concreta del repositorio de usuarios para MongoDB."""
    collection_name = "users"

    @translate_errors()
    def count(self):
        return self.collection.count_documents({})

    @translate_errors()
    def find_by_id(self, user_id):
        return self._find_one_by_id(user_id)

    @translate_errors()
    def find_by_username(self, username):
        return self.collection.find_one({"username": username})

    @translate_errors()
    def find_by_ids(self, user_ids):
        oids = [oid for oid in (to_object_id(u) for u in user_ids) if oid is not None]
        if not oids:
            return []
        return list(self.collection.find({"_id": {"$in": oids}}, {"username": 1, "fullName": 1}))

    @translate_errors()
    def get_all(self):
        return list(self.collection.find().sort("createdAt", pymongo.ASCENDING))

    @translate_errors(unique_field="username")
    def add(self, user_doc):
        result = self.collection.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id
        return user_doc

    @translate_errors(unique_field="username")
    def update(self, user_id, changes):
        return self._update_by_id(user_id, changes)

    @translate_errors()
    def delete(self, user_id):
        return self._delete_by_id(user_id)


class MongoReportRepository(_MongoRepository, ReportRepository):
    """Implementación concreta del repositorio de reportes para MongoDB."""
    collection_name = Report.collection

    @translate_errors(unique_field="folio")
    def add(self, report_doc):
        document = dict(report_doc)
        result = self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return document

    @translate_errors()
    def find_by_id(self, report_id):
        return self._find_one_by_id(report_id)

    @translate_errors()
    def find_folio_suffixes(self, prefix):
        pattern = f"^{re.escape(prefix)}\\d{{2,3}}$"
        cursor = self.collection.find({"folio": {"$regex": pattern}}, {"folio": 1})
        return [int(doc["folio"][len(prefix):]) for doc in cursor]

    @translate_errors()
    def find(self, query, limit):
        cursor = self.collection.find(query).sort("createdAt", pymongo.DESCENDING)
        return list(cursor.limit(limit))

    @translate_errors()
    def count(self, query):
        return self.collection.count_documents(query)

    @translate_errors(unique_field="folio")
    def update(self, report_id, changes):
        return self._update_by_id(report_id, changes)

    @translate_errors()
    def delete(self, report_id):
        return self._delete_by_id(report_id)


class MongoShiftSummaryRepository(_MongoRepository, ShiftSummaryRepository):
    """Implementación concreta del repositorio de novedades para MongoDB."""
    collection_name = ShiftSummary.collection

    @translate_errors()
    def add(self, summary_doc):
        document = dict(summary_doc)
        result = self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return document

    @translate_errors()
    def find_by_id(self, summary_id):
        return self._find_one_by_id(summary_id)

    @translate_errors()
    def find(self, query, limit):
        cursor = self.collection.find(query).sort(
            [("fecha", pymongo.DESCENDING), ("createdAt", pymongo.DESCENDING)]
        )
        return list(cursor.limit(limit))

    @translate_errors()
    def update(self, summary_id, changes):
        return self._update_by_id(summary_id, changes)

    @translate_errors()
    def delete(self, summary_id):
        return self._delete_by_id(summary_id)


def ensure_indexes(db=None):
    """Crea los índices únicos y secundarios de todas las colecciones."""
    db = db if db is not None else mongo.db
    db.users.create_index("username", unique=True)
    db[Report.collection].create_index("folio", unique=True)
    db[Report.collection].create_index("status")
    db[Report.collection].create_index("ownerId")
    db[Report.collection].create_index([("createdAt", pymongo.DESCENDING)])
    db[ShiftSummary.collection].create_index(
        [("ownerId", pymongo.ASCENDING), ("fecha", pymongo.DESCENDING)]
    )
