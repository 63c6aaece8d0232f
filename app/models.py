# --- Documentos de MongoDB ---
# Con PyMongo no se usan clases de modelo como con un ORM: los datos se
# manejan como diccionarios. Estas clases agrupan los campos y valores por
# defecto de cada colección para construir documentos consistentes.

from datetime import datetime, timezone

from bson.objectid import ObjectId


SEVERIDADES = ("Baja", "Media", "Alta", "Crítica")


def utcnow():
    return datetime.now(timezone.utc)


class Report:
    """
    Reporte de desviación.
    El folio es único e inmutable una vez asignado; el estado sigue la
    máquina de estados definida en ``app.reports.lifecycle``.
    """
    collection = "reports"

    # Campos en los que busca el filtro de texto libre ``q``.
    SEARCH_FIELDS = (
        "folio", "area", "tipo", "severidad", "descripcion",
        "ubicacion", "ownerName", "tags",
    )
    # Campos que ninguna actualización puede modificar.
    IMMUTABLE_FIELDS = ("_id", "folio", "ownerId", "ownerName", "createdAt")

    @staticmethod
    def new_document(data, folio, owner):
        now = utcnow()
        document = dict(data)
        document.update({
            "folio": folio,
            "status": "pendiente",
            "ownerId": ObjectId(owner.id),
            "ownerName": owner.username,
            "createdAt": now,
            "updatedAt": now,
        })
        return document


class ShiftSummary:
    """Resumen de cambio de turno (novedades). No tiene estado."""
    collection = "summaries"

    @staticmethod
    def new_document(data, owner):
        now = utcnow()
        document = dict(data)
        document.update({
            "ownerId": ObjectId(owner.id),
            "ownerName": owner.display_name,
            "createdAt": now,
            "updatedAt": now,
        })
        return document
