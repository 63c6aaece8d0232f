# app/utils.py

import re
from datetime import date, datetime

from bson.objectid import ObjectId
from flask.json.provider import DefaultJSONProvider

_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_RE = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")
_YEAR_RE = re.compile(r"^\d{4}$")


class MongoJSONProvider(DefaultJSONProvider):
    """Serializa ObjectId como texto y fechas en ISO-8601."""

    @staticmethod
    def default(o):
        if isinstance(o, ObjectId):
            return str(o)
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        return DefaultJSONProvider.default(o)


def build_date_filter(args, field="fecha"):
    """
    Filtro sobre la fecha de negocio (texto YYYY-MM-DD, comparable como cadena).

    Se admite, en orden de prioridad: ``from``/``to``, ``day``, ``month``
    (YYYY-MM) y ``year`` (YYYY). Los valores con formato inválido se ignoran.
    """
    date_from = args.get("from") if _DAY_RE.match(args.get("from") or "") else None
    date_to = args.get("to") if _DAY_RE.match(args.get("to") or "") else None
    if date_from or date_to:
        condition = {}
        if date_from:
            condition["$gte"] = date_from
        if date_to:
            condition["$lte"] = date_to
        return {field: condition}

    day = args.get("day") or ""
    if _DAY_RE.match(day):
        return {field: day}

    month = args.get("month") or ""
    if _MONTH_RE.match(month):
        return {field: {"$gte": f"{month}-01", "$lte": f"{month}-31"}}

    year = args.get("year") or ""
    if _YEAR_RE.match(year):
        return {field: {"$gte": f"{year}-01-01", "$lte": f"{year}-12-31"}}

    return {}


def build_text_filter(text, fields):
    """Búsqueda literal, sin distinguir mayúsculas, en varios campos."""
    text = (text or "").strip()
    if not text:
        return {}
    pattern = re.escape(text)
    return {"$or": [{name: {"$regex": pattern, "$options": "i"}} for name in fields]}


def parse_limit(value, default, maximum):
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return default
    if limit < 1:
        return default
    return min(limit, maximum)
