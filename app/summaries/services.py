"""Operaciones sobre novedades de cambio de turno (sin máquina de estados)."""

import logging

from app.auth.permissions import ensure_can_access, owner_scope
from app.exceptions import NotFoundError, ValidationError
from app.forms import clean_fotos, ensure_list
from app.models import ShiftSummary, utcnow
from app.summaries.forms import ShiftSummaryForm
from app.utils import build_date_filter

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("fecha", "area", "ubicacion", "novedades", "fotos")


def _load(repo, summary_id):
    summary = repo.find_by_id(summary_id)
    if summary is None:
        raise NotFoundError("Novedad no encontrada.")
    return summary


def list_summaries(actor, args, repo, user_repo, limit):
    query = {}
    owner = owner_scope(actor, args.get("owner"))
    if owner is not None:
        query["ownerId"] = owner
    query.update(build_date_filter({"from": args.get("from"), "to": args.get("to")}))

    items = repo.find(query, limit)

    owner_ids = {str(item["ownerId"]) for item in items}
    users = {str(u["_id"]): u for u in user_repo.find_by_ids(owner_ids)}
    for item in items:
        user = users.get(str(item["ownerId"]))
        if user:
            full_name = user.get("fullName") or user.get("username")
            item["ownerFullName"] = full_name
            if not item.get("ownerName"):
                item["ownerName"] = full_name
    return items


def get_summary(actor, summary_id, repo):
    summary = _load(repo, summary_id)
    ensure_can_access(actor, summary, "consultar")
    return summary


def create_summary(actor, payload, repo):
    ensure_list(payload, "fotos")
    form = ShiftSummaryForm.from_payload(payload)
    data = form.cleaned_data()
    data["fotos"] = clean_fotos(data.get("fotos"))
    summary = repo.add(ShiftSummary.new_document(data, actor))
    logger.info(f"Novedad {summary['_id']} creada por '{actor.username}'.")
    return summary


def update_summary(actor, summary_id, payload, repo):
    """Actualización parcial: solo cambian los campos presentes en el cuerpo."""
    summary = _load(repo, summary_id)
    ensure_can_access(actor, summary, "editar")

    ensure_list(payload, "fotos")
    form = ShiftSummaryForm.from_payload(payload, partial=True)
    present = [name for name in EDITABLE_FIELDS if name in payload]
    if not present:
        raise ValidationError("Nada para actualizar.")
    changes = form.cleaned_data(only=present)
    if "fotos" in changes:
        changes["fotos"] = clean_fotos(changes["fotos"])
    changes["updatedAt"] = utcnow()

    updated = repo.update(summary["_id"], changes)
    if updated is None:
        raise NotFoundError("Novedad no encontrada.")
    return updated


def delete_summary(actor, summary_id, repo):
    summary = _load(repo, summary_id)
    ensure_can_access(actor, summary, "eliminar")
    repo.delete(summary["_id"])
    logger.info(f"Novedad {summary['_id']} eliminada por '{actor.username}'.")
