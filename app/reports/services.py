"""
Operaciones sobre reportes de desviación.

Todas reciben la identidad autenticada (``AuthContext``) de forma explícita
y un repositorio de reportes. El orden de comprobación en operaciones
sobre un reporte existente es siempre: existencia (NotFoundError),
autorización (ForbiddenError), datos de entrada y transición
(ValidationError).
"""

import logging

from app.auth.permissions import ensure_can_access, owner_scope
from app.exceptions import NotFoundError
from app.forms import clean_fotos, ensure_list
from app.models import Report, utcnow
from app.reports.folio import (
    accept_supplied_folio, next_folio, parse_business_date, retry_on_duplicate,
)
from app.reports.forms import ReportForm
from app.reports.lifecycle import ReportStatus, check_transition, current_status, parse_status
from app.utils import build_date_filter, build_text_filter

logger = logging.getLogger(__name__)


def _load(repo, report_id):
    report = repo.find_by_id(report_id)
    if report is None:
        raise NotFoundError("Reporte no encontrado.")
    return report


def _validated_data(payload):
    ensure_list(payload, "fotos")
    form = ReportForm.from_payload(payload)
    data = form.cleaned_data()
    data["fotos"] = clean_fotos(data.get("fotos"))
    # Una fecha interpretable se almacena como YYYY-MM-DD.
    parsed = parse_business_date(data["fecha"])
    if parsed is not None:
        data["fecha"] = parsed.isoformat()
    return data


def build_report_query(actor, args, with_status=True):
    query = {}
    owner = owner_scope(actor, args.get("owner"))
    if owner is not None:
        query["ownerId"] = owner
    query.update(build_date_filter(args))
    query.update(build_text_filter(args.get("q"), Report.SEARCH_FIELDS))
    if with_status and args.get("status"):
        query["status"] = parse_status(args.get("status")).value
    return query


def list_reports(actor, args, repo, limit):
    return repo.find(build_report_query(actor, args), limit)


def compliance(total, concluded):
    """Porcentaje de reportes concluidos, redondeado a 2 decimales."""
    if not total:
        return 0
    return round(concluded / total * 100, 2)


def report_stats(actor, args, repo):
    query = build_report_query(actor, args, with_status=False)
    by_status = {
        status.value: repo.count({**query, "status": status.value})
        for status in ReportStatus
    }
    total = repo.count(query)
    return {
        "total": total,
        "byStatus": by_status,
        "compliance": compliance(total, by_status[ReportStatus.CONCLUIDO.value]),
    }


def preview_folio(fecha, repo):
    return next_folio(fecha, repo)


def get_report(actor, report_id, repo):
    report = _load(repo, report_id)
    ensure_can_access(actor, report, "consultar")
    return report


def create_report(actor, payload, repo):
    """
    Crea un reporte en estado ``pendiente``.

    Un folio enviado por el cliente se acepta si tiene formato válido,
    corresponde a la fecha de negocio y no salta la secuencia; si no, o si
    colisiona, se asigna el siguiente de la fecha de negocio, reintentando
    ante creaciones concurrentes.
    """
    data = _validated_data(payload)
    supplied = accept_supplied_folio(data.pop("folio", ""), data["fecha"], repo)

    def recompute():
        return next_folio(data["fecha"], repo)

    def insert(folio):
        return repo.add(Report.new_document(data, folio, actor))

    report = retry_on_duplicate(insert, supplied or recompute(), recompute)
    logger.info(f"Reporte {report['folio']} creado por '{actor.username}'.")
    return report


def update_report(actor, report_id, payload, repo):
    """
    Reemplaza los campos editables de un reporte.
    El folio y el dueño nunca cambian: un folio enviado se descarta.
    """
    report = _load(repo, report_id)
    ensure_can_access(actor, report, "editar")

    data = _validated_data(payload)
    for key in Report.IMMUTABLE_FIELDS:
        data.pop(key, None)

    if payload.get("status") is not None:
        target = parse_status(payload["status"])
        if check_transition(current_status(report), target):
            data["status"] = target.value

    data["updatedAt"] = utcnow()
    updated = repo.update(report["_id"], data)
    if updated is None:
        raise NotFoundError("Reporte no encontrado.")
    logger.info(f"Reporte {report['folio']} actualizado por '{actor.username}'.")
    return updated


def change_status(actor, report_id, status, repo):
    report = _load(repo, report_id)
    ensure_can_access(actor, report, "cambiar el estado de")

    target = parse_status(status)
    if not check_transition(current_status(report), target):
        return report

    updated = repo.update(report["_id"], {"status": target.value, "updatedAt": utcnow()})
    if updated is None:
        raise NotFoundError("Reporte no encontrado.")
    logger.info(
        f"Reporte {report['folio']}: {current_status(report).value} → {target.value} por '{actor.username}'."
    )
    return updated


def delete_report(actor, report_id, repo):
    report = _load(repo, report_id)
    ensure_can_access(actor, report, "eliminar")
    repo.delete(report["_id"])
    logger.info(f"Reporte {report['folio']} eliminado por '{actor.username}'.")
