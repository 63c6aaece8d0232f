from datetime import datetime
import logging

from flask import Response, current_app, jsonify, request
from flask_login import current_user, login_required

from app.reports import reports_bp
from app.reports import services
from app.reports.export import reports_workbook
from app.repositories import MongoReportRepository
from app.utils import parse_limit

logger = logging.getLogger(__name__)


def _actor():
    return current_user.auth_context()


def _payload():
    return request.get_json(silent=True)


@reports_bp.route('/next-folio', methods=['GET'])
@login_required
def next_folio():
    """Previsualiza el próximo folio para una fecha, sin reservarlo."""
    folio = services.preview_folio(request.args.get('fecha', ''), MongoReportRepository())
    return jsonify({"folio": folio})


@reports_bp.route('', methods=['GET'])
@login_required
def list_reports():
    limit = parse_limit(
        request.args.get('limit'),
        current_app.config['REPORTS_PAGE_LIMIT'],
        current_app.config['REPORTS_MAX_LIMIT'],
    )
    items = services.list_reports(_actor(), request.args, MongoReportRepository(), limit)
    return jsonify(items)


@reports_bp.route('/export', methods=['GET'])
@login_required
def export_reports():
    """Exporta a XLSX los reportes que devolvería el listado con los mismos filtros."""
    actor = _actor()
    limit = current_app.config['REPORTS_MAX_LIMIT']
    items = services.list_reports(actor, request.args, MongoReportRepository(), limit)
    logger.info(f"Usuario '{actor.username}' exportó {len(items)} reportes a XLSX.")
    return Response(
        reports_workbook(items),
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment;filename=reportes_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"},
    )


@reports_bp.route('/stats/summary', methods=['GET'])
@login_required
def stats_summary():
    return jsonify(services.report_stats(_actor(), request.args, MongoReportRepository()))


@reports_bp.route('', methods=['POST'])
@login_required
def create_report():
    report = services.create_report(_actor(), _payload(), MongoReportRepository())
    return jsonify(report), 201


@reports_bp.route('/<string:report_id>', methods=['GET'])
@login_required
def get_report(report_id):
    return jsonify(services.get_report(_actor(), report_id, MongoReportRepository()))


@reports_bp.route('/<string:report_id>', methods=['PUT'])
@login_required
def update_report(report_id):
    report = services.update_report(_actor(), report_id, _payload(), MongoReportRepository())
    return jsonify(report)


@reports_bp.route('/<string:report_id>/status', methods=['PATCH'])
@login_required
def change_status(report_id):
    payload = _payload() or {}
    status = payload.get('status') if isinstance(payload, dict) else None
    report = services.change_status(_actor(), report_id, status, MongoReportRepository())
    return jsonify(report)


@reports_bp.route('/<string:report_id>', methods=['DELETE'])
@login_required
def delete_report(report_id):
    services.delete_report(_actor(), report_id, MongoReportRepository())
    return jsonify({"ok": True})
