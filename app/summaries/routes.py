from flask import current_app, jsonify, request
from flask_login import current_user, login_required

from app.repositories import MongoShiftSummaryRepository, MongoUserRepository
from app.summaries import summaries_bp
from app.summaries import services
from app.utils import parse_limit


@summaries_bp.route('', methods=['GET'])
@login_required
def list_summaries():
    limit = parse_limit(
        request.args.get('limit'),
        current_app.config['REPORTS_PAGE_LIMIT'],
        current_app.config['REPORTS_MAX_LIMIT'],
    )
    items = services.list_summaries(
        current_user.auth_context(), request.args,
        MongoShiftSummaryRepository(), MongoUserRepository(), limit,
    )
    return jsonify(items)


@summaries_bp.route('', methods=['POST'])
@login_required
def create_summary():
    summary = services.create_summary(
        current_user.auth_context(), request.get_json(silent=True), MongoShiftSummaryRepository()
    )
    return jsonify(summary), 201


@summaries_bp.route('/<string:summary_id>', methods=['GET'])
@login_required
def get_summary(summary_id):
    return jsonify(services.get_summary(current_user.auth_context(), summary_id, MongoShiftSummaryRepository()))


@summaries_bp.route('/<string:summary_id>', methods=['PATCH'])
@login_required
def update_summary(summary_id):
    summary = services.update_summary(
        current_user.auth_context(), summary_id, request.get_json(silent=True), MongoShiftSummaryRepository()
    )
    return jsonify(summary)


@summaries_bp.route('/<string:summary_id>', methods=['DELETE'])
@login_required
def delete_summary(summary_id):
    services.delete_summary(current_user.auth_context(), summary_id, MongoShiftSummaryRepository())
    return jsonify({"ok": True})
