from flask import jsonify, request
from flask_login import current_user, login_required

from app.auth.decorators import admin_required
from app.repositories import MongoUserRepository
from app.users import users_bp
from app.users import services


# --- Perfil propio ---

@users_bp.route('/me', methods=['PATCH'])
@login_required
def update_me():
    user = services.update_profile(current_user.auth_context(), request.get_json(silent=True), MongoUserRepository())
    return jsonify(user.to_public())


@users_bp.route('/me/password', methods=['PATCH'])
@login_required
def change_my_password():
    services.change_own_password(current_user.auth_context(), request.get_json(silent=True), MongoUserRepository())
    return jsonify({"ok": True})


@users_bp.route('/<string:user_id>', methods=['GET'])
@login_required
def get_user(user_id):
    user = services.get_user(current_user.auth_context(), user_id, MongoUserRepository())
    return jsonify(user.to_public())


# --- Administración (solo admin) ---

@users_bp.route('', methods=['GET'])
@admin_required
def list_users():
    return jsonify([u.to_public() for u in services.list_users(MongoUserRepository())])


@users_bp.route('', methods=['POST'])
@admin_required
def create_user():
    user = services.create_user(request.get_json(silent=True), MongoUserRepository())
    return jsonify(user.to_public()), 201


@users_bp.route('/<string:user_id>', methods=['PATCH'])
@admin_required
def update_user(user_id):
    user = services.update_user(
        current_user.auth_context(), user_id, request.get_json(silent=True), MongoUserRepository()
    )
    return jsonify(user.to_public())


@users_bp.route('/<string:user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    services.delete_user(current_user.auth_context(), user_id, MongoUserRepository())
    return jsonify({"ok": True})
