# app/main/routes.py
import time

from flask import jsonify

from app.main import main_bp

_started_at = time.monotonic()


@main_bp.route('/api/health')
def health():
    return jsonify({"ok": True, "uptime": round(time.monotonic() - _started_at, 3)})
