from flask import Blueprint

summaries_bp = Blueprint('summaries_bp', __name__)

from . import routes
