"""
Portfolio Blueprint - Public portfolio site
Handles: Portfolio page, project details, visitor messages, questions and feedback
"""

from flask import Blueprint

portfolio_bp = Blueprint('portfolio', __name__, url_prefix='')

from . import routes
