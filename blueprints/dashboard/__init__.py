"""
Dashboard Blueprint - Admin content management
Handles: Profile, projects, education, leadership, skills, achievements, inbox
"""

from flask import Blueprint

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/admin')

from . import routes
