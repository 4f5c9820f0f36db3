"""
Portfolio Routes - Public portfolio views
Handles: Portfolio display, project details, contact / question / feedback forms
"""

from flask import render_template, redirect, url_for, request, flash, current_app
from backend.errors import BackendError
from utils.helpers import form_text, form_int
from utils.portfolio import get_services, load_portfolio, load_projects, load_profile
from . import portfolio_bp


def _site_owner_id():
    """Receiver of visitor submissions: the profile owner, else the configured owner"""
    profile = load_profile()
    if profile and profile.user_id:
        return profile.user_id
    return current_app.config.get('SITE_OWNER_ID')


def _find_project(project_id):
    return next((p for p in load_projects() if p.id == project_id), None)


def _project_unavailable(project_id, error):
    current_app.logger.error(f"Project {project_id} load failed: {str(error)}")
    flash('Project is temporarily unavailable.', 'error')
    return redirect(url_for('portfolio.index'))


@portfolio_bp.route('/')
def index():
    """Public portfolio page"""
    try:
        data = load_portfolio()
    except BackendError as e:
        current_app.logger.error(f"Portfolio load failed: {str(e)}")
        data = {
            'profile': None, 'projects': [], 'education': [],
            'skills': [], 'leadership': [], 'achievements': [],
        }
        flash('Portfolio content is temporarily unavailable.', 'error')
    return render_template('index.html', **data)


@portfolio_bp.route('/projects/<project_id>')
def project_detail(project_id):
    """Project detail page with the question and feedback forms"""
    try:
        project = _find_project(project_id)
        profile = load_profile() if project else None
    except BackendError as e:
        return _project_unavailable(project_id, e)
    if not project:
        return render_template('404.html'), 404
    return render_template('project_detail.html', project=project, profile=profile)


@portfolio_bp.route('/contact', methods=['POST'])
def contact():
    """Portfolio contact form processing"""
    services = get_services()
    data = {
        'name': form_text(request.form, 'name', 100),
        'email': form_text(request.form, 'email', 255),
        'message': form_text(request.form, 'message', 5000),
    }

    if not all(data.values()):
        flash('Required fields missing.', 'error')
        return redirect(url_for('portfolio.index') + '#contact')

    try:
        message_id = services.contact_messages.submit(data, _site_owner_id())
        current_app.logger.info(f"Contact message saved: {message_id}")
        flash('Message sent successfully! I will get back to you soon.', 'success')
    except BackendError as e:
        current_app.logger.error(f"Contact form error: {str(e)}")
        flash('Error sending message. Please try again.', 'error')

    return redirect(url_for('portfolio.index') + '#contact')


@portfolio_bp.route('/projects/<project_id>/questions', methods=['POST'])
def ask_question(project_id):
    """Visitor question about a project"""
    try:
        project = _find_project(project_id)
    except BackendError as e:
        return _project_unavailable(project_id, e)
    if not project:
        return render_template('404.html'), 404

    data = {
        'projectId': project.id,
        'projectTitle': project.title,
        'name': form_text(request.form, 'name', 100),
        'email': form_text(request.form, 'email', 255),
        'question': form_text(request.form, 'question', 2000),
    }
    if not all([data['name'], data['email'], data['question']]):
        flash('Please fill in your name, email and question.', 'error')
        return redirect(url_for('portfolio.project_detail', project_id=project_id))

    try:
        get_services().questions.submit(data, _site_owner_id())
        current_app.logger.info(f"Question received for project {project_id}")
        flash('Question sent! The answer will appear once it is reviewed.', 'success')
    except BackendError as e:
        current_app.logger.error(f"Question form error: {str(e)}")
        flash('Error sending question. Please try again.', 'error')

    return redirect(url_for('portfolio.project_detail', project_id=project_id))


@portfolio_bp.route('/projects/<project_id>/feedback', methods=['POST'])
def leave_feedback(project_id):
    """Visitor rating and feedback for a project"""
    try:
        project = _find_project(project_id)
    except BackendError as e:
        return _project_unavailable(project_id, e)
    if not project:
        return render_template('404.html'), 404

    data = {
        'projectId': project.id,
        'projectTitle': project.title,
        'name': form_text(request.form, 'name', 100),
        'email': form_text(request.form, 'email', 255),
        'rating': form_int(request.form, 'rating'),
        'feedback': form_text(request.form, 'feedback', 2000) or '',
    }
    if not all([data['name'], data['email'], data['rating']]):
        flash('Please fill in your name, email and a rating.', 'error')
        return redirect(url_for('portfolio.project_detail', project_id=project_id))

    try:
        get_services().feedback.submit(data, _site_owner_id())
        current_app.logger.info(f"Feedback received for project {project_id}")
        flash('Thank you for your feedback!', 'success')
    except BackendError as e:
        current_app.logger.error(f"Feedback form error: {str(e)}")
        flash(f'Error sending feedback: {e.message}', 'error')

    return redirect(url_for('portfolio.project_detail', project_id=project_id))
