"""
Dashboard Routes - Admin content management
Handles: Dashboard stats, profile, content sections (projects, education,
leadership, skills, achievements), connections, project questions and feedback
"""

from flask import render_template, redirect, url_for, request, flash, current_app
from backend.errors import BackendError
from utils.decorators import admin_required
from utils.helpers import (
    form_text, form_int, form_bool, form_list, get_dashboard_stats,
    sort_by_display_order, sort_by_date_desc, sort_by_created_desc
)
from utils.media import upload_media
from utils.portfolio import get_services, invalidate_portfolio_cache
from . import dashboard_bp


def _field(name, label, kind='text', required=False, blank=None, options=None, max_length=500):
    return {
        'name': name,
        'label': label,
        'kind': kind,
        'required': required,
        'blank': blank,
        'options': options,
        'max_length': max_length,
    }


PROFILE_FIELDS = [
    _field('full_name', 'Full name', max_length=100),
    _field('title', 'Title', max_length=150),
    _field('subtitle', 'Subtitle', max_length=250),
    _field('email', 'Email', 'email', max_length=255),
    _field('phone', 'Phone', max_length=50),
    _field('bio', 'Bio', 'textarea', max_length=5000),
    _field('location', 'Location', max_length=150),
    _field('website', 'Website', 'url'),
    _field('github_url', 'GitHub URL', 'url'),
    _field('linkedin_url', 'LinkedIn URL', 'url'),
    _field('twitter_url', 'Twitter URL', 'url'),
    _field('resume_url', 'Resume URL', 'url'),
    _field('avatar_url', 'Avatar URL', 'url'),
]

# Content sections edited through the shared list / form pages
SECTIONS = {
    'projects': {
        'title': 'Projects',
        'service': 'projects',
        'cache': 'projects',
        'sort': sort_by_display_order,
        'label_field': 'title',
        'media': {'input': 'media', 'kind': 'project', 'target': 'image_url'},
        'fields': [
            _field('title', 'Title', required=True, max_length=200),
            _field('description', 'Short description', 'textarea', blank='', max_length=1000),
            _field('long_description', 'Long description', 'textarea', max_length=10000),
            _field('tech_stack', 'Tech stack (comma separated)', 'list'),
            _field('github_url', 'GitHub URL', 'url'),
            _field('live_url', 'Live URL', 'url'),
            _field('image_url', 'Image or video URL', 'url'),
            _field('is_featured', 'Featured', 'checkbox'),
            _field('display_order', 'Display order', 'number', blank=0),
        ],
    },
    'education': {
        'title': 'Education',
        'service': 'education',
        'cache': 'education',
        'sort': sort_by_display_order,
        'label_field': 'institution',
        'fields': [
            _field('institution', 'Institution', required=True, max_length=200),
            _field('degree', 'Degree', required=True, max_length=200),
            _field('field_of_study', 'Field of study', max_length=200),
            _field('start_year', 'Start year', 'number', required=True),
            _field('end_year', 'End year', 'number'),
            _field('is_current', 'Currently studying', 'checkbox'),
            _field('grade', 'Grade', max_length=50),
            _field('description', 'Description', 'textarea', max_length=2000),
            _field('display_order', 'Display order', 'number', blank=0),
        ],
    },
    'leadership': {
        'title': 'Leadership & Experience',
        'service': 'experiences',
        'cache': 'experiences',
        'sort': sort_by_display_order,
        'query': {'type': 'leadership'},
        'label_field': 'title',
        'fields': [
            _field('title', 'Role', required=True, max_length=200),
            _field('organization', 'Organization', required=True, max_length=200),
            _field('description', 'Description', 'textarea', blank='', max_length=2000),
            _field('start_date', 'Start date', required=True, max_length=20),
            _field('end_date', 'End date', max_length=20),
            _field('is_current', 'Current role', 'checkbox'),
            _field('display_order', 'Display order', 'number', blank=0),
        ],
    },
    'skills': {
        'title': 'Skills',
        'service': 'skills',
        'cache': 'skills',
        'sort': sort_by_display_order,
        'label_field': 'name',
        'fields': [
            _field('name', 'Name', required=True, max_length=100),
            _field('category', 'Category', 'select', blank='other',
                   options=['frontend', 'backend', 'tools', 'other']),
            _field('proficiency', 'Proficiency (0-100)', 'number', blank=50),
            _field('icon', 'Icon', max_length=100),
            _field('display_order', 'Display order', 'number', blank=0),
        ],
    },
    'achievements': {
        'title': 'Achievements',
        'service': 'achievements',
        'cache': 'achievements',
        'sort': sort_by_date_desc,
        'label_field': 'title',
        'media': {'input': 'image', 'kind': 'achievement', 'target': 'image_url'},
        'fields': [
            _field('title', 'Title', required=True, max_length=200),
            _field('description', 'Description', 'textarea', blank='', max_length=2000),
            _field('date', 'Date', required=True, max_length=20),
            _field('certificate_url', 'Certificate URL', 'url'),
            _field('image_url', 'Image URL', 'url'),
            _field('display_order', 'Display order', 'number', blank=0),
        ],
    },
}

SECTION_NAMES = 'any(projects, education, leadership, skills, achievements)'


def _parse_form(fields):
    """Read every declared field from the submitted form"""
    data = {}
    for field in fields:
        name, kind = field['name'], field['kind']
        if kind == 'checkbox':
            value = form_bool(request.form, name)
        elif kind == 'number':
            value = form_int(request.form, name)
        elif kind == 'list':
            value = form_list(request.form, name)
        else:
            value = form_text(request.form, name, field['max_length'])
        data[name] = field['blank'] if value is None else value
    return data


def _attach_media(media, data):
    """Upload the section's file input, if one was chosen, into its url field"""
    if not media:
        return
    file = request.files.get(media['input'])
    if file and file.filename:
        data[media['target']] = upload_media(file, media['kind'])


def _section_service(section):
    return getattr(get_services(), SECTIONS[section]['service'])


def _confirm_delete(item, cancel_url):
    """Confirmation page whose form posts back to the same delete URL"""
    return render_template('admin/confirm_delete.html', item=item, action=request.path, cancel_url=cancel_url)


# ========================================
# DASHBOARD
# ========================================

@dashboard_bp.route('/')
@admin_required
def index():
    """Admin dashboard with content counts and inbox summary"""
    services = get_services()
    stats = {}
    inbox = {}
    try:
        stats = get_dashboard_stats(services)
        inbox = {
            'new_messages': sum(1 for m in services.contact_messages.get_all() if m.status == 'new'),
            'pending_questions': sum(1 for q in services.questions.get_all() if q.status == 'pending'),
            'pending_feedback': sum(1 for f in services.feedback.get_all() if f.status == 'pending'),
        }
    except BackendError as e:
        current_app.logger.error(f"Dashboard stats error: {str(e)}")
        flash(f'Could not load statistics: {e.message}', 'error')

    return render_template('admin/dashboard.html', stats=stats, inbox=inbox)


# ========================================
# PROFILE
# ========================================

@dashboard_bp.route('/profile', methods=['GET', 'POST'])
@admin_required
def profile():
    """Edit the site profile (created on first save)"""
    services = get_services()

    if request.method == 'POST':
        data = _parse_form(PROFILE_FIELDS)
        try:
            avatar = request.files.get('avatar')
            if avatar and avatar.filename:
                data['avatar_url'] = upload_media(avatar, 'avatar')
            services.profiles.update(data)
            invalidate_portfolio_cache('profile')
            current_app.logger.info("Profile updated")
            flash('Profile updated successfully!', 'success')
        except BackendError as e:
            current_app.logger.error(f"Profile update error: {str(e)}")
            flash(f'Error updating profile: {e.message}', 'error')
        return redirect(url_for('dashboard.profile'))

    try:
        current = services.profiles.get_current()
    except BackendError as e:
        current_app.logger.error(f"Profile load error: {str(e)}")
        flash(f'Error loading profile: {e.message}', 'error')
        current = None
    return render_template('admin/profile.html', profile=current, fields=PROFILE_FIELDS)


# ========================================
# CONTENT SECTIONS
# ========================================

@dashboard_bp.route(f'/<{SECTION_NAMES}:section>')
@admin_required
def section_list(section):
    """List the signed-in admin's records of one section"""
    config = SECTIONS[section]
    try:
        records = _section_service(section).get_all(**config.get('query', {}))
        records = config['sort'](records)
    except BackendError as e:
        current_app.logger.error(f"Error loading {section}: {str(e)}")
        flash(f'Error loading {config["title"].lower()}: {e.message}', 'error')
        records = []
    return render_template('admin/section_list.html', section=section, section_meta=config, records=records)


@dashboard_bp.route(f'/<{SECTION_NAMES}:section>/new', methods=['GET', 'POST'])
@dashboard_bp.route(f'/<{SECTION_NAMES}:section>/<record_id>/edit', methods=['GET', 'POST'])
@admin_required
def section_form(section, record_id=None):
    """Create or edit a record of one section"""
    config = SECTIONS[section]
    service = _section_service(section)

    if request.method == 'POST':
        data = _parse_form(config['fields'])
        try:
            _attach_media(config.get('media'), data)
            if record_id:
                service.update(record_id, data)
                flash(f'{config["title"]} entry updated successfully!', 'success')
            else:
                record_id = service.create(data)
                flash(f'{config["title"]} entry added successfully!', 'success')
            invalidate_portfolio_cache(config['cache'])
            current_app.logger.info(f"Saved {section} record {record_id}")
        except BackendError as e:
            current_app.logger.error(f"Error saving {section} record: {str(e)}")
            flash(f'Error saving entry: {e.message}', 'error')
            if record_id:
                return redirect(url_for('dashboard.section_form', section=section, record_id=record_id))
            return redirect(url_for('dashboard.section_form', section=section))
        return redirect(url_for('dashboard.section_list', section=section))

    record = None
    if record_id:
        try:
            record = service.get_by_id(record_id)
        except BackendError as e:
            current_app.logger.error(f"Error loading {section} record {record_id}: {str(e)}")
            flash(f'Error loading entry: {e.message}', 'error')
            return redirect(url_for('dashboard.section_list', section=section))
        if record is None:
            flash('Entry not found.', 'error')
            return redirect(url_for('dashboard.section_list', section=section))

    return render_template('admin/section_form.html', section=section, section_meta=config, record=record)


@dashboard_bp.route(f'/<{SECTION_NAMES}:section>/<record_id>/delete', methods=['GET', 'POST'])
@admin_required
def section_delete(section, record_id):
    config = SECTIONS[section]
    if request.method == 'GET':
        return _confirm_delete(f'this entry from {config["title"]}',
                               url_for('dashboard.section_list', section=section))
    try:
        _section_service(section).delete(record_id)
        invalidate_portfolio_cache(config['cache'])
        current_app.logger.info(f"Deleted {section} record {record_id}")
        flash(f'{config["title"]} entry deleted successfully!', 'success')
    except BackendError as e:
        current_app.logger.error(f"Error deleting {section} record {record_id}: {str(e)}")
        flash(f'Error deleting entry: {e.message}', 'error')
    return redirect(url_for('dashboard.section_list', section=section))


# ========================================
# CONNECTIONS (CONTACT MESSAGES)
# ========================================

def _apply_inbox_action(service, record_id, action):
    """archive / restore, or move straight to a named status"""
    if action == 'archive':
        service.archive(record_id)
    elif action == 'restore':
        service.restore(record_id)
    else:
        service.set_status(record_id, action)


@dashboard_bp.route('/connections')
@admin_required
def connections():
    """Contact messages, newest first"""
    try:
        messages = sort_by_created_desc(get_services().contact_messages.get_all())
    except BackendError as e:
        current_app.logger.error(f"Error loading messages: {str(e)}")
        flash(f'Error loading messages: {e.message}', 'error')
        messages = []
    return render_template('admin/connections.html', messages=messages)


@dashboard_bp.route('/connections/<message_id>')
@admin_required
def view_message(message_id):
    """Open a message; a new message becomes read"""
    service = get_services().contact_messages
    try:
        message = service.get_by_id(message_id)
        if message is None:
            flash('Message not found.', 'error')
            return redirect(url_for('dashboard.connections'))
        if service.mark_read(message):
            current_app.logger.info(f"Message {message_id} marked as read")
            message = service.get_by_id(message_id)
    except BackendError as e:
        current_app.logger.error(f"Error opening message {message_id}: {str(e)}")
        flash(f'Error opening message: {e.message}', 'error')
        return redirect(url_for('dashboard.connections'))
    return render_template('admin/message.html', message=message)


@dashboard_bp.route('/connections/<message_id>/status', methods=['POST'])
@admin_required
def message_status(message_id):
    action = request.form.get('action', '')
    try:
        _apply_inbox_action(get_services().contact_messages, message_id, action)
        flash('Message updated.', 'success')
    except BackendError as e:
        current_app.logger.error(f"Error updating message {message_id}: {str(e)}")
        flash(f'Error updating message: {e.message}', 'error')
    return redirect(url_for('dashboard.connections'))


@dashboard_bp.route('/connections/<message_id>/delete', methods=['GET', 'POST'])
@admin_required
def delete_message(message_id):
    if request.method == 'GET':
        return _confirm_delete('this message', url_for('dashboard.connections'))
    try:
        get_services().contact_messages.delete(message_id)
        flash('Message deleted successfully!', 'success')
    except BackendError as e:
        current_app.logger.error(f"Error deleting message {message_id}: {str(e)}")
        flash(f'Error deleting message: {e.message}', 'error')
    return redirect(url_for('dashboard.connections'))


# ========================================
# PROJECT QUESTIONS & FEEDBACK
# ========================================

@dashboard_bp.route('/questions')
@admin_required
def questions():
    """Visitor questions and feedback on projects, newest first"""
    services = get_services()
    try:
        question_list = sort_by_created_desc(services.questions.get_all())
        feedback_list = sort_by_created_desc(services.feedback.get_all())
    except BackendError as e:
        current_app.logger.error(f"Error loading questions: {str(e)}")
        flash(f'Error loading questions: {e.message}', 'error')
        question_list, feedback_list = [], []
    return render_template('admin/questions.html', questions=question_list, feedback=feedback_list)


@dashboard_bp.route('/questions/<question_id>/answer', methods=['POST'])
@admin_required
def answer_question(question_id):
    answer = form_text(request.form, 'answer', 5000)
    if not answer:
        flash('Please write an answer first.', 'error')
        return redirect(url_for('dashboard.questions'))

    try:
        get_services().questions.answer(question_id, answer)
        current_app.logger.info(f"Question {question_id} answered")
        flash('Answer submitted successfully!', 'success')
    except BackendError as e:
        current_app.logger.error(f"Error answering question {question_id}: {str(e)}")
        flash(f'Error submitting answer: {e.message}', 'error')
    return redirect(url_for('dashboard.questions'))


@dashboard_bp.route('/questions/<question_id>/status', methods=['POST'])
@admin_required
def question_status(question_id):
    action = request.form.get('action', '')
    try:
        _apply_inbox_action(get_services().questions, question_id, action)
        flash(f'Question marked as {action}.', 'success')
    except BackendError as e:
        current_app.logger.error(f"Error updating question {question_id}: {str(e)}")
        flash(f'Error updating question: {e.message}', 'error')
    return redirect(url_for('dashboard.questions'))


@dashboard_bp.route('/questions/<question_id>/delete', methods=['GET', 'POST'])
@admin_required
def delete_question(question_id):
    if request.method == 'GET':
        return _confirm_delete('this question', url_for('dashboard.questions'))
    try:
        get_services().questions.delete(question_id)
        flash('Question deleted successfully!', 'success')
    except BackendError as e:
        current_app.logger.error(f"Error deleting question {question_id}: {str(e)}")
        flash(f'Error deleting question: {e.message}', 'error')
    return redirect(url_for('dashboard.questions'))


@dashboard_bp.route('/feedback/<feedback_id>/status', methods=['POST'])
@admin_required
def feedback_status(feedback_id):
    action = request.form.get('action', '')
    try:
        _apply_inbox_action(get_services().feedback, feedback_id, action)
        flash(f'Feedback marked as {action}.', 'success')
    except BackendError as e:
        current_app.logger.error(f"Error updating feedback {feedback_id}: {str(e)}")
        flash(f'Error updating feedback: {e.message}', 'error')
    return redirect(url_for('dashboard.questions'))


@dashboard_bp.route('/feedback/<feedback_id>/delete', methods=['GET', 'POST'])
@admin_required
def delete_feedback(feedback_id):
    if request.method == 'GET':
        return _confirm_delete('this feedback', url_for('dashboard.questions'))
    try:
        get_services().feedback.delete(feedback_id)
        flash('Feedback deleted successfully!', 'success')
    except BackendError as e:
        current_app.logger.error(f"Error deleting feedback {feedback_id}: {str(e)}")
        flash(f'Error deleting feedback: {e.message}', 'error')
    return redirect(url_for('dashboard.questions'))
