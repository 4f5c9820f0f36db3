"""
Helpers Module - Ordering, date parsing, form parsing and dashboard statistics
"""

from datetime import datetime

DATE_FORMATS = [
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m',
    '%Y',
    '%B %Y',
    '%b %Y',
]


def parse_date(date_str):
    """Parse a date string in any of the accepted formats, None if unparseable"""
    if not date_str:
        return None
    text = str(date_str).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).replace(tzinfo=None)
    except ValueError:
        return None


def sort_by_display_order(records):
    """Ascending display_order, missing treated as 0; ties keep their original order"""
    return sorted(records, key=lambda r: r.display_order or 0)


def sort_by_date_desc(records):
    """Newest date first; undated records go last"""
    return sorted(records, key=lambda r: parse_date(r.date) or datetime.min, reverse=True)


def sort_by_created_desc(records):
    """Newest submission first"""
    return sorted(records, key=lambda r: r.created_at.timestamp() if r.created_at else 0, reverse=True)


def form_text(form, name, max_length=None):
    """Stripped text field, None when empty"""
    value = (form.get(name) or '').strip()
    if max_length:
        value = value[:max_length]
    return value or None


def form_int(form, name, default=None):
    value = (form.get(name) or '').strip()
    if not value:
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def form_bool(form, name):
    return form.get(name) in ('on', 'true', '1', 'yes')


def form_list(form, name, max_item_length=50):
    """Values of a repeated field (name[]) or a comma separated field"""
    values = form.getlist(f'{name}[]')
    if not values and form.get(name):
        values = form.get(name).split(',')
    return [v.strip()[:max_item_length] for v in values if v.strip()]


def get_dashboard_stats(services):
    """Counts shown on the admin dashboard, one owner-scoped read per collection"""
    experiences = services.experiences.get_all()
    return {
        'projects': len(services.projects.get_all()),
        'education': len(services.education.get_all()),
        'skills': len(services.skills.get_all()),
        'leadership': len([e for e in experiences if e.type == 'leadership']),
        'achievements': len(services.achievements.get_all()),
    }


__all__ = [
    'parse_date',
    'sort_by_display_order',
    'sort_by_date_desc',
    'sort_by_created_desc',
    'form_text',
    'form_int',
    'form_bool',
    'form_list',
    'get_dashboard_stats',
]
