"""
Portfolio Data Module - Cached public reads for the portfolio pages
Each section is fetched through its service, ordered, and kept in the
Flask-Caching store until the timeout expires or an admin write invalidates it
"""

from flask import current_app
from extensions import cache
from .helpers import sort_by_display_order, sort_by_date_desc

CACHE_PREFIX = 'portfolio:'
SECTIONS = ('profile', 'projects', 'education', 'skills', 'experiences', 'achievements')


def get_services():
    """PortfolioServices bound to the app's backend client"""
    return current_app.extensions['portfolio']


def _cached(section, fetch):
    key = CACHE_PREFIX + section
    value = cache.get(key)
    if value is None:
        value = fetch()
        cache.set(key, value)
    return value


def load_profile():
    return _cached('profile', lambda: get_services().profiles.get_current())


def load_projects():
    return _cached('projects', lambda: sort_by_display_order(get_services().projects.get_all_public()))


def load_education():
    return _cached('education', lambda: sort_by_display_order(get_services().education.get_all_public()))


def load_skills():
    return _cached('skills', lambda: sort_by_display_order(get_services().skills.get_all_public()))


def load_leadership():
    return _cached(
        'experiences',
        lambda: sort_by_display_order(get_services().experiences.get_all_public('leadership'))
    )


def load_achievements():
    return _cached('achievements', lambda: sort_by_date_desc(get_services().achievements.get_all_public()))


def load_portfolio():
    """Everything the public index page renders"""
    return {
        'profile': load_profile(),
        'projects': load_projects(),
        'education': load_education(),
        'skills': load_skills(),
        'leadership': load_leadership(),
        'achievements': load_achievements(),
    }


def invalidate_portfolio_cache(*sections):
    """Drop cached sections (all of them when none are named)"""
    keys = [CACHE_PREFIX + s for s in (sections or SECTIONS)]
    cache.delete_many(*keys)


__all__ = [
    'get_services',
    'load_profile',
    'load_projects',
    'load_education',
    'load_skills',
    'load_leadership',
    'load_achievements',
    'load_portfolio',
    'invalidate_portfolio_cache',
]
