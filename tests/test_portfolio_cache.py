"""Tests for the cached public reads and their invalidation."""

from backend import create_backend_client
from conftest import login
from utils.portfolio import load_portfolio, load_projects, invalidate_portfolio_cache
from utils.services import PortfolioServices, UserRoleService


def _signed_in_services(app):
    backend = create_backend_client(app.config).initialize()
    user = backend.auth.sign_up('admin@example.com', 'secret123')
    UserRoleService(backend).grant(user.uid)
    backend.auth.sign_in('admin@example.com', 'secret123')
    return PortfolioServices(backend)


def test_reads_are_cached_until_invalidated(cached_app):
    services = _signed_in_services(cached_app)
    services.projects.create({'title': 'Alpha'})
    assert [p.title for p in load_projects()] == ['Alpha']

    services.projects.create({'title': 'Beta', 'display_order': -1})
    assert [p.title for p in load_projects()] == ['Alpha']

    invalidate_portfolio_cache('projects')
    assert [p.title for p in load_projects()] == ['Beta', 'Alpha']


def test_load_portfolio_sections(cached_app):
    services = _signed_in_services(cached_app)
    services.experiences.create({'title': 'Lead', 'organization': 'Club', 'start_date': '2020'})
    services.experiences.create({'title': 'Dev', 'organization': 'Acme', 'start_date': '2021', 'type': 'work'})
    services.achievements.create({'title': 'Old', 'date': '2019-01-01'})
    services.achievements.create({'title': 'New', 'date': '2024-01-01'})

    data = load_portfolio()

    assert set(data) == {'profile', 'projects', 'education', 'skills', 'leadership', 'achievements'}
    assert data['profile'] is None
    assert [e.title for e in data['leadership']] == ['Lead']
    assert [a.title for a in data['achievements']] == ['New', 'Old']


def test_admin_write_invalidates_public_page(cached_app):
    _signed_in_services(cached_app)
    client = cached_app.test_client()

    assert b'No projects yet.' in client.get('/').data

    login(client)
    client.post('/admin/projects/new', data={'title': 'Fresh project'})

    assert b'Fresh project' in client.get('/').data
