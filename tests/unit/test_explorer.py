# tests/unit/test_explorer.py
from datetime import date, timedelta

import pytest

from raiz.models import ProjectStatus


@pytest.fixture
def catalogue(make_user, make_project, make_contribution):
    owner = make_user('owner@example.com', first_name='Joao', last_name='Souza')
    backer = make_user('backer@example.com')
    garden = make_project(owner, title='Community Garden', neighborhood='Centro', goal=100)
    library = make_project(owner, title='Street Library', neighborhood='Vila Nova', goal=100,
                           description='Free books on every corner',
                           deadline=date.today() + timedelta(days=2))
    solar = make_project(owner, title='Solar Panels', neighborhood='Centro', goal=40)
    make_project(owner, title='Hidden Proposal', neighborhood='Jardins', status=ProjectStatus.PENDING)
    make_contribution(backer, garden, 30)
    make_contribution(backer, solar, 40)
    return garden, library, solar


def test_explorer_is_public(client, catalogue):
    response = client.get('/explorer')
    assert response.status_code == 200
    html = response.data.decode()
    assert 'Explore Social Impact Projects' in html
    assert '3 project(s) found' in html
    assert 'Hidden Proposal' not in html
    # Pending projects do not contribute neighborhoods either
    assert 'Jardins' not in html


def test_summary_counts(client, catalogue):
    html = client.get('/explorer').data.decode()
    assert '<strong>2</strong><div class="muted">needing support</div>' in html
    assert '<strong>1</strong><div class="muted">goals reached</div>' in html
    assert '<strong>70</strong><div class="muted">tokens raised</div>' in html


def test_search_by_text(client, catalogue):
    html = client.get('/explorer?q=free+books').data.decode()
    assert '1 project(s) found' in html
    assert 'Street Library' in html
    assert 'Community Garden' not in html


def test_search_by_owner_name(client, catalogue):
    html = client.get('/explorer?q=souza').data.decode()
    assert '3 project(s) found' in html


def test_filter_by_neighborhood(client, catalogue):
    html = client.get('/explorer?bairro=Vila+Nova').data.decode()
    assert '1 project(s) found' in html
    assert 'Street Library' in html


def test_filter_by_status(client, catalogue):
    assert '1 project(s) found' in client.get('/explorer?status=completed').data.decode()
    assert '2 project(s) found' in client.get('/explorer?status=active').data.decode()

    html = client.get('/explorer?status=urgent').data.decode()
    assert '1 project(s) found' in html
    assert 'Street Library' in html


def test_unknown_status_is_ignored(client, catalogue):
    assert '3 project(s) found' in client.get('/explorer?status=bogus').data.decode()


def test_no_matches(client, catalogue):
    html = client.get('/explorer?q=nothing-like-this').data.decode()
    assert '0 project(s) found' in html
    assert 'No projects match the selected filters.' in html


def test_explorer_without_support_forms(client, catalogue):
    assert b'Support Project' not in client.get('/explorer').data
