# tests/unit/test_dashboard.py
from datetime import date, timedelta

from raiz import db
from raiz.models import Contribution, ProjectStatus, User


class TestDashboardView:

    def test_requires_login(self, client):
        response = client.get('/dashboard', follow_redirects=True)
        assert response.status_code == 200
        assert b'Please log in to access this page.' in response.data

    def test_shows_balance_and_counters(self, auth_client, regular_user, make_user, make_project,
                                        make_contribution):
        other = make_user('owner@example.com', first_name='Joao', last_name='Souza')
        make_project(regular_user, title='Mine Approved')
        make_project(regular_user, title='Mine Pending', status=ProjectStatus.PENDING)
        target = make_project(other, title='Street Library')
        make_contribution(regular_user, target, 5)
        make_contribution(regular_user, target, 5)

        response = auth_client.get('/dashboard')
        assert response.status_code == 200
        html = response.data.decode()
        assert 'Welcome, Maria!' in html
        assert '<strong>100</strong>' in html
        # Two projects created, one distinct project supported
        assert '<h4>Projects Created</h4><strong>2</strong>' in html
        assert '<h4>Projects Supported</h4><strong>1</strong>' in html

    def test_lists_only_approved_projects_newest_first(self, auth_client, regular_user, make_project):
        make_project(regular_user, title='Older Garden')
        make_project(regular_user, title='Waiting Review', status=ProjectStatus.PENDING)
        make_project(regular_user, title='Turned Down', status=ProjectStatus.REJECTED)
        make_project(regular_user, title='Newer Library')

        html = auth_client.get('/dashboard').data.decode()
        assert 'Waiting Review' not in html
        assert 'Turned Down' not in html
        assert html.index('Newer Library') < html.index('Older Garden')

    def test_empty_state(self, auth_client):
        response = auth_client.get('/dashboard')
        assert b'No approved projects yet' in response.data

    def test_card_shows_progress_and_owner(self, auth_client, regular_user, make_user, make_project,
                                           make_contribution):
        other = make_user('owner@example.com', first_name='Joao', last_name='Souza')
        project = make_project(other, title='Street Library', goal=200)
        make_contribution(regular_user, project, 50)

        html = auth_client.get('/dashboard').data.decode()
        assert 'Progress 25.0%' in html
        assert '50 tokens · Goal: 200' in html
        assert 'By: Joao Souza' in html

    def test_completed_project_shows_goal_reached(self, auth_client, regular_user, make_project,
                                                  make_contribution):
        project = make_project(regular_user, title='Funded', goal=10)
        make_contribution(regular_user, project, 15)

        html = auth_client.get('/dashboard').data.decode()
        assert 'Goal reached!' in html
        assert 'Progress 100.0%' in html

    def test_near_deadline_badge(self, auth_client, regular_user, make_project):
        make_project(regular_user, title='Soon', deadline=date.today() + timedelta(days=3))
        assert b'Ending soon' in auth_client.get('/dashboard').data


class TestSupportRoute:

    def test_support_debits_and_records(self, auth_client, regular_user, make_user, make_project):
        owner = make_user('owner@example.com')
        project = make_project(owner, goal=100)

        response = auth_client.post(f'/dashboard/support/{project.id}', data={'tokens': 30},
                                    follow_redirects=True)
        assert response.status_code == 200
        assert b'Thank you! You supported this project with 30 tokens.' in response.data

        assert db.session.get(User, regular_user.id).tokens_available == 70
        contributions = Contribution.query.filter_by(project_id=project.id).all()
        assert [c.tokens for c in contributions] == [30]
        assert contributions[0].user_id == regular_user.id

    def test_support_more_than_balance(self, auth_client, regular_user, make_user, make_project):
        owner = make_user('owner@example.com')
        project = make_project(owner, goal=500)

        response = auth_client.post(f'/dashboard/support/{project.id}', data={'tokens': 150},
                                    follow_redirects=True)
        assert response.status_code == 200
        assert b'enough tokens to support this project' in response.data
        assert db.session.get(User, regular_user.id).tokens_available == 100
        assert Contribution.query.count() == 0

    def test_support_pending_project_refused(self, auth_client, regular_user, make_user, make_project):
        owner = make_user('owner@example.com')
        project = make_project(owner, status=ProjectStatus.PENDING)

        response = auth_client.post(f'/dashboard/support/{project.id}', data={'tokens': 10},
                                    follow_redirects=True)
        assert b'Only approved projects can receive support.' in response.data
        assert db.session.get(User, regular_user.id).tokens_available == 100

    def test_support_completed_project_refused(self, auth_client, regular_user, make_user, make_project,
                                               make_contribution):
        owner = make_user('owner@example.com')
        project = make_project(owner, goal=20)
        make_contribution(owner, project, 20)

        response = auth_client.post(f'/dashboard/support/{project.id}', data={'tokens': 10},
                                    follow_redirects=True)
        assert b'already reached its goal' in response.data
        assert db.session.get(User, regular_user.id).tokens_available == 100

    def test_support_invalid_amount(self, auth_client, regular_user, make_user, make_project):
        owner = make_user('owner@example.com')
        project = make_project(owner)

        for amount in ('0', '-5', 'abc', ''):
            response = auth_client.post(f'/dashboard/support/{project.id}', data={'tokens': amount},
                                        follow_redirects=True)
            assert response.status_code == 200
            assert b'Error in Tokens field' in response.data
        assert db.session.get(User, regular_user.id).tokens_available == 100
        assert Contribution.query.count() == 0

    def test_support_unknown_project(self, auth_client, regular_user):
        response = auth_client.post('/dashboard/support/9999', data={'tokens': 10}, follow_redirects=True)
        assert b'Project not found.' in response.data

    def test_support_requires_login(self, client, make_user, make_project):
        owner = make_user('owner@example.com')
        project = make_project(owner)
        response = client.post(f'/dashboard/support/{project.id}', data={'tokens': 10})
        assert response.status_code == 302
        assert Contribution.query.count() == 0

    def test_support_huge_amount_is_a_form_error(self, auth_client, regular_user, make_user, make_project):
        owner = make_user('owner@example.com')
        project = make_project(owner)

        response = auth_client.post(f'/dashboard/support/{project.id}', data={'tokens': str(10**20)},
                                    follow_redirects=True)
        assert response.status_code == 200
        assert b'Error in Tokens field' in response.data
        assert db.session.get(User, regular_user.id).tokens_available == 100
        assert Contribution.query.count() == 0
