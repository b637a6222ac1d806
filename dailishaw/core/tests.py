"""
Test suite for accounts and sessions
Tests: login, deactivation, role gating, field user administration, user deletion, session cache
"""
from datetime import timedelta
from unittest import mock

from django.core.cache import cache
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status

from dailishaw.core.authentication import DEACTIVATED_MESSAGE
from dailishaw.core.models import User, Role
from dailishaw.core.session_cache import SessionCache, session_cache, get_session_cache_key
from dailishaw.core.test_utils import TestDataFactory, AuthenticatedAPIClient, APITestCase
from dailishaw.ledger.models import Expense


class LoginTests(APITestCase):
    """Test the login endpoint"""

    def test_field_user_login_with_user_id(self):
        response = self.anon_client.post('/api/v1/auth/login/', {
            'username': self.field_user.username,
            'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['redirect_to'], '/user-dashboard')
        self.assertEqual(response.data['user']['role'], Role.USER)

    def test_login_with_email(self):
        response = self.anon_client.post('/api/v1/auth/login/', {
            'username': self.admin.email.upper(),
            'password': 'adminpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['redirect_to'], '/dashboard')

    def test_wrong_password(self):
        response = self.anon_client.post('/api/v1/auth/login/', {
            'username': self.field_user.username,
            'password': 'wrong-password',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(str(response.data['detail']), 'Invalid credentials')

    def test_deactivated_user_cannot_login(self):
        self.field_user.is_active = False
        self.field_user.save()
        response = self.anon_client.post('/api/v1/auth/login/', {
            'username': self.field_user.username,
            'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(str(response.data['detail']), DEACTIVATED_MESSAGE)

    def test_deactivated_user_with_wrong_password_gets_generic_error(self):
        self.field_user.is_active = False
        self.field_user.save()
        response = self.anon_client.post('/api/v1/auth/login/', {
            'username': self.field_user.username,
            'password': 'nope-nope',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(str(response.data['detail']), 'Invalid credentials')

    def test_me_reports_capabilities(self):
        response = self.admin_client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_admin'])
        self.assertTrue(response.data['can_manage_catalog'])
        self.assertFalse(response.data['can_log_activity'])

        response = self.user_client.get('/api/v1/auth/me/')
        self.assertFalse(response.data['is_admin'])
        self.assertTrue(response.data['can_view_media'])
        self.assertEqual(response.data['redirect_to'], '/user-dashboard')

    def test_capabilities_follow_console_access(self):
        for client in (self.admin_client, self.user_client):
            me = client.get('/api/v1/auth/me/').data
            admin_access = client.get('/api/v1/dashboard/users/').status_code == status.HTTP_200_OK
            field_access = client.get('/api/v1/user-dashboard/expenses/').status_code == status.HTTP_200_OK
            self.assertEqual(me['is_admin'], admin_access)
            self.assertEqual(me['can_manage_users'], admin_access)
            self.assertEqual(me['can_log_activity'], field_access)
            self.assertEqual(me['can_view_media'], field_access)


class SessionTests(APITestCase):
    """Token lifecycle and the session cache"""

    def test_token_stops_working_after_deactivation(self):
        response = self.user_client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.admin_client.patch(
            f'/api/v1/dashboard/users/{self.field_user.pk}/', {'is_active': False}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.user_client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(str(response.data['detail']), DEACTIVATED_MESSAGE)

    def test_authenticated_request_fills_cache(self):
        self.assertIsNone(cache.get(get_session_cache_key(self.field_user.pk)))
        self.user_client.get('/api/v1/auth/me/')
        entry = cache.get(get_session_cache_key(self.field_user.pk))
        self.assertIsNotNone(entry)
        self.assertEqual(entry['role'], Role.USER)
        self.assertTrue(entry['is_active'])

    def test_logout_blacklists_refresh_token(self):
        login = self.anon_client.post('/api/v1/auth/login/', {
            'username': self.field_user.username,
            'password': 'testpass123',
        }, format='json')
        refresh = login.data['refresh']

        response = self.user_client.post('/api/v1/auth/logout/', {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_205_RESET_CONTENT)
        self.assertIsNone(session_cache.get(self.field_user.pk))

        response = self.anon_client.post('/api/v1/auth/refresh/', {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_issues_new_access_token(self):
        login = self.anon_client.post('/api/v1/auth/login/', {
            'username': self.field_user.username,
            'password': 'testpass123',
        }, format='json')
        response = self.anon_client.post('/api/v1/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)


class SessionCacheTests(TestCase):
    """Test the session cache entity directly"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()

    def test_store_and_get(self):
        sessions = SessionCache(ttl=60)
        sessions.store(self.user)
        self.assertEqual(sessions.get(self.user.pk).pk, self.user.pk)

    def test_entry_expires_after_ttl(self):
        sessions = SessionCache(ttl=60)
        with mock.patch('dailishaw.core.session_cache.time.time', return_value=1000.0):
            sessions.store(self.user)
        with mock.patch('dailishaw.core.session_cache.time.time', return_value=1061.0):
            self.assertIsNone(sessions.get(self.user.pk))

    def test_zero_ttl_disables_cache(self):
        sessions = SessionCache(ttl=0)
        sessions.store(self.user)
        self.assertIsNone(sessions.get(self.user.pk))

    def test_saving_user_invalidates_entry(self):
        session_cache.store(self.user)
        self.user.display_name = 'Renamed'
        self.user.save()
        self.assertIsNone(session_cache.get(self.user.pk))

    @override_settings(SESSION_CACHE_TTL=5)
    def test_ttl_read_from_settings(self):
        self.assertEqual(SessionCache().ttl, 5)


class RoleGatingTests(APITestCase):
    """Admin and field user consoles only admit their own role"""

    def test_field_user_cannot_use_admin_endpoints(self):
        for url in ['/api/v1/dashboard/users/', '/api/v1/dashboard/categories/', '/api/v1/dashboard/expenses/', '/api/v1/dashboard/stats/']:
            response = self.user_client.get(url)
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, url)

    def test_admin_cannot_use_field_endpoints(self):
        for url in ['/api/v1/user-dashboard/expenses/', '/api/v1/user-dashboard/media/', '/api/v1/user-dashboard/doctors/']:
            response = self.admin_client.get(url)
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, url)

    def test_anonymous_requests_are_unauthorized(self):
        for url in ['/api/v1/dashboard/users/', '/api/v1/user-dashboard/expenses/', '/api/v1/auth/me/']:
            response = self.anon_client.get(url)
            self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED, url)


class FieldUserAdminTests(APITestCase):
    """Test field user administration"""

    def test_list_field_users_newest_first(self):
        User.objects.filter(pk=self.field_user.pk).update(created_at=timezone.now() - timedelta(days=1))
        newer = TestDataFactory.create_user()
        response = self.admin_client.get('/api/v1/dashboard/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [row['id'] for row in response.data]
        self.assertEqual(ids[0], newer.pk)
        self.assertNotIn(self.admin.pk, ids)

    def test_create_field_user(self):
        response = self.admin_client.post('/api/v1/dashboard/users/', {
            'user_id': 'rep042',
            'password': 'secret1',
            'confirm_password': 'secret1',
            'display_name': 'Rep Forty Two',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(username='rep042')
        self.assertEqual(user.email, 'rep042.dailishaw@gmail.com')
        self.assertEqual(user.role, Role.USER)
        self.assertEqual(user.shared_password, 'secret1')
        self.assertTrue(user.check_password('secret1'))

    def test_create_rejects_mismatched_passwords(self):
        response = self.admin_client.post('/api/v1/dashboard/users/', {
            'user_id': 'rep043',
            'password': 'secret1',
            'confirm_password': 'secret2',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('confirm_password', response.data)
        self.assertFalse(User.objects.filter(username='rep043').exists())

    def test_create_rejects_short_password(self):
        response = self.admin_client.post('/api/v1/dashboard/users/', {
            'user_id': 'rep044',
            'password': 'abc',
            'confirm_password': 'abc',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)

    def test_create_rejects_duplicate_user_id(self):
        response = self.admin_client.post('/api/v1/dashboard/users/', {
            'user_id': self.field_user.username.upper(),
            'password': 'secret1',
            'confirm_password': 'secret1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('user_id', response.data)

    def test_active_and_share_lists(self):
        inactive = TestDataFactory.create_user(is_active=False)
        response = self.admin_client.get('/api/v1/dashboard/users/active/')
        ids = [row['id'] for row in response.data]
        self.assertIn(self.field_user.pk, ids)
        self.assertNotIn(inactive.pk, ids)

        response = self.admin_client.get('/api/v1/dashboard/users/share/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        shared = {row['id']: row for row in response.data}
        self.assertEqual(shared[self.field_user.pk]['shared_password'], 'testpass123')

    def test_reset_password(self):
        response = self.admin_client.post(
            f'/api/v1/dashboard/users/{self.field_user.pk}/password/', {'password': 'newpass99'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.field_user.refresh_from_db()
        self.assertTrue(self.field_user.check_password('newpass99'))
        self.assertEqual(self.field_user.shared_password, 'newpass99')

    def test_admin_rows_are_not_editable_here(self):
        response = self.admin_client.patch(f'/api/v1/dashboard/users/{self.admin.pk}/', {'is_active': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class DeleteUserTests(APITestCase):
    """Test the delete-user endpoint"""

    def test_missing_user_id(self):
        response = self.admin_client.post('/api/delete-user/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'User ID required')

    def test_unknown_user(self):
        response = self.admin_client.post('/api/delete-user/', {'userId': 999999}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_cascades_to_logs(self):
        TestDataFactory.create_expense(self.field_user)
        response = self.admin_client.post('/api/delete-user/', {'userId': self.field_user.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True})
        self.assertFalse(User.objects.filter(pk=self.field_user.pk).exists())
        self.assertEqual(Expense.objects.count(), 0)

    def test_cannot_delete_self(self):
        response = self.admin_client.post('/api/delete-user/', {'userId': self.admin.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_field_user_cannot_delete(self):
        other = TestDataFactory.create_user()
        response = self.user_client.post('/api/delete-user/', {'userId': other.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(User.objects.filter(pk=other.pk).exists())


class ManagerTests(TestCase):
    def test_superuser_is_admin(self):
        user = User.objects.create_superuser('root', 'root@dailishaw.test', 'rootpass1')
        self.assertEqual(user.role, Role.ADMIN)
        self.assertEqual(user.dashboard_path, '/dashboard')

    def test_client_helper_sets_bearer_header(self):
        user = TestDataFactory.create_user()
        client = AuthenticatedAPIClient().authenticate_user(user)
        self.assertTrue(client._credentials['HTTP_AUTHORIZATION'].startswith('Bearer '))
