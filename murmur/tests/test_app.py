"""Tests for the messaging API as a whole."""

import os
from unittest import TestCase, mock

from murmur.controllers.authentication import AUTH_FAILED
from murmur.controllers.forms import MISSING_MESSAGE
from murmur.factory import create_web_app
from murmur.services import datastore

ENVIRON = {
    'REDIS_FAKE': '1',
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'CREATE_DB': '1',
    'JWT_SECRET': 'foosecret',
    'LOGIN_MAX_ATTEMPTS': '3',
    'LOGIN_DECAY_SECONDS': '60'
}


class TestAPI(TestCase):
    """Log in, send messages, and read them back."""

    def setUp(self):
        with mock.patch.dict(os.environ, ENVIRON):
            self.app = create_web_app()
        self.client = self.app.test_client()
        with self.app.app_context():
            self.alice = datastore.create_user('alice', 'alice@example.com',
                                               'secret')
            self.bob = datastore.create_user('bob', 'bob@example.com',
                                             'bobsecret')

    def tearDown(self):
        with self.app.app_context():
            datastore.drop_all()

    def _login(self, email: str = 'alice@example.com',
               password: str = 'secret') -> str:
        response = self.client.post('/auth/login', json={
            'email': email,
            'password': password
        })
        self.assertEqual(response.status_code, 200)
        return response.get_json()['access_token']

    def _auth(self, token: str) -> dict:
        return {'Authorization': f'Bearer {token}'}

    def test_login(self):
        """A user logs in with e-mail and password."""
        response = self.client.post('/auth/login', json={
            'email': 'alice@example.com',
            'password': 'secret'
        })
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['token_type'], 'bearer')
        self.assertTrue(data['access_token'])
        self.assertGreater(data['expires_in'], 3590)
        self.assertLessEqual(data['expires_in'], 3600)

    def test_login_form_encoded(self):
        """Credentials may also be sent as a form."""
        response = self.client.post('/auth/login', data={
            'email': 'alice@example.com',
            'password': 'secret'
        })
        self.assertEqual(response.status_code, 200)

    def test_login_wrong_password(self):
        """Wrong credentials are refused."""
        response = self.client.post('/auth/login', json={
            'email': 'alice@example.com',
            'password': 'wrong'
        })
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.get_json(), {'email': AUTH_FAILED})

    def test_login_lockout(self):
        """Too many failures lock the client out."""
        for _ in range(3):
            response = self.client.post('/auth/login', json={
                'email': 'alice@example.com',
                'password': 'wrong'
            })
            self.assertEqual(response.status_code, 422)

        response = self.client.post('/auth/login', json={
            'email': 'ALICE@example.com',
            'password': 'secret'
        })
        self.assertEqual(response.status_code, 429)
        self.assertIn('Retry-After', response.headers)
        self.assertIn('Too many login attempts',
                      response.get_json()['email'])

        # Other accounts are not affected.
        self._login('bob@example.com', 'bobsecret')

    def test_login_when_authenticated(self):
        """Authenticated users cannot log in again."""
        token = self._login()
        response = self.client.post('/auth/login', headers=self._auth(token),
                                    json={'email': 'bob@example.com',
                                          'password': 'bobsecret'})
        self.assertEqual(response.status_code, 403)
        self.assertIn('reason', response.get_json())

    def test_me(self):
        """Authenticated users can see their profile."""
        token = self._login()
        response = self.client.get('/auth/me', headers=self._auth(token))
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['id'], self.alice.user_id)
        self.assertEqual(data['username'], 'alice')
        self.assertEqual(data['email'], 'alice@example.com')
        self.assertNotIn('password', data)
        self.assertNotIn('password_enc', data)

    def test_me_anonymous(self):
        """Anonymous requests for a profile are refused."""
        response = self.client.get('/auth/me')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json(),
                         {'reason': 'Not a valid session'})

    def test_logout(self):
        """A token cannot be used after logging out."""
        token = self._login()
        response = self.client.post('/auth/logout',
                                    headers=self._auth(token))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(),
                         {'message': 'Successfully logged out'})

        response = self.client.get('/auth/me', headers=self._auth(token))
        self.assertEqual(response.status_code, 401)
        response = self.client.post('/auth/logout',
                                    headers=self._auth(token))
        self.assertEqual(response.status_code, 401)

    def test_refresh(self):
        """Refreshing replaces the token."""
        token = self._login()
        response = self.client.post('/auth/refresh',
                                    headers=self._auth(token))
        self.assertEqual(response.status_code, 200)
        new_token = response.get_json()['access_token']
        self.assertNotEqual(new_token, token)

        response = self.client.get('/auth/me', headers=self._auth(token))
        self.assertEqual(response.status_code, 401)
        response = self.client.get('/auth/me', headers=self._auth(new_token))
        self.assertEqual(response.status_code, 200)

    def test_send_and_read(self):
        """Messages sent to a user show up in their list."""
        response = self.client.post('/alice/send', json={'message': 'hi'})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()['message'], 'hi')

        response = self.client.post('/alice/send',
                                    data={'record': 'recordings/1.ogg'})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()['record'], 'recordings/1.ogg')

        self.client.post('/bob/send', json={'message': 'for bob'})

        token = self._login()
        response = self.client.get('/messages', headers=self._auth(token))
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual([m['message'] for m in data], ['hi', None])
        self.assertEqual([m['record'] for m in data],
                         [None, 'recordings/1.ogg'])

    def test_messages_anonymous(self):
        """Anonymous requests for messages are refused."""
        response = self.client.get('/messages')
        self.assertEqual(response.status_code, 401)

    def test_send_empty(self):
        """An empty message is refused."""
        response = self.client.post('/alice/send', json={})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.get_json(), {'message': MISSING_MESSAGE})

    def test_send_message_with_any_record(self):
        """A record of any kind does not stop a written message."""
        response = self.client.post('/alice/send',
                                    json={'message': 'hi', 'record': 123})
        self.assertEqual(response.status_code, 201)
        data = response.get_json()
        self.assertEqual(data['message'], 'hi')
        self.assertIsNone(data['record'])

        response = self.client.post('/alice/send',
                                    json={'record': {'id': 7}})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()['record'], '{"id": 7}')

    def test_send_blank(self):
        """A message of only whitespace counts as no message."""
        response = self.client.post('/alice/send', json={'message': '   '})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.get_json(), {'message': MISSING_MESSAGE})

    def test_timestamps_are_utc(self):
        """Message timestamps carry the UTC offset."""
        response = self.client.post('/alice/send', json={'message': 'hi'})
        data = response.get_json()
        self.assertTrue(data['created_at'].endswith('+00:00'))
        self.assertTrue(data['updated_at'].endswith('+00:00'))

    def test_send_to_nobody(self):
        """Messages to users that do not exist are refused."""
        response = self.client.post('/ghost/send', json={'message': 'hi'})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(), {'reason': 'No such user'})

    def test_unknown_route(self):
        """Unknown routes get a JSON response."""
        response = self.client.get('/nothing/here/at/all')
        self.assertEqual(response.status_code, 404)
        self.assertIn('reason', response.get_json())

    def test_wrong_method(self):
        """Sending requires POST."""
        response = self.client.get('/alice/send')
        self.assertEqual(response.status_code, 405)
        self.assertIn('reason', response.get_json())
