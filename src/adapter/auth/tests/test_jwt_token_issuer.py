"""Tests for JwtTokenIssuer."""

import unittest
from datetime import timedelta

from jose import jwt

from adapter.auth.jwt_token_issuer import JWT_ALGORITHM, JwtTokenIssuer


class TestJwtTokenIssuer(unittest.TestCase):

    def setUp(self):
        self.issuer = JwtTokenIssuer(secret_key='unit-test-secret')

    def test_issue_then_verify_returns_subject(self):
        token = self.issuer.issue('user-1')

        self.assertEqual(self.issuer.verify(token), 'user-1')

    def test_token_carries_expiry(self):
        token = self.issuer.issue('user-1')

        claims = jwt.get_unverified_claims(token)
        self.assertEqual(claims['sub'], 'user-1')
        self.assertEqual(claims['exp'] - claims['iat'], int(timedelta(days=7).total_seconds()))

    def test_expired_token_is_rejected(self):
        expired = JwtTokenIssuer(secret_key='unit-test-secret', expires_in=timedelta(seconds=-10))

        self.assertIsNone(self.issuer.verify(expired.issue('user-1')))

    def test_token_signed_with_other_key_is_rejected(self):
        forged = JwtTokenIssuer(secret_key='someone-else').issue('user-1')

        self.assertIsNone(self.issuer.verify(forged))

    def test_garbage_is_rejected(self):
        self.assertIsNone(self.issuer.verify('not.a.token'))
        self.assertIsNone(self.issuer.verify(''))

    def test_token_without_subject_is_rejected(self):
        token = jwt.encode({'foo': 'bar'}, 'unit-test-secret', algorithm=JWT_ALGORITHM)

        self.assertIsNone(self.issuer.verify(token))


if __name__ == '__main__':
    unittest.main()
