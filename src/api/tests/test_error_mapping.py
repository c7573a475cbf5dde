"""Tests for the shared error table and the timestamp wire format."""

import unittest
from datetime import datetime, timedelta, timezone

from api import errors
from api.gql.context import to_graphql_error
from api.gql.scalars import parse_datetime_lenient
from api.serialization import format_timestamp, parse_timestamp
from domain.model.errors import (
    DomainError,
    DuplicateError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
    ValidationError,
)


class TestErrorTable(unittest.TestCase):

    def test_every_domain_error_has_one_mapping(self):
        expected = {
            ValidationError: (400, 'BAD_USER_INPUT', 'InvalidInput'),
            DuplicateError: (409, 'CONFLICT', 'DuplicateIdentity'),
            InvalidCredentialsError: (401, 'INVALID_CREDENTIALS', 'InvalidCredentials'),
            UnauthenticatedError: (401, 'UNAUTHENTICATED', 'Unauthenticated'),
            PermissionDeniedError: (403, 'FORBIDDEN', 'Forbidden'),
            NotFoundError: (404, 'NOT_FOUND', 'NotFound'),
            InternalError: (500, 'INTERNAL_SERVER_ERROR', 'InternalError'),
        }
        for cls, (http_status, code, kind) in expected.items():
            with self.subTest(cls=cls.__name__):
                mapping = errors.classify(cls("boom"))
                self.assertEqual((mapping.http_status, mapping.graphql_code, mapping.kind), (http_status, code, kind))

    def test_unknown_exceptions_are_internal_and_hidden(self):
        exc = RuntimeError("db password is hunter2")

        self.assertIs(errors.classify(exc), errors.INTERNAL)
        self.assertIs(errors.classify(DomainError("bare")), errors.INTERNAL)
        self.assertEqual(errors.public_message(exc), 'Internal server error')

    def test_domain_messages_are_public(self):
        self.assertEqual(errors.public_message(NotFoundError("Task not found")), 'Task not found')

    def test_reverse_lookups(self):
        self.assertIs(errors.mapping_for_graphql_code('FORBIDDEN'), errors.FORBIDDEN)
        self.assertIs(errors.mapping_for_graphql_code(None), errors.INVALID_INPUT)
        self.assertIs(errors.mapping_for_graphql_code('SOMETHING_ELSE'), errors.INTERNAL)
        self.assertIs(errors.mapping_for_rest_code('INVALID_CREDENTIALS', 401), errors.INVALID_CREDENTIALS)
        self.assertIs(errors.mapping_for_rest_code(None, 404), errors.NOT_FOUND)
        self.assertIs(errors.mapping_for_rest_code(None, 503), errors.INTERNAL)

    def test_graphql_error_carries_code(self):
        error = to_graphql_error(PermissionDeniedError("Not authorized to access this user"))

        self.assertEqual(error.message, 'Not authorized to access this user')
        self.assertEqual(error.extensions, {'code': 'FORBIDDEN'})


class TestTimestamps(unittest.TestCase):

    def test_format_is_utc_milliseconds_with_z(self):
        value = datetime(2026, 1, 23, 13, 0, 0, 123456, tzinfo=timezone(timedelta(hours=1)))

        self.assertEqual(format_timestamp(value), '2026-01-23T12:00:00.123Z')

    def test_naive_values_are_utc(self):
        self.assertEqual(format_timestamp(datetime(2026, 1, 23, 12, 0)), '2026-01-23T12:00:00.000Z')

    def test_parse_round_trip(self):
        parsed = parse_timestamp('2026-01-23T12:00:00.000Z')

        self.assertEqual(parsed, datetime(2026, 1, 23, 12, 0, tzinfo=timezone.utc))
        self.assertEqual(format_timestamp(parsed), '2026-01-23T12:00:00.000Z')

    def test_parse_rejects_garbage(self):
        with self.assertRaises(ValueError):
            parse_timestamp('yesterday')
        with self.assertRaises(TypeError):
            parse_timestamp(1234)

    def test_scalar_parsing_is_lenient(self):
        self.assertIsNone(parse_datetime_lenient('yesterday'))
        self.assertIsNone(parse_datetime_lenient(42))
        self.assertEqual(
            parse_datetime_lenient('2026-01-23T12:00:00Z'),
            datetime(2026, 1, 23, 12, 0, tzinfo=timezone.utc),
        )


if __name__ == '__main__':
    unittest.main()
