"""Unit tests for user_service."""

import unittest

from adapter.fake.task_repository import FakeTaskRepository
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import (
    DuplicateError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from domain.model.task import TaskDraft
from domain.model.user import UserChanges
from services import user_service


class TestRegister(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()

    def test_register_normalizes_email_and_sets_username(self):
        user = user_service.register(self.repo, '  Ada@Example.COM ', 'secret1', first_name=' Ada ')

        self.assertEqual(user.email, 'ada@example.com')
        self.assertEqual(user.username, 'ada@example.com')
        self.assertEqual(user.first_name, 'Ada')
        self.assertEqual(user.seq, 1)
        self.assertNotEqual(user.password_hash, 'secret1')

    def test_duplicate_email_is_case_insensitive(self):
        user_service.register(self.repo, 'a@x.com', 'secret1')

        with self.assertRaises(DuplicateError):
            user_service.register(self.repo, 'A@X.com', 'secret2')
        self.assertEqual(len(self.repo.store), 1)

    def test_short_password_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            user_service.register(self.repo, 'a@x.com', '12345')
        self.assertIn('at least 6', str(ctx.exception))

    def test_password_longer_than_bcrypt_input_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            user_service.register(self.repo, 'a@x.com', 'x' * 80)
        self.assertIn('at most 72 bytes', str(ctx.exception))
        self.assertEqual(self.repo.store, {})

    def test_byte_limit_counts_encoded_length(self):
        # 24 three-byte characters fit, 25 do not
        user_service.register(self.repo, 'a@x.com', '\u20ac' * 24)
        with self.assertRaises(ValidationError):
            user_service.register(self.repo, 'b@x.com', '\u20ac' * 25)

    def test_missing_or_malformed_email_rejected(self):
        for email in ('', '   ', 'no-at-sign', '@x.com', 'a@'):
            with self.subTest(email=email):
                with self.assertRaises(ValidationError):
                    user_service.register(self.repo, email, 'secret1')

    def test_store_failure_without_duplicate_is_internal(self):
        self.repo.create = lambda **kwargs: None

        with self.assertRaises(InternalError):
            user_service.register(self.repo, 'a@x.com', 'secret1')


class TestAuthenticate(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.user = user_service.register(self.repo, 'a@x.com', 'secret1')

    def test_correct_credentials(self):
        user = user_service.authenticate(self.repo, 'A@x.com', 'secret1')
        self.assertEqual(user.id, self.user.id)

    def test_wrong_password_and_unknown_email_are_indistinguishable(self):
        with self.assertRaises(InvalidCredentialsError) as wrong_password:
            user_service.authenticate(self.repo, 'a@x.com', 'wrong-password')
        with self.assertRaises(InvalidCredentialsError) as unknown_email:
            user_service.authenticate(self.repo, 'nobody@x.com', 'secret1')

        self.assertEqual(str(wrong_password.exception), str(unknown_email.exception))

    def test_over_long_password_is_invalid_credentials(self):
        for email in ('a@x.com', 'nobody@x.com'):
            with self.subTest(email=email):
                with self.assertRaises(InvalidCredentialsError):
                    user_service.authenticate(self.repo, email, 'x' * 80)

    def test_over_long_password_sharing_a_valid_prefix_is_rejected(self):
        repo = FakeUserRepository()
        user_service.register(repo, 'b@x.com', 'y' * 72)

        with self.assertRaises(InvalidCredentialsError):
            user_service.authenticate(repo, 'b@x.com', 'y' * 73)


class TestFindUser(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.user = user_service.register(self.repo, 'a@x.com', 'secret1')

    def test_find_by_sequence_or_opaque_id(self):
        self.assertEqual(user_service.find_user(self.repo, self.user.seq).id, self.user.id)
        self.assertEqual(user_service.find_user(self.repo, self.user.id).seq, self.user.seq)

    def test_unknown_reference_raises_not_found(self):
        with self.assertRaises(NotFoundError):
            user_service.find_user(self.repo, 99)
        with self.assertRaises(NotFoundError):
            user_service.find_user(self.repo, 'missing')

    def test_sequence_outside_storable_range_is_not_found(self):
        self.repo.get_by_seq = lambda seq: self.fail('store queried for %r' % seq)

        for ref in (2**63, 10**20, 0, -1):
            with self.subTest(ref=ref):
                with self.assertRaises(NotFoundError):
                    user_service.find_user(self.repo, ref)


class TestUpdateUser(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.user = user_service.register(self.repo, 'a@x.com', 'secret1')

    def test_password_change_allows_login_with_new_password(self):
        user_service.update_user(self.repo, self.user, UserChanges(password='newsecret'))

        self.assertEqual(user_service.authenticate(self.repo, 'a@x.com', 'newsecret').id, self.user.id)
        with self.assertRaises(InvalidCredentialsError):
            user_service.authenticate(self.repo, 'a@x.com', 'secret1')

    def test_short_new_password_rejected(self):
        with self.assertRaises(ValidationError):
            user_service.update_user(self.repo, self.user, UserChanges(password='123'))

    def test_over_long_new_password_rejected(self):
        with self.assertRaises(ValidationError):
            user_service.update_user(self.repo, self.user, UserChanges(password='x' * 73))
        self.assertEqual(user_service.authenticate(self.repo, 'a@x.com', 'secret1').id, self.user.id)

    def test_profile_fields(self):
        updated = user_service.update_user(self.repo, self.user, UserChanges(first_name='Ada', last_name='Lovelace'))

        self.assertEqual((updated.first_name, updated.last_name), ('Ada', 'Lovelace'))

    def test_empty_changes_return_user_unchanged(self):
        self.assertIs(user_service.update_user(self.repo, self.user, UserChanges()), self.user)


class TestDeleteUser(unittest.TestCase):

    def test_delete_cascades_to_owned_tasks_only(self):
        users = FakeUserRepository()
        tasks = FakeTaskRepository()
        doomed = user_service.register(users, 'a@x.com', 'secret1')
        survivor = user_service.register(users, 'b@x.com', 'secret1')
        tasks.create(TaskDraft(title='A1'), doomed.id, doomed.seq)
        tasks.create(TaskDraft(title='A2'), doomed.id, doomed.seq)
        kept = tasks.create(TaskDraft(title='B1'), survivor.id, survivor.seq)

        self.assertTrue(user_service.delete_user(users, tasks, doomed))

        self.assertIsNone(users.get_by_id(doomed.id))
        self.assertEqual(list(tasks.store), [kept.id])


if __name__ == '__main__':
    unittest.main()
