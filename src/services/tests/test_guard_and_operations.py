"""Tests for the authorization guard and DomainOperations.

DomainOperations is exercised end to end over the in-memory fakes and a
real JwtTokenIssuer.
"""

import unittest
from unittest.mock import MagicMock

from adapter.auth.jwt_token_issuer import JwtTokenIssuer
from adapter.fake.task_repository import FakeTaskRepository
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import (
    DuplicateError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
    ValidationError,
)
from domain.model.task import TaskDraft, TaskPatch, TaskStatus
from domain.model.user import UserChanges
from services.guard import require_authenticated, require_self, require_task_owner
from services.operations import DomainOperations, RequestContext


class TestGuard(unittest.TestCase):

    def setUp(self):
        self.users = FakeUserRepository()
        self.tokens = JwtTokenIssuer(secret_key='guard-secret')
        self.alice = self.users.create(email='a@x.com', password_hash='h', username='a@x.com')
        self.bob = self.users.create(email='b@x.com', password_hash='h', username='b@x.com')

    def test_valid_token_resolves_user(self):
        token = self.tokens.issue(self.alice.id)
        self.assertEqual(require_authenticated(self.users, self.tokens, token).id, self.alice.id)

    def test_missing_invalid_and_orphaned_tokens_raise_the_same_error(self):
        orphan = self.tokens.issue('deleted-user')
        messages = set()
        for token in (None, '', 'garbage', orphan):
            with self.subTest(token=token):
                with self.assertRaises(UnauthenticatedError) as ctx:
                    require_authenticated(self.users, self.tokens, token)
                messages.add(str(ctx.exception))
        self.assertEqual(len(messages), 1)

    def test_verification_is_delegated_to_the_issuer(self):
        tokens = MagicMock()
        tokens.verify.return_value = None

        with self.assertRaises(UnauthenticatedError):
            require_authenticated(self.users, tokens, 'some-token')
        tokens.verify.assert_called_once_with('some-token')

    def test_require_self(self):
        require_self(self.alice, self.alice)
        with self.assertRaises(PermissionDeniedError):
            require_self(self.alice, self.bob)

    def test_missing_and_foreign_task_are_indistinguishable(self):
        task = FakeTaskRepository().create(TaskDraft(title='T'), self.bob.id, self.bob.seq)

        with self.assertRaises(NotFoundError) as foreign:
            require_task_owner(self.alice, task)
        with self.assertRaises(NotFoundError) as missing:
            require_task_owner(self.alice, None)

        self.assertEqual(str(foreign.exception), str(missing.exception))
        self.assertIs(require_task_owner(self.bob, task), task)


class OperationsTestCase(unittest.TestCase):

    def setUp(self):
        self.users = FakeUserRepository()
        self.tasks = FakeTaskRepository()
        self.ops = DomainOperations(self.users, self.tasks, JwtTokenIssuer(secret_key='ops-secret'))

    def _register_and_login(self, email, password='secret1'):
        self.ops.create_user(email, password)
        session = self.ops.login(email, password)
        return session.user, RequestContext(token=session.token)


class TestSessionOperations(OperationsTestCase):

    def test_login_returns_token_for_the_user(self):
        user = self.ops.create_user('a@x.com', 'secret1')

        session = self.ops.login('a@x.com', 'secret1')

        self.assertEqual(session.user.id, user.id)
        self.assertEqual(self.ops.me(RequestContext(session.token)).id, user.id)

    def test_logout_requires_authentication(self):
        _, ctx = self._register_and_login('a@x.com')

        self.assertTrue(self.ops.logout(ctx))
        with self.assertRaises(UnauthenticatedError):
            self.ops.logout(RequestContext())

    def test_list_users_requires_authentication(self):
        _, ctx = self._register_and_login('a@x.com')
        self._register_and_login('b@x.com')

        self.assertEqual(len(self.ops.list_users(ctx)), 2)
        with self.assertRaises(UnauthenticatedError):
            self.ops.list_users(RequestContext())


class TestUserOperations(OperationsTestCase):

    def test_user_can_read_and_update_only_themselves(self):
        alice, alice_ctx = self._register_and_login('a@x.com')
        bob, _ = self._register_and_login('b@x.com')

        self.assertEqual(self.ops.get_user(alice.seq, alice_ctx).id, alice.id)
        self.assertEqual(self.ops.get_user(alice.id, alice_ctx).seq, alice.seq)
        with self.assertRaises(PermissionDeniedError):
            self.ops.get_user(bob.seq, alice_ctx)
        with self.assertRaises(PermissionDeniedError):
            self.ops.update_user(bob.id, UserChanges(first_name='Mallory'), alice_ctx)
        with self.assertRaises(PermissionDeniedError):
            self.ops.delete_user(bob.seq, alice_ctx)

    def test_unknown_user_is_not_found(self):
        _, ctx = self._register_and_login('a@x.com')

        with self.assertRaises(NotFoundError):
            self.ops.get_user(999, ctx)

    def test_deleted_users_token_becomes_inert(self):
        alice, ctx = self._register_and_login('a@x.com')
        self.ops.create_task(TaskDraft(title='T'), ctx)

        self.assertTrue(self.ops.delete_user(alice.seq, ctx))

        self.assertEqual(self.tasks.store, {})
        with self.assertRaises(UnauthenticatedError):
            self.ops.list_tasks(ctx)


class TestTaskOperations(OperationsTestCase):

    def test_round_trip_by_either_id(self):
        _, ctx = self._register_and_login('a@x.com')
        created = self.ops.create_task(TaskDraft(title='T', description='d', status=TaskStatus.IN_PROGRESS), ctx)

        for ref in (created.seq, created.id):
            with self.subTest(ref=ref):
                fetched = self.ops.get_task(ref, ctx)
                self.assertEqual(
                    (fetched.title, fetched.description, fetched.status),
                    ('T', 'd', TaskStatus.IN_PROGRESS),
                )

    def test_other_users_tasks_are_invisible(self):
        _, alice_ctx = self._register_and_login('a@x.com')
        _, bob_ctx = self._register_and_login('b@x.com')
        task = self.ops.create_task(TaskDraft(title='T'), alice_ctx)

        self.assertEqual(self.ops.list_tasks(bob_ctx).tasks, [])
        for call in (
            lambda: self.ops.get_task(task.seq, bob_ctx),
            lambda: self.ops.update_task(task.seq, TaskPatch(title='x'), bob_ctx),
            lambda: self.ops.delete_task(task.id, bob_ctx),
        ):
            with self.assertRaises(NotFoundError) as ctx:
                call()
            self.assertEqual(str(ctx.exception), 'Task not found')

        with self.assertRaises(NotFoundError) as missing:
            self.ops.get_task(9999, bob_ctx)
        self.assertEqual(str(missing.exception), 'Task not found')

    def test_nested_views_are_scoped_to_the_caller(self):
        alice, alice_ctx = self._register_and_login('a@x.com')
        bob, bob_ctx = self._register_and_login('b@x.com')
        task = self.ops.create_task(TaskDraft(title='T'), alice_ctx)

        self.assertEqual([t.id for t in self.ops.list_tasks_of(alice, alice_ctx)], [task.id])
        self.assertEqual(self.ops.list_tasks_of(alice, bob_ctx), [])
        self.assertEqual(self.ops.owner_of(task, alice_ctx).id, alice.id)
        with self.assertRaises(NotFoundError):
            self.ops.owner_of(task, bob_ctx)

    def test_create_task_requires_authentication(self):
        with self.assertRaises(UnauthenticatedError):
            self.ops.create_task(TaskDraft(title='T'), RequestContext())


class TestConcreteScenario(OperationsTestCase):

    def test_register_login_isolation_and_cascade(self):
        alice = self.ops.create_user('a@x.com', 'secret1')
        self.assertTrue(alice.id)
        with self.assertRaises(DuplicateError):
            self.ops.create_user('a@x.com', 'secret1')

        with self.assertRaises(InvalidCredentialsError) as wrong:
            self.ops.login('a@x.com', 'wrong-password')
        with self.assertRaises(InvalidCredentialsError) as unknown:
            self.ops.login('ghost@x.com', 'wrong-password')
        self.assertEqual(str(wrong.exception), str(unknown.exception))

        alice_ctx = RequestContext(self.ops.login('a@x.com', 'secret1').token)
        self.ops.create_task(TaskDraft(title='T', status=TaskStatus.TO_DO), alice_ctx)
        _, bob_ctx = self._register_and_login('b@x.com')
        self.assertNotIn('T', [t.title for t in self.ops.list_tasks(bob_ctx).tasks])

        self.ops.delete_user(alice.seq, alice_ctx)
        with self.assertRaises(UnauthenticatedError):
            self.ops.list_tasks(alice_ctx)

    def test_short_password_is_invalid_input(self):
        with self.assertRaises(ValidationError):
            self.ops.create_user('a@x.com', '123')


if __name__ == '__main__':
    unittest.main()
