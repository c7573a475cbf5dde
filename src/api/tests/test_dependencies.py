"""Unit tests for API dependency wiring and the health endpoint."""

import unittest
from unittest.mock import patch, MagicMock

from fastapi import HTTPException
from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError

from adapter.mongodb.task_repository import MongoTaskRepository
from adapter.mongodb.user_repository import MongoUserRepository
from api.dependencies import get_sequence_counter, get_task_repo, get_user_repo, get_operations
from api.main import app
from services.operations import DomainOperations


class TestRepositoryDependencies(unittest.TestCase):

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_mongo_repositories_when_connected(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.__getitem__.return_value = MagicMock()
        mock_get_client.return_value = mock_client
        counter = get_sequence_counter()

        self.assertIsInstance(get_user_repo(counter), MongoUserRepository)
        self.assertIsInstance(get_task_repo(counter), MongoTaskRepository)

    @patch('api.dependencies.get_mongodb_client')
    def test_raises_503_when_mongodb_unavailable(self, mock_get_client):
        mock_get_client.return_value = None

        with self.assertRaises(HTTPException) as context:
            get_sequence_counter()

        self.assertEqual(context.exception.status_code, 503)
        self.assertEqual(context.exception.detail, "Database unavailable")

    @patch('api.dependencies.get_mongodb_client')
    def test_uses_configured_database_name(self, mock_get_client):
        mock_client = MagicMock()
        mock_get_client.return_value = mock_client

        get_sequence_counter()

        from api.dependencies import DATABASE_NAME
        mock_client.__getitem__.assert_called_with(DATABASE_NAME)

    def test_operations_bundle_the_collaborators(self):
        users, tasks, tokens = MagicMock(), MagicMock(), MagicMock()

        ops = get_operations(users, tasks, tokens)

        self.assertIsInstance(ops, DomainOperations)
        self.assertIs(ops.users, users)
        self.assertIs(ops.tokens, tokens)


class TestHealthEndpoint(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    @patch('api.routes.health.get_mongodb_client')
    def test_healthy(self, mock_get_client):
        mock_get_client.return_value = MagicMock()

        response = self.client.get('/health')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'healthy')

    @patch('api.routes.health.get_mongodb_client')
    def test_degraded_when_unreachable(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.admin.command.side_effect = PyMongoError("timeout")
        mock_get_client.return_value = mock_client

        response = self.client.get('/health')

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['services']['mongodb']['status'], 'unhealthy')

    def test_requests_fail_with_503_without_database(self):
        with patch('api.dependencies.get_mongodb_client', return_value=None):
            response = self.client.get('/tasks')

        self.assertEqual(response.status_code, 503)


if __name__ == '__main__':
    unittest.main()
