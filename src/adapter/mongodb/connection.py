"""Shared MongoDB client.

One MongoClient per process, created lazily and re-checked with a ping on
every lookup. A missing MONGO_URL or a failed first connection is treated
as a configuration problem and not retried; losing an established
connection is retried on the next lookup.
"""

import os
import logging
from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'taskbridge')
USERS_COLLECTION_NAME = 'users'
TASKS_COLLECTION_NAME = 'tasks'
COUNTERS_COLLECTION_NAME = 'counters'

CLIENT_OPTIONS = {
    'serverSelectionTimeoutMS': 5000,
    'connectTimeoutMS': 5000,
    'socketTimeoutMS': 30000,
    'maxPoolSize': 20,
    'minPoolSize': 0,
    'maxIdleTimeMS': 30000,
    'waitQueueTimeoutMS': 10000,
    'retryWrites': True,
    'retryReads': True,
    'tz_aware': True,  # datetimes come back as aware UTC values
}

_client: MongoClient | None = None
_ever_connected = False
_gave_up = False


def reset_client():
    """Forget the cached client and any earlier connection failure."""
    global _client, _ever_connected, _gave_up
    _client = None
    _ever_connected = False
    _gave_up = False


def _is_alive(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError:
        return False


def _connect() -> MongoClient | None:
    global _ever_connected, _gave_up

    try:
        client = MongoClient(MONGO_URL, **CLIENT_OPTIONS)
        client.admin.command('ping')
    except PyMongoError as e:
        if _ever_connected:
            logger.warning("MongoDB reconnection failed", extra={"error": str(e)[:200]})
        else:
            logger.error("MongoDB initial connection failed", extra={"error": str(e)[:200]})
            _gave_up = True
        return None

    if not _ever_connected:
        logger.info("Connected to MongoDB", extra={"database": DATABASE_NAME})
    _ever_connected = True
    return client


def get_mongodb_client() -> MongoClient | None:
    """Return a healthy client, or None when MongoDB is unavailable."""
    global _client, _gave_up

    if _client is not None:
        if _is_alive(_client):
            return _client
        logger.debug("Cached MongoDB client failed ping, reconnecting")
        _client = None

    if _gave_up:
        return None

    if not MONGO_URL:
        logger.error("MONGO_URL is not configured")
        _gave_up = True
        return None

    _client = _connect()
    return _client
