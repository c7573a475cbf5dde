"""MongoDB index management.

Each MongoXxxRepository declares its indexes through create_index_safe();
ensure_all_indexes() runs them all once at application startup.
"""

from logging import getLogger

from pymongo.errors import PyMongoError

logger = getLogger(__name__)


def create_index_safe(collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing a conflicting one if necessary.

    A conflict is an existing index with the same name but different keys,
    or the same keys under a different name. The conflicting index is dropped
    and the requested one recreated.
    """
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise

    conflict = _find_conflict(collection, keys, name)
    if conflict is None:
        logger.error("Failed to resolve index conflict", extra={"index": name})
        return False

    logger.warning("Dropping conflicting index", extra={"index": conflict})
    collection.drop_index(conflict)
    collection.create_index(keys, name=name, **kwargs)
    logger.info("Recreated index", extra={"index": name})
    return True


def _find_conflict(collection, keys: list, name: str) -> str | None:
    wanted = dict(keys)
    for idx_name, idx_info in collection.index_information().items():
        if idx_name == '_id_':
            continue
        same_name = idx_name == name
        same_keys = dict(idx_info.get('key', [])) == wanted
        if same_name != same_keys:
            return idx_name
    return None


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.task_repository import MongoTaskRepository
    from adapter.mongodb.user_repository import MongoUserRepository

    results = [
        MongoUserRepository(db).ensure_indexes(),
        MongoTaskRepository(db).ensure_indexes(),
    ]
    return all(results)
