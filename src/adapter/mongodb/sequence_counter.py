"""MongoDB implementation of SequenceCounter.

One document per counter name in the counters collection; every allocation
is a single atomic $inc on that document.
"""

from logging import getLogger

from pymongo import ReturnDocument
from pymongo.database import Database

from adapter.mongodb import COUNTERS_COLLECTION_NAME

logger = getLogger(__name__)


class MongoSequenceCounter:
    def __init__(self, db: Database):
        self.collection = db[COUNTERS_COLLECTION_NAME]

    def next_value(self, name: str) -> int:
        """Increment and return counter ``name``, creating it at 1 if absent.

        PyMongoError propagates: a failed allocation must fail the insert.
        """
        doc = self.collection.find_one_and_update(
            {'_id': name},
            {'$inc': {'seq': 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        logger.debug("Allocated sequence value", extra={"counter": name, "seq": doc['seq']})
        return doc['seq']
