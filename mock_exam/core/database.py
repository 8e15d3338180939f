# mock_exam/core/database.py
import copy
import itertools
import logging
import threading
from typing import Any, Dict, List, Optional

import pymongo
from pymongo.errors import PyMongoError

from .config import config
from .models import AttemptState

logger = logging.getLogger(__name__)


class AttemptRepository:
    """Persistence boundary for exam attempts.

    Documents are plain dicts produced by ExamAttempt.to_document().
    complete_attempt must flip open -> submitted in one conditional write.
    """

    def insert_attempt(self, document: Dict[str, Any]) -> str:
        raise NotImplementedError

    def get_attempt(self, attempt_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def complete_attempt(self, attempt_id: str, owner: str, updates: Dict[str, Any]) -> bool:
        """Apply updates and mark submitted, only while still open. False if not open."""
        raise NotImplementedError

    def list_attempts(self, owner: str, limit: int) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def validate_connection(self) -> Dict[str, Any]:
        raise NotImplementedError

    def close(self):
        pass


class InMemoryAttemptRepository(AttemptRepository):
    """Thread-safe in-process store"""

    def __init__(self):
        self._attempts: Dict[str, Dict[str, Any]] = {}
        self._sequence: Dict[str, int] = {}
        self._counter = itertools.count()
        self._lock = threading.Lock()
        logger.info("🔧 Attempt repository in memory mode")

    def insert_attempt(self, document: Dict[str, Any]) -> str:
        attempt_id = document["attempt_id"]
        with self._lock:
            self._attempts[attempt_id] = copy.deepcopy(document)
            self._sequence[attempt_id] = next(self._counter)
        return attempt_id

    def get_attempt(self, attempt_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._attempts.get(attempt_id)
            return copy.deepcopy(document) if document else None

    def complete_attempt(self, attempt_id: str, owner: str, updates: Dict[str, Any]) -> bool:
        with self._lock:
            document = self._attempts.get(attempt_id)
            if not document or document["owner"] != owner:
                return False
            if document["state"] != AttemptState.OPEN.value:
                return False
            document.update(copy.deepcopy(updates))
            document["state"] = AttemptState.SUBMITTED.value
            return True

    def list_attempts(self, owner: str, limit: int) -> List[Dict[str, Any]]:
        with self._lock:
            owned = [doc for doc in self._attempts.values() if doc["owner"] == owner]
            owned.sort(
                key=lambda doc: (doc["created_at"], self._sequence[doc["attempt_id"]]),
                reverse=True,
            )
            return [copy.deepcopy(doc) for doc in owned[:limit]]

    def validate_connection(self) -> Dict[str, Any]:
        with self._lock:
            count = len(self._attempts)
        return {"overall": True, "mode": "memory", "attempts": count}


class MongoAttemptRepository(AttemptRepository):
    """MongoDB-backed store"""

    def __init__(self, connection_string: Optional[str] = None, db_name: Optional[str] = None,
                 collection_name: Optional[str] = None, client: Optional[pymongo.MongoClient] = None):
        logger.info("🔄 Initializing MongoDB attempt repository")

        try:
            self.mongo_client = client or pymongo.MongoClient(
                connection_string or config.MONGO_CONNECTION_STRING,
                serverSelectionTimeoutMS=5000,
                maxPoolSize=10,
                minPoolSize=1,
                maxIdleTimeMS=30000,
                waitQueueTimeoutMS=5000
            )
            self.db = self.mongo_client[db_name or config.MONGO_DB_NAME]
            self.collection = self.db[collection_name or config.ATTEMPTS_COLLECTION]
        except PyMongoError as e:
            logger.error(f"❌ MongoDB connection failed: {e}")
            raise

        # Create indexes for performance
        try:
            self.collection.create_index("attempt_id", unique=True)
            self.collection.create_index([("owner", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)])
            logger.info("✅ Database indexes created")
        except PyMongoError as idx_error:
            logger.warning(f"⚠️ Index creation failed: {idx_error}")

    def insert_attempt(self, document: Dict[str, Any]) -> str:
        # insert_one adds _id to the dict it is given
        self.collection.insert_one(dict(document))
        return document["attempt_id"]

    def get_attempt(self, attempt_id: str) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"attempt_id": attempt_id}, {"_id": 0})

    def complete_attempt(self, attempt_id: str, owner: str, updates: Dict[str, Any]) -> bool:
        fields = dict(updates)
        fields["state"] = AttemptState.SUBMITTED.value
        result = self.collection.find_one_and_update(
            {"attempt_id": attempt_id, "owner": owner, "state": AttemptState.OPEN.value},
            {"$set": fields},
            projection={"_id": 0, "attempt_id": 1},
        )
        return result is not None

    def list_attempts(self, owner: str, limit: int) -> List[Dict[str, Any]]:
        cursor = self.collection.find(
            {"owner": owner}, {"_id": 0}
        ).sort([("created_at", pymongo.DESCENDING), ("_id", pymongo.DESCENDING)]).limit(limit)
        return list(cursor)

    def validate_connection(self) -> Dict[str, Any]:
        status = {"overall": False, "mode": "mongodb"}
        try:
            self.mongo_client.admin.command("ping")
            status["overall"] = True
        except PyMongoError as e:
            logger.error(f"❌ MongoDB validation failed: {e}")
            status["error"] = str(e)
        return status

    def close(self):
        if self.mongo_client:
            self.mongo_client.close()
            logger.info("✅ Database connections closed")


# Singleton pattern for attempt repository
_attempt_repository = None


def get_attempt_repository() -> AttemptRepository:
    """Get attempt repository instance (singleton)"""
    global _attempt_repository
    if _attempt_repository is None:
        if config.USE_MEMORY_STORE:
            _attempt_repository = InMemoryAttemptRepository()
        else:
            _attempt_repository = MongoAttemptRepository()
    return _attempt_repository


def close_attempt_repository():
    """Close attempt repository instance"""
    global _attempt_repository
    if _attempt_repository:
        _attempt_repository.close()
        _attempt_repository = None
