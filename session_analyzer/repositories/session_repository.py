"""
Session Repository for reading educational session ratings from MongoDB.

This repository owns the connection to the ``sessions`` collection and runs
aggregation pipelines against it. The driver manages its own connection
pool; one repository instance is shared by all requests.
"""
import logging
from typing import Any, Dict, List, Optional

from bson.errors import BSONError
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from session_analyzer.config import MONGODB_COLLECTION, MONGODB_DATABASE, MONGODB_URI
from session_analyzer.exceptions import DataStoreError, NotInitializedError

logger = logging.getLogger("session_analyzer")

# Errors raised by the driver for a rejected or failed command
DRIVER_ERRORS = (PyMongoError, BSONError)


class SessionRepository:
    """
    Repository for session documents.

    Collection Schema:
    - topicCode, type, domain, class, cohorts, instructor, sessionDate
    - ratings: overallAverage (1-5), totalResponses, studentsAttended, ...
    - metadata: sourceSheet, sheetRowNumber, lastSyncedAt
    - createdAt, updatedAt
    """

    def __init__(
        self,
        uri: Optional[str] = MONGODB_URI,
        database_name: str = MONGODB_DATABASE,
        collection_name: str = MONGODB_COLLECTION,
    ):
        self.uri = uri
        self.database_name = database_name
        self.collection_name = collection_name
        self.client = None
        self.db = None
        self.collection = None
        self.is_connected = False

    async def connect(self) -> None:
        """
        Open the client and verify the collection is reachable.

        Calling connect() on a connected repository does nothing.

        Raises:
            DataStoreError: URI missing or the server could not be reached
        """
        if self.is_connected:
            return

        if not self.uri:
            raise DataStoreError("Database connection failed: MONGODB_URI is not configured")

        try:
            self.client = AsyncMongoClient(self.uri)
            self.db = self.client[self.database_name]
            self.collection = self.db[self.collection_name]
            self.is_connected = True
            logger.info(f"✅ Connected to MongoDB database '{self.database_name}'")

            await self.test_connection()
        except DataStoreError:
            await self._reset()
            raise
        except DRIVER_ERRORS as e:
            await self._reset()
            logger.error(f"❌ MongoDB connection failed: {e}")
            raise DataStoreError(f"Database connection failed: {e}") from e

    async def _reset(self) -> None:
        if self.client is not None:
            await self.client.close()
        self.client = None
        self.db = None
        self.collection = None
        self.is_connected = False

    def _ensure_connected(self) -> None:
        if not self.is_connected or self.collection is None:
            raise NotInitializedError("SessionRepository")

    async def test_connection(self) -> int:
        """Count the documents in the collection and log the figure."""
        self._ensure_connected()
        try:
            count = await self.collection.count_documents({})
        except DRIVER_ERRORS as e:
            raise DataStoreError(f"Database test failed: {e}") from e

        logger.info(f"📊 Database contains {count} session records")
        return count

    async def count(self) -> int:
        self._ensure_connected()
        try:
            return await self.collection.count_documents({})
        except DRIVER_ERRORS as e:
            raise DataStoreError(f"Failed to count documents: {e}") from e

    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Run an aggregation pipeline and return the complete result set.

        Raises:
            NotInitializedError: called before connect()
            DataStoreError: the server rejected or failed the pipeline
        """
        self._ensure_connected()
        try:
            cursor = await self.collection.aggregate(pipeline)
            return await cursor.to_list()
        except DRIVER_ERRORS as e:
            raise DataStoreError(str(e), {"pipeline_stages": len(pipeline)}) from e

    async def sample(self, limit: int = 3) -> List[Dict[str, Any]]:
        self._ensure_connected()
        try:
            cursor = self.collection.find({}).limit(limit)
            return await cursor.to_list()
        except DRIVER_ERRORS as e:
            raise DataStoreError(f"Failed to get sample data: {e}") from e

    async def collection_stats(self) -> Dict[str, Any]:
        """Return size figures for the sessions collection."""
        self._ensure_connected()
        try:
            stats = await self.db.command({"collStats": self.collection_name})
        except DRIVER_ERRORS as e:
            raise DataStoreError(f"Failed to get collection stats: {e}") from e

        return {
            "documentCount": stats.get("count"),
            "avgDocumentSize": stats.get("avgObjSize"),
            "totalSize": stats.get("size"),
            "storageSize": stats.get("storageSize"),
        }

    async def disconnect(self) -> None:
        if self.client is None:
            return
        try:
            await self.client.close()
            logger.info("✅ MongoDB disconnected")
        except DRIVER_ERRORS as e:
            logger.error(f"❌ Error disconnecting from MongoDB: {e}")
        finally:
            self.client = None
            self.db = None
            self.collection = None
            self.is_connected = False
