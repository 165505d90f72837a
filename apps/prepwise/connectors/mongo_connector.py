"""MongoDB connection holder."""

from __future__ import annotations

from typing import Any, ContextManager, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from prepwise.core.settings import settings


class MongoConnector(ContextManager["MongoConnector"]):
    """Lazily create a `MongoClient` and hand out the configured database."""

    def __init__(
        self,
        uri: Optional[str] = None,
        *,
        database: Optional[str] = None,
        client: Optional[MongoClient] = None,
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        self._uri = uri or settings.mongo_uri
        self._database_name = (database or settings.mongo_database).strip()
        self._client = client
        self._timeout_ms = server_selection_timeout_ms

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            self._client = MongoClient(self._uri, serverSelectionTimeoutMS=self._timeout_ms)
        return self._client

    @property
    def database(self) -> Database:
        return self.client[self._database_name]

    def get_collection(self, name: str) -> Collection:
        return self.database.get_collection(name.strip())

    def ping(self) -> bool:
        self.client.admin.command("ping")
        return True

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "MongoConnector":
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()
