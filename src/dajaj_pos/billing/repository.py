"""MongoDB repository for bills and the bill number counter."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..errors import BillAllocationError, BillPersistenceError, BillRetrievalError
from ..utils.config import Config
from ..utils.logging import get_logger

logger = get_logger(__name__)

BILL_COUNTER_ID = "bills"
# Concurrent first-time upserts of the counter can race on _id.
_COUNTER_UPSERT_RETRIES = 3


class BillStore(Protocol):
    """What the issuance protocol and bill viewer need from a store."""

    def ensure_indexes(self) -> None: ...

    def next_bill_sequence(self) -> int: ...

    def token_exists(self, token: str) -> bool: ...

    def insert_bill(self, document: Dict[str, Any]) -> datetime: ...

    def find_bill_by_number(self, bill_no: str) -> Optional[Dict[str, Any]]: ...

    def find_bill_by_token(self, token: str) -> Optional[Dict[str, Any]]: ...

    def find_bills_created_between(self, start: datetime, end: datetime) -> List[Dict[str, Any]]: ...


class BillRepository:
    """Bill store backed by MongoDB.

    The counter lives in ``counters/{_id: "bills"}`` as ``{"current": n}``;
    bills are documents in the bills collection keyed by ``billNo``.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        db_name: Optional[str] = None,
        bills_collection: Optional[str] = None,
        counters_collection: Optional[str] = None,
        config: Optional[Config] = None,
    ) -> None:
        config = config or Config(".env")
        self._url = url or config.get("mongo_url")
        self._db = db_name or config.get("mongo_db")
        self._bills = bills_collection or config.get("bills_collection")
        self._counters = counters_collection or config.get("counters_collection")
        if not self._url:
            raise ValueError("DB_CONNECTION_URL is required")
        self._client: Optional[MongoClient] = None

    def __enter__(self) -> "BillRepository":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    def connect(self) -> None:
        if self._client is None:
            self._client = MongoClient(self._url, serverSelectionTimeoutMS=5000, tz_aware=True)

    def disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _collection(self, name: str):
        if self._client is None:
            self.connect()
        return self._client[self._db][name]

    def ensure_indexes(self) -> None:
        bills = self._collection(self._bills)
        bills.create_index([("billNo", ASCENDING)], unique=True)
        bills.create_index([("publicToken", ASCENDING)], unique=True)
        bills.create_index([("createdAt", ASCENDING)])

    def next_bill_sequence(self) -> int:
        """Atomically increment the bill counter and return the new value.

        A missing counter document counts as 0, so the first call returns 1.
        """
        counters = self._collection(self._counters)
        for attempt in range(1, _COUNTER_UPSERT_RETRIES + 1):
            try:
                doc = counters.find_one_and_update(
                    {"_id": BILL_COUNTER_ID},
                    {"$inc": {"current": 1}},
                    upsert=True,
                    return_document=ReturnDocument.AFTER,
                )
                return int(doc["current"])
            except DuplicateKeyError:
                logger.warning(f"Bill counter upsert collided, retrying (attempt {attempt})")
            except PyMongoError as e:
                raise BillAllocationError(f"Could not allocate bill number: {e}") from e
        raise BillAllocationError("Could not allocate bill number: counter upsert kept colliding")

    def token_exists(self, token: str) -> bool:
        try:
            return self._collection(self._bills).count_documents({"publicToken": token}, limit=1) > 0
        except PyMongoError as e:
            raise BillAllocationError(f"Could not check public token: {e}") from e

    def insert_bill(self, document: Dict[str, Any]) -> datetime:
        """
        Insert a new bill; an existing billNo or publicToken is rejected.

        The creation timestamp is assigned here, never by the caller.

        Args:
            document: Bill document without ``createdAt``

        Returns:
            The assigned creation time
        """
        created_at = datetime.now(timezone.utc)
        payload = {k: v for k, v in document.items() if k != "createdAt"}
        payload["createdAt"] = created_at
        try:
            self._collection(self._bills).insert_one(payload)
        except DuplicateKeyError as e:
            raise BillPersistenceError(f"Bill {payload['billNo']} already exists") from e
        except PyMongoError as e:
            raise BillPersistenceError(f"Could not save bill {payload['billNo']}: {e}") from e
        return created_at

    def find_bill_by_number(self, bill_no: str) -> Optional[Dict[str, Any]]:
        try:
            return self._collection(self._bills).find_one({"billNo": bill_no}, {"_id": 0})
        except PyMongoError as e:
            raise BillRetrievalError(f"Could not load bill {bill_no}: {e}") from e

    def find_bill_by_token(self, token: str) -> Optional[Dict[str, Any]]:
        try:
            return self._collection(self._bills).find_one({"publicToken": token}, {"_id": 0})
        except PyMongoError as e:
            raise BillRetrievalError(f"Could not load bill by token: {e}") from e

    def find_bills_created_between(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        """Bills created in the inclusive window, newest first."""
        try:
            cursor = self._collection(self._bills).find(
                {"createdAt": {"$gte": start, "$lte": end}}, {"_id": 0}
            ).sort("createdAt", -1)
            return list(cursor)
        except PyMongoError as e:
            raise BillRetrievalError(f"Could not load bill history: {e}") from e
