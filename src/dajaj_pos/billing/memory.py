"""In-process bill store with the same contract as BillRepository.

Used by the test-suite and for offline demos; all state is lost with the
process.
"""

from __future__ import annotations

import copy
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from ..errors import BillPersistenceError


class InMemoryBillRepository:
    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._lock = threading.Lock()
        self._counter = 0
        self._bills: List[Dict[str, Any]] = []
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def __enter__(self) -> "InMemoryBillRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        pass

    @property
    def counter(self) -> int:
        return self._counter

    def ensure_indexes(self) -> None:
        pass

    def next_bill_sequence(self) -> int:
        with self._lock:
            self._counter += 1
            return self._counter

    def token_exists(self, token: str) -> bool:
        with self._lock:
            return any(doc["publicToken"] == token for doc in self._bills)

    def insert_bill(self, document: Dict[str, Any]) -> datetime:
        with self._lock:
            if any(doc["billNo"] == document["billNo"] for doc in self._bills):
                raise BillPersistenceError(f"Bill {document['billNo']} already exists")
            if any(doc["publicToken"] == document["publicToken"] for doc in self._bills):
                raise BillPersistenceError(f"Public token for {document['billNo']} already in use")
            stored = copy.deepcopy(document)
            stored["createdAt"] = self._clock()
            self._bills.append(stored)
            return stored["createdAt"]

    def find_bill_by_number(self, bill_no: str) -> Optional[Dict[str, Any]]:
        return self._find_one(lambda doc: doc["billNo"] == bill_no)

    def find_bill_by_token(self, token: str) -> Optional[Dict[str, Any]]:
        return self._find_one(lambda doc: doc["publicToken"] == token)

    def find_bills_created_between(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        with self._lock:
            found = [copy.deepcopy(doc) for doc in self._bills if start <= doc["createdAt"] <= end]
        found.sort(key=lambda doc: doc["createdAt"], reverse=True)
        return found

    def _find_one(self, predicate: Callable[[Dict[str, Any]], bool]) -> Optional[Dict[str, Any]]:
        with self._lock:
            for doc in self._bills:
                if predicate(doc):
                    return copy.deepcopy(doc)
        return None
