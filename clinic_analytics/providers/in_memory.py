import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from threading import Lock
from typing import Dict, Iterable, List, Optional, Tuple

from ..services.time_windows import TimeWindow
from .base import AggregateSource, Collection, GROUPABLE_COLLECTIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatientFact:
    owner_id: str
    created_at: datetime


@dataclass(frozen=True)
class ReceiptFact:
    owner_id: str
    amount: Decimal
    status: str
    created_at: datetime


@dataclass(frozen=True)
class PrescriptionFact:
    owner_id: str
    status: str
    created_at: datetime
    medications: Tuple[str, ...] = field(default_factory=tuple)


class InMemorySource(AggregateSource):
    """Aggregate source over plain fact records held in memory.

    Used for local simulation and for exercising the aggregators without a
    database. Facts are appended under a lock and every query reads a
    snapshot, so concurrent queries are safe.
    """

    def __init__(self):
        self._patients: List[PatientFact] = []
        self._receipts: List[ReceiptFact] = []
        self._prescriptions: List[PrescriptionFact] = []
        self._lock = Lock()
        self.query_count = 0

    def add_patient(self, owner_id: str, created_at: datetime) -> PatientFact:
        fact = PatientFact(owner_id=owner_id, created_at=created_at)
        with self._lock:
            self._patients.append(fact)
        return fact

    def add_receipt(self, owner_id: str, amount, created_at: datetime, status: str = "pending") -> ReceiptFact:
        fact = ReceiptFact(owner_id=owner_id, amount=Decimal(str(amount)), status=status, created_at=created_at)
        with self._lock:
            self._receipts.append(fact)
        return fact

    def add_prescription(
        self,
        owner_id: str,
        created_at: datetime,
        medications: Iterable[str] = (),
        status: str = "active",
    ) -> PrescriptionFact:
        fact = PrescriptionFact(
            owner_id=owner_id,
            status=status,
            created_at=created_at,
            medications=tuple(medications),
        )
        with self._lock:
            self._prescriptions.append(fact)
        return fact

    def reset(self) -> None:
        with self._lock:
            self._patients.clear()
            self._receipts.clear()
            self._prescriptions.clear()
            self.query_count = 0
        logger.info("In-memory aggregate source reset")

    def _rows(self, collection: Collection, owner_id: str, window: Optional[TimeWindow], status: Optional[str]) -> list:
        with self._lock:
            self.query_count += 1
            if collection == Collection.PATIENTS:
                if status is not None:
                    raise ValueError(f"Collection {collection.value} has no status")
                rows = list(self._patients)
            elif collection == Collection.RECEIPTS:
                rows = list(self._receipts)
            else:
                rows = list(self._prescriptions)

        rows = [r for r in rows if r.owner_id == owner_id]
        if window is not None:
            rows = [r for r in rows if window.contains(r.created_at)]
        if status is not None:
            rows = [r for r in rows if r.status == status]
        return rows

    def count(
        self,
        collection: Collection,
        owner_id: str,
        window: Optional[TimeWindow] = None,
        status: Optional[str] = None,
    ) -> int:
        rows = self._rows(collection, owner_id, window, status)
        if collection == Collection.MEDICATIONS:
            return sum(len(r.medications) for r in rows)
        return len(rows)

    def sum_amount(
        self,
        owner_id: str,
        window: Optional[TimeWindow] = None,
        status: Optional[str] = None,
    ) -> Decimal:
        rows = self._rows(Collection.RECEIPTS, owner_id, window, status)
        return sum((r.amount for r in rows), Decimal("0"))

    def count_by(
        self,
        collection: Collection,
        owner_id: str,
        window: Optional[TimeWindow] = None,
    ) -> Dict[str, int]:
        if collection not in GROUPABLE_COLLECTIONS:
            raise ValueError(f"Collection {collection.value} cannot be grouped")

        rows = self._rows(collection, owner_id, window, None)
        if collection == Collection.MEDICATIONS:
            return dict(Counter(name for r in rows for name in r.medications))
        return dict(Counter(r.status for r in rows))
