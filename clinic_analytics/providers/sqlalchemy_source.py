import logging
from decimal import Decimal
from typing import Callable, Dict, Optional, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..errors import DataSourceError
from ..models.patient import Patient
from ..models.prescription import Prescription, PrescriptionMedication
from ..models.receipt import Receipt
from ..services.time_windows import TimeWindow
from .base import AggregateSource, Collection, GROUPABLE_COLLECTIONS

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlAlchemySource(AggregateSource):
    """Aggregate source backed by the clinic ORM tables.

    Each query runs in its own short-lived session, so concurrent
    aggregations from one request never share a session.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _run(self, operation: str, query: Callable[[Session], T]) -> T:
        try:
            with self.session_factory() as session:
                return query(session)
        except SQLAlchemyError as e:
            logger.error(f"Aggregate query failed: operation={operation} error={e}")
            raise DataSourceError(f"Aggregate query '{operation}' failed", operation=operation) from e

    @staticmethod
    def _scoped(query, collection: Collection, owner_id: str, window: Optional[TimeWindow], status: Optional[str]):
        if collection == Collection.PATIENTS:
            owner_col, created_col, status_col = Patient.user_id, Patient.created_at, None
        elif collection == Collection.RECEIPTS:
            owner_col, created_col, status_col = Receipt.user_id, Receipt.date, Receipt.status
        elif collection == Collection.PRESCRIPTIONS:
            owner_col, created_col, status_col = Prescription.user_id, Prescription.created_at, Prescription.status
        else:
            query = query.select_from(PrescriptionMedication).join(
                Prescription, PrescriptionMedication.prescription_id == Prescription.id
            )
            owner_col, created_col, status_col = Prescription.user_id, Prescription.created_at, Prescription.status

        query = query.filter(owner_col == owner_id)
        if window is not None:
            query = query.filter(created_col.between(window.start, window.end))
        if status is not None:
            if status_col is None:
                raise ValueError(f"Collection {collection.value} has no status")
            query = query.filter(status_col == status)
        return query

    @staticmethod
    def _id_column(collection: Collection):
        return {
            Collection.PATIENTS: Patient.id,
            Collection.RECEIPTS: Receipt.id,
            Collection.PRESCRIPTIONS: Prescription.id,
            Collection.MEDICATIONS: PrescriptionMedication.id,
        }[collection]

    def count(
        self,
        collection: Collection,
        owner_id: str,
        window: Optional[TimeWindow] = None,
        status: Optional[str] = None,
    ) -> int:
        def query(session: Session) -> int:
            q = session.query(func.count(self._id_column(collection)))
            q = self._scoped(q, collection, owner_id, window, status)
            return q.scalar() or 0

        return self._run(f"count:{collection.value}", query)

    def sum_amount(
        self,
        owner_id: str,
        window: Optional[TimeWindow] = None,
        status: Optional[str] = None,
    ) -> Decimal:
        def query(session: Session) -> Decimal:
            q = session.query(func.sum(Receipt.total_amount))
            q = self._scoped(q, Collection.RECEIPTS, owner_id, window, status)
            total = q.scalar()
            if total is None:
                return Decimal("0")
            return Decimal(str(total))

        return self._run("sum:receipts", query)

    def count_by(
        self,
        collection: Collection,
        owner_id: str,
        window: Optional[TimeWindow] = None,
    ) -> Dict[str, int]:
        if collection not in GROUPABLE_COLLECTIONS:
            raise ValueError(f"Collection {collection.value} cannot be grouped")

        group_col = {
            Collection.RECEIPTS: Receipt.status,
            Collection.PRESCRIPTIONS: Prescription.status,
            Collection.MEDICATIONS: PrescriptionMedication.medication_name,
        }[collection]

        def query(session: Session) -> Dict[str, int]:
            q = session.query(group_col, func.count(self._id_column(collection)))
            q = self._scoped(q, collection, owner_id, window, None)
            rows = q.group_by(group_col).all()
            return {str(key): int(count) for key, count in rows}

        return self._run(f"count_by:{collection.value}", query)
