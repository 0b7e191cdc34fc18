from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from ..services.time_windows import TimeWindow


class Collection(str, Enum):
    PATIENTS = "patients"
    RECEIPTS = "receipts"
    PRESCRIPTIONS = "prescriptions"
    MEDICATIONS = "medications"


# Collections accepted by ``count_by``.
GROUPABLE_COLLECTIONS = frozenset({
    Collection.RECEIPTS,
    Collection.PRESCRIPTIONS,
    Collection.MEDICATIONS,
})


class AggregateSource(ABC):
    """Read-only aggregate queries over owner-scoped clinic records.

    Every query is filtered to rows whose owner matches ``owner_id``. When a
    ``window`` is given, only rows created inside it (both ends inclusive)
    are considered. Medication facts take their owner and timestamp from the
    parent prescription.
    """

    @abstractmethod
    def count(
        self,
        collection: Collection,
        owner_id: str,
        window: Optional[TimeWindow] = None,
        status: Optional[str] = None,
    ) -> int:
        pass

    @abstractmethod
    def sum_amount(
        self,
        owner_id: str,
        window: Optional[TimeWindow] = None,
        status: Optional[str] = None,
    ) -> Decimal:
        """Total receipt amount; ``Decimal("0")`` when nothing matches."""
        pass

    @abstractmethod
    def count_by(
        self,
        collection: Collection,
        owner_id: str,
        window: Optional[TimeWindow] = None,
    ) -> Dict[str, int]:
        """Row counts grouped by medication name (medications) or status (receipts, prescriptions)."""
        pass
