from .user import User
from .patient import Patient
from .receipt import Receipt, ReceiptStatus
from .prescription import Prescription, PrescriptionMedication, PrescriptionStatus

__all__ = [
    "User",
    "Patient",
    "Receipt",
    "ReceiptStatus",
    "Prescription",
    "PrescriptionMedication",
    "PrescriptionStatus",
]
