import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base


class PrescriptionStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    COMPLETED = "completed"


class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=PrescriptionStatus.DRAFT.value)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    user = relationship("User", back_populates="prescriptions")
    patient = relationship("Patient", back_populates="prescriptions")
    medications = relationship(
        "PrescriptionMedication",
        back_populates="prescription",
        cascade="all, delete-orphan",
    )


class PrescriptionMedication(Base):
    __tablename__ = "prescription_medications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    prescription_id = Column(
        String(36), ForeignKey("prescriptions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    medication_name = Column(String(255), nullable=False)
    dosage = Column(String(255), nullable=False, default="")
    frequency = Column(String(255), nullable=False, default="")
    duration = Column(String(255), nullable=False, default="")

    prescription = relationship("Prescription", back_populates="medications")
