from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from clinic_analytics.database import Base
from clinic_analytics.errors import DataSourceError
from clinic_analytics.models.patient import Patient
from clinic_analytics.models.prescription import Prescription, PrescriptionMedication
from clinic_analytics.models.receipt import Receipt
from clinic_analytics.models.user import User
from clinic_analytics.providers import Collection, SqlAlchemySource
from clinic_analytics.services.time_windows import month_bounds


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'source.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def source(session_factory):
    return SqlAlchemySource(session_factory)


@pytest.fixture
def owners(session_factory):
    db = session_factory()
    a = User(email="a@clinic.com")
    b = User(email="b@clinic.com")
    db.add_all([a, b])
    db.flush()

    pa = Patient(user_id=a.id, name="Ana", created_at=datetime(2025, 10, 3))
    pb = Patient(user_id=b.id, name="Beto", created_at=datetime(2025, 10, 3))
    db.add_all([pa, pb])
    db.flush()

    db.add_all([
        Receipt(user_id=a.id, patient_id=pa.id, total_amount=Decimal("10.50"), status="paid",
                date=datetime(2025, 10, 1)),
        Receipt(user_id=a.id, patient_id=pa.id, total_amount=Decimal("20.25"), status="pending",
                date=datetime(2025, 10, 31, 23, 59, 59)),
        Receipt(user_id=a.id, patient_id=pa.id, total_amount=Decimal("99.00"), status="paid",
                date=datetime(2025, 11, 1)),
        Receipt(user_id=b.id, patient_id=pb.id, total_amount=Decimal("5.00"), status="paid",
                date=datetime(2025, 10, 5)),
    ])

    rx = Prescription(user_id=a.id, patient_id=pa.id, status="active", created_at=datetime(2025, 10, 2))
    rx.medications = [
        PrescriptionMedication(medication_name="Amoxicillin"),
        PrescriptionMedication(medication_name="Ibuprofen"),
    ]
    other = Prescription(user_id=b.id, patient_id=pb.id, status="active", created_at=datetime(2025, 10, 2))
    other.medications = [PrescriptionMedication(medication_name="Amoxicillin")]
    db.add_all([rx, other])
    db.commit()

    ids = (a.id, b.id)
    db.close()
    return ids


class TestSqlAlchemySource:
    def test_count_scoped_to_owner(self, source, owners):
        owner_a, owner_b = owners
        assert source.count(Collection.PATIENTS, owner_a) == 1
        assert source.count(Collection.RECEIPTS, owner_a) == 3
        assert source.count(Collection.RECEIPTS, owner_b) == 1

    def test_count_with_window_and_status(self, source, owners):
        owner_a, _ = owners
        october = month_bounds(2025, 10)
        assert source.count(Collection.RECEIPTS, owner_a, october) == 2
        assert source.count(Collection.RECEIPTS, owner_a, october, status="paid") == 1

    def test_sum_amount(self, source, owners):
        owner_a, _ = owners
        assert source.sum_amount(owner_a, month_bounds(2025, 10)) == Decimal("30.75")

    def test_sum_amount_empty_is_zero(self, source, owners):
        owner_a, _ = owners
        assert source.sum_amount(owner_a, month_bounds(2020, 1)) == Decimal("0")

    def test_medications_take_owner_from_prescription(self, source, owners):
        owner_a, owner_b = owners
        assert source.count(Collection.MEDICATIONS, owner_a) == 2
        assert source.count_by(Collection.MEDICATIONS, owner_a) == {"Amoxicillin": 1, "Ibuprofen": 1}
        assert source.count_by(Collection.MEDICATIONS, owner_b) == {"Amoxicillin": 1}

    def test_count_by_status(self, source, owners):
        owner_a, _ = owners
        assert source.count_by(Collection.RECEIPTS, owner_a) == {"paid": 2, "pending": 1}

    def test_patients_cannot_be_grouped(self, source, owners):
        with pytest.raises(ValueError):
            source.count_by(Collection.PATIENTS, owners[0])

    def test_database_error_becomes_data_source_error(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        source = SqlAlchemySource(sessionmaker(bind=engine))

        with pytest.raises(DataSourceError) as exc:
            source.count(Collection.PATIENTS, "anyone")
        assert exc.value.operation == "count:patients"
