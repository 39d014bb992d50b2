"""Unit tests for database models."""

import pytest
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from commhub.models import (
    Base, Profile, UserRole, Ticket, TicketStatus,
    Contact, Deal, DealStage, Appointment, AppointmentStatus
)
from tests.factories import utc


@pytest.fixture(scope="function")
def db_session():
    """Create test database session."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()

    yield session

    session.close()
    Base.metadata.drop_all(engine)


@pytest.fixture
def owner(db_session):
    profile = Profile(email="owner@example.com", name="Owner", role=UserRole.AGENT.value)
    db_session.add(profile)
    db_session.commit()
    return profile


class TestProfileModel:
    """Test Profile model."""

    def test_defaults(self, db_session):
        profile = Profile(email="new@example.com", name="New")
        db_session.add(profile)
        db_session.commit()

        assert len(profile.id) == 36
        assert profile.role == "user"
        assert profile.status == "offline"
        assert profile.created_at is not None


class TestTicketModel:
    """Test Ticket model."""

    def test_customer_and_assignee_relationships(self, db_session, owner):
        customer = Profile(email="customer@example.com", name="Customer")
        db_session.add(customer)
        db_session.commit()

        ticket = Ticket(subject="Printer on fire", customer_id=customer.id, assigned_to=owner.id)
        db_session.add(ticket)
        db_session.commit()

        assert ticket.status == TicketStatus.OPEN.value
        assert ticket.priority == "medium"
        assert ticket.tags == []
        assert ticket.customer.name == "Customer"
        assert ticket.assignee.name == "Owner"

    def test_unassigned(self, db_session, owner):
        ticket = Ticket(subject="Question", customer_id=owner.id)
        db_session.add(ticket)
        db_session.commit()

        assert ticket.assigned_to is None
        assert ticket.assignee is None


class TestDealModel:
    """Test Contact and Deal models."""

    def test_deal_belongs_to_contact(self, db_session, owner):
        contact = Contact(name="Dana", email="dana@acme.test", company="Acme", created_by=owner.id)
        db_session.add(contact)
        db_session.commit()

        deal = Deal(title="Renewal", value=Decimal("1500.00"), stage=DealStage.CLOSED_WON.value,
                    contact_id=contact.id, created_by=owner.id)
        db_session.add(deal)
        db_session.commit()

        assert deal.contact.company == "Acme"
        assert contact.deals == [deal]
        assert deal.value == Decimal("1500.00")


class TestAppointmentModel:
    """Test Appointment model."""

    def test_defaults(self, db_session, owner):
        appointment = Appointment(title="Kickoff", start_time=utc(2025, 1, 8, 15),
                                  end_time=utc(2025, 1, 8, 16), created_by=owner.id)
        db_session.add(appointment)
        db_session.commit()

        assert appointment.status == AppointmentStatus.SCHEDULED.value
        assert appointment.type == "meeting"
        assert appointment.meeting_link is None
