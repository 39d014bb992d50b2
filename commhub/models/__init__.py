"""Database models."""

from .base import Base
from .profile import Profile, UserRole, UserStatus
from .ticket import Ticket, TicketStatus, TicketPriority
from .crm import Contact, ContactStatus, Deal, DealStage
from .appointment import Appointment, AppointmentType, AppointmentStatus

__all__ = [
    "Base",
    "Profile",
    "UserRole",
    "UserStatus",
    "Ticket",
    "TicketStatus",
    "TicketPriority",
    "Contact",
    "ContactStatus",
    "Deal",
    "DealStage",
    "Appointment",
    "AppointmentType",
    "AppointmentStatus",
]
