"""
Decision Hub SQLAlchemy Models.

Uses compatibility types for SQLite (dev) + PostgreSQL (prod).
Access rules that used to live in row-level-security policies are enforced
in the service layer (owner / team member checks).
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from decisionhub.db.compat import GUID, JSONType, utcnow
from decisionhub.db.engine import Base


def _genuuid():
    return uuid.uuid4()


# ──────────────────────────────────────────────────────────────────────────────
# 1. Users & Entitlements
# ──────────────────────────────────────────────────────────────────────────────


class Profile(Base):
    """Directory entry used to resolve teammates by email."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    user_id: Mapped[uuid.UUID] = mapped_column(GUID(), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(255))
    company_name: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class UserRole(Base):
    """Entitlement tier: free / pro / premium. One row per user."""

    __tablename__ = "user_roles"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    user_id: Mapped[uuid.UUID] = mapped_column(GUID(), unique=True, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="free")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Subscription(Base):
    """Local mirror of the payment provider's subscription object."""

    __tablename__ = "subscriptions"
    __table_args__ = (
        Index("ix_subscriptions_customer", "stripe_customer_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    user_id: Mapped[uuid.UUID] = mapped_column(GUID(), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="inactive")
    stripe_customer_id: Mapped[Optional[str]] = mapped_column(String(100))
    stripe_subscription_id: Mapped[Optional[str]] = mapped_column(String(100))
    stripe_price_id: Mapped[Optional[str]] = mapped_column(String(100))
    current_period_start: Mapped[Optional[datetime]] = mapped_column(DateTime)
    current_period_end: Mapped[Optional[datetime]] = mapped_column(DateTime)
    cancel_at_period_end: Mapped[bool] = mapped_column(Boolean, default=False)
    trial_end: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class StripeProduct(Base):
    """Provisioned product/price identifiers per plan."""

    __tablename__ = "stripe_products"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    plan_name: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    stripe_product_id: Mapped[Optional[str]] = mapped_column(String(100))
    stripe_price_id: Mapped[Optional[str]] = mapped_column(String(100))
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    interval: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


# ──────────────────────────────────────────────────────────────────────────────
# 2. Decision Cases and AI Output
# ──────────────────────────────────────────────────────────────────────────────


class DecisionCase(Base):
    __tablename__ = "decision_cases"
    __table_args__ = (
        Index("ix_decision_cases_user_created", "user_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    user_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    objectives: Mapped[Optional[str]] = mapped_column(Text)
    constraints: Mapped[Optional[str]] = mapped_column(Text)
    context: Mapped[Optional[str]] = mapped_column(Text)
    risks: Mapped[Optional[str]] = mapped_column(Text)
    additional_text: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class Analysis(Base):
    """AI decision analysis. Append-only; latest by created_at wins."""

    __tablename__ = "decision_analyses"
    __table_args__ = (
        Index("ix_decision_analyses_case_created", "case_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    case_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("decision_cases.id"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    summary: Mapped[Optional[str]] = mapped_column(Text)
    key_arguments: Mapped[Optional[dict]] = mapped_column(JSONType())
    decision_paths: Mapped[Optional[list]] = mapped_column(JSONType())
    effects_tradeoffs: Mapped[Optional[dict]] = mapped_column(JSONType())
    probability_reasoning: Mapped[Optional[str]] = mapped_column(Text)
    blind_spots: Mapped[Optional[list]] = mapped_column(JSONType())
    recommended_path: Mapped[Optional[str]] = mapped_column(Text)
    follow_up_questions: Mapped[Optional[list]] = mapped_column(JSONType())
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Simulation(Base):
    """AI risk simulation. Append-only; latest by created_at wins."""

    __tablename__ = "risk_simulations"
    __table_args__ = (
        Index("ix_risk_simulations_case_created", "case_id", "created_at"),
        Index("ix_risk_simulations_user_created", "user_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    case_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("decision_cases.id"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    expected_value: Mapped[Optional[dict]] = mapped_column(JSONType())
    best_case: Mapped[Optional[dict]] = mapped_column(JSONType())
    worst_case: Mapped[Optional[dict]] = mapped_column(JSONType())
    simulation_results: Mapped[Optional[dict]] = mapped_column(JSONType())
    probability_data: Mapped[Optional[list]] = mapped_column(JSONType())
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Revision(Base):
    """
    Immutable audit entry for a case.

    NO UPDATE, NO DELETE. One row is appended after every analysis,
    simulation, creation, edit and status change.
    """

    __tablename__ = "decision_revisions"
    __table_args__ = (
        Index("ix_decision_revisions_case", "case_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    case_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("decision_cases.id"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    revision_type: Mapped[str] = mapped_column(String(50), nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text)
    metadata_: Mapped[Optional[dict]] = mapped_column("metadata", JSONType(), default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


# ──────────────────────────────────────────────────────────────────────────────
# 3. Team Collaboration
# ──────────────────────────────────────────────────────────────────────────────


class TeamInvitation(Base):
    __tablename__ = "team_invitations"
    __table_args__ = (
        Index("ix_team_invitations_case", "case_id"),
        Index("ix_team_invitations_email", "invitee_email"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    case_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("decision_cases.id"), nullable=False)
    inviter_user_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    invitee_email: Mapped[str] = mapped_column(String(255), nullable=False)
    invitee_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(GUID())
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="viewer")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    accepted_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class TeamMember(Base):
    """Case membership. ``user_id`` is the inviter, ``invited_user_id`` the member."""

    __tablename__ = "team_members"
    __table_args__ = (
        Index("ix_team_members_case", "case_id"),
        Index("ix_team_members_invited", "invited_user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    case_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("decision_cases.id"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    invited_user_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="viewer")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Notification(Base):
    __tablename__ = "team_notifications"
    __table_args__ = (
        Index("ix_team_notifications_user", "user_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    user_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[Optional[str]] = mapped_column(String(500))
    metadata_: Mapped[Optional[dict]] = mapped_column("metadata", JSONType(), default=dict)
    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class CaseAccessLog(Base):
    """Append-only record of who joined or touched a case."""

    __tablename__ = "case_access_logs"
    __table_args__ = (
        Index("ix_case_access_logs_case", "case_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=_genuuid)
    user_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    case_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("decision_cases.id"), nullable=False)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    metadata_: Mapped[Optional[dict]] = mapped_column("metadata", JSONType(), default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
