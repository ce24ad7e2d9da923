"""SQLAlchemy models for commtrack database."""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional
from sqlalchemy import Column, String, DateTime, Date, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class ExactDecimal(TypeDecorator):
    """Decimal stored as text.

    SQLite has no fixed-point type, and back-computed percentages carry more
    digits than a float keeps.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[str]:
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value)


class Transaction(Base):
    """Commission transaction model."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    transaction_type = Column(String, nullable=False)
    brokerage = Column(String, nullable=False)
    property_type = Column(String, nullable=False)
    client_type = Column(String, nullable=False)
    status = Column(String, nullable=False)
    source = Column(String, nullable=False, default="")
    address = Column(String, nullable=False, default="")
    city = Column(String, nullable=False, default="")
    referring_agent = Column(String, nullable=False, default="")
    list_date = Column(Date, nullable=True)
    closing_date = Column(Date, nullable=True)

    list_price = Column(ExactDecimal, nullable=False)
    closed_price = Column(ExactDecimal, nullable=False)
    commission_pct = Column(ExactDecimal, nullable=False)
    referral_pct = Column(ExactDecimal, nullable=False)
    referral_fee_received = Column(ExactDecimal, nullable=False)

    eo = Column(ExactDecimal, nullable=False)
    hoa_transfer = Column(ExactDecimal, nullable=False)
    home_warranty = Column(ExactDecimal, nullable=False)
    kw_cares = Column(ExactDecimal, nullable=False)
    kw_next_gen = Column(ExactDecimal, nullable=False)
    bold_scholarship = Column(ExactDecimal, nullable=False)
    tc_concierge = Column(ExactDecimal, nullable=False)
    jelmberg_team = Column(ExactDecimal, nullable=False)

    bdh_split_pct = Column(ExactDecimal, nullable=False)
    asf = Column(ExactDecimal, nullable=False)
    foundation10 = Column(ExactDecimal, nullable=False)
    admin_fee = Column(ExactDecimal, nullable=False)

    other_deductions = Column(ExactDecimal, nullable=False)
    buyers_agent_split = Column(ExactDecimal, nullable=False)
    assistant_bonus = Column(ExactDecimal, nullable=False)

    net_volume = Column(ExactDecimal, nullable=False)
    gci = Column(ExactDecimal, nullable=False)
    referral_dollar = Column(ExactDecimal, nullable=False)
    adjusted_gci = Column(ExactDecimal, nullable=False)
    royalty = Column(ExactDecimal, nullable=False)
    company_dollar = Column(ExactDecimal, nullable=False)
    pre_split_deduction = Column(ExactDecimal, nullable=False)
    total_brokerage_fees = Column(ExactDecimal, nullable=False)
    nci = Column(ExactDecimal, nullable=False)

    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
