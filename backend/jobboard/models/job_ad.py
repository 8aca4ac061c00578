from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, Index

from jobboard.database import Base


class AdTier(str, Enum):
    """Sponsorship level purchased for a job ad"""
    BASIC = "BASIC"
    SPONSORED_BACKGROUND = "SPONSORED_BACKGROUND"
    PINNED_FOR_30_DAYS = "PINNED_FOR_30_DAYS"
    PINNED_FOR_7_DAYS = "PINNED_FOR_7_DAYS"
    WITH_COMPANY_LOGO = "WITH_COMPANY_LOGO"
    PINNED_FOR_60_DAYS = "PINNED_FOR_60_DAYS"


# Largest value the INTEGER primary key can hold
MAX_AD_ID = 2**31 - 1

# Served by the pinned query, never by organic search
PINNED_TIERS = frozenset({
    AdTier.SPONSORED_BACKGROUND,
    AdTier.PINNED_FOR_30_DAYS,
    AdTier.PINNED_FOR_7_DAYS,
})


class JobAd(Base):
    __tablename__ = "job_ads"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    
    # Public identifiers
    external_id = Column(String, nullable=False, unique=True)
    slug = Column(String, nullable=False, unique=True)
    
    # Ad content
    title = Column(String, nullable=False, default="")
    company = Column(String, nullable=False, default="")
    company_url = Column(String, nullable=True)
    company_email = Column(String, nullable=True)
    location = Column(String, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    how_to_apply = Column(Text, nullable=False, default="")
    perks = Column(Text, nullable=True)
    interview_process = Column(Text, nullable=True)
    
    # Compensation
    salary_min = Column(Integer, nullable=False, default=0)
    salary_max = Column(Integer, nullable=False, default=0)
    salary_currency = Column(String, nullable=False, default="$")
    salary_period = Column(String, nullable=False, default="year")
    
    # Lifecycle
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    approved_at = Column(DateTime, nullable=True)  # NULL = pending or disapproved
    expired = Column(Boolean, default=False, nullable=False)
    ad_tier = Column(String, nullable=False, default=AdTier.BASIC.value)
    
    # Recomputed by the clickout batch job
    last_week_clickouts = Column(Integer, nullable=False, default=0)
    
    __table_args__ = (
        Index('idx_job_ads_visibility', 'approved_at', 'expired'),
        Index('idx_job_ads_tier', 'ad_tier', 'approved_at'),
        Index('idx_job_ads_created_at', 'created_at'),
    )
