"""Job ad Pydantic schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from jobboard.models.job_ad import AdTier
from jobboard.services.ad_lifecycle import AdStatus


class JobAdBase(BaseModel):
    """Base schema with common job ad fields."""
    title: str
    company: str
    location: str = ""
    description: str = ""
    how_to_apply: str = ""
    perks: Optional[str] = None
    interview_process: Optional[str] = None
    company_url: Optional[str] = None
    salary_min: int = 0
    salary_max: int = 0
    salary_currency: str = "$"
    salary_period: str = "year"


class JobAdCreate(JobAdBase):
    """Schema for submitting a new draft ad."""
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    salary_min: int = Field(default=0, ge=0)
    salary_max: int = Field(default=0, ge=0)
    company_email: Optional[str] = None
    ad_tier: AdTier = AdTier.BASIC

    @model_validator(mode="after")
    def check_salary_range(self):
        if self.salary_max < self.salary_min:
            raise ValueError("salary_max must be greater than or equal to salary_min")
        return self


class JobAdResponse(JobAdBase):
    """
    Public view of a job ad.

    Carries the obfuscated token instead of the internal id.
    """
    token: str
    slug: str
    ad_tier: AdTier
    created_at: datetime
    approved_at: Optional[datetime] = None
    last_week_clickouts: int = 0

    model_config = ConfigDict(from_attributes=True)


class JobAdConfirmationResponse(JobAdResponse):
    """
    Job ad as returned to its submitter and to payment confirmations.

    Adds the external id, which stays off public listings.
    """
    external_id: str


class JobAdAdminResponse(JobAdConfirmationResponse):
    """Moderation view of a job ad."""
    status: AdStatus
    expired: bool
    company_email: Optional[str] = None


class SearchResponse(BaseModel):
    """One page of the public listing."""
    ads: list[JobAdResponse]
    pinned: list[JobAdResponse]
    total_count: int
    page: int
    page_size: int
    pages: list[int]
    fallback: bool


class DemoteRequest(BaseModel):
    """Schema for a manual demotion run."""
    cutoff: datetime
    tier: AdTier


class DemoteResponse(BaseModel):
    tier: AdTier
    affected: int


class DemoteSweepResponse(BaseModel):
    demoted: dict[AdTier, int]
