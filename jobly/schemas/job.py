from decimal import Decimal
from typing import Optional
from pydantic import Field, field_validator

from jobly.schemas.base import CamelModel, StrictCamelModel, reject_null


class JobCreateRequest(StrictCamelModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25)


class JobUpdateRequest(StrictCamelModel):
    """Schema for a partial job update. A job cannot move to another company."""
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)

    @field_validator("title")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class JobSummary(CamelModel):
    """Job as listed under its company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None


class JobResponse(JobSummary):
    """Schema for job response"""
    company_handle: str
