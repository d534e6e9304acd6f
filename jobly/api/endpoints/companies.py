import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin
from jobly.crud import company as company_crud
from jobly.schemas.company import (
    CompanyCreateRequest,
    CompanyDetailResponse,
    CompanyResponse,
    CompanyUpdateRequest,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=CompanyResponse,
    dependencies=[Depends(ensure_admin)],
)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a company.

    Authorization required: admin
    """
    return company_crud.create(db, request)


@router.get("/", response_model=List[CompanyResponse])
def list_companies(
    name: Optional[str] = None,
    emin: Optional[str] = None,
    emax: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List companies, optionally filtered.

    Args:
        name: Case-insensitive substring of the company name
        emin: Minimum number of employees
        emax: Maximum number of employees

    Filtering returns 404 when nothing matches; an unfiltered list may be empty.
    """
    filters = {"name": name, "emin": emin, "emax": emax}
    if any(value not in (None, "") for value in filters.values()):
        return company_crud.filter(db, filters)

    return company_crud.find_all(db)


@router.get("/{handle}", response_model=CompanyDetailResponse)
def get_company(handle: str, db: Session = Depends(get_db)):
    """Retrieve a company and the jobs it has posted."""
    return company_crud.get(db, handle)


@router.patch("/{handle}", response_model=CompanyResponse, dependencies=[Depends(ensure_admin)])
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Partially update a company: name, description, numEmployees, logoUrl.

    Authorization required: admin
    """
    return company_crud.update(db, handle, request)


@router.delete("/{handle}", dependencies=[Depends(ensure_admin)])
def delete_company(handle: str, db: Session = Depends(get_db)):
    """
    Delete a company and all its jobs.

    Authorization required: admin
    """
    company_crud.remove(db, handle)
    return {"deleted": handle}
