import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin
from jobly.crud import job as job_crud
from jobly.schemas.job import JobCreateRequest, JobResponse, JobUpdateRequest

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=JobResponse,
    dependencies=[Depends(ensure_admin)],
)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a job posting for an existing company.

    Authorization required: admin
    """
    return job_crud.create(db, request)


@router.get("/", response_model=List[JobResponse])
def list_jobs(
    t: Optional[str] = None,
    smin: Optional[str] = None,
    eq: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List jobs, optionally filtered.

    Args:
        t: Case-insensitive substring of the job title
        smin: Minimum salary
        eq: "true" to list only jobs offering equity
    """
    filters = {"t": t, "smin": smin, "eq": eq}
    if any(value not in (None, "") for value in filters.values()):
        return job_crud.filter(db, filters)

    return job_crud.find_all(db)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job by ID."""
    return job_crud.get(db, job_id)


@router.patch("/{job_id}", response_model=JobResponse, dependencies=[Depends(ensure_admin)])
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Partially update a job: title, salary, equity.

    Authorization required: admin
    """
    return job_crud.update(db, job_id, request)


@router.delete("/{job_id}", dependencies=[Depends(ensure_admin)])
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """
    Delete a job by ID.

    Authorization required: admin
    """
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
