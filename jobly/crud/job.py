"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs, providing a clean interface for the API layer.
"""

import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy.orm import Session

from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.crud import company as company_crud
from jobly.helpers.sql import SqlOperator, bind_positional, sql_for_filtering, sql_for_partial_update
from jobly.models.job import Job
from jobly.schemas.job import JobCreateRequest, JobUpdateRequest

logger = logging.getLogger(__name__)

# Filter keys accepted from the query string, with their column and operator
FILTER_COLUMNS = {"t": "title", "smin": "salary", "eq": "equity"}
FILTER_OPERATORS = {"t": SqlOperator.ILIKE, "smin": SqlOperator.GE, "eq": SqlOperator.GT}

# Job field names match their columns
UPDATE_COLUMNS: Dict[str, str] = {}


def create(db: Session, job_data: JobCreateRequest) -> Job:
    """
    Create a new job. Duplicate openings are allowed.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        Created Job instance with id

    Raises:
        NotFoundError: If the company handle does not exist
    """
    if not company_crud.get_by_handle(db, job_data.company_handle):
        raise NotFoundError(f"No company: {job_data.company_handle}")

    db_job = Job(
        title=job_data.title,
        salary=job_data.salary,
        equity=job_data.equity,
        company_handle=job_data.company_handle,
    )

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    logger.info(f"Created job {db_job.id}: {db_job.title} at {db_job.company_handle}")
    return db_job


def get_by_id(db: Session, job_id: int):
    return db.query(Job).filter(Job.id == job_id).first()


def find_all(db: Session) -> List[Job]:
    """All jobs, ordered by title."""
    return db.query(Job).order_by(Job.title, Job.id).all()


def filter(db: Session, data: Mapping[str, Any]) -> List[Job]:
    """
    Find jobs matching the given criteria.

    data can include { t, smin, eq }; other keys are ignored.
    - t: case-insensitive substring of the title
    - smin: minimum salary
    - eq: "true" keeps only jobs with non-zero equity, "false" does not filter

    Raises:
        BadRequestError: If smin is not a non-negative integer or eq is not true/false
        NotFoundError: If no job matches
    """
    criteria: Dict[str, Any] = {}
    if data.get("t"):
        criteria["t"] = data["t"]

    if data.get("smin") not in (None, ""):
        try:
            criteria["smin"] = int(data["smin"])
        except (TypeError, ValueError):
            raise BadRequestError("smin must be an integer")
        if criteria["smin"] < 0:
            raise BadRequestError("smin must be non-negative")

    if data.get("eq") not in (None, ""):
        has_equity = str(data["eq"]).lower()
        if has_equity not in ("true", "false"):
            raise BadRequestError("eq must be true or false")
        if has_equity == "true":
            criteria["eq"] = 0

    col_names = {key: col for key, col in FILTER_COLUMNS.items() if key in criteria}
    where, values = sql_for_filtering(col_names, criteria, FILTER_OPERATORS, strict=True)

    sql = "SELECT * FROM jobs"
    if where:
        sql += f" WHERE {where}"
    sql += " ORDER BY title, id"

    stmt, params = bind_positional(sql, values, db.get_bind().dialect.name)
    jobs = db.query(Job).from_statement(stmt).params(params).all()

    if not jobs:
        raise NotFoundError("No jobs found matching criteria")
    return jobs


def get(db: Session, job_id: int) -> Job:
    """
    Raises:
        NotFoundError: If no such job
    """
    job = get_by_id(db, job_id)
    if not job:
        raise NotFoundError(f"No job: {job_id}")
    return job


def update(db: Session, job_id: int, job_data: JobUpdateRequest) -> Job:
    """
    Partial update: only the fields present in job_data change.

    Raises:
        EmptyPayloadError: If job_data has no fields
        NotFoundError: If no such job
    """
    data = job_data.model_dump(exclude_unset=True, by_alias=True, mode="json")
    set_cols, values = sql_for_partial_update(data, UPDATE_COLUMNS)
    id_idx = len(values) + 1

    sql = f"UPDATE jobs SET {set_cols} WHERE id = ${id_idx}"
    stmt, params = bind_positional(sql, [*values, job_id], db.get_bind().dialect.name)
    result = db.execute(stmt, params)
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"No job with id of {job_id}")

    db.commit()
    logger.info(f"Updated job {job_id}: {', '.join(data)}")
    return get(db, job_id)


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job and its applications.

    Raises:
        NotFoundError: If no such job
    """
    job = get(db, job_id)
    db.delete(job)
    db.commit()
    logger.info(f"Deleted job {job_id}")
