"""
CRUD operations for job applications.
"""

import logging

from sqlalchemy.orm import Session

from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.crud import job as job_crud
from jobly.crud import user as user_crud
from jobly.models.application import Application

logger = logging.getLogger(__name__)


def get(db: Session, username: str, job_id: int):
    return db.query(Application).filter(
        Application.username == username,
        Application.job_id == job_id
    ).first()


def create(db: Session, username: str, job_id: int) -> int:
    """
    Record that a user applied to a job.

    Returns:
        The job id applied to

    Raises:
        NotFoundError: If the user or job does not exist
        BadRequestError: If the user already applied to this job
    """
    user_crud.get(db, username)
    job_crud.get(db, job_id)

    if get(db, username, job_id):
        raise BadRequestError(f"Duplicate application: {username} - {job_id}")

    db.add(Application(username=username, job_id=job_id))
    db.commit()

    logger.info(f"{username} applied to job {job_id}")
    return job_id


def remove(db: Session, username: str, job_id: int) -> None:
    """
    Withdraw an application.

    Raises:
        NotFoundError: If there is no such application
    """
    application = get(db, username, job_id)
    if not application:
        raise NotFoundError(f"Application not found: {username} - {job_id}")

    db.delete(application)
    db.commit()
    logger.info(f"{username} withdrew application to job {job_id}")
