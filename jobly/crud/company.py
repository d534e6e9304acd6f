"""
CRUD operations for Company model.
"""

import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.helpers.sql import SqlOperator, bind_positional, sql_for_filtering, sql_for_partial_update
from jobly.models.company import Company
from jobly.schemas.company import CompanyCreateRequest, CompanyUpdateRequest

logger = logging.getLogger(__name__)

# Filter keys accepted from the query string, with their column and operator
FILTER_COLUMNS = {"name": "name", "emin": "num_employees", "emax": "num_employees"}
FILTER_OPERATORS = {"name": SqlOperator.ILIKE, "emin": SqlOperator.GE, "emax": SqlOperator.LE}

UPDATE_COLUMNS = {"numEmployees": "num_employees", "logoUrl": "logo_url"}


def create(db: Session, company_data: CompanyCreateRequest) -> Company:
    """
    Create a new company.

    Raises:
        BadRequestError: If the handle or name is already taken
    """
    if get_by_handle(db, company_data.handle):
        raise BadRequestError(f"Duplicate company: {company_data.handle}")

    db_company = Company(**company_data.model_dump())
    db.add(db_company)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError(f"Duplicate company name: {company_data.name}")
    db.refresh(db_company)

    logger.info(f"Created company {db_company.handle}")
    return db_company


def get_by_handle(db: Session, handle: str):
    return db.query(Company).filter(Company.handle == handle).first()


def find_all(db: Session) -> List[Company]:
    """All companies, ordered by name."""
    return db.query(Company).order_by(Company.name).all()


def _parse_employee_count(key: str, value: Any) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise BadRequestError(f"{key} must be an integer")
    if count < 0:
        raise BadRequestError(f"{key} must be non-negative")
    return count


def filter(db: Session, data: Mapping[str, Any]) -> List[Company]:
    """
    Find companies matching the given criteria.

    data can include { name, emin, emax }; other keys are ignored.
    name matches case-insensitively anywhere in the company name, emin and
    emax bound num_employees inclusively.

    Raises:
        BadRequestError: If emin/emax is not a non-negative integer or emin > emax
        NotFoundError: If no company matches
    """
    criteria: Dict[str, Any] = {}
    if data.get("name"):
        criteria["name"] = data["name"]
    for key in ("emin", "emax"):
        if data.get(key) not in (None, ""):
            criteria[key] = _parse_employee_count(key, data[key])

    if "emin" in criteria and "emax" in criteria and criteria["emin"] > criteria["emax"]:
        raise BadRequestError("emin cannot be greater than emax")

    col_names = {key: col for key, col in FILTER_COLUMNS.items() if key in criteria}
    where, values = sql_for_filtering(col_names, criteria, FILTER_OPERATORS, strict=True)

    sql = "SELECT * FROM companies"
    if where:
        sql += f" WHERE {where}"
    sql += " ORDER BY name"

    stmt, params = bind_positional(sql, values, db.get_bind().dialect.name)
    companies = db.query(Company).from_statement(stmt).params(params).all()

    if not companies:
        raise NotFoundError("No companies found matching criteria")
    return companies


def get(db: Session, handle: str) -> Company:
    """
    Company by handle, with its jobs.

    Raises:
        NotFoundError: If no such company
    """
    company = get_by_handle(db, handle)
    if not company:
        raise NotFoundError(f"No company: {handle}")
    return company


def update(db: Session, handle: str, company_data: CompanyUpdateRequest) -> Company:
    """
    Partial update: only the fields present in company_data change.

    Raises:
        EmptyPayloadError: If company_data has no fields
        NotFoundError: If no such company
    """
    data = company_data.model_dump(exclude_unset=True, by_alias=True, mode="json")
    set_cols, values = sql_for_partial_update(data, UPDATE_COLUMNS)
    handle_idx = len(values) + 1

    sql = f"UPDATE companies SET {set_cols} WHERE handle = ${handle_idx}"
    stmt, params = bind_positional(sql, [*values, handle], db.get_bind().dialect.name)
    try:
        result = db.execute(stmt, params)
    except IntegrityError:
        db.rollback()
        raise BadRequestError("Update conflicts with an existing company")
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return get(db, handle)


def remove(db: Session, handle: str) -> None:
    """
    Delete a company and its jobs.

    Raises:
        NotFoundError: If no such company
    """
    company = get(db, handle)
    db.delete(company)
    db.commit()
    logger.info(f"Deleted company {handle}")
