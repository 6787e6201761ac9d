"""Seeding of the initial Director account."""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.config import get_settings
from employee_api.models.domain.employee import EmployeeRole, Gender
from employee_api.repositories.employee_repository import EmployeeRepository
from employee_api.security.password import get_password_service

logger = logging.getLogger(__name__)

SEED_FIRST_NAME = "Admin"
SEED_LAST_NAME = "Admin"
SEED_BIRTH_DATE = date(1995, 2, 10)
SEED_PHONES = [11999999999, 11888888888]


async def ensure_seed_director(
    session: AsyncSession,
    document_number: int | None = None,
    email: str | None = None,
    password: str | None = None,
) -> bool:
    """Create the initial Director unless its document number is taken.

    Values not given are read from settings.

    Args:
        session: Database session (not committed here)
        document_number: Director document number
        email: Director email
        password: Director plain text password

    Returns:
        True if the Director was created, False if it already existed

    Raises:
        ValueError: If no password is available
    """
    settings = get_settings()
    document_number = document_number or settings.seed_admin_document_number
    email = email or settings.seed_admin_email
    password = password or settings.seed_admin_password
    if not password:
        raise ValueError("A password is required to seed the initial Director")

    repo = EmployeeRepository(session)
    if await repo.document_number_exists(document_number):
        logger.info(f"Seed skipped: Director already exists (doc={document_number})")
        return False

    logger.info("Seeding initial Director...")
    await repo.create_employee(
        document_number=document_number,
        first_name=SEED_FIRST_NAME,
        last_name=SEED_LAST_NAME,
        email=email,
        birth_date=SEED_BIRTH_DATE,
        gender=Gender.FEMALE,
        role=EmployeeRole.DIRECTOR,
        password_hash=get_password_service().hash_password(password),
        phones=SEED_PHONES,
    )
    logger.info(f"Seed completed: Director created (doc={document_number})")
    return True
