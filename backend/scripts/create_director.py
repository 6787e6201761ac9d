#!/usr/bin/env python
"""Create the initial Director account."""

import asyncio
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from employee_api.config import get_settings
from employee_api.constants.validation import MIN_PASSWORD_LENGTH
from employee_api.exceptions import EmployeeAlreadyExistsError
from employee_api.services.seed_service import ensure_seed_director


async def create_director(document_number: int, email: str, password: str) -> bool:
    """Create a Director if the document number is free."""
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return False

    settings = get_settings()
    engine = create_async_engine(settings.async_database_url, echo=False)
    async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        async with async_session() as session:
            try:
                created = await ensure_seed_director(session, document_number, email, password)
            except EmployeeAlreadyExistsError:
                print(f"Email {email} is already used by another employee")
                return False
            if not created:
                print(f"Employee {document_number} already exists")
                return False
            await session.commit()
    finally:
        await engine.dispose()

    print(f"Director created: doc={document_number} email={email}")
    return True


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Create the initial Director")
    parser.add_argument("--document-number", type=int, required=True, help="Document number")
    parser.add_argument("--email", required=True, help="Email address")
    parser.add_argument("--password", required=True, help=f"Password (min {MIN_PASSWORD_LENGTH} chars)")
    args = parser.parse_args()

    ok = asyncio.run(create_director(args.document_number, args.email, args.password))
    sys.exit(0 if ok else 1)
