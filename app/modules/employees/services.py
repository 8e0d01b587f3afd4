from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List
import logging

from app.modules.employees.models import Employee

logger = logging.getLogger(__name__)

DEFAULT_EMPLOYEES = [
    {"name": "Mr. Rahim Ahmed", "role": "Manager", "email": "rahim@efportal.com"},
    {"name": "Ms. Jahanara Khatun", "role": "Customer Support", "email": "jahanara@efportal.com"},
    {"name": "Mr. Shakil Hossain", "role": "Loan Officer", "email": "shakil@efportal.com"},
]


class EmployeeService:
    """Staff directory"""

    @staticmethod
    async def list_employees(db: AsyncSession) -> List[Employee]:
        result = await db.execute(select(Employee).order_by(Employee.id))
        return list(result.scalars().all())

    @staticmethod
    async def seed_defaults(db: AsyncSession) -> int:
        """Insert the default staff when the directory is empty; returns rows added"""
        count = await db.scalar(select(func.count()).select_from(Employee))
        if count:
            return 0

        db.add_all([Employee(**data) for data in DEFAULT_EMPLOYEES])
        await db.commit()

        logger.info(f"Seeded {len(DEFAULT_EMPLOYEES)} employees")
        return len(DEFAULT_EMPLOYEES)
