"""
Contact repository for database operations.
"""

from typing import List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.repositories.base_repository import BaseRepository
from app.models.contact import Contact, Address
from app.schemas.common import PaginationInfo, SortField, SortInfo
from app.schemas.contact import ContactSearchCriteria

# Sort key -> ordered columns. Name is the compound display name.
_SORT_COLUMNS = {
    SortField.NAME: (Contact.first_name, Contact.last_name),
    SortField.EMAIL: (Contact.email,),
    SortField.COMPANY_NAME: (Contact.company_name,),
    SortField.JOB_TITLE: (Contact.job_title,),
    SortField.CREATED_ON: (Contact.created_on,),
    SortField.DATE_OF_BIRTH: (Contact.date_of_birth,),
}


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


class ContactRepository(BaseRepository[Contact]):
    """Repository for contact operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Contact, session)

    def _base_query(self):
        """Base query with eager loading of owned records."""
        return select(Contact).options(
            selectinload(Contact.home_address),
            selectinload(Contact.emergency_contacts),
        )

    async def get(self, id: int) -> Optional[Contact]:
        """Get contact by ID with address and emergency contacts loaded."""
        query = (
            self._base_query()
            .where(Contact.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def search(
        self,
        criteria: ContactSearchCriteria,
        pagination: PaginationInfo,
        sort: SortInfo,
    ) -> Tuple[List[Contact], int]:
        """
        Filter, count, page and sort contacts.

        Returns the page of contacts and the number of contacts matching the
        filters before paging.
        """
        conditions = self._filter_conditions(criteria)

        total = await self.count_matching(conditions)

        query = select(Contact).options(selectinload(Contact.home_address)).where(*conditions)
        query = query.offset(pagination.skip).limit(pagination.page_size)
        query = query.order_by(*self._sort_clauses(sort))

        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def count_matching(self, conditions) -> int:
        """Count contacts matching the given filter conditions."""
        result = await self.session.execute(
            select(func.count(Contact.id)).where(*conditions)
        )
        return result.scalar() or 0

    def _filter_conditions(self, criteria: ContactSearchCriteria) -> list:
        conditions = []

        if _present(criteria.email):
            conditions.append(Contact.email.icontains(criteria.email, autoescape=True))

        if _present(criteria.name):
            conditions.append(
                or_(
                    Contact.first_name.icontains(criteria.name, autoescape=True),
                    Contact.last_name.icontains(criteria.name, autoescape=True),
                )
            )

        for value, column in (
            (criteria.city, Address.city),
            (criteria.state, Address.state),
            (criteria.country, Address.country),
        ):
            if _present(value):
                conditions.append(Contact.home_address.has(column.icontains(value, autoescape=True)))

        if _present(criteria.company):
            conditions.append(Contact.company_name.icontains(criteria.company, autoescape=True))

        if _present(criteria.job_title):
            conditions.append(Contact.job_title.icontains(criteria.job_title, autoescape=True))

        return conditions

    def _sort_clauses(self, sort: SortInfo) -> list:
        columns = _SORT_COLUMNS[SortField(sort.sort_by)]
        if sort.is_ascending:
            clauses = [column.asc() for column in columns]
        else:
            clauses = [column.desc() for column in columns]
        # Stable ordering across pages
        clauses.append(Contact.id.asc())
        return clauses
