"""Culture Repository — loads the configured cultures as SupportedCulture descriptors.

Invariants:
    - Returned in declared order: priority first, then code
    - Unsupported cultures are returned too; select_clone_cultures filters them out
    - Read-only: never writes, commits or closes the caller's session
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from cultureview.core.domain_types import SupportedCulture
from cultureview.models.culture import CultureRecord

_CULTURES_QUERY = select(CultureRecord).order_by(
    CultureRecord.priority, CultureRecord.code,
)


def to_supported_culture(record: CultureRecord) -> SupportedCulture:
    return SupportedCulture(
        code=record.code,
        is_default=record.is_default,
        is_supported=record.is_supported,
        alias=record.alias,
        full_name=record.full_name,
        icon=record.icon,
    )


def load_supported_cultures(session: Session) -> list[SupportedCulture]:
    result = session.execute(_CULTURES_QUERY)
    return [to_supported_culture(r) for r in result.scalars().all()]


async def load_supported_cultures_async(session: AsyncSession) -> list[SupportedCulture]:
    result = await session.execute(_CULTURES_QUERY)
    return [to_supported_culture(r) for r in result.scalars().all()]
