"""Consultant identity resolver.

Best effort: fills `name` and `email` independently from, in order, the
authenticated user, the deal's creator and the user re-read by id. A source
is only consulted while a field is still missing. Database errors are
logged and the next source is tried; the resolver itself never raises.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from uptown_docs.db import queries
from uptown_docs.schemas.documents import AuthUser, Consultant

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


async def resolve_consultant(db: AsyncSession, user: AuthUser, deal_id: int | None = None) -> Consultant:
    """Resolve the consultant shown in document headers."""
    name = _clean(user.name)
    email = _clean(user.email)

    if (name is None or email is None) and deal_id is not None:
        try:
            found = await queries.get_consultant_via_deal(db, deal_id)
        except SQLAlchemyError:
            logger.warning("Consultant lookup via deal %s failed", deal_id, exc_info=True)
            found = None
        if found is not None:
            name = name or _clean(found[0])
            email = email or _clean(found[1])

    if name is None or email is None:
        try:
            found = await queries.get_user_identity(db, user.user_id)
        except SQLAlchemyError:
            logger.warning("Consultant lookup for user %s failed", user.user_id, exc_info=True)
            found = None
        if found is not None:
            name = name or _clean(found[0])
            email = email or _clean(found[1])

    return Consultant(name=name, email=email)
