"""
Read-side helpers shared by the route-interest services.

Related rows are fetched with one keyed ``IN (...)`` query per table and
joined in memory by id.
"""

from typing import Any, Dict, Iterable, Optional

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.app.models.activity import Activity
from crm_backend.app.models.human import Human


def row_to_dict(obj) -> Dict[str, Any]:
    """Return the mapped column values of an ORM instance."""
    return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}


async def load_by_ids(db: AsyncSession, model, ids: Iterable[Optional[str]]) -> Dict[str, Any]:
    """
    Fetch rows of ``model`` whose primary key is in ``ids``.

    ``None`` entries are ignored; no query is issued when nothing is left.

    Returns:
        Mapping of id -> ORM instance (missing ids are simply absent)
    """
    wanted = {i for i in ids if i is not None}
    if not wanted:
        return {}

    result = await db.execute(select(model).where(model.id.in_(wanted)))
    return {row.id: row for row in result.scalars().all()}


def human_name(human: Optional[Human]) -> Optional[str]:
    return human.full_name if human else None


def activity_subject(activity: Optional[Activity]) -> Optional[str]:
    return activity.subject if activity else None
