from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from app.domain.entities.resource import RESOURCE_TYPE_NAMES
from app.infrastructure.db.models import ResourceRow, ResourceTypeRow

logger = logging.getLogger(__name__)


def seed_resources(
    session_factory: sessionmaker[Session],
    resources_per_type: int | dict[int, int] = 4,
) -> int:
    """
    Create the fixed resource types and a pool of resources per type.

    Idempotent: types are upserted by id and resources are only added to
    types that have none yet. Returns the number of resources created.
    """
    if isinstance(resources_per_type, int):
        counts = {type_id: resources_per_type for type_id in RESOURCE_TYPE_NAMES}
    else:
        counts = dict(resources_per_type)

    created = 0
    with session_factory() as session:
        for type_id, name in RESOURCE_TYPE_NAMES.items():
            row = session.get(ResourceTypeRow, type_id)
            if row is None:
                session.add(ResourceTypeRow(id=type_id, name=name))
        session.flush()

        for type_id, count in counts.items():
            existing = session.scalar(
                select(func.count(ResourceRow.id)).where(ResourceRow.resource_type_id == type_id)
            )
            if existing:
                continue
            name = RESOURCE_TYPE_NAMES.get(type_id, "resource")
            label = name[:1].upper() + name[1:]
            for n in range(1, count + 1):
                session.add(ResourceRow(resource_type_id=type_id, name=f"{label} {n}", is_bookable=True))
                created += 1
        session.commit()

    if created:
        logger.info("Seeded resources", extra={"resources_created": created})
    return created
