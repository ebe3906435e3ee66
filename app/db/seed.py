# app/db/seed.py
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.team import Team
from app.models.user import User
from app.schemas.enums import UserRole

logger = logging.getLogger(__name__)

# Fixed timestamp so repeated seeding always produces identical rows.
SEED_CREATED_AT = datetime(2026, 1, 1, tzinfo=timezone.utc)

SAMPLE_TEAM = {"id": 1, "name": "Product Engineering"}

SAMPLE_USERS = [
    {"id": 1, "name": "Alice Johnson", "email": "alice.johnson@company.com", "role": UserRole.LEAD},
    {"id": 2, "name": "Bob Smith", "email": "bob.smith@company.com", "role": UserRole.MEMBER},
    {"id": 3, "name": "Carol White", "email": "carol.white@company.com", "role": UserRole.MEMBER},
    {"id": 4, "name": "David Brown", "email": "david.brown@company.com", "role": UserRole.MEMBER},
    {"id": 5, "name": "Eve Davis", "email": "eve.davis@company.com", "role": UserRole.MEMBER},
]


async def seed_sample_data(db: AsyncSession) -> int:
    """
    Insert the sample team and its members if they are not present yet.

    Idempotent: rows are matched by primary key and never overwritten.

    Returns
    -------
    int
        Number of rows inserted during this call.
    """
    inserted = 0

    team = await db.get(Team, SAMPLE_TEAM["id"])
    if team is None:
        db.add(Team(id=SAMPLE_TEAM["id"], name=SAMPLE_TEAM["name"], created_at=SEED_CREATED_AT))
        inserted += 1
        # Users reference the team, so it must exist before they are flushed.
        await db.flush()

    existing_ids_result = await db.execute(
        select(User.id).where(User.id.in_([u["id"] for u in SAMPLE_USERS]))
    )
    existing_ids = set(existing_ids_result.scalars().all())

    for sample in SAMPLE_USERS:
        if sample["id"] in existing_ids:
            continue
        db.add(
            User(
                id=sample["id"],
                name=sample["name"],
                email=sample["email"],
                role=sample["role"].value,
                team_id=SAMPLE_TEAM["id"],
                created_at=SEED_CREATED_AT,
            )
        )
        inserted += 1

    await db.commit()

    if inserted:
        logger.info("Seeded %d sample row(s)", inserted)
    return inserted
