"""Seed demo tools, reviewers and reviews into the database.

Creates a small directory of tools whose reviews land in each verdict band
(keep, try, stop and one tool with no reviews), then calculates every verdict
so the dashboard has something to show.

Usage:
    DATABASE_URL="postgresql+asyncpg://..." python -m fixtures.seed_fixtures

The script is idempotent — running it multiple times is safe. If the seed
tools already exist, the script prints "Already seeded" and exits.
"""
import asyncio
import sys

from sqlalchemy import select

from breaktool.database import async_session_factory
from breaktool.models.review import Review, ReviewType
from breaktool.models.tool import Tool
from breaktool.models.user import User, UserRole
from breaktool.repositories import SqlReviewRepository, SqlVerdictRepository
from breaktool.services.verdict_engine import VerdictEngine

SEED_USERS = [
    {"email": "admin@breaktool.dev", "name": "Avery Admin", "role": UserRole.admin, "is_verified_tester": False},
    {"email": "tester1@breaktool.dev", "name": "Tess Tester", "role": UserRole.verified_tester, "is_verified_tester": True},
    {"email": "tester2@breaktool.dev", "name": "Theo Tester", "role": UserRole.verified_tester, "is_verified_tester": True},
    {"email": "community1@breaktool.dev", "name": "Casey", "role": UserRole.community, "is_verified_tester": False},
    {"email": "community2@breaktool.dev", "name": "Jordan", "role": UserRole.community, "is_verified_tester": False},
    {"email": "community3@breaktool.dev", "name": "Riley", "role": UserRole.community, "is_verified_tester": False},
]

# (slug, name, description, [(reviewer email, rating, helpful, total, content)])
SEED_TOOLS = [
    (
        "flowdesk",
        "FlowDesk",
        "Shared inbox and ticketing for small support teams.",
        [
            ("admin@breaktool.dev", 5.0, 8, 9, "Rolled it out to three teams; onboarding took an afternoon and the automations replaced two other subscriptions."),
            ("tester1@breaktool.dev", 4.5, 5, 6, "Structured test over two weeks: SLA timers, macros and the API all behaved as documented."),
            ("community1@breaktool.dev", 4.8, 3, 3, "Fast, clean UI."),
            ("community2@breaktool.dev", 4.6, 1, 2, "Solid value for the price."),
        ],
    ),
    (
        "metricly",
        "Metricly",
        "Product analytics with a generous free tier.",
        [
            ("tester2@breaktool.dev", 3.5, 2, 4, "Event ingestion works but the funnel builder is limited and exports are CSV only."),
            ("community1@breaktool.dev", 4.0, 0, 0, "Good enough for early stage."),
            ("community3@breaktool.dev", 3.0, 1, 3, "Dashboards are slow with more than a few million events."),
        ],
    ),
    (
        "shipfast-crm",
        "ShipFast CRM",
        "Lightweight CRM for founders.",
        [
            ("community2@breaktool.dev", 2.0, 4, 5, "Lost contact data during an import and support never answered."),
            ("community3@breaktool.dev", 1.5, 2, 2, "Buggy sync with Gmail."),
        ],
    ),
    ("quietnotes", "QuietNotes", "Distraction-free meeting notes.", []),
]


async def seed() -> None:
    """Insert seed users, tools and reviews, then calculate verdicts."""
    async with async_session_factory() as session:
        existing = await session.execute(select(Tool).where(Tool.slug == SEED_TOOLS[0][0]))
        if existing.scalar_one_or_none() is not None:
            print("Already seeded")
            sys.exit(0)

        users = {}
        for entry in SEED_USERS:
            user = User(
                email=entry["email"],
                name=entry["name"],
                role=entry["role"].value,
                is_verified_tester=entry["is_verified_tester"],
            )
            session.add(user)
            users[entry["email"]] = user

        tools = []
        for slug, name, description, reviews in SEED_TOOLS:
            tool = Tool(slug=slug, name=name, description=description)
            session.add(tool)
            tools.append(tool)
            for email, rating, helpful, total, content in reviews:
                reviewer = users[email]
                if reviewer.role == UserRole.admin.value:
                    review_type = ReviewType.admin
                elif reviewer.is_verified_tester:
                    review_type = ReviewType.verified_tester
                else:
                    review_type = ReviewType.community
                session.add(
                    Review(
                        tool=tool,
                        user=reviewer,
                        review_type=review_type.value,
                        rating=rating,
                        content=content,
                        helpful_votes=helpful,
                        total_votes=total,
                    )
                )

        await session.commit()

        engine = VerdictEngine(
            reviews=SqlReviewRepository(session),
            verdicts=SqlVerdictRepository(session),
        )
        for tool in tools:
            verdict = await engine.calculate_tool_verdict(tool.id)
            print(f"{tool.slug}: {verdict.verdict} ({verdict.confidence}%)")

    print(f"Seeded {len(SEED_USERS)} users and {len(SEED_TOOLS)} tools")


if __name__ == "__main__":
    asyncio.run(seed())
