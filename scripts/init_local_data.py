"""Initialize local development data"""
import asyncio
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy import select

from app.core.database import get_db, init_db
from app.domains.auth import repository as users_repository
from app.domains.auth.models import User
from app.domains.friends import repository as friends_repository
from app.domains.groups import repository as groups_repository
from app.domains.posts import repository as posts_repository
from app.shared.utils.logger import get_logger
from app.shared.utils.security import get_password_hash

logger = get_logger(__name__)

DEFAULT_PASSWORD = "password123"

TEST_USERS = [
    {"name": "Alice Demo", "email": "alice@example.com"},
    {"name": "Bob Demo", "email": "bob@example.com"},
    {"name": "Carol Demo", "email": "carol@example.com"},
]


async def init_local_data():
    """Initialize test data for local development"""
    await init_db()

    async with get_db() as db:
        result = await db.execute(select(User.id).limit(1))
        if result.scalar_one_or_none():
            logger.info("Data already exists, skipping initialization")
            return

    logger.info("Initializing local development data...")
    users = []
    for data in TEST_USERS:
        users.append(
            await users_repository.create_user(
                {**data, "password_hash": get_password_hash(DEFAULT_PASSWORD)}
            )
        )
    alice, bob, carol = users

    request = await friends_repository.create_request(alice.id, bob.id, "Hi Bob!")
    await friends_repository.accept_request(request.id, bob.id)
    await friends_repository.create_request(carol.id, alice.id, None)

    group = await groups_repository.create_group(
        {"name": "Local Hikers", "description": "Weekend trails", "category": "sports"},
        alice.id,
    )
    await groups_repository.add_member(group.id, bob.id)

    await posts_repository.create_post(
        {
            "author_id": alice.id,
            "content": "Hello from the seed script",
            "images": [],
            "type": "text",
            "visibility": "public",
            "tags": ["welcome"],
        }
    )

    logger.info(f"Local data initialized; log in as {TEST_USERS[0]['email']} / {DEFAULT_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(init_local_data())
