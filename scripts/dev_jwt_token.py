# scripts/dev_jwt_token.py
"""Print a long-lived bearer token for a local user id (or the first user)."""
import asyncio
import sys
from datetime import timedelta
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy import select

from app.core.database import get_db
from app.domains.auth.models import User
from app.shared.utils.security import create_access_token


async def main(user_id=None):
    if user_id is None:
        async with get_db() as db:
            result = await db.execute(select(User.id).order_by(User.created_at).limit(1))
            user_id = result.scalar_one_or_none()
        if user_id is None:
            print("No users yet, run scripts/init_local_data.py first")
            return
    token = create_access_token({"sub": user_id}, timedelta(days=30))
    print(token)


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
