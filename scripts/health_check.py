"""Health check script for all environments"""
import asyncio
import sys

import httpx

from app.core.config import get_settings


async def check_health():
    settings = get_settings()

    urls = {
        "local": "http://localhost:5000/health",
        "dev": "http://localhost:8000/health",
        "staging": "https://staging.social.example.com/health",
        "prod": "https://api.social.example.com/health",
    }

    env = settings.ENVIRONMENT.value
    url = urls.get(env)
    if not url:
        print(f"Unknown environment: {env}")
        return False

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(url)
            data = response.json()

            print(f"Environment: {env}")
            print(f"Status: {data['status']}")
            print("Services:")
            for service, status in data["services"].items():
                mark = "ok" if status else "FAIL"
                print(f"  [{mark}] {service}")
            print(f"Online users: {data.get('realtime', {}).get('active_users', 0)}")

            return data["status"] == "healthy"

    except httpx.HTTPError as e:
        print(f"Health check failed: {e}")
        return False


if __name__ == "__main__":
    sys.exit(0 if asyncio.run(check_health()) else 1)
