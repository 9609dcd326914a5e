import asyncio

from netflim_api.core.config import settings
from netflim_api.db.store import Database


async def main():
    db = Database(settings.db_path)
    print("Using DB_PATH:", settings.db_path)
    await db.connect()
    await db.close()
    print("Tables and indexes ensured.")


if __name__ == "__main__":
    asyncio.run(main())
