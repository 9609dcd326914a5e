import asyncio
import sys

from sqlalchemy import inspect

from netflim_api.core.config import settings
from netflim_api.db.store import Database


def dump(conn, table: str):
    insp = inspect(conn)
    print(f"== {table}")
    for idx in insp.get_indexes(table):
        unique = " unique" if idx.get("unique") else ""
        print(f"  {idx['name']}{unique}: {', '.join(idx['column_names'])}")
    for uq in insp.get_unique_constraints(table):
        print(f"  {uq['name'] or '(unnamed)'} unique: "
              f"{', '.join(uq['column_names'])}")


async def main(tables: list[str]):
    db = Database(settings.db_path)
    await db.connect()
    try:
        async with db.engine.connect() as conn:
            for table in tables:
                await conn.run_sync(dump, table)
    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:] or ["users", "movies", "likes"]))
