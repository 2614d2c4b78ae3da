# init_db.py
import asyncio

from quickslot.db.sql import engine, init_db


async def init_models():
    # drops every table first
    await init_db(drop=True)
    await engine.dispose()
    print("Database schema recreated successfully!")


if __name__ == "__main__":
    asyncio.run(init_models())
