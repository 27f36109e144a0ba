# create_db.py
import asyncio

from shared.config import settings
from shared.db import Database

# Import all models here so they are registered with SQLAlchemy's metadata
import services.user_management.models
import services.section_management.models


async def init_models():
    database = Database(settings.database_url)
    await database.connect()
    try:
        print("🔧 Creating tables...")
        await database.create_all()
        print("✅ Tables created.")
    finally:
        await database.close()


if __name__ == "__main__":
    asyncio.run(init_models())
