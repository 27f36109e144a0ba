import asyncio

from shared.config import settings
from shared.db import Database

import services.user_management.models
import services.section_management.models


async def reset_db():
    database = Database(settings.database_url)
    await database.connect()
    try:
        await database.drop_all()
        await database.create_all()
    finally:
        await database.close()


if __name__ == "__main__":
    asyncio.run(reset_db())
