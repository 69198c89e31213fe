"""MongoDB connection handle."""

from typing import Optional

from beanie import init_beanie
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient

from wellness.core.logging import logger


class Database:
    """
    MongoDB client handle scoped to the application lifespan.

    One instance is created at startup, stored on ``app.state`` and handed
    to request handlers through ``get_database``.
    """

    def __init__(self, url: str, name: str):
        self.url = url
        self.name = name
        self.client: Optional[AsyncIOMotorClient] = None

    async def connect(self):
        """Connect to MongoDB and initialize Beanie."""
        from wellness.features.auth.models import User
        from wellness.features.patients.models import Patient
        from wellness.features.practice.models import PracticeSettings
        from wellness.features.templates.models import Template
        from wellness.features.visits.models import Visit

        client = AsyncIOMotorClient(self.url)
        try:
            await init_beanie(
                database=client[self.name],
                document_models=[
                    User,
                    Patient,
                    PracticeSettings,
                    Template,
                    Visit,
                ]
            )
        except Exception as e:
            # Leave the handle unset so the next start retries
            client.close()
            logger.error(f"Failed to connect to MongoDB database {self.name}: {e}")
            raise

        self.client = client
        logger.info(f"Connected to MongoDB database: {self.name}")

    async def ping(self) -> bool:
        """Round-trip to the server; False when unreachable."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    async def close(self):
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            self.client = None
            logger.info("Closed MongoDB connection")


def get_database(request: Request) -> Database:
    """Dependency for the lifespan-scoped database handle."""
    return request.app.state.database
