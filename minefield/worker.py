"""Temporal worker hosting Minesweeper game workflows."""
import asyncio
import logging
from temporalio.client import Client
from temporalio.worker import Worker
from minefield.workflows import MinesweeperWorkflow
from minefield.client_provider import ConnectionSettings, get_temporal_client

logger = logging.getLogger(__name__)


def build_worker(client: Client, task_queue: str) -> Worker:
    # Game logic runs inside the workflow, so there are no activities to register
    return Worker(client, task_queue=task_queue, workflows=[MinesweeperWorkflow])


async def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = ConnectionSettings()
    client = await get_temporal_client(settings)
    where = f"profile {settings.profile}" if settings.uses_profile() else settings.address
    logger.info(f"Worker for {where} polling task queue {settings.task_queue}")
    await build_worker(client, settings.task_queue).run()


if __name__ == "__main__":
    asyncio.run(main())
