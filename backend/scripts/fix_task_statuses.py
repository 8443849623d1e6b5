"""Repair tasks stuck in 'due' although their reports have been submitted.

Run from backend/:
    python -m scripts.fix_task_statuses

Or via Docker / ECS task:
    python -m scripts.fix_task_statuses
"""

import asyncio

from sqlalchemy.ext.asyncio import create_async_engine

from statusflow.core.config import get_settings
from statusflow.core.logging import configure_structlog
from statusflow.db.base import create_session_factory
from statusflow.services.task_status import TaskStatusService


async def main() -> None:
    configure_structlog(log_level="INFO", json_logs=False)
    settings = get_settings()
    engine = create_async_engine(settings.database_url, echo=False)
    session_factory = create_session_factory(engine)

    async with session_factory() as session:
        counts = await TaskStatusService().reconcile_due_tasks(session, batch_size=settings.task_due_batch_size)
        await session.commit()

    await engine.dispose()

    print("Tasks moved out of 'due':")
    for status, count in counts.items():
        print(f"  {status}: {count}")
    print("\nALL DONE")


if __name__ == "__main__":
    asyncio.run(main())
