# stockops/cli/run_snapshot.py
import asyncio
import sys

import click

from stockops.core.config import get_settings
from stockops.core.exceptions import StoreOperationError
from stockops.core.logging_config import configure_logging
from stockops.services.activity_logger import ActivityLogger
from stockops.services.identity import AuthenticatedUser
from stockops.services.snapshot_service import OpeningStockSnapshotter
from stockops.services.store import open_elevated_store


async def capture(settings, operator):
    async with open_elevated_store(settings) as store:
        snapshotter = OpeningStockSnapshotter(
            store, settings.SNAPSHOT_PROCEDURE, ActivityLogger(store.session)
        )
        return await snapshotter.capture(AuthenticatedUser(id=operator))


@click.command()
@click.option('--operator', default='cli', show_default=True, help='Recorded as the user in the activity log')
def run_snapshot(operator):
    """Capture opening stock from the shell (uses the database login directly)"""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    try:
        message = asyncio.run(capture(settings, operator))
    except StoreOperationError as e:
        click.echo(f"Snapshot failed: {e.message}", err=True)
        sys.exit(1)

    click.echo(message)


if __name__ == "__main__":
    run_snapshot()
