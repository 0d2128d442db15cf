# stockops/cli/apply_corrections.py
import asyncio
import json
import sys

import click

from stockops.core.config import get_settings
from stockops.core.exceptions import CorrectionBatchError
from stockops.core.logging_config import configure_logging
from stockops.correction_sets import CORRECTION_SETS, get_correction_set, load_corrections_file
from stockops.services.activity_logger import ActivityLogger
from stockops.services.stock_corrector import StockCorrector
from stockops.services.store import open_elevated_store


async def run_corrections(settings, name, corrections, atomic, dry_run):
    async with open_elevated_store(settings) as store:
        corrector = StockCorrector(store, ActivityLogger(store.session))
        return await corrector.apply(name, corrections, atomic=atomic, dry_run=dry_run)


@click.command()
@click.option('--set', 'set_name', type=click.Choice(sorted(CORRECTION_SETS)), help='Built-in correction set')
@click.option('--file', 'file_path', type=click.Path(exists=True, dir_okay=False), help='JSON file of correction records')
@click.option('--name', help='Name recorded in the activity log (defaults to the set or file name)')
@click.option('--atomic', is_flag=True, help='Apply every step in one transaction')
@click.option('--dry-run', is_flag=True, help='Apply in a transaction and roll it back')
def apply_corrections(set_name, file_path, name, atomic, dry_run):
    """Apply a stock correction set to stock items and purchase order lines"""
    if bool(set_name) == bool(file_path):
        raise click.UsageError("Give exactly one of --set or --file")

    if set_name:
        corrections = get_correction_set(set_name)
        name = name or set_name
    else:
        corrections = load_corrections_file(file_path)
        name = name or click.format_filename(file_path)

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    try:
        report = asyncio.run(run_corrections(settings, name, corrections, atomic, dry_run))
    except CorrectionBatchError as e:
        click.echo(f"Correction failed: {e.message}", err=True)
        click.echo(json.dumps({"committed_steps": e.committed_steps}, indent=2), err=True)
        sys.exit(1)

    click.echo(report.message)
    click.echo(json.dumps(report.to_payload(corrections), indent=2))


if __name__ == "__main__":
    apply_corrections()
