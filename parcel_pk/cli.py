import logging
import sys
import threading

import click

from .config import Settings
from .controller import Outcome, RefreshController
from .session import TrackingSession
from .track import SUPPORTED_CARRIERS
from .view import render


def _watch_for_quit(controller: RefreshController) -> None:
    for line in sys.stdin:
        if line.strip().lower() == "q":
            break
    controller.request_quit()


@click.command()
@click.option("--tracking-number", "-t", required=True, help="Tracking number to query")
@click.option(
    "--service",
    "-s",
    required=True,
    type=click.Choice(SUPPORTED_CARRIERS),
    help="Service name for the tracking service",
)
@click.option(
    "--refresh-interval",
    "-r",
    type=click.IntRange(min=0),
    default=None,
    help="Refresh interval in seconds, 0 fetches once and exits",
)
def main(tracking_number: str, service: str, refresh_interval: int | None):
    """Track a parcel and keep its checkpoints up to date."""
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise click.UsageError(str(e))

    logging.basicConfig(
        level=settings.log_level, format="%(asctime)s %(levelname)s %(message)s"
    )

    if not tracking_number.strip():
        raise click.BadParameter("must not be empty", param_hint="--tracking-number")
    if refresh_interval is None:
        refresh_interval = settings.refresh_interval

    session = TrackingSession.open(service, tracking_number, refresh_interval, settings)
    continuous = refresh_interval > 0

    def show(snapshot):
        if continuous:
            click.clear()
            click.echo(render(snapshot, continuous=True), nl=False)

    controller = RefreshController(session, on_update=show)
    if continuous and sys.stdin.isatty():
        # left blocked on stdin once the controller stops
        threading.Thread(target=_watch_for_quit, args=(controller,), daemon=True).start()

    outcome = controller.run()
    if not continuous:
        click.echo(render(controller.snapshot()), nl=False)

    if outcome is Outcome.Failed:
        sys.exit(1)
