import click

from .controller import ControllerState, TrackingSnapshot


def render(snapshot: TrackingSnapshot, continuous: bool = False) -> str:
    lines = [
        click.style(f"{snapshot.carrier.value} {snapshot.tracking_number}", bold=True),
        f"Last updated {snapshot.seconds_since_last_update} seconds ago.",
    ]

    if snapshot.events is None:
        if snapshot.error is None:
            lines.append("Fetching tracking data...")
    else:
        for event in snapshot.events:
            lines.append(f"{click.style(event.timestamp, fg='cyan')} -- {event.description}")

    if snapshot.error is not None:
        lines.append(click.style(f"Error: {snapshot.error}", fg="red"))

    if continuous and snapshot.state is not ControllerState.Terminated:
        lines.append("")
        lines.append("Press q and Enter (or Ctrl+C) to quit.")

    return "\n".join(lines) + "\n"
