"""
Command line interface for telejoin.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, List

import click
from rich.console import Console
from rich.table import Table

from . import config
from .errors import InvalidAppointmentError, JoinNotAvailableError
from .join_window import (
    Appointment,
    AppointmentMode,
    BrowserOpener,
    JoinTarget,
    appointment_from_record,
    evaluate_join_window,
    open_join_target,
    parse_timestamp,
)
from .presence import ChannelState, InMemoryChannelRegistry, PresenceSupervisor
from .version import __version__

logger = logging.getLogger("telejoin")


def _parse_instant(value, param_name: str) -> datetime:
    try:
        return parse_timestamp(value)
    except InvalidAppointmentError as e:
        raise click.BadParameter(str(e), param_hint=param_name)


def _resolve_now(now) -> datetime:
    if now:
        return _parse_instant(now, "--now")
    return datetime.now(timezone.utc)


@click.group()
@click.version_option(__version__, prog_name="telejoin")
@click.help_option('-h', '--help', help='Show this message and exit')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def cli(debug):
    """Telehealth join-window and realtime presence tools."""
    level = logging.DEBUG if (debug or config.DEBUG) else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("telejoin").setLevel(level)


@cli.command('join-status')
@click.option('--mode', type=click.Choice([m.value for m in AppointmentMode]), required=True,
              help='Appointment mode')
@click.option('--start-at', required=True, help='Scheduled start (ISO-8601 with offset)')
@click.option('--link', help="Doctor's meeting link")
@click.option('--passcode', help='Meeting passcode')
@click.option('--now', help='Evaluate at this instant instead of the current time')
@click.option('--early', type=float, help='Minutes before start the link opens')
@click.option('--late', type=float, help='Minutes after start the link stays open')
@click.option('--open', 'open_link', is_flag=True, help='Open the link if it can be joined now')
@click.option('--json', 'as_json', is_flag=True, help='Output as JSON')
def join_status(mode, start_at, link, passcode, now, early, late, open_link, as_json):
    """Show whether an appointment can be joined right now."""
    appointment = Appointment(
        mode=AppointmentMode(mode),
        start_at=_parse_instant(start_at, "--start-at"),
        join_target=JoinTarget(uri=link, passcode=passcode) if link else None,
    )
    decision = evaluate_join_window(appointment, _resolve_now(now), early, late)

    if as_json:
        click.echo(json.dumps(decision.to_dict(), indent=2))
    else:
        click.echo(f"State: {decision.state.value}")
        if decision.label:
            click.echo(f"Label: {decision.label}")
        if decision.minutes_until_start is not None:
            click.echo(f"Minutes until start: {decision.minutes_until_start:.1f}")
        if decision.hint:
            click.echo(decision.hint)

    if open_link:
        try:
            open_join_target(decision, BrowserOpener())
        except JoinNotAvailableError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)


@cli.command()
@click.argument('records_file', type=click.File('r'))
@click.option('--now', help='Evaluate at this instant instead of the current time')
@click.option('-f', '--format', 'output_format', type=click.Choice(['simple', 'json']),
              default='simple', help='Output format')
def appointments(records_file, now, output_format):
    """Evaluate every appointment in a JSON array of booking records."""
    try:
        records = json.load(records_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON: {e}")
    if not isinstance(records, list):
        raise click.ClickException("Expected a JSON array of appointment records")

    instant = _resolve_now(now)
    results = []
    for index, record in enumerate(records):
        try:
            appointment = appointment_from_record(record)
        except InvalidAppointmentError as e:
            logger.debug(f"Invalid appointment record {index}: {record!r}")
            click.echo(f"Skipping record {index}: {e}", err=True)
            continue
        decision = evaluate_join_window(appointment, instant)
        results.append((appointment, decision))

    if output_format == 'json':
        payload = []
        for appointment, decision in results:
            entry = {"id": appointment.id, "start_at": appointment.start_at.isoformat()}
            entry.update(decision.to_dict())
            payload.append(entry)
        click.echo(json.dumps(payload, indent=2))
        return

    if not results:
        click.echo("No appointments found.", err=True)
        return

    table = Table(title=f"Appointments at {instant.isoformat(timespec='minutes')}")
    table.add_column("ID")
    table.add_column("Start")
    table.add_column("Mode")
    table.add_column("State")
    table.add_column("Label")
    for appointment, decision in results:
        table.add_row(
            appointment.id or "-",
            appointment.start_at.isoformat(timespec='minutes'),
            appointment.mode.value if appointment.mode else "-",
            decision.state.value,
            decision.label or "",
        )
    Console(width=160).print(table)


def _parse_timelines(specs) -> Dict[str, List[ChannelState]]:
    timelines = {}
    for spec in specs:
        topic, sep, states = spec.partition("=")
        if not sep or not topic or not states:
            raise click.BadParameter(f"expected TOPIC=STATE[,STATE...], got {spec!r}",
                                     param_hint="--channel")
        parsed = []
        for raw in states.split(","):
            state = ChannelState.parse(raw)
            if state is None:
                raise click.BadParameter(f"unknown channel state {raw!r}", param_hint="--channel")
            parsed.append(state)
        timelines[topic.strip()] = parsed
    return timelines


@cli.command('presence-simulate')
@click.option('-c', '--channel', 'channels', multiple=True,
              help='TOPIC=STATE[,STATE...]: channel state per tick (last state repeats)')
@click.option('-n', '--ticks', type=int, default=6, help='Number of sampling ticks')
@click.option('--threshold', type=click.IntRange(min=0), help='Bad samples tolerated before escalation')
def presence_simulate(channels, ticks, threshold):
    """Run the presence supervisor against simulated channels.

    Escalations resubscribe every removed channel, the way the owning
    realtime layer would.
    """
    timelines = _parse_timelines(channels)
    registry = InMemoryChannelRegistry()
    for topic in timelines:
        registry.subscribe(topic)

    supervisor = PresenceSupervisor(registry, escalation_threshold=threshold)

    def resubscribe(event):
        click.echo(f"  escalated after {event.bad_samples} bad samples, "
                   f"removed {len(event.removed)} channel(s)")
        for channel in event.removed:
            registry.subscribe(channel.topic)

    supervisor.add_escalation_listener(resubscribe)

    for tick in range(1, ticks + 1):
        for channel in registry.list_channels():
            timeline = timelines[channel.topic]
            channel.state = timeline[min(tick - 1, len(timeline) - 1)]
        verdict = supervisor.sample()
        click.echo(
            f"tick {tick}: {verdict.label} "
            f"(state={verdict.state.value}, bad_samples={verdict.consecutive_bad_samples})"
        )

    click.echo(supervisor.get_status_text())


@cli.command('config')
def show_config():
    """Show the effective configuration."""
    for key, value in config.as_dict().items():
        click.echo(f"{key}={value}")


def main():
    cli()


if __name__ == '__main__':
    main()
