"""
Terminal front end for a check-in desk.

Commands, one per line:
    <text>   search guests by name or ID
    #<n>     select result n
    1 / 2    record one or two meals for the selected guest
    x        cancel the selection
    t        re-fetch today's total
    q        quit
"""

import asyncio
import logging
import sys
from typing import Callable, List, Optional

from desk.api import CheckInApiClient
from desk.config import DeskSettings
from desk.session import CheckInSession, DeskState

logger = logging.getLogger("mealcheckin.desk.console")

QUIT_COMMANDS = {"q", "quit", "exit"}


def render(session: CheckInSession) -> str:
    """Plain-text screen for the current session state"""
    lines: List[str] = [
        f"Meal Tracker - {session.total} meals today",
        "-" * 40,
    ]

    if session.state == DeskState.SEARCHING:
        lines.append("Searching...")
    elif session.results:
        for i, guest in enumerate(session.results, start=1):
            marker = ">" if session.selected is not None and session.selected.id == guest.id else " "
            lines.append(
                f"{marker}#{i} {guest.display_name}  ID: {guest.external_id} | {guest.housing_status or '-'}"
            )
    elif len(session.query.strip()) >= 2:
        lines.append(f'No guests found matching "{session.query}"')

    if session.selected is not None:
        lines.append("")
        lines.append(f"{session.selected.display_name} - how many meals? [1] [2]  (x to cancel)")
        if session.submitting:
            lines.append("...")

    if session.recent:
        lines.append("")
        lines.append("RECENT ENTRIES")
        for i, entry in enumerate(session.recent):
            check = " +" if i == 0 else ""
            lines.append(
                f"  {entry.guest.short_name:<30} {entry.time_label}  {entry.quantity_label}{check}"
            )

    return "\n".join(lines)


class ConsoleDesk:
    """Turns typed lines into session actions and prints the resulting screen"""

    def __init__(self, session: CheckInSession, write: Callable[[str], None] = print):
        self.session = session
        self.write = write

    async def handle(self, line: str) -> bool:
        """Process one input line; returns False when the desk should quit"""
        command = line.strip()
        session = self.session

        if command.lower() in QUIT_COMMANDS:
            return False

        if command.lower() == "x":
            session.cancel()
        elif command.lower() == "t":
            await session.refresh_total()
        elif command in ("1", "2") and session.selected is not None:
            await session.submit(int(command))
        elif command.startswith("#") and command[1:].isdigit():
            index = int(command[1:]) - 1
            if 0 <= index < len(session.results):
                session.select_index(index)
            else:
                self.write(f"No result #{command[1:]}")
        elif command:
            session.set_query(command)
            await session.wait_idle()

        self.write(render(session))
        return True


async def _read_line() -> Optional[str]:
    line = await asyncio.to_thread(sys.stdin.readline)
    return line if line else None


async def run_console(settings: DeskSettings, read_line=_read_line, write: Callable[[str], None] = print):
    """Run a desk session until the user quits or input ends"""
    async with CheckInApiClient(settings.base_url) as api:
        session = CheckInSession(
            api,
            debounce_seconds=settings.debounce_seconds,
            refresh_interval_seconds=settings.refresh_interval_seconds,
            history_limit=settings.history_limit,
            on_alert=lambda message: write(f"!! {message}"),
        )
        async with session:
            desk = ConsoleDesk(session, write)
            write(render(session))
            write("Type a name to search, #n to select, then 1 or 2 meals.")
            while True:
                line = await read_line()
                if line is None or not await desk.handle(line):
                    break


def main():
    settings = DeskSettings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(run_console(settings))
    except KeyboardInterrupt:
        logger.info("Desk closed")


if __name__ == "__main__":
    main()
