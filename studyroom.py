#!/usr/bin/env python3
"""StudyRoom command line.

Exports AI-generated study schedules to iCalendar (.ics), prints their
interpreted layout, runs the Pomodoro focus timer in the terminal and
serves the HTTP endpoints.
"""

import argparse
import asyncio
import sys
from datetime import date, datetime
from typing import Optional

from focus import ConsoleNotifier, FocusTimer, TimerMode, TimerRunningError, TimerSettings
from interpreter import ScheduleInterpreter, SegmentKind, render_html
from services.config import Settings
from services.errors import StudyRoomError
from services.logging_handler import setup_logger
from transformer import ICalTransformer

logger = setup_logger(__name__)

MODE_KEYS = {
    "w": TimerMode.WORK,
    "s": TimerMode.SHORT_BREAK,
    "l": TimerMode.LONG_BREAK,
}


def parse_date(date_str: str) -> date:
    """Parse date string in YYYY-MM-DD format."""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid date format: '{date_str}'. Expected YYYY-MM-DD."
        )


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected a whole number, got '{value}'.")
    if number < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive number, got {number}.")
    return number


def read_schedule(path: str) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


def cmd_export(args: argparse.Namespace) -> None:
    # Ensure output file has .ics extension
    output_path = args.output
    if not output_path.lower().endswith(".ics"):
        output_path = f"{output_path}.ics"

    segments = ScheduleInterpreter().parse(read_schedule(args.file))
    timed = [s for s in segments if s.kind is SegmentKind.TIMED_BLOCK]
    print(f"Found {len(timed)} time blocks.")

    if not timed:
        print("Warning: No time blocks found. The calendar will be empty.")

    transformer = ICalTransformer()
    transformer.transform(segments, args.schedule_id, args.date)
    transformer.save(output_path)

    print(f"Schedule saved to: {output_path}")


def cmd_render(args: argparse.Namespace) -> None:
    segments = ScheduleInterpreter().parse(read_schedule(args.file))

    if args.html:
        print(render_html(segments))
        return

    for segment in segments:
        if segment.kind is SegmentKind.SECTION_HEADER:
            print(f"\n== {segment.text}")
        elif segment.kind is SegmentKind.TIMED_BLOCK:
            category = segment.category.label if segment.category else ""
            print(f"  {segment.start_time:>8} - {segment.end_time:<8} [{category}] {segment.text}")
        elif segment.kind is SegmentKind.TIP:
            print(f"  • {segment.text}")
        else:
            print(f"  {segment.text}")


def build_session_recorder(args: argparse.Namespace):
    """Return a SessionRecorder when a user id and store credentials exist."""
    if not args.user_id:
        return None

    from services.sessions import SessionRecorder
    from services.store import PostgrestStore

    url, key = Settings.from_env().require_store_credentials()
    return SessionRecorder(PostgrestStore(url, key), args.user_id, args.profile_id)


async def show_status(timer: FocusTimer) -> None:
    while True:
        label = timer.mode.value.upper()
        state = "running" if timer.running else "paused"
        sys.stdout.write(
            f"\r[{label}] {timer.format_remaining()} "
            f"({state}, {timer.sessions_completed} sessions)   "
        )
        sys.stdout.flush()
        await asyncio.sleep(FocusTimer.TICK_INTERVAL)


def handle_key(timer: FocusTimer, command: str) -> None:
    if command == "":
        timer.toggle()
    elif command == "r":
        timer.reset()
    elif command in MODE_KEYS:
        try:
            timer.switch_mode(MODE_KEYS[command])
        except TimerRunningError as e:
            print(f"\n{e}.")
    else:
        print("\nKeys: Enter=start/pause, r=reset, w/s/l=work/short/long, q=quit")


async def run_timer(timer: FocusTimer) -> None:
    loop = asyncio.get_running_loop()
    print("Enter=start/pause, r=reset, w/s/l=switch mode, q=quit")

    async with timer:
        status = loop.create_task(show_status(timer))
        try:
            while True:
                line = await loop.run_in_executor(None, sys.stdin.readline)
                if not line:
                    break
                command = line.strip().lower()
                if command == "q":
                    break
                handle_key(timer, command)
        finally:
            status.cancel()
    print()


def cmd_timer(args: argparse.Namespace) -> None:
    settings = TimerSettings(
        work_duration=args.work,
        short_break_duration=args.short_break,
        long_break_duration=args.long_break,
        sessions_until_long_break=args.sessions,
    )
    timer = FocusTimer(
        settings,
        session_sink=build_session_recorder(args),
        notifier=ConsoleNotifier(),
    )
    asyncio.run(run_timer(timer))


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from server import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="StudyRoom study schedule and focus timer tools.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 studyroom.py export schedule.txt --schedule-id abc123 -o my_schedule.ics
  python3 studyroom.py render schedule.txt --html
  python3 studyroom.py timer --work 50 --short-break 10 --long-break 20
  python3 studyroom.py serve --port 8000
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", help="Export schedule text to iCalendar")
    export.add_argument("file", help="Text file with the generated schedule")
    export.add_argument(
        "--schedule-id",
        required=True,
        help="Identifier of the schedule, used in event UIDs"
    )
    export.add_argument(
        "-o", "--output",
        default="study-schedule.ics",
        help="Output file path (default: study-schedule.ics)"
    )
    export.add_argument(
        "--date",
        type=parse_date,
        default=None,
        help="Day of the first occurrence (format: YYYY-MM-DD). Default: today"
    )
    export.set_defaults(handler=cmd_export)

    render = subparsers.add_parser("render", help="Print the interpreted schedule")
    render.add_argument("file", help="Text file with the generated schedule")
    render.add_argument("--html", action="store_true", help="Print an HTML fragment")
    render.set_defaults(handler=cmd_render)

    timer = subparsers.add_parser("timer", help="Run the Pomodoro focus timer")
    timer.add_argument("--work", type=positive_int, default=25, help="Work minutes (default: 25)")
    timer.add_argument(
        "--short-break", type=positive_int, default=5, help="Short break minutes (default: 5)"
    )
    timer.add_argument(
        "--long-break", type=positive_int, default=15, help="Long break minutes (default: 15)"
    )
    timer.add_argument(
        "--sessions",
        type=positive_int,
        default=4,
        help="Work sessions before a long break (default: 4)"
    )
    timer.add_argument("--user-id", default=None, help="Record completed sessions for this user")
    timer.add_argument("--profile-id", default=None, help="Profile the sessions belong to")
    timer.set_defaults(handler=cmd_timer)

    serve = subparsers.add_parser("serve", help="Serve the HTTP endpoints")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    serve.set_defaults(handler=cmd_serve)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the command line."""
    args = build_parser().parse_args(argv)

    try:
        args.handler(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)
    except (StudyRoomError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        print(f"Error: An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
