"""Line notes – command-line entry point.

Usage:
    line-notes [--root DIR] [-v] add FILE LINE [TEXT]
    line-notes [--root DIR] [-v] remove FILE LINE
    line-notes [--root DIR] [-v] show FILE
    line-notes [--root DIR] [-v] list

The project root defaults to $LINE_NOTES_ROOT, then the nearest ancestor of
the working directory holding .line-notes.yaml, notes.json or .git.
Exit code is 1 when a command reported an error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from file_ids import to_file_id
from note_session import NoteSession
from note_store import iter_notes, notes_for_file
from terminal_host import TerminalHost, view_for_file

log = logging.getLogger("line-notes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="line-notes", description="Attach notes to lines of project files.")
    parser.add_argument("--root", default=None, help="project root (default: auto-detect)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="add or replace the note on a line")
    add.add_argument("file")
    add.add_argument("line", type=_line_number)
    add.add_argument("text", nargs="?", default=None, help="note text (prompted when omitted)")

    remove = sub.add_parser("remove", help="remove the note on a line")
    remove.add_argument("file")
    remove.add_argument("line", type=_line_number)

    show = sub.add_parser("show", help="print a file with its notes")
    show.add_argument("file")

    sub.add_parser("list", help="list every note in the project")
    return parser


def main(argv: Optional[Sequence[str]] = None, *, stdout: TextIO | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    out = stdout or sys.stdout

    if args.command == "list":
        host = TerminalHost(stdout=out)
    elif args.command == "show":
        host = TerminalHost(view_for_file(args.file), stdout=out)
    else:
        text = getattr(args, "text", None)
        host = TerminalHost(view_for_file(args.file, args.line), text=text, stdout=out)

    session = NoteSession.open(host, args.root)
    if not session.is_loaded:
        return 1
    log.debug("Running %s in %s", args.command, session.project_root)

    if args.command == "add":
        session.add_note_command()
    elif args.command == "remove":
        session.remove_note_command()
    elif args.command == "show":
        _print_file(session, host, out)
    elif args.command == "list":
        _print_all(session, out)
    return 1 if host.error_count else 0


def _print_file(session: NoteSession, host: TerminalHost, out: TextIO) -> None:
    view = host.active_view()
    if not view.path.is_file():
        host.notify("error", f"File not found: {view.path}")
        return
    markers = {m.line: m for m in host.markers.get(view.path, [])}
    with open(view.path, "r", encoding="utf-8", errors="replace") as f:
        for number, text in enumerate(f, 1):
            marker = markers.get(number)
            glyph = marker.glyph if marker else " "
            print(f"{number:>5} {glyph} {text.rstrip()}", file=out)
            if marker:
                print(f"{'':>5}   -> {marker.hover}", file=out)
    file_id = to_file_id(session.project_root, view.path)
    dormant = len(notes_for_file(session.store, file_id)) - len(markers)
    if dormant > 0:
        print(f"({dormant} note(s) beyond the end of the file)", file=out)


def _print_all(session: NoteSession, out: TextIO) -> None:
    count = 0
    for file_id, line, text in iter_notes(session.store):
        print(f"{file_id}:{line}: {text}", file=out)
        count += 1
    if count == 0:
        print("No notes.", file=out)


def _line_number(value: str) -> int:
    try:
        line = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a line number: {value!r}")
    if line < 1:
        raise argparse.ArgumentTypeError(f"line numbers start at 1: {value!r}")
    return line


if __name__ == "__main__":
    sys.exit(main())
