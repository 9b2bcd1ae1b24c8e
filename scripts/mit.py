#!/usr/bin/env python3
"""
MIT (Most Important Task) scheduling for a todo.txt list.

Usage:
    mit.py [@context | not @context]
    mit.py DATE "task text"
    mit.py DATE [@context]
    mit.py mv ID DATE
    mit.py rm ID
    mit.py usage | -h | --help
    mit.py -v | --version
"""

import argparse
import logging
import re
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))
from date_tokens import normalize
from grouping import classify
from markers import clear_marker, read_marker, with_marker, write_marker
from report import render
from todo_file import TodoList, resolve_task_id
from utils import (
    MitError,
    configure_logging,
    date_on_add,
    get_todo_file,
    parse_reference_date,
)

__version__ = "1.0.0"

logger = logging.getLogger(__name__)

DATE_HELP = """\
dates:
  today, tomorrow          a single day
  mon..sun, monday..sunday next such weekday (never today)
  Nd, Nday, Ndays          N days from today
  YYYY.MM.DD, YYYY-MM-DD   a specific day
  jan..dec, january..      that month, this year or next
  YYYY.MM, YYYYMM          a specific month
  q1..q4                   that quarter, this year or next
  YYYYqN, YYYY.qN          a specific quarter
  YYYY                     a whole year

todo file: --file, else $TODO_FILE, else $TODO_DIR/todo.txt, else ~/todo.txt
"""

COMMANDS_HELP = """\
commands:
  mit                      list all MITs
  mit @ctx | not @ctx      list MITs with / without a context
  mit DATE task text       add a new MIT
  mit DATE [@ctx]          list MITs scheduled for DATE
  mit mv ID DATE           reschedule MIT ID
  mit rm ID                turn MIT ID back into a plain task
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mit',
        description='Most Important Tasks for todo.txt',
        epilog=COMMANDS_HELP + '\n' + DATE_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--file', help='Path to todo.txt')
    parser.add_argument('--date', help='Treat this date (YYYY-MM-DD) as today')
    parser.add_argument('words', nargs=argparse.REMAINDER, help='Command and arguments')
    return parser


def _load(args) -> TodoList:
    path = Path(args.file).expanduser() if args.file else get_todo_file()
    return TodoList.load(path)


def _with_creation_date(text: str, today: date) -> str:
    """Insert today's date after the priority unless the text already has one."""
    match = re.match(r'^(\([A-Z]\) )?(\d{4}-\d{2}-\d{2} )?', text)
    if match.group(2):
        return text
    priority = match.group(1) or ''
    return f"{priority}{today.isoformat()} {text[len(priority):]}"


def list_mits(args, context: str | None = None, invert: bool = False, period=None):
    """Print the grouped report, optionally narrowed to a context or one period."""
    todo = _load(args)
    group = classify(todo.tasks(), context=context, invert=invert)
    if period is not None:
        group = group.only(period)
    label = None
    if context:
        label = f"not {context}" if invert else context
    print(render(group, args.today, context=label))


def add_mit(args, token: str, text: str):
    period = normalize(token, args.today)
    todo = _load(args)
    if date_on_add():
        text = _with_creation_date(text, args.today)
    task_id = todo.append(with_marker(text, period))
    todo.save()
    print(f"✅ Added MIT {task_id}: {todo.get(task_id)}")


def move_mit(args, params: list[str]):
    if len(params) != 2:
        raise MitError("usage: mit mv ID DATE")
    task_id = resolve_task_id(params[0])
    period = normalize(params[1], args.today)
    todo = _load(args)
    previous = read_marker(todo, task_id)
    new_line = write_marker(todo, task_id, period)
    todo.save()
    if previous is None:
        print(f"✅ Scheduled task {task_id} for {period}: {new_line}")
    else:
        print(f"✅ Moved MIT {task_id} from {previous} to {period}: {new_line}")


def remove_mit(args, params: list[str]):
    if len(params) != 1:
        raise MitError("usage: mit rm ID")
    task_id = resolve_task_id(params[0])
    todo = _load(args)
    if not clear_marker(todo, task_id):
        print(f"⚠️ Task {task_id} is not an MIT.")
        return
    todo.save()
    print(f"✅ Task {task_id} is no longer an MIT: {todo.get(task_id)}")


def dispatch(args, parser: argparse.ArgumentParser):
    words = args.words
    if not words:
        return list_mits(args)

    first = words[0]
    if first == 'usage':
        parser.print_help()
        return
    if first == 'mv':
        return move_mit(args, words[1:])
    if first == 'rm':
        return remove_mit(args, words[1:])
    if first.startswith('@') and len(words) == 1:
        return list_mits(args, context=first)
    if first == 'not' and len(words) == 2 and words[1].startswith('@'):
        return list_mits(args, context=words[1], invert=True)

    rest = words[1:]
    if not rest or rest[0].startswith('@'):
        period = normalize(first, args.today)
        context = rest[0] if rest else None
        return list_mits(args, context=context, period=period)
    return add_mit(args, first, ' '.join(rest))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging()

    try:
        args.today = parse_reference_date(args.date)
        dispatch(args, parser)
    except MitError as e:
        logger.debug(f"Aborted: {e!r}")
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
