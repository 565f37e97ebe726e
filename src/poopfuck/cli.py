import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .api import run_file
from .errors import PoopError
from .options import RunOptions
from .state import ExecutionState
from .translate import from_brainfuck

SOURCE_SUFFIX = ".poop"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="poopfuck",
        description="Run a poopfuck program.",
    )
    parser.add_argument("filename", help="source file (*.poop)")
    parser.add_argument("--no-ext-check", action="store_true", help="Accept files without the .poop extension")
    parser.add_argument("--no-wrap", action="store_true", help="Use unbounded cells instead of wrapping")
    parser.add_argument("--cell-bits", type=int, default=8, help="Cell width in bits when wrapping (default 8)")
    parser.add_argument("--max-steps", type=int, default=None, help="Abort after this many instructions")
    parser.add_argument("--dump", action="store_true", help="Print non-zero tape cells after the run")
    parser.add_argument("--from-bf", action="store_true", help="Translate a Brainfuck file and print the source")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _dump(tape, pointer: int) -> None:
    cells = ExecutionState(tape=list(tape), pointer=pointer).nonzero_cells()
    print("\n================")
    print(f"pointer: {pointer}, tape length: {len(tape)}")
    for addr, v in cells:
        print(f"  [{addr:5d}] {v}")


def _read_failure(filename: str, e: Exception) -> int:
    if isinstance(e, FileNotFoundError):
        print(f"Could not find file {filename}.", file=sys.stderr)
    elif isinstance(e, UnicodeDecodeError):
        print(f"Could not decode file {filename}: {e.reason} at byte {e.start}.", file=sys.stderr)
    else:
        print(f"Could not read file {filename}: {e.strerror or e}.", file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger(__package__).setLevel(level)

    path = Path(args.filename)
    if args.from_bf:
        try:
            code = path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            return _read_failure(args.filename, e)
        try:
            sys.stdout.write(from_brainfuck(code, per_line=8) + "\n")
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    if not args.no_ext_check and path.suffix != SOURCE_SUFFIX:
        print(f"File extension must be '{SOURCE_SUFFIX}'. e.g. file{SOURCE_SUFFIX}", file=sys.stderr)
        return 2

    try:
        options = RunOptions(cell_bits=args.cell_bits, wrap=not args.no_wrap, max_steps=args.max_steps)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        result = run_file(path, options=options, sink=sys.stdout)
    except (UnicodeDecodeError, OSError) as e:
        return _read_failure(args.filename, e)
    except PoopError as e:
        sys.stdout.flush()
        print(e, file=sys.stderr)
        return 1

    if args.dump:
        _dump(result.tape, result.pointer)
    return 0
