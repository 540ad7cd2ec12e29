# src/magicsquare/cli.py

"""
Magic Square - construction and validation of n x n magic squares

Description:
    Builds a magic square of any order n != 2 (Siamese method for odd n,
    Dürer pattern fill for n = 4p, LUX relabelling for n = 4p + 2), prints
    it with its row/column/diagonal sums, checks squares read from CSV,
    computes the smallest width holding a number of cells, and exports
    the square as CSV or as an HTML page with a line heatmap.

usage: see magicsquare -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import platform
import re
import sys
import textwrap
import traceback
from importlib.resources import files as pkg_files
from pathlib import Path

from colorama import Fore, Style
from colorama import just_fix_windows_console

from magicsquare import __version__ as _ver
from magicsquare import config as CONFIG
from magicsquare.dataio import load_grid, write_csv
from magicsquare.display import write_page
from magicsquare.engine import compute_width, generate
from magicsquare.fmt import format_grid, format_summary
from magicsquare.orders import classify
from magicsquare.output_manager import OutputManager
from magicsquare.runtime import APPLY, CFG, ensure_runtime_deps
from magicsquare.runtime import current as _rt_current
from magicsquare.utility import (
    UserInputError,
    clear_screen,
    flatten_dotted,
    parse_order,
    typename,
    validate_output_setting,
)
from magicsquare.validate import summarise
from magicsquare.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

COMMANDS = ("init", "where", "profiles", "active")

# Anything that looks like a number is an order attempt, never a profile name
_NUMERIC_RE = re.compile(r"^[+-]?[\d_.,]+$")

_TWO_ARGS = 2


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    try:
        faulthandler.enable()
    except (AttributeError, ValueError):
        # stderr replaced by a stream without a file descriptor
        pass

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _resolve_inputs(items: list[str]) -> tuple[str | None, int | None]:
    """Return (profile, order) from the positionals.

    Rules:
      - one item: numeric-looking -> order, otherwise -> profile/command
      - two items: one profile and one order, in either order
    Numeric-looking text that is not a positive integer raises InvalidInput;
    anything else that does not fit the rules is a UserInputError.
    """
    if not items:
        return None, None

    if len(items) > _TWO_ARGS:
        raise UserInputError(f"expected at most a profile and an order, got {len(items)} items: {' '.join(items)}")

    if len(items) == 1:
        item = items[0]
        if _NUMERIC_RE.match(item.strip()):
            return None, parse_order(item)
        return item, None

    profile, order = items[0], items[1]
    if _NUMERIC_RE.match(profile.strip()):
        if _NUMERIC_RE.match(order.strip()):
            raise UserInputError(f"two orders given ('{profile}' and '{order}'); build one square per run")
        profile, order = order, profile
    return profile, parse_order(order)


def _check_order_limit(n: int) -> None:
    limit = int(CFG("BEHAVIOUR.MAX_ORDER"))
    if n > limit:
        raise UserInputError(f"order {n} exceeds BEHAVIOUR.MAX_ORDER = {limit}")


def show_square(n: int, om: OutputManager, *, show_sums: bool | None = None) -> list[list[int]]:
    """Build, print and summarise one square; returns the grid."""
    _check_order_limit(n)
    grid = generate(n)
    order = classify(n)
    om.write(f"\n{Fore.YELLOW}{Style.BRIGHT}Magic square {n} x {n}{Style.RESET_ALL} "
             f"{Style.DIM}({order.label}: {order.method}){Style.RESET_ALL}")
    om.write(format_grid(grid))
    om.write(format_summary(summarise(grid), show_sums=show_sums))
    return grid


def show_width(cells: int, om: OutputManager) -> int:
    width = compute_width(cells)
    om.write(f"Minimum width for {cells} cell(s): {Fore.GREEN}{width}{Style.RESET_ALL} "
             f"({width} x {width} = {width * width} cells)")
    return width


def check_file(path: Path, om: OutputManager, *, show_sums: bool | None = None) -> bool:
    grid = load_grid(path)
    summary = summarise(grid)
    om.write(f"\n{Fore.YELLOW}{Style.BRIGHT}{path.name}{Style.RESET_ALL} ({summary.order} x {summary.order})")
    om.write(format_grid(grid))
    om.write(format_summary(summary, show_sums=show_sums))
    return summary.is_magic


def print_profiles_with_descriptions() -> None:
    current = CONFIG.read_current_profile() or "default"
    for name, desc in CONFIG.list_profiles_with_descriptions():
        mark = f"{Fore.GREEN}*{Style.RESET_ALL}" if name == current else " "
        print(f" {mark} {Fore.CYAN}{name:<16}{Style.RESET_ALL} {desc}")


def _print_debug_settings(selected: CONFIG.Settings | None) -> None:
    rt = _rt_current()
    print(f"[debug] active profile: {rt.profile_name}", file=sys.stderr)
    if selected is not None and selected.source:
        print(f"[debug] profile file: {selected.source}", file=sys.stderr)
    flat = flatten_dotted(rt.settings)
    for k in sorted(flat, key=str.lower):
        v = flat[k]
        origin = f" {Style.DIM}(default){Style.RESET_ALL}" if rt.is_default(k) else ""
        print(f"        {k:.<40} {v!r} ({typename(v)}){origin}", file=sys.stderr)
    print(file=sys.stderr)


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init
          Create the workspace folders and copy packaged profiles and
          templates if missing.

      init overwrite
          Meant for developers. Requires environment variable MAGICSQUARE_DEV=1.
          Replaces the workspace profiles and templates with the packaged ones.

      where
          Show the workspace and package paths.

      profiles
          List available profiles.

      active
          Show the active profile.
    """)

    p = argparse.ArgumentParser(
        prog="magicsquare",
        description="Magic Square — construction and validation of n x n magic squares",
        usage=(
            "magicsquare [[profile] order] [--width CELLS] [--check FILE] [--csv FILE] [--html FILE]\n"
            "                   [--output OUTPUT] [--quiet] [--no-sums] [--debug]\n"
            "       magicsquare init [overwrite] | where | profiles | active\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="[[profile] order]",
                   help="optional profile name followed by the order n of the square")
    p.add_argument("--width", metavar="CELLS", default=None,
                   help="Print the smallest square width that holds CELLS cells")
    p.add_argument("--check", metavar="FILE", type=Path, default=None,
                   help="Check whether the CSV grid in FILE is a magic square")
    p.add_argument("--csv", metavar="FILE", type=Path, default=None,
                   help="Write the generated square as CSV")
    p.add_argument("--html", metavar="FILE", type=Path, default=None,
                   help="Write the generated square as an HTML page with heatmap")
    p.add_argument("--output", default=None, help="Write results to a file (also prints unless --quiet)")
    p.add_argument("--quiet", action="store_true", help="Suppress screen output")
    p.add_argument("--no-sums", action="store_true", help="Omit row, column and diagonal sums")
    p.add_argument("--debug", action="store_true", help="Show timings, profile settings and tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        if "--debug" in (argv if argv is not None else sys.argv):
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _configure_text_streams() -> None:
    if os.environ.get("PYTHONIOENCODING"):
        return
    if sys.stdout.isatty():
        return
    enc = (sys.stdout.encoding or "").lower()
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is None:
        return
    if platform.system() == "Windows" or enc in ("", "ascii", "us-ascii"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")


def _run_command(cmd: str, items: list[str]) -> int:
    if cmd == "init":
        if len(items) == _TWO_ARGS and items[1] == "overwrite":
            if os.environ.get("MAGICSQUARE_DEV") != "1":
                print("Refusing to overwrite: set MAGICSQUARE_DEV=1 to enable developer overwrite.")
                return 2
            ws, copied = seed_workspace(overwrite=True)
            print(f"Workspace ready at: {ws} (overwrote existing files)")
        else:
            ws, _, copied = ensure_workspace_seeded()
            print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}, templates: {copied.get('templates', 0)}")
        return 0
    if cmd == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('magicsquare')}")
        return 0
    if cmd == "profiles":
        print_profiles_with_descriptions()
        return 0
    # active
    print(f"Active profile: {CONFIG.read_current_profile() or 'default'}")
    return 0


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit profile positional
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


# ---- main ----
def _main_impl(argv=None) -> int:

    just_fix_windows_console()
    _configure_text_streams()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()

    _install_loud_error_handlers(args.debug)

    if not ensure_runtime_deps(strict=True):
        return 1

    ensure_workspace_seeded()

    if args.items and args.items[0] in COMMANDS:
        return _run_command(args.items[0], args.items)

    profile, n = _resolve_inputs(args.items)

    if n is None and (args.csv is not None or args.html is not None):
        parser.error("--csv and --html need an order")
    if n is not None and args.check is not None:
        parser.error("--check reads a grid from FILE and cannot be combined with an order")

    if profile and not CONFIG.has_profile(profile):
        print(f"Unknown profile: '{profile}'", file=sys.stderr)
        print("Available profiles:", ", ".join(CONFIG.list_all_profiles()), file=sys.stderr)
        return 2

    profile_name = _select_profile_name(profile)
    if not CONFIG.has_profile(profile_name):
        profile_name = "default"
    if CONFIG.has_profile(profile_name):
        selected = CONFIG.load_settings(profile_name)
        APPLY(selected)
        if profile:
            CONFIG.write_current_profile(profile_name)
    else:
        selected = None

    # --debug wins over the profile flag
    if args.debug:
        rt.debug = True
        _print_debug_settings(selected)

    try:
        cli_target = validate_output_setting(args.output)
    except ValueError as e:
        print(f"Fatal error in --output: {e}", file=sys.stderr)
        return 1

    show_sums = False if args.no_sums else None

    def make_output_manager(stem: str) -> OutputManager:
        # --output wins; otherwise the profile's target, which may change in the REPL
        if cli_target is not None:
            return OutputManager(output_file=cli_target, quiet=args.quiet, stem=stem)
        try:
            target = validate_output_setting(CFG("OUTPUT.OUTPUT_FILE"))
        except ValueError as e:
            raise UserInputError(f"OUTPUT.OUTPUT_FILE in profile '{_rt_current().profile_name}': {e}") from None
        return OutputManager(output_file=target, quiet=args.quiet, stem=stem)

    # --- one-shot paths ---
    if args.width is not None:
        cells = parse_order(args.width, "cell count")
        with make_output_manager(f"width_{cells}") as om:
            show_width(cells, om)
        if args.check is None and n is None:
            return 0

    if args.check is not None:
        with make_output_manager(args.check.stem) as om:
            ok = check_file(args.check, om, show_sums=show_sums)
        return 0 if ok else 1

    if n is not None:
        with make_output_manager(f"{n}x{n}") as om:
            grid = show_square(n, om, show_sums=show_sums)
        if args.csv is not None:
            write_csv(grid, args.csv)
            print(f"CSV written to {args.csv}")
        if args.html is not None:
            write_page(grid, args.html, workspace=workspace_dir())
            print(f"HTML written to {args.html}")
        return 0

    return repl(profile_name, show_sums=show_sums, make_output_manager=make_output_manager)


# ---- REPL ----
_REPL_HELP = textwrap.dedent(f"""\
    {Fore.CYAN}<n>{Style.RESET_ALL}            build and show the n x n magic square
    {Fore.CYAN}w <cells>{Style.RESET_ALL}      smallest width holding <cells> cells
    {Fore.CYAN}c <file.csv>{Style.RESET_ALL}   check a grid stored as CSV
    {Fore.CYAN}p{Style.RESET_ALL}              list profiles; type a profile name to switch
    {Fore.CYAN}debug on|off{Style.RESET_ALL}   toggle timings and tracebacks
    {Fore.CYAN}h{Style.RESET_ALL} / {Fore.CYAN}q{Style.RESET_ALL}          help / quit""")


def repl(profile_name: str, *, show_sums: bool | None, make_output_manager, read=input) -> int:
    if not _rt_current().debug:
        clear_screen()
    print(f"{Fore.YELLOW}{Style.BRIGHT}Magic Square v{_ver}{Style.RESET_ALL}")

    current_profile = profile_name
    while True:
        try:
            user_input = read(f"\nProfile: {current_profile} — order, command or profile (h=Help, q=Quit): ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        low = user_input.lower()
        if low in {"", "q", "quit"}:
            break

        try:
            if low in {"h", "help"}:
                print(_REPL_HELP)
            elif low in {"p", "profiles"}:
                print_profiles_with_descriptions()
            elif low.startswith("debug"):
                parts = low.split()
                rt = _rt_current()
                if len(parts) == 1:
                    print(f"Debug is currently {'ON' if rt.debug else 'OFF'}.")
                elif parts[1] in {"on", "off"}:
                    rt.debug = parts[1] == "on"
                    print(f"Debug mode {'enabled' if rt.debug else 'disabled'} for this session.")
                else:
                    print("Usage: DEBUG [on|off]")
            elif low.startswith("w "):
                cells = parse_order(user_input[2:], "cell count")
                with make_output_manager(f"width_{cells}") as om:
                    show_width(cells, om)
            elif low.startswith("c "):
                path = Path(user_input[2:].strip()).expanduser()
                with make_output_manager(path.stem) as om:
                    check_file(path, om, show_sums=show_sums)
            elif _NUMERIC_RE.match(user_input):
                n = parse_order(user_input)
                with make_output_manager(f"{n}x{n}") as om:
                    show_square(n, om, show_sums=show_sums)
            elif CONFIG.has_profile(user_input):
                APPLY(CONFIG.load_settings(user_input))
                CONFIG.write_current_profile(user_input)
                current_profile = user_input
                print(f"Applied profile: {current_profile}")
            else:
                print(f"{Fore.RED}Invalid input: {Style.RESET_ALL}'{user_input}'. Type H for help.")
        except UserInputError as e:
            _print_user_error(str(e))
        except Exception as e:
            if _rt_current().debug:
                traceback.print_exc()
            else:
                _print_user_error(f"{e.__class__.__name__}: {e}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
