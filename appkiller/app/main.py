# appkiller/app/main.py
from __future__ import annotations

import argparse
import json
import logging
import os
import shlex
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, TextIO

from ..adapters.storage_local import StorageLocal
from ..domain.entities import ConfirmationDecision, FilterMode
from ..domain.errors import (
    CatalogConstructionFailed,
    EmptySelectionError,
    InvalidArgumentError,
    NotFoundError,
    UseCaseError,
)
from ..utils.logging import setup_logging
from ..viewmodels.settings_vm import ASK_POLICY, SYSTEM_POLICIES, SettingsVM
from ..viewmodels.status_format import HIBERNATION_HELP, selection_label
from .console_presenter import ConsolePresenter
from .controller import AppController

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_FATAL = 3

CONFIG_DIR_ENV = "APPKILLER_CONFIG_DIR"
_FILTER_CHOICES = [mode.value for mode in FilterMode]


def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty()) if callable(isatty) else False


class _ShellUsage(Exception):
    def __init__(self, status: int, message: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.message = message


class _ShellArgumentParser(argparse.ArgumentParser):
    """Parser for shell lines: reports usage problems instead of exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise _ShellUsage(EXIT_USAGE, f"{self.prog}: {message}")

    def exit(self, status: int = 0, message: Optional[str] = None) -> None:  # type: ignore[override]
        raise _ShellUsage(status, message or "")


@dataclass
class Session:
    """Everything one command needs: controller, presenter, settings and streams."""

    controller: AppController
    presenter: ConsolePresenter
    settings_vm: SettingsVM
    storage: StorageLocal
    stdin: TextIO
    out: TextIO

    def ask_decision(self) -> ConfirmationDecision:
        self.out.write("Continue [all], skip system apps [user-only], or cancel [abort]? ")
        self.out.flush()
        answer = self.stdin.readline()
        if not _is_tty(self.stdin):
            self.out.write("\n")
        if not answer:
            return ConfirmationDecision.ABORT
        try:
            return ConfirmationDecision.parse(answer)
        except ValueError:
            self.presenter.show_error(f"unknown answer '{answer.strip()}', cancelling")
            return ConfirmationDecision.ABORT


# ----------------------------------------------------------------------
# Parsers
# ----------------------------------------------------------------------
def _add_session_commands(sub: argparse._SubParsersAction) -> None:
    p_list = sub.add_parser("list", help="Show apps for a filter.")
    p_list.add_argument("--filter", choices=_FILTER_CHOICES, default=None)

    p_select = sub.add_parser("select", help="Select apps by identifier.")
    p_select.add_argument("ids", nargs="+", metavar="ID")

    p_deselect = sub.add_parser("deselect", help="Deselect apps by identifier.")
    p_deselect.add_argument("ids", nargs="+", metavar="ID")

    p_toggle = sub.add_parser("toggle", help="Flip selection of apps by identifier.")
    p_toggle.add_argument("ids", nargs="+", metavar="ID")

    sub.add_parser("select-all-user", help="Select every user app (never system apps).")
    sub.add_parser("deselect-all", help="Clear the selection.")
    sub.add_parser("status", help="Show the selection count.")

    p_hib = sub.add_parser("hibernate", help="Hibernate the selected apps.")
    p_hib.add_argument(
        "--system-policy",
        choices=list(SYSTEM_POLICIES),
        default=None,
        help="What to do when system apps are selected (default from settings).",
    )
    p_hib.add_argument("--id", dest="ids", action="append", default=[], metavar="ID")
    p_hib.add_argument("--all-user", action="store_true", help="Select all user apps first.")


def build_parser() -> argparse.ArgumentParser:
    """Top-level command-line parser."""
    parser = argparse.ArgumentParser(
        prog="appkiller",
        description="List running apps, select some, and ask the host to hibernate them.",
    )
    parser.add_argument("--mock", action="store_true", help="Use the built-in demo catalog.")
    parser.add_argument("--config-dir", default=None, help="Directory holding user_settings.json.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)
    _add_session_commands(sub)
    sub.add_parser("shell", help="Read commands line by line from stdin in one session.")
    sub.add_parser("help-hibernate", help="Explain what hibernation does.")
    p_config = sub.add_parser("config", help="Show or update persisted settings.")
    p_config.add_argument("--set", dest="assignments", action="append", default=[], metavar="KEY=VALUE")
    return parser


def build_shell_parser() -> argparse.ArgumentParser:
    parser = _ShellArgumentParser(prog="appkiller>", add_help=False)
    sub = parser.add_subparsers(dest="command", required=True, parser_class=_ShellArgumentParser)
    _add_session_commands(sub)
    return parser


# ----------------------------------------------------------------------
# Command handlers
# ----------------------------------------------------------------------
def _cmd_list(session: Session, args: argparse.Namespace) -> int:
    engine = session.controller.ensure_ready()
    if args.filter:
        engine.set_filter_mode(FilterMode.parse(args.filter))
    else:
        session.presenter.show_filter(engine.current_view())
    return EXIT_OK


def _cmd_select(session: Session, args: argparse.Namespace) -> int:
    engine = session.controller.ensure_ready()
    for identifier in args.ids:
        engine.set_selected(identifier, True)
    return EXIT_OK


def _cmd_deselect(session: Session, args: argparse.Namespace) -> int:
    engine = session.controller.ensure_ready()
    for identifier in args.ids:
        engine.set_selected(identifier, False)
    return EXIT_OK


def _cmd_toggle(session: Session, args: argparse.Namespace) -> int:
    engine = session.controller.ensure_ready()
    for identifier in args.ids:
        engine.toggle_selection(identifier)
    return EXIT_OK


def _cmd_select_all_user(session: Session, args: argparse.Namespace) -> int:
    session.controller.ensure_ready().select_all_visible_user_only()
    return EXIT_OK


def _cmd_deselect_all(session: Session, args: argparse.Namespace) -> int:
    session.controller.ensure_ready().deselect_all()
    return EXIT_OK


def _cmd_status(session: Session, args: argparse.Namespace) -> int:
    engine = session.controller.ensure_ready()
    session.out.write(selection_label(engine.selected_count()) + "\n")
    session.presenter.show_records(engine.selected_records())
    return EXIT_OK


def _cmd_hibernate(session: Session, args: argparse.Namespace) -> int:
    engine = session.controller.ensure_ready()
    for identifier in args.ids:
        engine.set_selected(identifier, True)
    if args.all_user:
        engine.select_all_visible_user_only()

    orchestrator = session.controller.orchestrator
    assert orchestrator is not None
    result = orchestrator.prepare()
    if result.needs_confirmation:
        policy = args.system_policy or session.settings_vm.system_policy
        if policy == ASK_POLICY:
            decision = session.ask_decision()
        else:
            decision = ConfirmationDecision.parse(policy)
        report = orchestrator.decide(decision)
        if report is None:
            session.out.write("Hibernation cancelled; selection kept.\n")
            return EXIT_FAILED
    else:
        report = result.report
    assert report is not None
    return EXIT_OK if report.failure_count == 0 else EXIT_FAILED


def _cmd_help_hibernate(session: Session, args: argparse.Namespace) -> int:
    session.out.write(HIBERNATION_HELP + "\n")
    return EXIT_OK


def _cmd_config(session: Session, args: argparse.Namespace) -> int:
    if args.assignments:
        updates: Dict[str, object] = {}
        for assignment in args.assignments:
            key, sep, raw = assignment.partition("=")
            if not sep or not key.strip():
                session.presenter.show_error(f"expected KEY=VALUE, got '{assignment}'")
                return EXIT_USAGE
            updates[key.strip()] = _parse_config_value(raw)
        try:
            session.settings_vm.apply_dict(updates)
        except ValueError as exc:
            session.presenter.show_error(str(exc))
            return EXIT_USAGE
        session.settings_vm.cmd_save()
        log.info("Saved settings to %s", session.storage.settings_path)
    session.out.write(json.dumps(session.settings_vm.to_dict(), indent=2, sort_keys=True) + "\n")
    return EXIT_OK


def _parse_config_value(raw: str) -> object:
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _cmd_shell(session: Session, args: argparse.Namespace) -> int:
    parser = build_shell_parser()
    interactive = _is_tty(session.stdin)
    code = EXIT_OK
    session.controller.ensure_ready()
    while True:
        if interactive:
            session.out.write("appkiller> ")
            session.out.flush()
        line = session.stdin.readline()
        if not line:
            break
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line in {"exit", "quit"}:
            break
        try:
            line_args = parser.parse_args(shlex.split(line))
        except ValueError as exc:
            session.presenter.show_error(str(exc))
            code = EXIT_USAGE
            continue
        except _ShellUsage as exc:
            if exc.message:
                session.presenter.show_error(exc.message.strip())
            code = exc.status
            continue
        code = run_command(session, line_args)
    return code


_HANDLERS: Dict[str, Callable[[Session, argparse.Namespace], int]] = {
    "list": _cmd_list,
    "select": _cmd_select,
    "deselect": _cmd_deselect,
    "toggle": _cmd_toggle,
    "select-all-user": _cmd_select_all_user,
    "deselect-all": _cmd_deselect_all,
    "status": _cmd_status,
    "hibernate": _cmd_hibernate,
    "help-hibernate": _cmd_help_hibernate,
    "config": _cmd_config,
    "shell": _cmd_shell,
}


def run_command(session: Session, args: argparse.Namespace) -> int:
    """Dispatch one parsed command and map core errors to exit codes."""
    handler = _HANDLERS[args.command]
    try:
        return handler(session, args)
    except CatalogConstructionFailed:
        raise
    except (NotFoundError, EmptySelectionError, InvalidArgumentError) as exc:
        session.presenter.show_error(exc.message)
        return EXIT_USAGE
    except UseCaseError as exc:
        session.presenter.show_error(exc.message)
        return EXIT_FAILED


# ----------------------------------------------------------------------
# Entry point
# ----------------------------------------------------------------------
def _resolve_config_dir(explicit: Optional[str]) -> str:
    if explicit:
        return explicit
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return env_dir
    return os.path.join(os.path.expanduser("~"), ".appkiller")


def _load_settings(storage: StorageLocal) -> SettingsVM:
    settings_vm = SettingsVM(on_save=storage.save_user_settings)
    try:
        payload = storage.load_user_settings()
    except (OSError, ValueError) as exc:
        log.warning("Ignoring unreadable settings at %s: %s", storage.settings_path, exc)
        return settings_vm
    if payload:
        try:
            settings_vm.apply_dict(payload)
        except ValueError as exc:
            log.warning("Ignoring invalid settings at %s: %s", storage.settings_path, exc)
            settings_vm = SettingsVM(on_save=storage.save_user_settings)
    return settings_vm


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    controller_factory: Optional[Callable[[SettingsVM, bool], AppController]] = None,
) -> int:
    """CLI entrypoint; returns the process exit code."""
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    out = stdout or sys.stdout

    storage = StorageLocal(root_dir=_resolve_config_dir(args.config_dir))
    settings_vm = _load_settings(storage)
    level = setup_logging(debug=args.debug or settings_vm.debug_logging)
    log.debug("Effective log level: %s", logging.getLevelName(level))

    factory = controller_factory or (lambda vm, mock: AppController(vm, use_mock=mock))
    controller = factory(settings_vm, args.mock)
    presenter = ConsolePresenter(out)
    presenter.bind(controller)
    session = Session(
        controller=controller,
        presenter=presenter,
        settings_vm=settings_vm,
        storage=storage,
        stdin=stdin or sys.stdin,
        out=out,
    )

    try:
        if args.command not in {"help-hibernate", "config"}:
            # Initial load is silent; commands render what they need.
            presenter.verbose = False
            try:
                controller.load()
            finally:
                presenter.verbose = True
        return run_command(session, args)
    except CatalogConstructionFailed as exc:
        presenter.show_error(exc.message)
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
