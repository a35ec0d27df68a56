"""Option defaults loaded from / saved to JSON or CSV settings files."""
from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import Any, Iterable

logger = logging.getLogger(__name__)

# flag -> key in the dict returned by strip_settings_args
_SETTINGS_FLAGS = {
    "--settings": "load",
    "--save-settings": "save",
}


def add_settings_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--settings",
        dest="settings_path",
        default=None,
        help="Load option defaults from a settings file (json or csv).",
    )
    parser.add_argument(
        "--save-settings",
        dest="save_settings_path",
        default=None,
        help="Save the effective option values to a settings file (json or csv).",
    )


def strip_settings_args(
    argv: Iterable[str],
) -> tuple[list[str], str | None, str | None]:
    """
    Remove --settings/--save-settings (either ``--flag PATH`` or
    ``--flag=PATH``) from `argv`, wherever they appear.

    Returns the remaining arguments, the settings path and the save path.
    """
    args = list(argv)
    found: dict[str, str | None] = {"load": None, "save": None}
    cleaned: list[str] = []

    i = 0
    while i < len(args):
        flag, eq, value = args[i].partition("=")
        key = _SETTINGS_FLAGS.get(flag)
        if key is None:
            cleaned.append(args[i])
            i += 1
            continue
        if not eq:
            if i + 1 >= len(args):
                raise SystemExit(f"{flag} requires a path.")
            value = args[i + 1]
            i += 1
        found[key] = value
        i += 1

    return cleaned, found["load"], found["save"]


def detect_command(argv: Iterable[str]) -> str | None:
    """First positional argument, i.e. the subcommand name."""
    return next((arg for arg in argv if not arg.startswith("-")), None)


def _parse_csv_value(raw: str) -> Any:
    text = raw.strip()
    if not text:
        return ""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _load_csv(path: Path) -> dict[str, Any]:
    data: dict[str, Any] = {}
    with path.open("r", newline="", encoding="utf-8") as handle:
        for row in csv.reader(handle):
            key = row[0].strip() if row else ""
            if not key:
                continue
            # header row
            if key.lower() in {"key", "name"} and len(row) > 1 and row[1].strip().lower() in {"value", "val"}:
                continue
            data[key] = _parse_csv_value(row[1]) if len(row) > 1 else ""
    return data


def _save_csv(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(["key", "value"])
        for key in sorted(data):
            writer.writerow([key, json.dumps(data[key], ensure_ascii=True)])


def load_settings(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise SystemExit(f"Settings file not found: {path}")
    if path.suffix.lower() == ".csv":
        return _load_csv(path)

    with path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise SystemExit(f"Invalid JSON in settings file {path}: {exc}") from None
    if not isinstance(data, dict):
        raise SystemExit(f"Settings file must be a JSON object: {path}")
    logger.info("Loaded settings from %s", path)
    return data


def _is_flat(data: dict[str, Any]) -> bool:
    return all(not isinstance(v, dict) for v in data.values())


def save_settings(
    path: Path,
    settings: dict[str, Any],
    *,
    command: str | None = None,
) -> None:
    """
    Write `settings` to `path`.

    JSON files are keyed by subcommand so one file can hold the defaults of
    several commands; an existing file is merged, not replaced. CSV files
    hold a single flat section.
    """
    if path.suffix.lower() == ".csv":
        _save_csv(path, settings)
        return

    data: dict[str, Any] = {}
    if command and path.exists():
        try:
            data = load_settings(path)
        except SystemExit:
            logger.warning("Overwriting unreadable settings file %s", path)
            data = {}
        if data and _is_flat(data):
            data = {"default": data}

    if command:
        data[command] = settings
    else:
        data = settings

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, indent=2, sort_keys=True, ensure_ascii=True)
        handle.write("\n")
    logger.info("Saved settings to %s", path)


def select_settings(
    data: dict[str, Any],
    command: str | None,
) -> dict[str, Any]:
    """Pick the section for `command`, falling back to "default" or a flat file."""
    if not isinstance(data, dict):
        return {}
    for key in (command, "default", "__all__"):
        if key and isinstance(data.get(key), dict):
            return dict(data[key])
    return dict(data) if _is_flat(data) else {}


def _option_actions(parser: argparse.ArgumentParser) -> list[argparse.Action]:
    return [
        action
        for action in parser._actions
        if action.option_strings
        and not isinstance(action, (argparse._HelpAction, argparse._VersionAction))
    ]


def apply_settings_to_parser(
    parser: argparse.ArgumentParser,
    settings: dict[str, Any],
) -> None:
    """Use `settings` as option defaults; settings can satisfy required options."""
    for action in _option_actions(parser):
        if action.dest in settings:
            action.default = settings[action.dest]
            action.required = False


def collect_option_dests(parser: argparse.ArgumentParser) -> set[str]:
    return {action.dest for action in _option_actions(parser)}


def _coerce_value(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, tuple):
        return [_coerce_value(v) for v in value]
    if hasattr(value, "item"):
        # numpy scalars
        return value.item()
    return value


def serialize_args(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    *,
    exclude: set[str] | None = None,
) -> dict[str, Any]:
    exclude = exclude or set()
    return {
        dest: _coerce_value(getattr(args, dest, None))
        for dest in collect_option_dests(parser)
        if dest not in exclude
    }


def find_subparser(
    parser: argparse.ArgumentParser,
    command: str | None,
) -> argparse.ArgumentParser | None:
    if not command:
        return None
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):
            return action.choices.get(command)
    return None
