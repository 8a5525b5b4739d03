#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Paul Tiffany
# Project: switchboard - Declarative command-line switches

"""
switchboard - Declarative command-line switches with typed values.

A single-file, zero-dependency parser. Register named switches with a value
conversion, a default and a callback, hand the parser the tokenized command
line, and get back every token that did not belong to a switch.

    total = []
    parser = ArgParser(int_switch("-n", "<int> adds a number", total.append))
    extras = parser.parse(["-n", "5", "file.txt"])  # ["file.txt"], total == [5]
"""

import enum
import logging
import re
import sys
from collections.abc import Collection, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, TextIO

# Project metadata (also shown by --about)
__version__ = "1.0.0"
__license__ = "MIT"
__summary__ = "Declarative command-line switches with typed values"

# --- Configuration ---
HELP_NAME_WIDTH = 5
HELP_INDENT = "  "
HELP_DESCRIPTION_INDENT = " " * 9
HELP_TEXT = "displays this help message"

MAX_WORDS = 64  # extras accepted by the command-line front end

_ROOT_LOGGER_NAME = "switchboard"
_INTEGER_LITERAL = re.compile(r"^\s*[+-]?[0-9]+\s*$")

_LOGGER = logging.getLogger(_ROOT_LOGGER_NAME)

# --- Core Logic ---


class ArgParseError(Exception):
    """Raised when command-line arguments cannot be parsed."""


class SwitchKind(enum.Enum):
    """The closed set of switch kinds."""

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    EXISTING_FILE = "existing_file"
    FLAG = "flag"
    HELP = "help"


def _to_int(name: str, raw: Optional[str]) -> int:
    if raw is None or not _INTEGER_LITERAL.match(raw):
        raise ArgParseError(f"Switch <{name}> expected an integer, and got <{raw}> instead.")
    return int(raw)


def _to_float(name: str, raw: Optional[str]) -> float:
    message = f"Switch <{name}> expected a number, and got <{raw}> instead."
    if raw is None or "_" in raw:
        raise ArgParseError(message)
    try:
        return float(raw)
    except ValueError as e:
        raise ArgParseError(message) from e


def _to_str(name: str, raw: Optional[str]) -> Optional[str]:
    return raw


def _to_existing_file(name: str, raw: Optional[str]) -> str:
    if raw is None or not Path(raw).is_file():
        raise ArgParseError(f"<{raw}> is not an existing file!")
    return raw


def _to_flag(name: str, raw: Optional[str]) -> bool:
    return True


# HELP has no value, so it has no converter.
_CONVERTERS: dict[SwitchKind, Callable[[str, Optional[str]], Any]] = {
    SwitchKind.INTEGER: _to_int,
    SwitchKind.FLOAT: _to_float,
    SwitchKind.STRING: _to_str,
    SwitchKind.EXISTING_FILE: _to_existing_file,
    SwitchKind.FLAG: _to_flag,
}

_NO_ARG_KINDS = {SwitchKind.FLAG, SwitchKind.HELP}


@dataclass
class Switch:
    """A named command-line option and the reaction it triggers.

    Everything is configured at construction. The only state is
    ``times_seen``, which counts how often the switch matched during a parse.
    A switch set is meant for a single parse.

    Attributes:
        name: The token that activates the switch, e.g. ``"-n"``.
        help: Description for the help listing. A leading ``<placeholder>``
            is rendered next to the name.
        kind: Which conversion the raw token goes through.
        command: Called with the converted value (or, for help switches,
            with the parser's help renderer).
        default: Passed to ``command`` when the switch never matched.
        options: If given, the only converted values that are accepted.
        required: Fail instead of applying ``default``.
        multiples_allowed: Accept the switch more than once per parse.
    """

    name: str
    help: str
    kind: SwitchKind
    command: Optional[Callable[[Any], None]] = None
    default: Any = None
    options: Optional[Collection[Any]] = None
    required: bool = False
    multiples_allowed: bool = False
    times_seen: int = field(default=0, init=False, compare=False)

    @property
    def needs_arg(self) -> bool:
        """Whether the parser hands this switch the following token."""
        return self.kind not in _NO_ARG_KINDS

    @property
    def seen(self) -> bool:
        return self.times_seen > 0

    def _require_command(self) -> Callable[[Any], None]:
        if self.command is None:
            raise ArgParseError(f"<{self.name}> has no defined command!")
        return self.command

    def accept(self, parser: "ArgParser", raw: Optional[str]) -> None:
        """Convert ``raw``, validate it and invoke the command."""
        if self.kind is SwitchKind.HELP:
            command = self._require_command()
            self.times_seen += 1
            command(parser.render_help)
            return

        if self.seen and not self.multiples_allowed:
            raise ArgParseError(f"Switch <{self.name}> appears multiple times!")
        self.times_seen += 1

        value = _CONVERTERS[self.kind](self.name, raw)
        command = self._require_command()
        if self.options is not None and value not in self.options:
            raise ArgParseError(f"<{value}> isn't a valid argument to switch <{self.name}>!")

        _LOGGER.debug("Switch <%s> accepted %r", self.name, value)
        command(value)

    def apply_default(self) -> None:
        """React with ``default`` if the switch never matched."""
        if self.seen or self.kind is SwitchKind.HELP:
            return
        if self.required:
            raise ArgParseError(f"<{self.name}> is a required option, but did not get a value!")
        command = self._require_command()
        _LOGGER.debug("Switch <%s> defaulted to %r", self.name, self.default)
        command(self.default)


def int_switch(
    name: str,
    help: str,
    command: Optional[Callable[[int], None]] = None,
    default: int = 0,
    **config: Any,
) -> Switch:
    """Build a switch that takes a base-10 integer."""
    return Switch(name, help, SwitchKind.INTEGER, command, default, **config)


def float_switch(
    name: str,
    help: str,
    command: Optional[Callable[[float], None]] = None,
    default: float = 0.0,
    **config: Any,
) -> Switch:
    """Build a switch that takes a decimal number."""
    return Switch(name, help, SwitchKind.FLOAT, command, default, **config)


def str_switch(
    name: str,
    help: str,
    command: Optional[Callable[[Optional[str]], None]] = None,
    default: Optional[str] = None,
    **config: Any,
) -> Switch:
    """Build a switch that takes any string."""
    return Switch(name, help, SwitchKind.STRING, command, default, **config)


def existing_file_switch(
    name: str,
    help: str,
    command: Optional[Callable[[Optional[str]], None]] = None,
    default: Optional[str] = None,
    **config: Any,
) -> Switch:
    """Build a switch whose argument must name an existing file."""
    return Switch(name, help, SwitchKind.EXISTING_FILE, command, default, **config)


def flag_switch(
    name: str,
    help: str,
    command: Optional[Callable[[bool], None]] = None,
    default: bool = False,
    **config: Any,
) -> Switch:
    """Build a no-argument switch: ``True`` if given, ``default`` otherwise."""
    return Switch(name, help, SwitchKind.FLAG, command, default, **config)


def help_switch(
    name: str, command: Optional[Callable[[Callable[[TextIO], None]], None]] = None
) -> Switch:
    """Build a switch whose command receives the parser's help renderer."""
    return Switch(name, HELP_TEXT, SwitchKind.HELP, command)


def split_help(text: str) -> tuple[str, str]:
    """Split a leading ``<placeholder>`` off help text.

    Returns ``(placeholder, description)``; the placeholder is empty when the
    text does not start with a complete ``<...>``.
    """
    if not text.startswith("<") or ">" not in text:
        return "", text
    end = text.index(">") + 1
    return text[:end].strip(), text[end:].lstrip()


class ArgParser:
    """Scan a token list, dispatching to switches and collecting extras.

    Attributes:
        switches: Registered switches keyed by name.
        extras_range: ``(required, allowed)`` bounds on the number of extras
            a parse may produce. ``allowed`` of ``None`` means unbounded.
    """

    def __init__(
        self, *switches: Switch, extras_range: tuple[int, Optional[int]] = (0, None)
    ) -> None:
        self.switches: dict[str, Switch] = {}
        for switch in switches:
            if switch.name in self.switches:
                raise ArgParseError(f"Duplicate switch name <{switch.name}>!")
            self.switches[switch.name] = switch
        self.extras_range = extras_range

    def activate_switch(self, name: str, arg: Optional[str] = None) -> None:
        """Run the named switch outside of ``parse``."""
        switch = self.switches.get(name)
        if switch is None:
            raise ArgParseError(f"<{name}> could not activate: it is not a switch!")
        switch.accept(self, arg)

    def parse(self, tokens: Sequence[str]) -> list[str]:
        """Activate switches found in ``tokens`` and return the other tokens.

        Raises:
            ArgParseError: On the first failure; nothing after it is processed.
        """
        extras: list[str] = []
        remaining: Iterator[str] = iter(tokens)
        for token in remaining:
            switch = self.switches.get(token)
            if switch is None:
                extras.append(token)
                continue
            raw = None
            if switch.needs_arg:
                raw = next(remaining, None)
                if raw is None:
                    raise ArgParseError(f"Switch <{switch.name}> expects an argument!")
            switch.accept(self, raw)

        self._check_extras(len(extras))
        _LOGGER.debug("Collected %d extra argument(s)", len(extras))

        for switch in self.switches.values():
            switch.apply_default()
        return extras

    def _check_extras(self, count: int) -> None:
        required, allowed = self.extras_range
        if count < required:
            raise ArgParseError(f"Not enough arguments (got {count} but need {required})!")
        if allowed is not None and count > allowed:
            raise ArgParseError(f"Too many arguments (got {count} when maximum is {allowed})!")

    def render_help(self, sink: TextIO) -> None:
        """Write the option listing, sorted by switch name, to ``sink``."""
        print("OPTIONS", file=sink)
        for name in sorted(self.switches):
            placeholder, description = split_help(self.switches[name].help)
            lhs = f"{name} {placeholder}" if placeholder else name
            if len(lhs) <= HELP_NAME_WIDTH:
                print(f"{HELP_INDENT}{lhs:<{HELP_NAME_WIDTH}}  {description}", file=sink)
            else:
                print(f"{HELP_INDENT}{lhs}", file=sink)
                print(f"{HELP_DESCRIPTION_INDENT}{description}", file=sink)
            print(file=sink)


# --- CLI and Main Execution ---


@dataclass
class CliOptions:
    """Values collected by the front end's switches."""

    about: bool = False
    repeat: int = 1
    separator: str = "\n"
    sources: list[str] = field(default_factory=list)
    show_help: Optional[Callable[[TextIO], None]] = None

    def add_source(self, path: Optional[str]) -> None:
        if path is not None:
            self.sources.append(path)


def _initialize_logging() -> None:
    """Send log records to stderr, once."""
    if _LOGGER.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    _LOGGER.addHandler(handler)
    _LOGGER.setLevel(logging.WARNING)


def _set_verbose(enabled: bool) -> None:
    _LOGGER.setLevel(logging.DEBUG if enabled else logging.WARNING)


def create_parser(options: CliOptions) -> ArgParser:
    """Create the front end's switches, storing their values in ``options``."""

    def store(attribute: str) -> Callable[[Any], None]:
        return lambda value: setattr(options, attribute, value)

    return ArgParser(
        help_switch("-h", store("show_help")),
        help_switch("--help", store("show_help")),
        flag_switch("--about", "Show project info and exit", store("about")),
        flag_switch("--verbose", "Log parsing details to stderr", _set_verbose),
        int_switch(
            "--repeat",
            "<count> Echo each word this many times (1-9)",
            store("repeat"),
            default=1,
            options=range(1, 10),
        ),
        str_switch("--sep", "<text> Separator between echoed words", store("separator"), "\n"),
        existing_file_switch(
            "--from",
            "<file> Read more words from a file, one per line (repeatable)",
            options.add_source,
            multiples_allowed=True,
        ),
        extras_range=(0, MAX_WORDS),
    )


def read_words(path: str) -> list[str]:
    """Return the non-blank, stripped lines of ``path``."""
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise ArgParseError(f"Error reading {path}: {e}") from e
    return [line.strip() for line in lines if line.strip()]


def main(argv: Optional[list[str]] = None) -> int:
    """Run the main entry point."""
    _initialize_logging()
    options = CliOptions()
    parser = create_parser(options)

    try:
        words = parser.parse(sys.argv[1:] if argv is None else argv)

        if options.show_help:
            print("usage: switchboard [options] [word ...]\n")
            options.show_help(sys.stdout)
            return 0

        if options.about:
            print(f"switchboard {__version__} ({__license__})\n{__summary__}")
            return 0

        for path in options.sources:
            words.extend(read_words(path))

        if words:
            print(options.separator.join(word for word in words for _ in range(options.repeat)))
        return 0

    except ArgParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled by user", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


def cli_entrypoint() -> None:
    """Console entry point (kept tiny so tests can patch sys.exit)."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entrypoint()
