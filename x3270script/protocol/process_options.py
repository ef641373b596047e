"""Command-line options passed to a spawned emulator process."""

from typing import Iterable, List

from ..exceptions import ArgumentError
from .quoting import CONTROL_ESCAPES, is_control, quote_string


class ProcessOption:
    """Base class for one emulator command-line option.

    Option names are given with or without their leading '-'. ``quote()``
    renders the option as command-line text; ``argv()`` gives the same
    option as separate, unquoted process arguments.
    """

    def __init__(self, name: str) -> None:
        plain = name[1:] if name.startswith("-") else name
        if not plain.strip() or any(
            c in '"\\' or c.isspace() or is_control(c) for c in plain
        ):
            raise ArgumentError("Invalid option name", {"name": name})
        self.name = plain

    def quote(self) -> str:
        raise NotImplementedError

    def argv(self) -> List[str]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.quote()!r})"


class ProcessOptionWithoutValue(ProcessOption):
    """A flag option, e.g. ``-trace``."""

    def quote(self) -> str:
        return f"-{self.name}"

    def argv(self) -> List[str]:
        return [f"-{self.name}"]


class ProcessOptionWithValue(ProcessOption):
    """An option with a value, e.g. ``-tracefile "C:\\temp\\x.trc"``."""

    # Controls with C escapes are accepted in the value
    allow_c_controls = False

    def __init__(self, name: str, value: str) -> None:
        super().__init__(name)
        for c in value:
            if c == '"' or (
                is_control(c)
                and not (self.allow_c_controls and c in CONTROL_ESCAPES)
            ):
                raise ArgumentError("Invalid option value", {"value": value})
        self.value = value

    def quote(self) -> str:
        # Command-line values do not need backslashes escaped.
        return f"-{self.name} {quote_string(self.value, quote_backslashes=False)}"

    def argv(self) -> List[str]:
        return [f"-{self.name}", self.value]


class ProcessOptionXrm(ProcessOptionWithValue):
    """An X resource definition, passed as ``-xrm "s3270.resource: value"``."""

    allow_c_controls = True
    RESOURCE_PREFIXES = ("s3270.", "ws3270.", "*")

    def __init__(self, resource: str, value: str, program: str = "s3270") -> None:
        if not resource.startswith(self.RESOURCE_PREFIXES):
            resource = f"{program}.{resource}"
        super().__init__("xrm", f"{resource}: {value}")

    def quote(self) -> str:
        return f"-{self.name} {quote_string(self.value, quote_backslashes=True)}"


def check_options(options: Iterable[object]) -> List[ProcessOption]:
    """Return options as a list, rejecting anything that is not a ProcessOption."""
    checked = []
    for option in options:
        if not isinstance(option, ProcessOption):
            raise ArgumentError("Not a process option", {"option": repr(option)})
        checked.append(option)
    return checked
