"""Command-line builders for the external binaries."""

from __future__ import annotations

from typing import Any

from .errors import ExecutableError


class Executable:
    """Builds an argv list: binary, command, arguments, then ``--options``."""

    binary = ""

    def __init__(self, binary: str | None = None) -> None:
        self.binary = binary or self.binary
        self.command: str | None = None
        self.arguments: list[str] = []
        self.options: dict[str, Any] = {}

    def set_command(self, command: str) -> "Executable":
        self.command = command
        return self

    def set_arguments(self, arguments: list[Any]) -> "Executable":
        self.arguments = [str(arg) for arg in arguments]
        return self

    def set_argument(self, argument: Any) -> "Executable":
        self.arguments.append(str(argument))
        return self

    def set_options(self, options: dict[str, Any]) -> "Executable":
        self.options.update(options)
        return self

    def set_option(self, name: str, value: Any = True) -> "Executable":
        self.options[name] = value
        return self

    def _rendered_options(self) -> list[str]:
        rendered = []
        for name, value in self.options.items():
            if value is None or value is False:
                continue
            if value is True:
                rendered.append(f"--{name}")
            else:
                rendered.append(f"--{name}={value}")
        return rendered

    def build(self) -> list[str]:
        if not self.command and not self.arguments:
            raise ExecutableError(f"No command or arguments were given for {self.binary}.")
        argv = [self.binary]
        if self.command:
            argv.append(self.command)
        argv.extend(self.arguments)
        argv.extend(self._rendered_options())
        return argv


class Drush(Executable):
    binary = "drush"


class Composer(Executable):
    binary = "composer"


EXECUTABLES: dict[str, type[Executable]] = {
    "drush": Drush,
    "composer": Composer,
}


def create_executable(executable_id: str, binary: str | None = None) -> Executable:
    try:
        cls = EXECUTABLES[executable_id]
    except KeyError:
        raise ExecutableError(f"Unknown executable '{executable_id}'.")
    return cls(binary)
