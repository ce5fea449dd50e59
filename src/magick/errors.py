"""Exception types raised by the geometry toolkit.

Blank or unparseable geometry text is not an error: ``Geometry.parse`` returns
``None`` for both. Exceptions are reserved for the dimension probe.

GeometryError
    ProbeError
        CommandLineError
    NotIdentifiedError
"""

from __future__ import annotations

from typing import Optional, Sequence


class GeometryError(Exception):
    """Base class for all toolkit errors."""


class ProbeError(GeometryError):
    """Image dimensions could not be measured."""


class CommandLineError(ProbeError):
    """An external command was missing or exited with a non-zero status.

    Attributes
    ----------
    command
        The argument vector that was executed.
    returncode
        Exit status, or None when the executable could not be started.
    stderr
        Captured standard error output, if any.
    """

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            message = f"Could not run command: {self.command[0]}"
        else:
            message = f"Command {self.command[0]!r} exited with status {returncode}"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class NotIdentifiedError(GeometryError):
    """The dimension probe output could not be read as a geometry."""
