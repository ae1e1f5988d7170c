"""
Exceptions raised by build tasks.
"""


class BuildError(RuntimeError):
    """A task could not produce its output."""


class IncludeError(BuildError):
    """An include directive could not be resolved."""


class TranspileError(BuildError):
    """The JavaScript transpiler exited with an error."""
