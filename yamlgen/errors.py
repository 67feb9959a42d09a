"""Exception hierarchy shared by the generation pipeline."""


class GeneratorError(Exception):
    """Base exception for code generation errors.

    Every failure that aborts a run derives from this class so the command
    line front end can report it uniformly.
    """

    pass
