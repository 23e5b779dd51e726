from pathlib import Path


class PatchError(Exception):
    """Base class for every error raised while parsing or applying a patch."""


class ParseError(PatchError, ValueError):
    """The patch text does not follow the patch grammar."""

    def __init__(self, message: str, line_number: int | None = None):
        self.message = message
        self.line_number = line_number
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)


class ApplyPatchError(PatchError, RuntimeError):
    """A chunk's context or old lines could not be located in the target file."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        excerpt: str | None = None,
    ):
        self.message = message
        self.path = path
        self.excerpt = excerpt
        super().__init__(message)


class WorkspaceError(PatchError, RuntimeError):
    pass
