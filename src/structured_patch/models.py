from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Union


@dataclass(frozen=True)
class UpdateFileChunk:
    """One contiguous edit region inside an Update File hunk.

    Lines present in both ``old_lines`` and ``new_lines`` are unchanged
    context. ``change_context`` is an anchor line searched for before
    ``old_lines``, and ``is_end_of_file`` pins ``old_lines`` to the tail of
    the file.
    """

    old_lines: List[str]
    new_lines: List[str]
    change_context: str | None = None
    is_end_of_file: bool = False


@dataclass(frozen=True)
class AddFile:
    path: Path
    content: str


@dataclass(frozen=True)
class DeleteFile:
    path: Path


@dataclass(frozen=True)
class UpdateFile:
    path: Path
    move_to: Path | None
    chunks: List[UpdateFileChunk]


Hunk = Union[AddFile, DeleteFile, UpdateFile]


@dataclass(frozen=True)
class ParsedPatch:
    hunks: List[Hunk]
    # Patch text with any heredoc wrapper and surrounding whitespace removed.
    patch: str


class ChangeType(str, Enum):
    ADD = "add"
    DELETE = "delete"
    UPDATE = "update"


@dataclass(frozen=True)
class ApplyPatchFileChange:
    """The computed effect of one hunk.

    Nothing has been written when this is produced; the caller performs
    the actual mutation (see ``Workspace.commit``).
    """

    type: ChangeType
    path: Path
    move_path: Path | None = None
    original_content: str | None = None
    new_content: str | None = None

    @property
    def target_path(self) -> Path:
        return self.move_path or self.path

    @property
    def is_noop(self) -> bool:
        return (
            self.type is ChangeType.UPDATE
            and self.move_path is None
            and self.original_content == self.new_content
        )


@dataclass
class AffectedPaths:
    added: List[Path] = field(default_factory=list)
    modified: List[Path] = field(default_factory=list)
    deleted: List[Path] = field(default_factory=list)
    unchanged: List[Path] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.added or self.modified or self.deleted or self.unchanged)
