from .applier import PatchApplier
from .cli import main
from .constants import PATCH_FORMAT_INSTRUCTIONS
from .errors import ApplyPatchError, ParseError, PatchError, WorkspaceError
from .models import (
    AddFile,
    AffectedPaths,
    ApplyPatchFileChange,
    ChangeType,
    DeleteFile,
    Hunk,
    ParsedPatch,
    UpdateFile,
    UpdateFileChunk,
)
from .parser import PatchParser
from .search import ContentSearcher
from .workspace import Workspace, apply_patch


__all__ = [
    "apply_patch",
    "main",
    "PatchParser",
    "ContentSearcher",
    "PatchApplier",
    "Workspace",
    "PATCH_FORMAT_INSTRUCTIONS",
    "PatchError",
    "ParseError",
    "ApplyPatchError",
    "WorkspaceError",
    "Hunk",
    "AddFile",
    "DeleteFile",
    "UpdateFile",
    "UpdateFileChunk",
    "ParsedPatch",
    "ChangeType",
    "ApplyPatchFileChange",
    "AffectedPaths",
]
