import logging
import os
from pathlib import Path
from typing import Sequence, Set

import aiofiles

from .applier import PatchApplier
from .errors import ParseError, WorkspaceError
from .models import AffectedPaths, ApplyPatchFileChange, ChangeType
from .parser import PatchParser

logger = logging.getLogger(__name__)


class Workspace:
    """A directory that patches are read from and written to.

    Every path handed to the workspace is relative and must stay inside
    ``root`` once resolved.
    """

    def __init__(self, root: Path = Path(".")):
        self.root = Path(root).resolve()

    def resolve(self, rel_path: Path) -> Path:
        if rel_path.is_absolute():
            raise WorkspaceError(f"Path must be within the workspace: {rel_path}")

        target = (self.root / rel_path).resolve()
        if self.root != target and self.root not in target.parents:
            raise WorkspaceError(f"Path must be within the workspace: {rel_path}")
        return target

    async def read_file(self, rel_path: Path) -> str:
        """Reads a file as UTF-8. A missing file raises ``FileNotFoundError``."""
        async with aiofiles.open(self.resolve(rel_path), "r", encoding="utf-8") as f:
            return await f.read()

    def validate(self, changes: Sequence[ApplyPatchFileChange]) -> None:
        """Checks a whole batch against the disk before anything is written.

        ``removed`` and ``created`` track what earlier changes in the batch
        will have done by the time a later change runs.
        """
        removed: Set[Path] = set()
        created: Set[Path] = set()

        def will_exist(target: Path) -> bool:
            return target in created or (target.exists() and target not in removed)

        for change in changes:
            target = self.resolve(change.path)

            if change.type is ChangeType.ADD:
                if will_exist(target):
                    raise WorkspaceError(
                        f"File already exists: {change.path}. Use Update File instead."
                    )
                created.add(target)
                removed.discard(target)

            elif change.type is ChangeType.DELETE:
                if not will_exist(target):
                    raise WorkspaceError(
                        f"File not found: {change.path}. Cannot delete a non-existent file."
                    )
                removed.add(target)
                created.discard(target)

            else:
                if not will_exist(target):
                    raise WorkspaceError(
                        f"File not found: {change.path}. Cannot update a non-existent file."
                    )
                dest = self.resolve(change.target_path)
                if dest != target:
                    if will_exist(dest):
                        raise WorkspaceError(
                            f"Cannot move {change.path} to {change.move_path}: destination already exists"
                        )
                    removed.add(target)
                    created.discard(target)
                    created.add(dest)
                    removed.discard(dest)

    async def commit(
        self, changes: Sequence[ApplyPatchFileChange], dry_run: bool = False
    ) -> AffectedPaths:
        self.validate(changes)

        affected = AffectedPaths()
        for change in changes:
            if change.type is ChangeType.ADD:
                if not dry_run:
                    await self._write(change.path, change.new_content or "")
                affected.added.append(change.path)

            elif change.type is ChangeType.DELETE:
                if not dry_run:
                    self._remove(change.path)
                affected.deleted.append(change.path)

            elif change.is_noop:
                affected.unchanged.append(change.path)

            else:
                if not dry_run:
                    await self._write(change.target_path, change.new_content or "")
                    if change.move_path is not None and self.resolve(
                        change.move_path
                    ) != self.resolve(change.path):
                        self._remove(change.path)
                affected.modified.append(change.target_path)

        return affected

    async def _write(self, rel_path: Path, content: str) -> None:
        path = self.resolve(rel_path)
        logger.debug("Writing %s", path)
        try:
            if path.parent != self.root:
                path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            raise WorkspaceError(f"Failed to write file {rel_path}") from e

    def _remove(self, rel_path: Path) -> None:
        path = self.resolve(rel_path)
        logger.debug("Removing %s", path)
        try:
            os.remove(path)
        except OSError as e:
            raise WorkspaceError(f"Failed to delete file {rel_path}") from e


async def apply_patch(
    patch_text: str, workdir: Path = Path("."), dry_run: bool = False
) -> AffectedPaths:
    """Parses ``patch_text`` and applies it to the files under ``workdir``.

    Every hunk is computed and the whole batch validated before anything is
    written, so a patch that fails to parse or apply leaves the workspace
    untouched.
    """
    patch = PatchParser.parse(patch_text)
    if not patch.hunks:
        raise ParseError("No files were modified.")

    workspace = Workspace(workdir)
    changes = await PatchApplier.process_all_hunks(patch.hunks, workspace.read_file)
    return await workspace.commit(changes, dry_run=dry_run)
