import logging
from pathlib import Path
from typing import Awaitable, Callable, List, NamedTuple, Sequence

from .errors import ApplyPatchError
from .models import (
    AddFile,
    ApplyPatchFileChange,
    ChangeType,
    DeleteFile,
    Hunk,
    UpdateFile,
    UpdateFileChunk,
)
from .search import ContentSearcher
from .utils import excerpt

logger = logging.getLogger(__name__)

ReadFile = Callable[[Path], Awaitable[str]]


class Replacement(NamedTuple):
    start: int
    old_length: int
    new_lines: List[str]


class PatchApplier:
    @classmethod
    def apply_chunks_to_content(
        cls, original_content: str, path: Path, chunks: Sequence[UpdateFileChunk]
    ) -> str:
        """Applies ``chunks`` to ``original_content`` and returns the new content.

        The result always ends with a newline.
        """
        original_lines = original_content.split("\n")
        # A final newline leaves an empty trailing element; drop it so line
        # indices match the patch author's counting.
        if original_lines and original_lines[-1] == "":
            original_lines.pop()

        replacements = cls._compute_replacements(original_lines, chunks, path)
        new_lines = cls._apply_replacements(original_lines, replacements)

        if not new_lines or new_lines[-1] != "":
            new_lines.append("")
        return "\n".join(new_lines)

    @classmethod
    def _compute_replacements(
        cls, original_lines: List[str], chunks: Sequence[UpdateFileChunk], path: Path
    ) -> List[Replacement]:
        replacements: List[Replacement] = []
        line_index = 0

        for chunk in chunks:
            if chunk.change_context is not None:
                found_idx = ContentSearcher.find_sequence(
                    original_lines,
                    [chunk.change_context],
                    line_index,
                    False,
                )
                if found_idx is None:
                    raise ApplyPatchError(
                        f"Failed to find context '{chunk.change_context}' in {path}",
                        path=path,
                        excerpt=chunk.change_context,
                    )
                line_index = found_idx + 1

            if not chunk.old_lines:
                insertion_idx = len(original_lines)
                if original_lines and original_lines[-1] == "":
                    insertion_idx -= 1
                replacements.append(Replacement(insertion_idx, 0, list(chunk.new_lines)))
                continue

            pattern: List[str] = list(chunk.old_lines)
            new_block: List[str] = list(chunk.new_lines)
            found_idx = ContentSearcher.find_sequence(
                original_lines,
                pattern,
                line_index,
                chunk.is_end_of_file,
            )

            # The pattern may carry the file's final newline as an empty line.
            if found_idx is None and pattern[-1] == "":
                pattern = pattern[:-1]
                if new_block and new_block[-1] == "":
                    new_block = new_block[:-1]
                found_idx = ContentSearcher.find_sequence(
                    original_lines,
                    pattern,
                    line_index,
                    chunk.is_end_of_file,
                )

            if found_idx is None:
                snippet = excerpt(chunk.old_lines)
                raise ApplyPatchError(
                    f"Failed to find expected lines in {path}:\n{snippet}",
                    path=path,
                    excerpt=snippet,
                )

            logger.debug("Chunk for %s located at line %d", path, found_idx + 1)
            replacements.append(Replacement(found_idx, len(pattern), new_block))
            line_index = found_idx + len(pattern)

        replacements.sort(key=lambda r: r.start)
        return replacements

    @staticmethod
    def _apply_replacements(
        lines: List[str], replacements: List[Replacement]
    ) -> List[str]:
        result = list(lines)
        # Descending order keeps the indices of earlier replacements valid.
        for start, old_length, new_lines in reversed(replacements):
            result[start : start + old_length] = new_lines
        return result

    @classmethod
    async def process_hunk(cls, hunk: Hunk, read_file: ReadFile) -> ApplyPatchFileChange:
        if isinstance(hunk, AddFile):
            return ApplyPatchFileChange(
                type=ChangeType.ADD,
                path=hunk.path,
                new_content=hunk.content,
            )

        elif isinstance(hunk, DeleteFile):
            content = await read_file(hunk.path)
            return ApplyPatchFileChange(
                type=ChangeType.DELETE,
                path=hunk.path,
                original_content=content,
            )

        elif isinstance(hunk, UpdateFile):
            original_content = await read_file(hunk.path)
            new_content = cls.apply_chunks_to_content(
                original_content, hunk.path, hunk.chunks
            )
            return ApplyPatchFileChange(
                type=ChangeType.UPDATE,
                path=hunk.path,
                move_path=hunk.move_to,
                original_content=original_content,
                new_content=new_content,
            )

        raise TypeError(f"Unsupported hunk type: {type(hunk).__name__}")

    @classmethod
    async def process_all_hunks(
        cls, hunks: Sequence[Hunk], read_file: ReadFile
    ) -> List[ApplyPatchFileChange]:
        """Computes one change per hunk, strictly in order.

        Nothing is rolled back: if a hunk fails, the changes computed for
        earlier hunks are simply discarded with the exception.
        """
        changes: List[ApplyPatchFileChange] = []
        for hunk in hunks:
            logger.debug("Processing %s for %s", type(hunk).__name__, hunk.path)
            changes.append(await cls.process_hunk(hunk, read_file))
        return changes
