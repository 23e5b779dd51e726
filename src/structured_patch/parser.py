import logging
from pathlib import Path
from typing import List, Tuple

from .errors import ParseError
from .models import AddFile, DeleteFile, Hunk, ParsedPatch, UpdateFile, UpdateFileChunk

logger = logging.getLogger(__name__)


class PatchParser:
    BEGIN_PATCH = "*** Begin Patch"
    END_PATCH = "*** End Patch"
    ADD_FILE = "*** Add File: "
    DELETE_FILE = "*** Delete File: "
    UPDATE_FILE = "*** Update File: "
    MOVE_TO = "*** Move to: "
    EOF_MARKER = "*** End of File"
    CHANGE_CONTEXT = "@@ "
    EMPTY_CHANGE_CONTEXT = "@@"
    HEREDOC_STARTS = frozenset({"<<EOF", "<<'EOF'", '<<"EOF"'})

    @classmethod
    def parse(cls, text: str) -> ParsedPatch:
        lines = cls._strip_heredoc(text.strip().split("\n"))
        cls._check_boundaries(lines)

        hunks: List[Hunk] = []
        remaining = lines[1:-1]
        # Line 1 is the Begin marker.
        line_number = 2

        while remaining:
            hunk, consumed = cls._parse_one_hunk(remaining, line_number)
            hunks.append(hunk)
            line_number += consumed
            remaining = remaining[consumed:]

        logger.debug("Parsed %d hunk(s)", len(hunks))
        return ParsedPatch(hunks=hunks, patch="\n".join(lines))

    @classmethod
    def _strip_heredoc(cls, lines: List[str]) -> List[str]:
        """Drops a ``<<EOF`` ... ``EOF`` wrapper around the whole patch."""
        if len(lines) < 4:
            return lines

        if lines[0] in cls.HEREDOC_STARTS and lines[-1].endswith("EOF"):
            return lines[1:-1]

        return lines

    @classmethod
    def _check_boundaries(cls, lines: List[str]) -> None:
        if not lines or (len(lines) == 1 and not lines[0]):
            raise ParseError("Empty patch")

        if lines[0].strip() != cls.BEGIN_PATCH:
            raise ParseError(f"The first line of the patch must be '{cls.BEGIN_PATCH}'")

        if len(lines) < 2 or lines[-1].strip() != cls.END_PATCH:
            raise ParseError(f"The last line of the patch must be '{cls.END_PATCH}'")

    @classmethod
    def _parse_one_hunk(cls, lines: List[str], line_number: int) -> Tuple[Hunk, int]:
        first_line = lines[0].strip()

        if first_line.startswith(cls.ADD_FILE):
            path_str = first_line[len(cls.ADD_FILE) :]
            content = []
            consumed = 1

            for line in lines[1:]:
                if not line.startswith("+"):
                    break
                content.append(line[1:] + "\n")
                consumed += 1

            return AddFile(path=Path(path_str), content="".join(content)), consumed

        elif first_line.startswith(cls.DELETE_FILE):
            path_str = first_line[len(cls.DELETE_FILE) :]
            return DeleteFile(path=Path(path_str)), 1

        elif first_line.startswith(cls.UPDATE_FILE):
            return cls._parse_update_file(lines, line_number)

        raise ParseError(
            f"'{first_line}' is not a valid hunk header. "
            "Valid hunk headers: '*** Add File: {path}', '*** Delete File: {path}', '*** Update File: {path}'",
            line_number,
        )

    @classmethod
    def _parse_update_file(cls, lines: List[str], line_number: int) -> Tuple[UpdateFile, int]:
        path_str = lines[0].strip()[len(cls.UPDATE_FILE) :]
        consumed = 1
        remaining = lines[1:]
        move_to = None

        if remaining and remaining[0].startswith(cls.MOVE_TO):
            move_to = Path(remaining[0][len(cls.MOVE_TO) :])
            consumed += 1
            remaining = remaining[1:]

        chunks: List[UpdateFileChunk] = []

        while remaining:
            if not remaining[0].strip():
                consumed += 1
                remaining = remaining[1:]
                continue

            # Start of the next file operation.
            if remaining[0].startswith("***"):
                break

            chunk, chunk_consumed = cls._parse_update_chunk(
                remaining,
                line_number=line_number + consumed,
                allow_missing_context=not chunks,
            )
            chunks.append(chunk)
            consumed += chunk_consumed
            remaining = remaining[chunk_consumed:]

        if not chunks:
            raise ParseError(f"Update file hunk for path '{path_str}' is empty", line_number)

        return UpdateFile(path=Path(path_str), move_to=move_to, chunks=chunks), consumed

    @classmethod
    def _parse_update_chunk(
        cls,
        lines: List[str],
        *,
        line_number: int,
        allow_missing_context: bool,
    ) -> Tuple[UpdateFileChunk, int]:
        first = lines[0]
        change_context = None

        if first == cls.EMPTY_CHANGE_CONTEXT:
            start_idx = 1
        elif first.startswith(cls.CHANGE_CONTEXT):
            change_context = first[len(cls.CHANGE_CONTEXT) :]
            start_idx = 1
        else:
            if not allow_missing_context:
                raise ParseError(
                    f"Expected update hunk to start with a @@ context marker, got: '{first}'",
                    line_number,
                )
            start_idx = 0

        if start_idx >= len(lines):
            raise ParseError("Update hunk does not contain any lines", line_number + 1)

        old_lines: List[str] = []
        new_lines: List[str] = []
        is_eof = False
        parsed = 0

        for line in lines[start_idx:]:
            if line == cls.EOF_MARKER:
                if not parsed:
                    raise ParseError("Update hunk does not contain any lines", line_number + 1)
                is_eof = True
                parsed += 1
                break

            if line == "":
                old_lines.append("")
                new_lines.append("")
                parsed += 1
                continue

            marker, content = line[0], line[1:]
            if marker == " ":
                old_lines.append(content)
                new_lines.append(content)
            elif marker == "-":
                old_lines.append(content)
            elif marker == "+":
                new_lines.append(content)
            elif not parsed:
                raise ParseError(
                    f"Unexpected line found in update hunk: '{line}'. Every line should start with "
                    "' ' (context line), '+' (added line), or '-' (removed line)",
                    line_number + start_idx,
                )
            else:
                # Anything else begins the next chunk or file operation.
                break

            parsed += 1

        chunk = UpdateFileChunk(old_lines, new_lines, change_context, is_eof)
        return chunk, start_idx + parsed
