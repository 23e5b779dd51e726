from pathlib import Path

import pytest

from structured_patch.errors import ParseError
from structured_patch.models import AddFile, DeleteFile, UpdateFile, UpdateFileChunk
from structured_patch.parser import PatchParser
from structured_patch.utils import get_patch_format_instructions


def _parse(text: str):
    return PatchParser.parse(text)


def test_rejects_text_without_begin_marker():
    with pytest.raises(ParseError, match=r"must be '\*\*\* Begin Patch'"):
        _parse("not a patch")


def test_rejects_patch_without_end_marker():
    with pytest.raises(ParseError, match=r"must be '\*\*\* End Patch'"):
        _parse("*** Begin Patch\nbad")


def test_rejects_lone_begin_marker():
    with pytest.raises(ParseError, match="End Patch"):
        _parse("*** Begin Patch")


def test_rejects_empty_input():
    with pytest.raises(ParseError, match="Empty patch"):
        _parse("   \n  ")


def test_empty_envelope_has_no_hunks():
    assert _parse("*** Begin Patch\n*** End Patch").hunks == []


def test_add_file():
    patch = _parse("*** Begin Patch\n*** Add File: a.txt\n+x\n+y\n*** End Patch")

    assert patch.hunks == [AddFile(path=Path("a.txt"), content="x\ny\n")]


def test_delete_file():
    patch = _parse("*** Begin Patch\n*** Delete File: path/delete.py\n*** End Patch")

    assert patch.hunks == [DeleteFile(path=Path("path/delete.py"))]


def test_update_file_with_move_and_context():
    patch = _parse(
        """*** Begin Patch
*** Update File: path/update.py
*** Move to: path/update2.py
@@ def f():
-    pass
+    return 123
*** End Patch"""
    )

    assert patch.hunks == [
        UpdateFile(
            path=Path("path/update.py"),
            move_to=Path("path/update2.py"),
            chunks=[UpdateFileChunk(["    pass"], ["    return 123"], "def f():", False)],
        )
    ]


def test_multiple_file_operations_keep_order():
    patch = _parse(
        """*** Begin Patch
*** Add File: path/add.py
+abc
+def
*** Delete File: path/delete.py
*** Update File: path/update.py
@@
+line
*** Add File: other.py
+content
*** End Patch"""
    )

    assert [type(h) for h in patch.hunks] == [AddFile, DeleteFile, UpdateFile, AddFile]
    assert patch.hunks[0].content == "abc\ndef\n"
    assert patch.hunks[2].chunks == [UpdateFileChunk([], ["line"])]
    assert patch.hunks[3].content == "content\n"


def test_first_chunk_may_omit_context_marker():
    patch = _parse(
        """*** Begin Patch
*** Update File: file2.py
 import foo
+bar
*** End Patch"""
    )

    chunk = patch.hunks[0].chunks[0]
    assert chunk.change_context is None
    assert chunk.old_lines == ["import foo"]
    assert chunk.new_lines == ["import foo", "bar"]


def test_later_chunks_require_context_marker():
    """A chunk only ends at an unrecognized line, so that line must be '@@'."""

    text = """*** Begin Patch
*** Update File: file.py
@@
 foo
+bar
bogus
*** End Patch"""
    with pytest.raises(ParseError, match="Expected update hunk to start with a @@ context marker") as excinfo:
        _parse(text)
    assert excinfo.value.line_number == 6


def test_multiple_chunks_and_blank_context_lines():
    patch = _parse(
        """*** Begin Patch
*** Update File: multi.txt
@@
 foo
-bar
+BAR

@@ def baz():
 baz
-qux
+QUX
*** End Patch"""
    )

    assert patch.hunks[0].chunks == [
        UpdateFileChunk(["foo", "bar", ""], ["foo", "BAR", ""]),
        UpdateFileChunk(["baz", "qux"], ["baz", "QUX"], "def baz():"),
    ]


def test_end_of_file_marker_sets_flag():
    patch = _parse(
        """*** Begin Patch
*** Update File: file.py
@@
+line
*** End of File
*** End Patch"""
    )

    assert patch.hunks[0].chunks == [UpdateFileChunk([], ["line"], None, True)]


def test_end_of_file_marker_without_body_is_rejected():
    text = """*** Begin Patch
*** Update File: file.py
@@
*** End of File
*** End Patch"""
    with pytest.raises(ParseError, match="does not contain any lines"):
        _parse(text)


def test_update_without_chunks_is_rejected():
    text = """*** Begin Patch
*** Update File: test.py
*** End Patch"""
    with pytest.raises(ParseError, match="Update file hunk for path 'test.py' is empty") as excinfo:
        _parse(text)
    assert excinfo.value.line_number == 2
    assert str(excinfo.value).startswith("Line 2: ")


def test_unexpected_first_body_line_is_rejected():
    text = """*** Begin Patch
*** Update File: test.py
@@
bogus
*** End Patch"""
    with pytest.raises(ParseError, match="Unexpected line found in update hunk: 'bogus'") as excinfo:
        _parse(text)
    assert excinfo.value.line_number == 4


def test_unknown_file_operation_is_rejected():
    text = """*** Begin Patch
*** Frobnicate File: x
*** End Patch"""
    with pytest.raises(ParseError, match="is not a valid hunk header") as excinfo:
        _parse(text)
    assert excinfo.value.line_number == 2


@pytest.mark.parametrize("opener", ["<<EOF", "<<'EOF'", '<<"EOF"'])
def test_heredoc_wrapper_is_stripped(opener):
    text = f"{opener}\n*** Begin Patch\n*** Add File: foo\n+hi\n*** End Patch\nEOF"
    patch = _parse(text)

    assert patch.hunks == [AddFile(path=Path("foo"), content="hi\n")]
    assert patch.patch == "*** Begin Patch\n*** Add File: foo\n+hi\n*** End Patch"


def test_other_heredoc_tags_are_not_recognised():
    text = "<<PATCH\n*** Begin Patch\n*** Add File: foo\n+hi\n*** End Patch\nPATCH"
    with pytest.raises(ParseError, match="Begin Patch"):
        _parse(text)


def test_surrounding_whitespace_is_trimmed():
    patch = _parse("\n\n  *** Begin Patch\n*** Delete File: a\n*** End Patch  \n\n")

    assert patch.hunks == [DeleteFile(path=Path("a"))]
    assert patch.patch == "*** Begin Patch\n*** Delete File: a\n*** End Patch"


def test_format_instructions_example_parses():
    instructions = get_patch_format_instructions()
    start = instructions.index("*** Begin Patch\n*** Add File")
    end = instructions.index("*** End Patch", start) + len("*** End Patch")

    patch = _parse(instructions[start:end])

    assert [type(h) for h in patch.hunks] == [AddFile, UpdateFile, DeleteFile]
    assert patch.hunks[1].move_to == Path("src/main.py")


def test_blank_body_line_is_context_on_both_sides():
    patch = _parse("*** Begin Patch\n*** Update File: a.txt\n@@\n\n*** End Patch")

    assert patch.hunks[0].chunks == [UpdateFileChunk([""], [""])]
