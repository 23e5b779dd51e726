EXCERPT_LIMIT = 200

PATCH_FORMAT_INSTRUCTIONS = """
Apply patches to files using a stripped-down, file-oriented diff format. It supports creating new files,
deleting files, and updating existing files (optionally renaming them) with precise changes.

Every patch is wrapped in an envelope:

*** Begin Patch
[ one or more file sections ]
*** End Patch

Each file section starts with one of three headers:

*** Add File: <path> - create a new file. Every following line is a + line (the initial contents).
*** Delete File: <path> - remove an existing file. Nothing follows.
*** Update File: <path> - patch an existing file in place.

An Update File header may be immediately followed by *** Move to: <new path> to rename the file.
Then come one or more hunks, each introduced by @@ (optionally followed by a context line).
Within a hunk each line starts with:

- ' ' (space) for context lines (unchanged)
- '-' for lines to remove
- '+' for lines to add

Context guidelines:
- Show 3 lines of unchanged code above and below each change.
  If two changes are within 3 lines of each other, do NOT duplicate the first change's post-context
  as the second change's pre-context.
- The text after "@@ " is searched for as a whole line in the file. Use it to name the class or
  function a change belongs to when 3 lines of context are not enough to identify the location:

@@ class BaseClass
[3 lines of pre-context]
- [old_code]
+ [new_code]
[3 lines of post-context]

- Add "*** End of File" after the last line of a hunk whose lines must match the end of the file.
- Order hunks from top to bottom within a file. Each hunk is searched for after the previous one.
- Hunks without any '-' or ' ' lines append their '+' lines to the end of the file.

The full grammar definition is below:
Patch := Begin { FileOp } End
Begin := "*** Begin Patch" NEWLINE
End := "*** End Patch" NEWLINE
FileOp := AddFile | DeleteFile | UpdateFile
AddFile := "*** Add File: " path NEWLINE { "+" line NEWLINE }
DeleteFile := "*** Delete File: " path NEWLINE
UpdateFile := "*** Update File: " path NEWLINE [ MoveTo ] { Hunk }
MoveTo := "*** Move to: " newPath NEWLINE
Hunk := "@@" [ header ] NEWLINE { HunkLine } [ "*** End of File" NEWLINE ]
HunkLine := (" " | "-" | "+") text NEWLINE

A full patch can combine several operations:

*** Begin Patch
*** Add File: hello.txt
+Hello world
*** Update File: src/app.py
*** Move to: src/main.py
@@ def greet():
-print("Hi")
+print("Hello, world!")
*** Delete File: obsolete.txt
*** End Patch

It is important to remember:

- You must include a header with your intended action (Add/Delete/Update).
- You must prefix new lines with `+` even when creating a new file.
- File references can only be relative, NEVER ABSOLUTE.
"""
