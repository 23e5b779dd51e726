import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .errors import PatchError
from .workspace import apply_patch


async def run_apply_patch(patch_text: str, workdir: Path = Path("."), dry_run: bool = False) -> int:
    try:
        affected = await apply_patch(patch_text, workdir, dry_run=dry_run)
    except (PatchError, OSError) as e:
        print(str(e), file=sys.stderr)
        return 1

    if dry_run:
        print("Dry run. The following files would be updated:")
    else:
        print("Success. Updated the following files:")
    for path in affected.added:
        print(f"A {path}")
    for path in affected.modified:
        print(f"M {path}")
    for path in affected.deleted:
        print(f"D {path}")
    for path in affected.unchanged:
        print(f"= {path}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Apply a structured patch to files.")
    parser.add_argument("patch_file", nargs="?", help="Path to the patch file. If omitted, reads from stdin.")
    parser.add_argument(
        "-C",
        "--workdir",
        type=Path,
        default=Path("."),
        help="Directory the patch paths are relative to (default: current directory).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Check the patch without writing any files.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.patch_file:
        with open(args.patch_file, "r", encoding="utf-8") as f:
            patch_text = f.read()
    else:
        if sys.stdin.isatty():
            parser.print_help()
            sys.exit(2)
        patch_text = sys.stdin.read()

    sys.exit(asyncio.run(run_apply_patch(patch_text, args.workdir, args.dry_run)))
