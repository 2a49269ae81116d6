# --- Directory scanning convenience -----------------------------------------
import os
import sys
from typing import Iterable

from super_methods.src.super_methods.models.ast_models import Program
from super_methods.src.super_methods.parser import JavaScriptParser


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def collect_js_files(paths: Iterable[str]) -> list[str]:
    """
    Expands directories into their .js files (recursively, sorted so that the
    compilation-unit order is stable). Plain file paths are kept as given.
    """
    files = []
    for path in paths:
        if os.path.isdir(path):
            for dirpath, dirnames, filenames in os.walk(path):
                dirnames.sort()
                for fn in sorted(filenames):
                    if fn.endswith(".js"):
                        files.append(os.path.join(dirpath, fn))
        else:
            files.append(path)
    return files


def load_program(parser: JavaScriptParser, paths: Iterable[str]) -> Program:
    """
    Reads every file into one Program, one compilation unit per file. Files
    that cannot be read are reported and skipped.
    """
    sources = []
    for full in collect_js_files(paths):
        try:
            sources.append((full, read_text(full)))
        except OSError as e:
            print(f"[WARN] Failed to read {full}: {e}", file=sys.stderr)
    return parser.parse_program(sources)
