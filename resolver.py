import logging
import os

from ast_nodes import Program
from diagnostics import ParseError, VoltImportError
from filesystem import LocalFileSystem
from parser import parse_program

log = logging.getLogger(__name__)

SOURCE_EXTENSION = ".vts"


class ImportResolver:
    def __init__(self, fs=None):
        self.fs = fs or LocalFileSystem()
        self.visited = set()  # canonical paths already loaded

    def load(self, entry_path):
        self.visited = set()
        return self._load(entry_path, import_line=1)

    def _load(self, path, import_line):
        abs_path = self.fs.canonicalize(path)
        if abs_path in self.visited:
            # Already merged (or being merged) higher up the import chain.
            log.debug("skipping already loaded %s", abs_path)
            return Program([], [])
        self.visited.add(abs_path)

        log.debug("loading %s", abs_path)
        try:
            source = self.fs.read_text(abs_path)
        except OSError as e:
            raise VoltImportError(f"failed to read {abs_path}: {e.strerror or e}", import_line) from e
        except UnicodeDecodeError as e:
            raise VoltImportError(f"failed to read {abs_path}: not valid UTF-8 ({e.reason})", import_line) from e

        try:
            program = parse_program(source)
        except ParseError as e:
            if e.path is None:
                e.path = abs_path
            raise

        base_dir = os.path.dirname(abs_path) or "."
        extra_functions = []
        for imp in program.imports:
            if not imp.is_relative():
                continue
            try:
                nested = self._load(self.resolve(base_dir, imp.module), imp.line or 1)
            except VoltImportError as e:
                if e.path is None:
                    e.path = abs_path
                raise
            extra_functions.extend(nested.functions)

        program.functions.extend(extra_functions)
        return program

    def resolve(self, base_dir, module):
        resolved = os.path.join(base_dir, module)
        if not os.path.splitext(resolved)[1]:
            resolved += SOURCE_EXTENSION
        return resolved


def load_program(entry_path, fs=None):
    return ImportResolver(fs).load(entry_path)
