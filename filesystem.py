import os


class LocalFileSystem:
    """Filesystem access used by the import resolver and the CLI.

    Anything exposing ``read_text``, ``write_text`` and ``canonicalize`` can be
    passed in its place.
    """

    def read_text(self, path: str) -> str:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def write_text(self, path: str, text: str) -> None:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)

    def canonicalize(self, path: str) -> str:
        return os.path.normpath(os.path.realpath(path))
