class VoltError(Exception):
    pass


class ParseError(VoltError):
    def __init__(self, message: str, line: int = 1, column: int = 1, path: str | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.path = path

    def location(self) -> str:
        return f"line {self.line}, col {self.column}"

    def __str__(self) -> str:
        text = f"parse error: {self.message} ({self.location()})"
        if self.path:
            return f"{self.path}: {text}"
        return text


class VoltImportError(ParseError):
    # Raised when an imported file cannot be read. line points at the import.
    def __str__(self) -> str:
        text = f"import error: {self.message} ({self.location()})"
        if self.path:
            return f"{self.path}: {text}"
        return text


class TypeCheckError(VoltError):
    def __init__(self, message: str, line: int = 1, path: str | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.path = path

    def __str__(self) -> str:
        text = f"type error: {self.message} (line {self.line})"
        if self.path:
            return f"{self.path}: {text}"
        return text
