class ASTNode:
    # Optional source line (1-based). Parser sets this on every node it builds.
    line: int | None = None

    def _fields(self):
        return {k: v for k, v in vars(self).items() if k != "line"}

    # Structural equality; source lines are not part of a node's identity.
    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._fields() == other._fields()

    __hash__ = None

    def __repr__(self):
        args = ", ".join(f"{k}={v!r}" for k, v in self._fields().items())
        return f"{self.__class__.__name__}({args})"


class Program(ASTNode):
    def __init__(self, imports, functions):
        self.imports = imports      # list[Import]
        self.functions = functions  # list[FuncDef]


class Import(ASTNode):
    def __init__(self, names, module):
        self.names = names    # list[str], source order
        self.module = module  # "./helper", "log", ...

    def is_relative(self) -> bool:
        return self.module.startswith("./") or self.module.startswith("../")


class FuncDef(ASTNode):
    def __init__(self, name, body, return_type=None, is_async=False, exported=False):
        self.name = name
        self.body = body                # Block
        self.return_type = return_type  # TypeAnnotation | None
        self.is_async = is_async
        self.exported = exported


# ---------- return type annotations ----------

class TypeAnnotation(ASTNode):
    text = ""


class IntType(TypeAnnotation):
    text = "int"


class StringType(TypeAnnotation):
    text = "string"


class VoidType(TypeAnnotation):
    text = "void"


class UnknownType(TypeAnnotation):
    def __init__(self, raw):
        self.raw = raw

    @property
    def text(self):
        return self.raw


KNOWN_TYPES = {
    "int": IntType,
    "string": StringType,
    "void": VoidType,
}


# ---------- conditions ----------

class BoolLiteral(ASTNode):
    def __init__(self, value: bool):
        self.value = value


# ---------- statements ----------

class Block(ASTNode):
    def __init__(self, statements):
        self.statements = statements


LOG_LEVELS = ("info", "warn", "error")


class Print(ASTNode):
    def __init__(self, text):
        self.text = text


class Log(ASTNode):
    def __init__(self, level, message):
        self.level = level  # one of LOG_LEVELS
        self.message = message


class Sleep(ASTNode):
    def __init__(self, ms):
        self.ms = ms  # non-negative int


class TimeNow(ASTNode):
    pass


class ReadFile(ASTNode):
    def __init__(self, path):
        self.path = path


class WriteFile(ASTNode):
    def __init__(self, path, contents):
        self.path = path
        self.contents = contents


class Call(ASTNode):
    def __init__(self, name):
        self.name = name


class Await(ASTNode):
    def __init__(self, stmt):
        self.stmt = stmt  # never another Await


class Return(ASTNode):
    def __init__(self, value):
        self.value = value  # int


class If(ASTNode):
    def __init__(self, condition, then_block, else_block=None):
        self.condition = condition
        self.then_block = then_block
        self.else_block = else_block  # Block | None


class While(ASTNode):
    def __init__(self, condition, body):
        self.condition = condition
        self.body = body


class ForRange(ASTNode):
    def __init__(self, var_name, start, end, body):
        # start inclusive, end exclusive
        self.var_name = var_name
        self.start = start
        self.end = end
        self.body = body


def child_blocks(stmt):
    """Nested statement sequences of a control statement (empty for simple ones)."""
    if isinstance(stmt, If):
        blocks = [stmt.then_block]
        if stmt.else_block is not None:
            blocks.append(stmt.else_block)
        return blocks
    if isinstance(stmt, (While, ForRange)):
        return [stmt.body]
    return []
