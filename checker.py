from ast_nodes import IntType, VoidType, Await, Return, child_blocks
from diagnostics import TypeCheckError

ENTRY_FUNCTION = "main"


def find_value_return(statements):
    """First return-with-value statement in a body, searching nested blocks."""
    for stmt in statements:
        if isinstance(stmt, Await):
            stmt = stmt.stmt
        if isinstance(stmt, Return):
            return stmt
        for block in child_blocks(stmt):
            found = find_value_return(block.statements)
            if found is not None:
                return found
    return None


class TypeChecker:
    def __init__(self, entry: str = ENTRY_FUNCTION, require_entry: bool = False):
        self.entry = entry
        self.require_entry = require_entry

    def check(self, program):
        seen = set()
        for func in program.functions:
            if func.name in seen:
                raise TypeCheckError(f"function '{func.name}' is defined more than once", func.line or 1)
            seen.add(func.name)
            self.check_function(func)

        if self.require_entry and self.entry not in seen:
            raise TypeCheckError(f"entry function '{self.entry}' not found", 1)

    def check_function(self, func):
        is_entry = func.name == self.entry
        if is_entry and not isinstance(func.return_type, (IntType, VoidType)):
            raise TypeCheckError(
                f"entry function '{func.name}' must declare return type int or void",
                func.line or 1,
            )

        returns_int = isinstance(func.return_type, IntType)
        ret = find_value_return(func.body.statements)

        if ret is not None and not returns_int:
            declared = func.return_type.text if func.return_type is not None else "void"
            raise TypeCheckError(
                f"function '{func.name}' has return type {declared} but returns a value; declare ': int'",
                ret.line or func.line or 1,
            )

        if ret is None and returns_int and not is_entry:
            statements = func.body.statements
            line = statements[-1].line if statements else func.line
            raise TypeCheckError(
                f"function '{func.name}' declares return type int but has no return statement",
                line or 1,
            )


def check_program(program, entry: str = ENTRY_FUNCTION, require_entry: bool = False):
    TypeChecker(entry, require_entry).check(program)
    return program
