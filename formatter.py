from ast_nodes import (
    Print, Log, Sleep, TimeNow, ReadFile, WriteFile, Call, Await, Return, If, While, ForRange,
)

INDENT = "    "


def quote(text):
    return '"' + text.replace('"', '\\"') + '"'


def format_block(block):
    # Nested blocks always render on one line.
    if not block.statements:
        return "{}"
    return "{ " + "; ".join(format_stmt(s) for s in block.statements) + " }"


def format_condition(cond):
    return "true" if cond.value else "false"


def format_stmt(stmt):
    if isinstance(stmt, Await):
        return "await " + format_stmt(stmt.stmt)
    if isinstance(stmt, Print):
        return f"print({quote(stmt.text)})"
    if isinstance(stmt, Log):
        return f"log.{stmt.level}({quote(stmt.message)})"
    if isinstance(stmt, Sleep):
        return f"time.sleep({stmt.ms})"
    if isinstance(stmt, TimeNow):
        return "time.now()"
    if isinstance(stmt, ReadFile):
        return f"fs.readFile({quote(stmt.path)})"
    if isinstance(stmt, WriteFile):
        return f"fs.writeFile({quote(stmt.path)}, {quote(stmt.contents)})"
    if isinstance(stmt, Call):
        return f"{stmt.name}()"
    if isinstance(stmt, Return):
        return f"return {stmt.value}"
    if isinstance(stmt, If):
        text = f"if {format_condition(stmt.condition)} {format_block(stmt.then_block)}"
        if stmt.else_block is not None:
            text += f" else {format_block(stmt.else_block)}"
        return text
    if isinstance(stmt, While):
        return f"while {format_condition(stmt.condition)} {format_block(stmt.body)}"
    if isinstance(stmt, ForRange):
        return f"for {stmt.var_name} in {stmt.start}..{stmt.end} {format_block(stmt.body)}"
    raise TypeError(f"Unknown statement node: {stmt.__class__.__name__}")


def format_function(func):
    prefix = ""
    if func.exported:
        prefix += "export "
    if func.is_async:
        prefix += "async "
    signature = f"{prefix}fn {func.name}()"
    if func.return_type is not None:
        signature += f": {func.return_type.text}"

    lines = [signature + " {"]
    for stmt in func.body.statements:
        lines.append(INDENT + format_stmt(stmt))
    lines.append("}")
    return "\n".join(lines)


def format_program(program):
    """Canonical source text for a parsed program.

    Formatting already-formatted source reproduces it byte for byte, and
    re-parsing the output yields an AST equal to ``program``.
    """
    sections = []
    if program.imports:
        sections.append("\n".join(
            f"import {{ {', '.join(imp.names)} }} from {quote(imp.module)}" for imp in program.imports
        ))
    sections.extend(format_function(func) for func in program.functions)
    return "\n\n".join(sections) + "\n"
