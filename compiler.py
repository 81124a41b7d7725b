import logging

from ast_nodes import (
    Program, IntType, VoidType, BoolLiteral, Block,
    Print, Log, Sleep, TimeNow, ReadFile, WriteFile, Call, Await, Return, If, While, ForRange,
)
from checker import ENTRY_FUNCTION
from runtime import PREAMBLE, c_string

log = logging.getLogger(__name__)

INDENT = "    "
VOID_ENTRY_NAME = "vts_main"


class EmitState:
    """Per-function emission state, threaded through every nested block."""

    def __init__(self, returns_int: bool):
        self.returns_int = returns_int
        self.saw_return = False
        self._tmp_id = 0

    def new_tmp(self) -> str:
        self._tmp_id += 1
        return f"vts_tmp_{self._tmp_id}"

    def failure_return(self) -> str:
        return "return 1;" if self.returns_int else "return;"


class Compiler:
    def __init__(self, source_path: str | None = None, entry: str = ENTRY_FUNCTION):
        self.source_path = source_path
        self.entry = entry
        self.lines = []
        self.void_entry = False

    def emit(self, text, depth=0):
        self.lines.append(INDENT * depth + text if text else "")

    def compile(self, node):
        # entry point
        if not isinstance(node, Program):
            raise TypeError("Compiler expects a Program node at the top")

        self.lines = []
        self.void_entry = any(
            f.name == self.entry and isinstance(f.return_type, VoidType) for f in node.functions
        )

        self.emit("// generated by volt (C99)")
        if self.source_path is not None:
            self.emit(f"// Source: {self.source_path}")
        self.lines.append(PREAMBLE)

        self.emit("// --- user prototypes ---")
        for func in node.functions:
            self.emit(f"{self.signature(func)};")
        self.emit("")

        for func in node.functions:
            self.compile_funcdef(func)

        if self.void_entry:
            # C requires int main; the void entry body lives in vts_main.
            self.emit("int main(void) {")
            self.emit(f"{VOID_ENTRY_NAME}();", 1)
            self.emit("}")
            self.emit("")

        return "\n".join(self.lines)

    # -------- functions --------
    def returns_int(self, func):
        if func.name == self.entry:
            return not isinstance(func.return_type, VoidType)
        return isinstance(func.return_type, IntType)

    def c_name(self, name):
        if name == self.entry and self.void_entry:
            return VOID_ENTRY_NAME
        return name

    def signature(self, func):
        if func.name == self.entry and self.void_entry:
            return f"static void {VOID_ENTRY_NAME}(void)"
        c_type = "int" if self.returns_int(func) else "void"
        return f"{c_type} {func.name}(void)"

    def compile_funcdef(self, func):
        log.debug("emitting function %s", func.name)
        state = EmitState(self.returns_int(func))

        self.emit(f"{self.signature(func)} {{")
        self.compile_block(func.body, state, 1)

        # Default return only when the body never wrote one, at any depth.
        if not state.saw_return:
            self.emit("return 0;" if state.returns_int else "return;", 1)
        self.emit("}")
        self.emit("")

    # -------- statements --------
    def compile_block(self, block, state, depth):
        for stmt in block.statements:
            self.compile_stmt(stmt, state, depth)

    def compile_stmt(self, node, state, depth):
        if isinstance(node, Await):
            # await is erased; the wrapped statement runs synchronously
            self.compile_stmt(node.stmt, state, depth)
            return

        if isinstance(node, Print):
            self.emit(f'printf("%s\\n", {c_string(node.text)});', depth)
            return

        if isinstance(node, Log):
            self.emit(f"vts_log_{node.level}({c_string(node.message)});", depth)
            return

        if isinstance(node, Sleep):
            self.emit(f"vts_sleep_ms({node.ms});", depth)
            return

        if isinstance(node, TimeNow):
            tmp = state.new_tmp()
            self.emit(f"long long {tmp} = vts_time_now_ms();", depth)
            self.emit(f'printf("unix epoch (ms): %lld\\n", {tmp});', depth)
            return

        if isinstance(node, ReadFile):
            self.compile_read_file(node, state, depth)
            return

        if isinstance(node, WriteFile):
            self.compile_write_file(node, state, depth)
            return

        if isinstance(node, Call):
            self.emit(f"{self.c_name(node.name)}();", depth)
            return

        if isinstance(node, Return):
            state.saw_return = True
            if state.returns_int:
                self.emit(f"return {node.value};", depth)
            else:
                self.emit("return;", depth)
            return

        if isinstance(node, If):
            self.compile_if(node, state, depth)
            return

        if isinstance(node, While):
            self.emit(f"while ({self.compile_condition(node.condition)}) {{", depth)
            self.compile_block(node.body, state, depth + 1)
            self.emit("}", depth)
            return

        if isinstance(node, ForRange):
            v = node.var_name
            self.emit(f"for (long long {v} = {node.start}; {v} < {node.end}; {v}++) {{", depth)
            self.compile_block(node.body, state, depth + 1)
            self.emit("}", depth)
            return

        raise TypeError(f"Unknown statement node: {node.__class__.__name__}")

    def compile_if(self, node, state, depth):
        self.emit(f"if ({self.compile_condition(node.condition)}) {{", depth)
        self.compile_block(node.then_block, state, depth + 1)
        if isinstance(node.else_block, Block):
            self.emit("} else {", depth)
            self.compile_block(node.else_block, state, depth + 1)
        self.emit("}", depth)

    def compile_read_file(self, node, state, depth):
        tmp = state.new_tmp()
        path = c_string(node.path)
        self.emit(f"char *{tmp} = vts_fs_read_file({path});", depth)
        self.emit(f"if (!{tmp}) {{", depth)
        self.emit(f'fprintf(stderr, "[fs.readFile] failed: %s\\n", {path});', depth + 1)
        self.emit(state.failure_return(), depth + 1)
        self.emit("}", depth)
        self.emit(f'printf("%s\\n", {tmp});', depth)
        self.emit(f"free({tmp});", depth)

    def compile_write_file(self, node, state, depth):
        path = c_string(node.path)
        self.emit(f"if (vts_fs_write_file({path}, {c_string(node.contents)}) != 0) {{", depth)
        self.emit(f'fprintf(stderr, "[fs.writeFile] failed: %s\\n", {path});', depth + 1)
        self.emit(state.failure_return(), depth + 1)
        self.emit("}", depth)

    # -------- conditions --------
    def compile_condition(self, node):
        if isinstance(node, BoolLiteral):
            return "1" if node.value else "0"
        raise TypeError(f"Unknown condition node: {node.__class__.__name__}")


def generate_c(program, source_path=None, entry=ENTRY_FUNCTION):
    return Compiler(source_path=source_path, entry=entry).compile(program)
