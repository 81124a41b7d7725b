import logging
import sys
import traceback

import colorama
from colorama import Fore, Style

from ast_nodes import ASTNode, TypeAnnotation
from checker import check_program
from compiler import Compiler
from diagnostics import VoltError
from filesystem import LocalFileSystem
from formatter import format_program
from parser import parse_program
from resolver import load_program

DEFAULT_C_OUT = "dist/app.c"

USAGE = """\
Usage:
  python cli.py parse <file.vts>
  python cli.py lint <file.vts>
  python cli.py fmt [--check] <file.vts>
  python cli.py build <file.vts> [--out dist/app.c]
  (optional) --debug to show Python traceback and debug logs"""

LEVEL_COLORS = {
    logging.DEBUG: Fore.CYAN,
    logging.INFO: "",
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
}


class ColorFormatter(logging.Formatter):
    def format(self, record):
        text = f"[{record.levelname.lower()}] {record.getMessage()}"
        color = LEVEL_COLORS.get(record.levelno, "")
        if not color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"


def setup_logging(debug: bool = False):
    colorama.just_fix_windows_console()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColorFormatter())
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if debug else logging.WARNING)


# Simple AST printer (so you can SEE what the parser built)
def ast_to_dict(node):
    if node is None:
        return None
    if isinstance(node, TypeAnnotation):
        return node.text
    if isinstance(node, list):
        return [ast_to_dict(item) for item in node]
    if not isinstance(node, ASTNode):
        return node

    d = {"type": node.__class__.__name__}
    if node.line is not None:
        d["line"] = node.line
    for key, value in node._fields().items():
        d[key] = ast_to_dict(value)
    return d


def pretty(obj, indent=0):
    sp = "  " * indent
    if isinstance(obj, dict):
        lines = []
        for k, v in obj.items():
            if isinstance(v, (dict, list)):
                lines.append(f"{sp}{k}:")
                lines.append(pretty(v, indent + 1))
            else:
                lines.append(f"{sp}{k}: {v}")
        return "\n".join(lines)
    if isinstance(obj, list):
        lines = []
        for item in obj:
            lines.append(f"{sp}-")
            lines.append(pretty(item, indent + 1))
        return "\n".join(lines)
    return f"{sp}{obj}"


def cmd_parse(path, fs):
    program = parse_program(fs.read_text(path))
    print(pretty(ast_to_dict(program)))


def cmd_lint(path, fs):
    program = load_program(path, fs=fs)
    check_program(program)
    print(f"{path} linted successfully")


def cmd_fmt(path, fs, check=False):
    # Only this file is formatted; imported files are not merged in.
    source = fs.read_text(path)
    program = check_program(parse_program(source))
    formatted = format_program(program)

    if check:
        if source != formatted:
            print(f"{Fore.RED}{path} is not formatted{Style.RESET_ALL}")
            return 1
        print(f"{path} is already formatted")
        return 0

    fs.write_text(path, formatted)
    print(f"Formatted {path}")
    return 0


def cmd_build(path, fs, c_out=DEFAULT_C_OUT):
    program = load_program(path, fs=fs)
    check_program(program, require_entry=True)

    c_code = Compiler(source_path=path).compile(program)
    fs.write_text(c_out, c_code)
    print(f"Generated {c_out}")


def take_option(args, name):
    if name not in args:
        return None
    i = args.index(name)
    if i + 1 >= len(args):
        raise SystemExit(f"{name} expects a value")
    value = args[i + 1]
    del args[i:i + 2]
    return value


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)

    debug = False
    if "--debug" in args:
        debug = True
        args.remove("--debug")
    setup_logging(debug)

    check = False
    if "--check" in args:
        check = True
        args.remove("--check")
    c_out = take_option(args, "--out")

    if len(args) != 2:
        print(USAGE)
        return 1

    cmd, path = args
    if check and cmd != "fmt":
        print("--check is only accepted by fmt.")
        return 1
    if c_out is not None and cmd != "build":
        print("--out is only accepted by build.")
        return 1

    fs = LocalFileSystem()
    try:
        if cmd == "parse":
            cmd_parse(path, fs)
        elif cmd == "lint":
            cmd_lint(path, fs)
        elif cmd == "fmt":
            return cmd_fmt(path, fs, check=check)
        elif cmd == "build":
            cmd_build(path, fs, c_out or DEFAULT_C_OUT)
        else:
            print(f"Unknown command: {cmd}")
            return 1
    except (VoltError, OSError, UnicodeDecodeError) as e:
        if debug:
            traceback.print_exc()
        else:
            print(f"{Fore.RED}{e}{Style.RESET_ALL}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
