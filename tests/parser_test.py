import logging

import pytest

from ast_nodes import (
    Import, Block, IntType, VoidType, UnknownType, BoolLiteral,
    Print, Log, Sleep, TimeNow, ReadFile, WriteFile, Call, Await, Return, If, While, ForRange,
)
from diagnostics import ParseError
from parser import parse_program


def parse_body(body):
    program = parse_program("fn main(): int {\n" + body + "\n}\n")
    return program.functions[0].body.statements


def parse_error(source):
    with pytest.raises(ParseError) as exc:
        parse_program(source)
    return exc.value


def test_every_simple_statement():
    stmts = parse_body(
        'print("hello")\n'
        'log.info("i")\n'
        'log.warn("w")\n'
        'log.error("e")\n'
        "time.sleep(25)\n"
        "time.now()\n"
        'fs.readFile("in.txt")\n'
        'fs.writeFile("out/x.txt", "data")\n'
        "helper()\n"
        "return 3"
    )
    assert stmts == [
        Print("hello"),
        Log("info", "i"),
        Log("warn", "w"),
        Log("error", "e"),
        Sleep(25),
        TimeNow(),
        ReadFile("in.txt"),
        WriteFile("out/x.txt", "data"),
        Call("helper"),
        Return(3),
    ]
    assert [s.line for s in stmts] == list(range(2, 12))


def test_semicolons_and_blank_lines_separate_statements():
    stmts = parse_body('\n  print("a"); print("b");\n\n// note\n  time.now()')
    assert stmts == [Print("a"), Print("b"), TimeNow()]
    assert [s.line for s in stmts] == [3, 3, 6]


def test_negative_return():
    assert parse_body("return -1") == [Return(-1)]


def test_quote_unescaping():
    assert parse_body(r'print("say \"hi\"")') == [Print('say "hi"')]


def test_signature_prefixes_and_ignored_parameters():
    program = parse_program("export async fn helper(a: int, b: (string)): void {\n}\n")
    func = program.functions[0]
    assert func.name == "helper"
    assert func.exported and func.is_async
    assert func.return_type == VoidType()
    assert func.body == Block([])
    assert func.line == 1


def test_missing_annotation_is_none():
    program = parse_program("fn main() {\n}\n")
    assert program.functions[0].return_type is None
    assert not program.functions[0].is_async


def test_brace_on_next_line():
    program = parse_program("fn main(): int\n{\n    return 0\n}\n")
    assert program.functions[0].return_type == IntType()
    assert program.functions[0].body.statements == [Return(0)]


def test_unknown_annotation_is_kept_with_warning(caplog):
    caplog.set_level(logging.WARNING)
    program = parse_program("fn f(): Promise<int> {\n}\n")
    assert program.functions[0].return_type == UnknownType("Promise<int>")
    assert "Promise<int>" in caplog.text
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_one_line_function():
    program = parse_program('fn f(): int { log.info("x") }')
    assert program.functions[0].body.statements == [Log("info", "x")]
    assert program.functions[0].body.statements[0].line == 1


def test_inline_control_blocks():
    stmts = parse_body('if true { print("a"); log.warn("b") } else { time.sleep(1) }')
    assert stmts == [
        If(BoolLiteral(True), Block([Print("a"), Log("warn", "b")]), Block([Sleep(1)])),
    ]


def test_multiline_control_blocks_and_else_on_next_line():
    stmts = parse_body(
        "while false {\n"
        '    print("x")\n'
        "}\n"
        "if false {\n"
        "    helper()\n"
        "}\n"
        "else {\n"
        "    return 1\n"
        "}"
    )
    assert stmts == [
        While(BoolLiteral(False), Block([Print("x")])),
        If(BoolLiteral(False), Block([Call("helper")]), Block([Return(1)])),
    ]
    # nested statements keep their own lines
    assert stmts[1].else_block.statements[0].line == 9


def test_if_without_else_followed_by_statement():
    stmts = parse_body('if true { print("a") }\nprint("b")')
    assert stmts == [If(BoolLiteral(True), Block([Print("a")]), None), Print("b")]


def test_else_if_chains_nest_in_else_block():
    stmts = parse_body('if false { print("a") } else if true { print("b") }')
    inner = If(BoolLiteral(True), Block([Print("b")]), None)
    assert stmts == [If(BoolLiteral(False), Block([Print("a")]), Block([inner]))]


def test_for_range():
    stmts = parse_body('for i in 0..3 { for j in 1..2 { print("x") } }')
    assert stmts == [
        ForRange("i", 0, 3, Block([ForRange("j", 1, 2, Block([Print("x")]))])),
    ]


def test_await_wraps_one_statement():
    assert parse_body("await time.sleep(5)") == [Await(Sleep(5))]
    assert parse_body("await helper()") == [Await(Call("helper"))]


def test_nested_await_is_rejected():
    err = parse_error("fn main() {\n    await await helper()\n}\n")
    assert "nested await" in err.message
    assert err.line == 2


def test_imports_keep_name_order():
    program = parse_program(
        'import { b, a } from "./support/helper"\n'
        'import { log } from "log";\n'
        "fn main() {\n}\n"
    )
    assert program.imports == [Import(["b", "a"], "./support/helper"), Import(["log"], "log")]
    assert program.imports[0].is_relative()
    assert not program.imports[1].is_relative()
    assert [imp.line for imp in program.imports] == [1, 2]


@pytest.mark.parametrize(
    "line, message",
    [
        ('import a } from "x"', "must start with '{'"),
        ('import { a from "x"', "closing brace"),
        ('import { } from "x"', "at least one name"),
        ('import { a } "x"', "missing 'from'"),
        ('import { a } from ""', "module path is empty"),
    ],
)
def test_import_errors(line, message):
    err = parse_error("\n" + line + "\nfn main() {\n}\n")
    assert message in err.message
    assert err.line == 2


def test_program_needs_a_function():
    err = parse_error('import { log } from "log"\n')
    assert err.message == "no functions found"
    assert err.line == 1


@pytest.mark.parametrize(
    "statement, message",
    [
        ('log.debug("x")', "unsupported log level 'log.debug'"),
        ("time.sleep(soon)", "time.sleep expects integer milliseconds"),
        ("return maybe", "only int return values supported"),
        ("return 3000000000", "only int return values supported"),
        ('if x { print("a") }', "only boolean literal conditions"),
        ('fs.writeFile("a")', "fs.writeFile expects path, contents"),
        ("fs.remove()", "unsupported statement: fs.remove"),
        ("helper(1)", "take no arguments"),
        ("foo bar", "unsupported statement: 'foo'"),
        ('print("a") print("b")', "after statement"),
        ("print(hello)", "print expects a string literal"),
        ("for i in a..3 {}", "integer literals"),
    ],
)
def test_statement_errors(statement, message):
    err = parse_error("fn main() {\n    " + statement + "\n}\n")
    assert message in err.message
    assert err.line == 2


def test_error_column_points_at_token():
    err = parse_error('fn main() {\nlog.debug("x")\n}\n')
    assert (err.line, err.column) == (2, 5)
    assert str(err) == "parse error: unsupported log level 'log.debug'; use log.info/log.warn/log.error (line 2, col 5)"


def test_top_level_statement_is_rejected():
    err = parse_error('print("x")\nfn main() {\n}\n')
    assert "expected import or function declaration" in err.message
    assert err.line == 1


def test_unclosed_block():
    err = parse_error('fn main() {\n    print("x")\n')
    assert "unclosed block" in err.message
    assert err.line == 1


def test_non_ascii_digits_are_not_numbers():
    err = parse_error("fn main(): int {\n    time.sleep(²)\n}\n")
    assert "time.sleep expects integer milliseconds" in err.message
    assert err.line == 2


def test_sleep_must_fit_in_u64():
    assert parse_body("time.sleep(18446744073709551615)") == [Sleep(2 ** 64 - 1)]
    err = parse_error("fn main(): int {\n    time.sleep(99999999999999999999999)\n}\n")
    assert "time.sleep expects integer milliseconds" in err.message
    assert err.line == 2


def test_for_bounds_must_fit_in_long_long():
    err = parse_error("fn main() {\n    for i in 0..9223372036854775808 {}\n}\n")
    assert "out of range" in err.message
    assert err.line == 2


def test_comment_after_return_type_is_not_part_of_it():
    program = parse_program("fn main(): int // entry point\n{\n}\n")
    assert program.functions[0].return_type == IntType()
