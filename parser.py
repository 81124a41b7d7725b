import logging

from ast_nodes import (
    Program, Import, FuncDef, Block, KNOWN_TYPES, UnknownType, BoolLiteral,
    LOG_LEVELS, Print, Log, Sleep, TimeNow, ReadFile, WriteFile, Call, Await, Return,
    If, While, ForRange,
)
from diagnostics import ParseError
from lexer import Lexer

log = logging.getLogger(__name__)

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1
LONG_MAX = 2 ** 63 - 1
U64_MAX = 2 ** 64 - 1

TOKEN_TEXT = {
    "LPAREN": "'('",
    "RPAREN": "')'",
    "LBRACE": "'{'",
    "RBRACE": "'}'",
    "COMMA": "','",
    "COLON": "':'",
    "SEMI": "';'",
    "DOT": "'.'",
    "DOTDOT": "'..'",
    "MINUS": "'-'",
    "NEWLINE": "end of line",
    "EOF": "end of file",
}


def describe(tok):
    if tok.type in ("IDENT", "SYMBOL"):
        return f"'{tok.value}'"
    if tok.type == "STRING":
        return f'"{tok.value}"'
    if tok.type == "NUMBER":
        return str(tok.value)
    if tok.type == "BOOL":
        return "true" if tok.value else "false"
    if tok.type in TOKEN_TEXT:
        return TOKEN_TEXT[tok.type]
    return f"'{tok.type.lower()}'"


class Parser:
    def __init__(self, lexer):
        self.lexer = lexer
        self.tokens = lexer.tokenize()
        self.index = 0

    @property
    def current_token(self):
        return self.tokens[self.index]

    @property
    def next_token(self):
        return self.tokens[min(self.index + 1, len(self.tokens) - 1)]

    # move to next token, but only if it matches what we expect
    def eat(self, token_type):
        tok = self.current_token
        if tok.type != token_type:
            expected = TOKEN_TEXT.get(token_type, token_type.lower())
            self.error_here(f"expected {expected}, got {describe(tok)}")
        if tok.type != "EOF":
            self.index += 1
        return tok

    def error_here(self, message, tok=None):
        tok = tok or self.current_token
        raise ParseError(message, tok.line, tok.column)

    def at_ident(self, value):
        tok = self.current_token
        return tok.type == "IDENT" and tok.value == value

    def skip_newlines(self):
        while self.current_token.type == "NEWLINE":
            self.eat("NEWLINE")

    # statements are separated by newlines and/or ';'
    def skip_separators(self):
        while self.current_token.type in ("NEWLINE", "SEMI"):
            self.eat(self.current_token.type)

    def end_of_statement(self):
        if self.current_token.type in ("NEWLINE", "SEMI", "RBRACE", "EOF"):
            return
        self.error_here(f"unexpected {describe(self.current_token)} after statement")

    def member_name(self):
        tok = self.current_token
        return tok.value if tok.type == "IDENT" else describe(tok)

    def type_after_newlines(self):
        i = self.index
        while self.tokens[i].type == "NEWLINE":
            i += 1
        return self.tokens[i].type

    # ---------- TOP LEVEL ----------
    def parse(self):
        imports = []
        functions = []
        self.skip_separators()

        while self.current_token.type != "EOF":
            if self.current_token.type == "IMPORT":
                imports.append(self.import_statement())
            elif self.current_token.type in ("EXPORT", "ASYNC", "FN"):
                functions.append(self.func_def())
            else:
                self.error_here(f"expected import or function declaration, got {describe(self.current_token)}")
            self.end_of_statement()
            self.skip_separators()

        if not functions:
            raise ParseError("no functions found", 1, 1)

        return Program(imports, functions)

    def import_statement(self):
        # import { a, b } from "module"
        tok = self.eat("IMPORT")
        if self.current_token.type != "LBRACE":
            self.error_here("import must start with '{'", tok)
        self.eat("LBRACE")

        names = []
        while self.current_token.type == "IDENT":
            names.append(self.eat("IDENT").value)
            if self.current_token.type != "COMMA":
                break
            self.eat("COMMA")

        if self.current_token.type != "RBRACE":
            self.error_here("import must include a closing brace ('}')", tok)
        self.eat("RBRACE")

        if not names:
            self.error_here("import must list at least one name", tok)

        if not self.at_ident("from"):
            self.error_here("import missing 'from'", tok)
        self.eat("IDENT")

        if self.current_token.type != "STRING":
            self.error_here("import expects a quoted module path")
        module = self.eat("STRING").value
        if not module:
            self.error_here("import module path is empty", tok)

        node = Import(names, module)
        node.line = tok.line
        return node

    def func_def(self):
        # [export] [async] fn name(<ignored>) [: Type] { ... }
        tok = self.current_token
        exported = False
        is_async = False
        if self.current_token.type == "EXPORT":
            self.eat("EXPORT")
            exported = True
        if self.current_token.type == "ASYNC":
            self.eat("ASYNC")
            is_async = True
        if self.current_token.type != "FN":
            self.error_here(f"invalid function signature: expected 'fn', got {describe(self.current_token)}")
        self.eat("FN")

        if self.current_token.type != "IDENT":
            self.error_here("invalid function signature: expected a function name")
        name = self.eat("IDENT").value

        if self.current_token.type != "LPAREN":
            self.error_here("invalid function signature: expected '(' after the function name")
        self.skip_parameters()

        return_type = None
        if self.current_token.type == "COLON":
            self.eat("COLON")
            return_type = self.return_annotation(name, tok.line)

        self.skip_newlines()
        body = self.block()

        node = FuncDef(name, body, return_type, is_async=is_async, exported=exported)
        node.line = tok.line
        return node

    def skip_parameters(self):
        # Parameters are accepted but carry no meaning.
        open_tok = self.eat("LPAREN")
        depth = 1
        while depth > 0:
            tok = self.current_token
            if tok.type == "EOF":
                self.error_here("unclosed parameter list", open_tok)
            if tok.type == "LPAREN":
                depth += 1
            elif tok.type == "RPAREN":
                depth -= 1
            self.eat(tok.type)

    def return_annotation(self, func_name, line):
        start = end = self.current_token.pos
        while self.current_token.type not in ("LBRACE", "NEWLINE", "EOF"):
            end = self.eat(self.current_token.type).end
        # comments between the last token and the brace are not part of the type
        raw = self.lexer.text[start:end].strip()
        if not raw:
            self.error_here("expected a return type after ':'")

        known = KNOWN_TYPES.get(raw)
        if known is not None:
            return known()

        log.warning(
            "line %d: unrecognized return type '%s' on function '%s'; accepting it unchecked",
            line, raw, func_name,
        )
        return UnknownType(raw)

    def block(self):
        open_tok = self.current_token
        if open_tok.type != "LBRACE":
            self.error_here(f"expected '{{', got {describe(open_tok)}")
        self.eat("LBRACE")
        self.skip_separators()

        statements = []
        while self.current_token.type != "RBRACE":
            if self.current_token.type == "EOF":
                self.error_here("unclosed block: missing '}'", open_tok)
            statements.append(self.statement())
            self.end_of_statement()
            self.skip_separators()

        self.eat("RBRACE")
        node = Block(statements)
        node.line = open_tok.line
        return node

    # ---------- STATEMENTS ----------
    def statement(self):
        tok = self.current_token

        if tok.type == "IF":
            node = self.if_statement()
        elif tok.type == "WHILE":
            node = self.while_statement()
        elif tok.type == "FOR":
            node = self.for_statement()
        elif self.at_ident("print") and self.next_token.type == "LPAREN":
            node = self.print_statement()
        elif self.at_ident("log") and self.next_token.type == "DOT":
            node = self.log_statement()
        elif self.at_ident("fs") and self.next_token.type == "DOT":
            node = self.fs_statement()
        elif self.at_ident("time") and self.next_token.type == "DOT":
            node = self.time_statement()
        elif tok.type == "RETURN":
            node = self.return_statement()
        elif tok.type == "AWAIT":
            node = self.await_statement()
        elif tok.type == "IDENT":
            node = self.call_statement()
        else:
            self.error_here(f"unsupported statement starting with {describe(tok)}")

        node.line = tok.line
        return node

    def condition(self):
        tok = self.current_token
        if tok.type != "BOOL":
            self.error_here(f"only boolean literal conditions (true/false) are supported, got {describe(tok)}")
        self.eat("BOOL")
        node = BoolLiteral(tok.value)
        node.line = tok.line
        return node

    def if_statement(self):
        # IF cond block (ELSE (block | if))?
        self.eat("IF")
        condition = self.condition()
        then_block = self.block()

        else_block = None
        # else may sit on the line after the closing brace
        if self.type_after_newlines() == "ELSE":
            self.skip_newlines()
            self.eat("ELSE")
            if self.current_token.type == "IF":
                nested_tok = self.current_token
                nested = self.if_statement()
                nested.line = nested_tok.line
                else_block = Block([nested])
                else_block.line = nested_tok.line
            else:
                else_block = self.block()

        return If(condition, then_block, else_block)

    def while_statement(self):
        self.eat("WHILE")
        condition = self.condition()
        body = self.block()
        return While(condition, body)

    def for_statement(self):
        # for i in 0..10 { ... }
        self.eat("FOR")
        if self.current_token.type != "IDENT":
            self.error_here("expected loop variable name after for")
        var_name = self.eat("IDENT").value
        self.eat("IN")
        start = self.range_bound()
        self.eat("DOTDOT")
        end = self.range_bound()
        body = self.block()
        return ForRange(var_name, start, end, body)

    def range_bound(self):
        tok = self.current_token
        if tok.type != "NUMBER":
            self.error_here(f"for range bounds must be integer literals, got {describe(tok)}")
        if tok.value > LONG_MAX:
            self.error_here(f"for range bound {tok.value} is out of range")
        return self.eat("NUMBER").value

    def string_arg(self, what):
        if self.current_token.type != "STRING":
            self.error_here(f"{what} expects a string literal, got {describe(self.current_token)}")
        return self.eat("STRING").value

    def print_statement(self):
        self.eat("IDENT")
        self.eat("LPAREN")
        text = self.string_arg("print")
        self.eat("RPAREN")
        return Print(text)

    def log_statement(self):
        self.eat("IDENT")
        self.eat("DOT")
        tok = self.current_token
        level = self.member_name()
        if tok.type != "IDENT" or level not in LOG_LEVELS:
            self.error_here(f"unsupported log level 'log.{level}'; use log.info/log.warn/log.error")
        self.eat("IDENT")
        self.eat("LPAREN")
        message = self.string_arg(f"log.{level}")
        self.eat("RPAREN")
        return Log(level, message)

    def fs_statement(self):
        self.eat("IDENT")
        self.eat("DOT")
        if self.at_ident("readFile"):
            self.eat("IDENT")
            self.eat("LPAREN")
            path = self.string_arg("fs.readFile")
            self.eat("RPAREN")
            return ReadFile(path)

        if self.at_ident("writeFile"):
            self.eat("IDENT")
            self.eat("LPAREN")
            path = self.string_arg("fs.writeFile")
            if self.current_token.type != "COMMA":
                self.error_here("fs.writeFile expects path, contents")
            self.eat("COMMA")
            contents = self.string_arg("fs.writeFile")
            self.eat("RPAREN")
            return WriteFile(path, contents)

        self.error_here(f"unsupported statement: fs.{self.member_name()}")

    def time_statement(self):
        self.eat("IDENT")
        self.eat("DOT")
        if self.at_ident("sleep"):
            self.eat("IDENT")
            self.eat("LPAREN")
            if self.current_token.type != "NUMBER":
                self.error_here(f"time.sleep expects integer milliseconds, got {describe(self.current_token)}")
            if self.current_token.value > U64_MAX:
                self.error_here(f"time.sleep expects integer milliseconds: {self.current_token.value} is out of range")
            ms = self.eat("NUMBER").value
            self.eat("RPAREN")
            return Sleep(ms)

        if self.at_ident("now"):
            self.eat("IDENT")
            self.eat("LPAREN")
            self.eat("RPAREN")
            return TimeNow()

        self.error_here(f"unsupported statement: time.{self.member_name()}")

    def return_statement(self):
        self.eat("RETURN")
        sign = 1
        if self.current_token.type == "MINUS":
            self.eat("MINUS")
            sign = -1
        if self.current_token.type != "NUMBER":
            self.error_here(f"only int return values supported for now, got {describe(self.current_token)}")
        value = sign * self.eat("NUMBER").value
        if not INT_MIN <= value <= INT_MAX:
            self.error_here(f"only int return values supported for now: {value} is out of range")
        return Return(value)

    def await_statement(self):
        self.eat("AWAIT")
        if self.current_token.type == "AWAIT":
            self.error_here("nested await is not supported")
        return Await(self.statement())

    def call_statement(self):
        name = self.eat("IDENT").value
        if self.current_token.type != "LPAREN":
            self.error_here(f"unsupported statement: '{name}'")
        self.eat("LPAREN")
        if self.current_token.type != "RPAREN":
            self.error_here(f"function calls take no arguments: {name}(...)")
        self.eat("RPAREN")
        return Call(name)


def parse_program(source):
    return Parser(Lexer(source)).parse()
