from diagnostics import ParseError


class Token:
    def __init__(self, type, value=None, line=1, column=1, pos=0):
        self.type = type
        self.value = value
        self.line = line
        self.column = column
        self.pos = pos  # offset into the source text
        self.end = pos  # offset just past the token, set by tokenize()

    def __repr__(self):
        if self.value is not None:
            return f"{self.type}({self.value})"
        return f"{self.type}"


KEYWORDS = {
    "fn": "FN",
    "async": "ASYNC",
    "export": "EXPORT",
    "import": "IMPORT",
    "if": "IF",
    "else": "ELSE",
    "while": "WHILE",
    "for": "FOR",
    "in": "IN",
    "return": "RETURN",
    "await": "AWAIT",
}

DIGITS = "0123456789"

PUNCTUATION = {
    "(": "LPAREN",
    ")": "RPAREN",
    "{": "LBRACE",
    "}": "RBRACE",
    ",": "COMMA",
    ":": "COLON",
    ";": "SEMI",
    "-": "MINUS",
}


class Lexer:
    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.current_char = text[0] if text else None
        self.line = 1
        self.column = 1

    def advance(self):
        # track line/column based on current_char before moving
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1
        if self.pos >= len(self.text):
            self.current_char = None
        else:
            self.current_char = self.text[self.pos]

    def peek(self):
        nxt = self.pos + 1
        if nxt >= len(self.text):
            return None
        return self.text[nxt]

    # IMPORTANT: skip spaces/tabs only (NOT newlines)
    def skip_whitespace(self):
        while self.current_char and self.current_char in " \t\r":
            self.advance()

    def skip_comment(self):
        while self.current_char and self.current_char != "\n":
            self.advance()

    def _token(self, type, value=None):
        return Token(type, value, line=self.line, column=self.column, pos=self.pos)

    def read_identifier(self):
        tok = self._token("IDENT")
        result = ""
        while self.current_char and (self.current_char.isalnum() or self.current_char == "_"):
            result += self.current_char
            self.advance()

        if result in ("true", "false"):
            tok.type = "BOOL"
            tok.value = result == "true"
            return tok
        if result in KEYWORDS:
            tok.type = KEYWORDS[result]
            return tok

        tok.value = result
        return tok

    def read_number(self):
        tok = self._token("NUMBER")
        result = ""
        while self.current_char and self.current_char in DIGITS:
            result += self.current_char
            self.advance()
        tok.value = int(result)
        return tok

    def read_string(self):
        tok = self._token("STRING")
        self.advance()  # skip opening quote
        result = ""

        while self.current_char and self.current_char not in '"\n':
            # only \" is an escape; every other backslash stays as written
            if self.current_char == "\\" and self.peek() == '"':
                result += '"'
                self.advance()
                self.advance()
                continue
            result += self.current_char
            self.advance()

        if self.current_char != '"':
            raise ParseError("unterminated string literal", tok.line, tok.column)

        self.advance()  # skip closing quote
        tok.value = result
        return tok

    def get_next_token(self):
        while self.current_char:

            # NEWLINE is a real token (parser needs it)
            if self.current_char == "\n":
                tok = self._token("NEWLINE")
                self.advance()
                return tok

            # spaces/tabs
            if self.current_char in " \t\r":
                self.skip_whitespace()
                continue

            # // line comments
            if self.current_char == "/" and self.peek() == "/":
                self.skip_comment()
                continue

            if self.current_char.isalpha() or self.current_char == "_":
                return self.read_identifier()

            if self.current_char in DIGITS:
                return self.read_number()

            if self.current_char == '"':
                return self.read_string()

            # . and ..
            if self.current_char == ".":
                tok = self._token("DOT")
                self.advance()
                if self.current_char == ".":
                    tok.type = "DOTDOT"
                    self.advance()
                return tok

            if self.current_char in PUNCTUATION:
                tok = self._token(PUNCTUATION[self.current_char])
                self.advance()
                return tok

            # anything else; the parser decides whether it is acceptable
            tok = self._token("SYMBOL", self.current_char)
            self.advance()
            return tok

        return self._token("EOF")

    def tokenize(self):
        tokens = []
        while True:
            tok = self.get_next_token()
            tok.end = self.pos
            tokens.append(tok)
            if tok.type == "EOF":
                return tokens
