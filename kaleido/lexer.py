import io

EOF = 'EOF'
DEF = 'DEF'
EXTERN = 'EXTERN'
IDENTIFIER = 'IDENTIFIER'
NUMBER = 'NUMBER'
CHAR = 'CHAR'

KEYWORDS = {
    'def': DEF,
    'extern': EXTERN,
}


def _is_alpha(char):
    return char.isascii() and char.isalpha()


def _is_digit(char):
    return char.isascii() and char.isdigit()


def _is_alnum(char):
    return char.isascii() and char.isalnum()


class Token:
    def __init__(self, type, value, line=None, column=None):
        self.type = type
        self.value = value
        self.line = line
        self.column = column

    def is_char(self, char):
        return self.type == CHAR and self.value == char

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return self.type == other.type and self.value == other.value

    def __repr__(self):
        return f"Token({self.type}, {self.value!r})"


class Lexer:
    """Character-at-a-time scanner.

    Holds exactly one pending character between calls to ``next_token`` so
    token boundaries can be found without pushing characters back into the
    source. The source may be a string or any text stream with ``read``.
    """

    def __init__(self, source):
        if isinstance(source, str):
            source = io.StringIO(source)
        self.stream = source
        self.line = 1
        self.column = 0
        self._at_line_start = False
        self.last_char = ' '

    def _read_char(self):
        char = self.stream.read(1)
        if self._at_line_start:
            self.line += 1
            self.column = 0
        if char:
            self.column += 1
        self._at_line_start = char == '\n'
        return char

    def next_token(self):
        while True:
            while self.last_char and self.last_char.isspace():
                self.last_char = self._read_char()

            line, column = self.line, self.column
            char = self.last_char

            if not char:
                return Token(EOF, None, line, column)

            # Identifiers and keywords
            if _is_alpha(char):
                text = char
                self.last_char = self._read_char()
                while self.last_char and _is_alnum(self.last_char):
                    text += self.last_char
                    self.last_char = self._read_char()
                if text in KEYWORDS:
                    return Token(KEYWORDS[text], text, line, column)
                return Token(IDENTIFIER, text, line, column)

            # Numbers: digits with at most one '.'
            if _is_digit(char) or char == '.':
                text = ''
                seen_point = False
                while self.last_char and (_is_digit(self.last_char) or self.last_char == '.'):
                    if self.last_char == '.':
                        if seen_point:
                            break
                        seen_point = True
                    text += self.last_char
                    self.last_char = self._read_char()
                # strtod semantics: a lone '.' reads as zero
                value = float(text) if text != '.' else 0.0
                return Token(NUMBER, value, line, column)

            # Line comments run up to the newline
            if char == '#':
                while self.last_char and self.last_char not in '\n\r':
                    self.last_char = self._read_char()
                continue

            self.last_char = self._read_char()
            return Token(CHAR, char, line, column)

    def tokenize(self):
        tokens = []
        while True:
            token = self.next_token()
            if token.type == EOF:
                return tokens
            tokens.append(token)
