"""Turn a calculator expression into typed tokens."""
import math
import re
import string
from typing import Dict, List

from sci_calculator.common.errors import LexError, LexErrorKind
from sci_calculator.engine.tokens import CONSTANTS, FACTORIAL, UNARY_MINUS, Token, TokenKind


# Display glyphs and their canonical spelling
SYMBOL_ALIASES: Dict[str, str] = {
    "×": "*",
    "÷": "/",
    "−": "-",
    "π": "pi",
    "Ans": "ans",
}

# Identifier -> function name
FUNCTION_NAMES: Dict[str, str] = {
    "sin": "sin",
    "cos": "cos",
    "tan": "tan",
    "asin": "asin",
    "acos": "acos",
    "atan": "atan",
    "log": "log10",
    "ln": "ln",
    "sqrt": "sqrt",
    "inv": "reciprocal",
}

OPERATOR_CHARS = "+-*/^%"

_WHITESPACE = re.compile(r"\s+")


class ExpressionLexer:
    """
    Tokenize calculator expressions.

    Besides splitting the input, the lexer resolves everything that depends on
    context so later stages never have to look back:
        - ``-`` becomes unary minus at the start, after an operator or after ``(``
        - a ``*`` is inserted where multiplication is implied (``2pi``, ``3(1+1)``, ``(2)(3)``, ``2sin(30)``)

    Examples:
        - ``2π`` -> ``2 * pi``
        - ``-3^2`` -> ``u- 3 ^ 2``
    """

    @staticmethod
    def normalize(expr: str) -> str:
        """
        Replace display glyphs by their canonical form and remove all whitespace.

        :param str expr: Raw expression

        :return: Canonical expression; lexer positions index into this string
        :rtype: str
        """
        for alias, canonical in SYMBOL_ALIASES.items():
            expr = expr.replace(alias, canonical)
        return _WHITESPACE.sub("", expr)

    @staticmethod
    def tokenize(expr: str) -> List[Token]:
        """
        Split an expression into tokens.

        :param str expr: Expression as typed by the user

        :return: Tokens with unary minus resolved and implicit multiplications inserted
        :rtype: List[Token]
        :raises LexError: On an unparsable number, an unknown identifier or an unexpected character
        """
        text = ExpressionLexer.normalize(expr)
        tokens: List[Token] = []
        i = 0

        while i < len(text):
            c = text[i]

            if c in string.digits or c == ".":
                j = i
                dots = 0
                while j < len(text) and (text[j] in string.digits or text[j] == "."):
                    if text[j] == ".":
                        dots += 1
                        # A second dot ends the number, it does not fail
                        if dots > 1:
                            break
                    j += 1
                literal = text[i:j]
                try:
                    value = float(literal)
                except ValueError:
                    raise LexError(LexErrorKind.INVALID_NUMBER, i, literal) from None
                if not math.isfinite(value):
                    raise LexError(LexErrorKind.INVALID_NUMBER, i, literal)
                tokens.append(Token.number(value))
                i = j

            elif c == "(":
                tokens.append(Token.paren_open())
                i += 1

            elif c == ")":
                tokens.append(Token.paren_close())
                i += 1

            elif c in OPERATOR_CHARS:
                tokens.append(Token.operator(c))
                i += 1

            elif c in string.ascii_letters:
                j = i
                while j < len(text) and text[j] in string.ascii_letters:
                    j += 1
                name = text[i:j].lower()
                if name in CONSTANTS:
                    tokens.append(Token.constant(name))
                elif name in FUNCTION_NAMES:
                    tokens.append(Token.function(FUNCTION_NAMES[name]))
                else:
                    raise LexError(LexErrorKind.UNKNOWN_IDENTIFIER, i, name)
                i = j

            elif c == "!":
                tokens.append(Token.function(FACTORIAL))
                i += 1

            else:
                raise LexError(LexErrorKind.UNEXPECTED_CHAR, i, c)

        return ExpressionLexer._insert_implicit_multiplication(ExpressionLexer._mark_unary_minus(tokens))

    @staticmethod
    def _mark_unary_minus(tokens: List[Token]) -> List[Token]:
        """Rewrite ``-`` as unary minus when nothing it could subtract from precedes it."""
        out: List[Token] = []
        for token in tokens:
            if token.kind is TokenKind.OPERATOR and token.value == "-":
                prev = out[-1] if out else None
                if prev is None or prev.kind in (TokenKind.OPERATOR, TokenKind.PAREN_OPEN):
                    token = Token.operator(UNARY_MINUS)
            out.append(token)
        return out

    @staticmethod
    def _insert_implicit_multiplication(tokens: List[Token]) -> List[Token]:
        """Insert ``*`` between a value and a following value, prefix function or ``(``."""
        out: List[Token] = []
        for token in tokens:
            prev = out[-1] if out else None
            if (
                prev is not None
                and ExpressionLexer._ends_value(prev)
                and ExpressionLexer._starts_value(token)
                # A function binds directly to its argument list
                and not (prev.kind is TokenKind.FUNCTION and token.kind is TokenKind.PAREN_OPEN)
            ):
                out.append(Token.operator("*"))
            out.append(token)
        return out

    @staticmethod
    def _ends_value(token: Token) -> bool:
        return token.is_operand or token.kind is TokenKind.PAREN_CLOSE

    @staticmethod
    def _starts_value(token: Token) -> bool:
        # Factorial applies to what precedes it, so it never starts a value
        return token.is_operand or token.is_prefix_function or token.kind is TokenKind.PAREN_OPEN
