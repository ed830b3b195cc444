"""Convert token sequences to Reverse Polish Notation."""
from typing import List

from sci_calculator.common.errors import ParseError, ParseErrorKind
from sci_calculator.engine.tokens import OPERATORS, UNARY_MINUS, Token, TokenKind


class ExpressionParser:
    """
    Convert an infix token sequence into Reverse Polish Notation (RPN).

    Algorithm:
        Shunting-yard: operands go straight to the output, operators and prefix
        functions wait on a stack until something with lower precedence, a
        closing parenthesis or the end of input releases them.

    Precedence (higher binds tighter):
        - ``+`` ``-``: 1, left associative
        - ``*`` ``/`` ``%``: 2, left associative
        - unary minus: 3, right associative
        - ``^``: 4, right associative

    Prefix functions bind tighter than any operator. The postfix factorial is
    emitted as soon as it is read, so it applies to the value right before it.

    Examples:
        - Infix expression: -3^2
        - Corresponding RPN: 3 2 ^ u-
    """

    @staticmethod
    def _should_pop(top: Token, incoming: Token) -> bool:
        """
        Decide whether the stack top leaves before ``incoming`` is pushed.

        :param Token top: Token on top of the operator stack
        :param Token incoming: Operator being pushed

        :return: True if ``top`` must be moved to the output first
        :rtype: bool
        """
        if top.is_prefix_function:
            return True
        if top.kind is not TokenKind.OPERATOR:
            return False
        o = OPERATORS[top.value]
        t = OPERATORS[incoming.value]
        if o.right_assoc:
            return o.precedence > t.precedence
        return o.precedence >= t.precedence

    @staticmethod
    def to_rpn(tokens: List[Token]) -> List[Token]:
        """
        Convert a list of tokens into RPN using the Shunting-yard algorithm.

        :param List[Token] tokens: Tokens produced by the lexer

        :return: Tokens in RPN order, without parentheses
        :rtype: List[Token]
        :raises ParseError: If parentheses do not match
        """
        output: List[Token] = []
        stack: List[Token] = []

        for token in tokens:
            if token.is_operand or token.is_postfix_function:
                output.append(token)

            elif token.kind is TokenKind.FUNCTION:
                stack.append(token)

            elif token.kind is TokenKind.OPERATOR:
                # Unary minus has no left operand, nothing before it can be complete yet
                if token.value != UNARY_MINUS:
                    while stack and ExpressionParser._should_pop(stack[-1], token):
                        output.append(stack.pop())
                stack.append(token)

            elif token.kind is TokenKind.PAREN_OPEN:
                stack.append(token)

            else:
                while stack and stack[-1].kind is not TokenKind.PAREN_OPEN:
                    output.append(stack.pop())
                if not stack:
                    raise ParseError(ParseErrorKind.MISMATCHED_PAREN)
                stack.pop()
                # Closing the argument list of a function
                if stack and stack[-1].is_prefix_function:
                    output.append(stack.pop())

        # Remaining entries leave in reverse order (stack top first)
        while stack:
            token = stack.pop()
            if token.kind is TokenKind.PAREN_OPEN:
                raise ParseError(ParseErrorKind.MISMATCHED_PAREN)
            output.append(token)

        return output
