"""Arithmetic expression parsing and evaluation.

Grammar, lowest to highest precedence:

    expr    := term (("+" | "-") term)*
    term    := power (("*" | "/" | "%") power)*
    power   := unary ("^" power)?
    unary   := ("+" | "-") unary | factor
    factor  := "(" expr ")" | number

A leading sign binds to the left operand of "^", so -2^2 evaluates to 4,
and an exponent may carry its own sign (2^-3).
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Union

from ..errors import DivisionByZero, DomainError, ParseFailure
from ..models.search import ActionType, Payload, ResultType, SearchResult
from .base import UNLABELED, Interpreter
from .formatting import format_number, is_finite

logger = logging.getLogger(__name__)

ARITHMETIC_RE = re.compile(r"^[\d\s+\-*/%^().]+$")
DIGIT_RE = re.compile(r"\d")


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"


Node = Union[Number, UnaryOp, BinaryOp]


class _Parser:
    def __init__(self, text: str):
        self.text = "".join(text.split())
        self.pos = 0

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def parse(self) -> Node:
        if not self.text:
            raise ParseFailure("empty expression")
        node = self.expr()
        if self.pos != len(self.text):
            raise ParseFailure(f"unexpected {self.peek()!r} at position {self.pos}")
        return node

    def expr(self) -> Node:
        node = self.term()
        while self.peek() in ("+", "-"):
            op = self.text[self.pos]
            self.pos += 1
            node = BinaryOp(op, node, self.term())
        return node

    def term(self) -> Node:
        node = self.power()
        while self.peek() in ("*", "/", "%"):
            op = self.text[self.pos]
            self.pos += 1
            node = BinaryOp(op, node, self.power())
        return node

    def power(self) -> Node:
        base = self.unary()
        if self.peek() == "^":
            self.pos += 1
            return BinaryOp("^", base, self.power())
        return base

    def unary(self) -> Node:
        if self.peek() in ("+", "-"):
            op = self.text[self.pos]
            self.pos += 1
            return UnaryOp(op, self.unary())
        return self.factor()

    def factor(self) -> Node:
        if self.peek() == "(":
            self.pos += 1
            node = self.expr()
            if self.peek() != ")":
                raise ParseFailure("missing closing parenthesis")
            self.pos += 1
            return node
        return self.number()

    def number(self) -> Number:
        start = self.pos
        seen_dot = False
        while self.peek() and (self.peek().isdigit() or self.peek() == "."):
            if self.peek() == ".":
                if seen_dot:
                    raise ParseFailure(f"malformed number at position {start}")
                seen_dot = True
            self.pos += 1
        literal = self.text[start:self.pos]
        if not literal or literal == ".":
            found = self.peek() or "end of input"
            raise ParseFailure(f"expected number at position {start}, found {found!r}")
        value = float(literal)
        if not is_finite(value):
            raise DomainError(f"number too large at position {start}")
        return Number(value)


def parse(text: str) -> Node:
    """Parse an arithmetic expression into an AST.

    Raises:
        ParseFailure: On empty input, unbalanced parentheses, dangling
            operators or malformed numbers
    """
    return _Parser(text).parse()


def _power(base: float, exponent: float) -> float:
    if base == 0 and exponent < 0:
        raise DivisionByZero("zero raised to a negative power")
    if base < 0 and not float(exponent).is_integer():
        raise DomainError("negative base with fractional exponent")
    try:
        return math.pow(base, exponent)
    except OverflowError as e:
        raise DomainError("result overflows") from e


def evaluate(node: Node) -> float:
    """Evaluate an AST to a finite float.

    Raises:
        DivisionByZero: On "/" or "%" by zero
        DomainError: On non-finite or undefined results
    """
    if isinstance(node, Number):
        return node.value
    if isinstance(node, UnaryOp):
        value = evaluate(node.operand)
        return -value if node.op == "-" else value
    if isinstance(node, BinaryOp):
        left = evaluate(node.left)
        right = evaluate(node.right)
        if node.op == "+":
            result = left + right
        elif node.op == "-":
            result = left - right
        elif node.op == "*":
            result = left * right
        elif node.op == "/":
            if right == 0:
                raise DivisionByZero("division by zero")
            result = left / right
        elif node.op == "%":
            if right == 0:
                raise DivisionByZero("modulo by zero")
            result = math.fmod(left, right)
        elif node.op == "^":
            result = _power(left, right)
        else:
            raise ParseFailure(f"unknown operator {node.op!r}")
        if not is_finite(result):
            raise DomainError("result is not finite")
        return result
    raise TypeError(f"not an expression node: {node!r}")


def calculate(text: str) -> float:
    return evaluate(parse(text))


class CalculatorInterpreter(Interpreter):
    """Evaluates plain arithmetic typed into the launcher."""

    name = "calculator"

    def accepts(self, text: str) -> bool:
        return bool(ARITHMETIC_RE.match(text)) and bool(DIGIT_RE.search(text))

    async def interpret(self, text: str) -> list[SearchResult]:
        value = calculate(text)
        formatted = format_number(value)
        logger.debug(f"Evaluated {text!r} = {formatted}")
        return [
            SearchResult(
                title=formatted,
                subtitle=text.strip(),
                group_label=UNLABELED,
                result_type=ResultType.CALCULATOR,
                payload=Payload(action=ActionType.COPY_TEXT, target=formatted),
                score=1.0,
            )
        ]
