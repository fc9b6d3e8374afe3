"""
Calculator session: one variable environment plus the per-line pipeline.

A line goes tokenize -> (variable shortcut) -> parse -> evaluate ->
stringify. Every failure is captured in the returned LineResult so a
read loop can report it and carry on with the next line.
"""

from __future__ import annotations

import logging
from enum import StrEnum, auto

from pydantic import BaseModel, ConfigDict, Field

from exprwhizz.config import WhizzSettings
from exprwhizz.core.dictionary import Dictionary
from exprwhizz.core.errors import WhizzError
from exprwhizz.core.expression_lang.evaluator import evaluate
from exprwhizz.core.expression_lang.parser import parse
from exprwhizz.core.expression_lang.tokenizer import TokenKind, TokenSequence, tokenize
from exprwhizz.core.expression_lang.tree import stringify

logger = logging.getLogger(__name__)

QUIT_COMMAND = "quit"


class LineKind(StrEnum):
    """What running a line produced."""

    EMPTY = auto()
    VALUE = auto()
    VARIABLE = auto()
    ASSIGNED = auto()
    ERROR = auto()
    QUIT = auto()


class LineResult(BaseModel):
    """Outcome of running one input line."""

    kind: LineKind
    text: str = Field(default="", description="Rendered expression or variable name")
    value: float | None = None
    error: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return self.kind != LineKind.ERROR

    def describe(self) -> str:
        """The line a calculator prints for this result."""
        if self.kind == LineKind.ERROR:
            return self.error or ""
        if self.kind == LineKind.VALUE:
            return f"{self.text}  ==> {self.value:g}"
        if self.kind == LineKind.VARIABLE:
            return f"Variable '{self.text}' is {self.value:g}"
        if self.kind == LineKind.ASSIGNED:
            return f"Variable '{self.text}' set to {self.value:g}"
        return ""


class Session:
    """A calculator session owning its variable Dictionary."""

    def __init__(self, settings: WhizzSettings | None = None) -> None:
        self.settings = settings or WhizzSettings()
        self.variables = Dictionary()

    def run(self, line: str) -> LineResult:
        """Run one input line through the pipeline."""
        if not line.strip():
            return LineResult(kind=LineKind.EMPTY)
        if line.strip().lower() == QUIT_COMMAND:
            return LineResult(kind=LineKind.QUIT)

        try:
            tokens = tokenize(line, increment_shorthand=self.settings.increment_shorthand)
            shortcut = self._inspect_variable(tokens)
            if shortcut is not None:
                return shortcut

            tree = parse(tokens)
            if tree is None:
                return LineResult(kind=LineKind.EMPTY)

            value = evaluate(tree, self.variables)
        except WhizzError as e:
            logger.debug("Line %r failed: %s", line, e)
            return LineResult(kind=LineKind.ERROR, error=str(e))

        text = stringify(tree, self.settings.stringify_capacity)
        return LineResult(kind=LineKind.VALUE, text=text, value=value)

    def _inspect_variable(self, tokens: TokenSequence) -> LineResult | None:
        """Handle ``x`` and ``x = 5`` / ``x = y`` without the parser."""
        kinds = [tok.kind for tok in tokens]

        if kinds == [TokenKind.SYMBOL]:
            name = str(tokens[0].value)
            value = self.variables.retrieve(name)
            if value is None:
                return _unknown(name)
            return LineResult(kind=LineKind.VARIABLE, text=name, value=value)

        if (
            len(kinds) == 3
            and kinds[0] == TokenKind.SYMBOL
            and kinds[1] == TokenKind.EQUAL
            and kinds[2] in (TokenKind.VALUE, TokenKind.SYMBOL)
        ):
            name = str(tokens[0].value)
            source = tokens[2]
            if source.kind == TokenKind.SYMBOL:
                value = self.variables.retrieve(str(source.value))
                if value is None:
                    return _unknown(str(source.value))
            else:
                assert isinstance(source.value, float)
                value = source.value
            self.variables.store(name, value)
            return LineResult(kind=LineKind.ASSIGNED, text=name, value=value)

        return None

    def delete(self, name: str) -> None:
        """Forget a variable.

        Raises:
            KeyError: If no such variable is defined.
        """
        self.variables.delete(name)

    def list_variables(self) -> list[tuple[str, float]]:
        """Defined variables sorted by name."""
        return sorted(self.variables.items())


def _unknown(name: str) -> LineResult:
    return LineResult(kind=LineKind.ERROR, error=f"Unknown variable '{name}'")
