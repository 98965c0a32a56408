# expr_parser.py
"""Statement parser for ConVector.

Expressions are parsed in a single pass with an operator stack
(shunting-yard) into a flat postfix sequence. Matrix literals recurse back
into the same expression routine for each cell.
"""

from __future__ import annotations
from typing import Iterator, List, Tuple

from frontend.lexer import Token, number_value
from frontend.parse_errors import (
    ParseError, UnmatchedOpenParenError, UnmatchedCloseParenError,
    UnexpectedEndOfInputError, IncompleteStatementError,
    InvalidArithmeticExpressionError, EmptyMatrixElementError,
    DimensionsMismatchError, UnexpectedTokenError,
)
from ir.ir import (
    Operator, OPERATOR_SYMBOLS, ExprNode, Var, Number, MatrixLit,
    OperatorNode, ArithmeticExpr, Statement, stores_in_ans,
)

STATEMENT_TERMINATORS = {"EOF", "NEWLINE", ";"}


class ExprParser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.i = 0
        self.matrix_depth = 0

    # token helpers

    def current(self) -> Token:
        return self.tokens[self.i]

    def advance(self) -> Token:
        """Consume the current token (EOF is never consumed)."""
        tok = self.current()
        if tok.kind != "EOF":
            self.i += 1
        return tok

    def at_end(self) -> bool:
        return self.current().kind == "EOF"

    def skip_separators(self) -> None:
        """Skip blank lines and empty statements between statements."""
        while self.current().kind in ("NEWLINE", ";"):
            self.i += 1

    def recover_to_stmt_boundary(self, start: int) -> List[Token]:
        """Recover from a parse error by skipping to the next statement.

        Rescans from the token index where the failed statement started.
        A statement boundary is `;` or NEWLINE outside any matrix literal;
        the boundary token itself is consumed. Parentheses never span lines,
        so only square brackets are counted.

        Returns: the skipped tokens (boundary excluded)
        """
        self.i = start
        skipped = []
        depth = 0

        while not self.at_end():
            tok = self.current()
            if depth == 0 and tok.kind in ("NEWLINE", ";"):
                self.i += 1
                break
            if tok.kind == "[":
                depth += 1
            elif tok.kind == "]":
                depth = max(0, depth - 1)
            skipped.append(tok)
            self.i += 1

        return skipped

    # statements

    def parse_statements(self) -> Iterator[Statement]:
        """Yield statements until EOF. Stops at the first ParseError."""
        while True:
            self.skip_separators()
            if self.at_end():
                return
            yield self.parse_statement()

    def parse_statement(self) -> Statement:
        """Parse one expression followed by a statement terminator.

        EOF and NEWLINE terminate with print_result set; `;` clears it.
        """
        start_line = self.current().line
        expr = self.parse_expr()

        tok = self.current()
        if tok.kind in ("EOF", "NEWLINE"):
            print_result = True
        elif tok.kind == ";":
            print_result = False
        else:
            raise UnexpectedTokenError(
                expected="EndOfFile", found=tok.stringify(), line=tok.line, pos=tok.pos
            )
        self.advance()

        return Statement(
            expr=expr,
            store_in_ans=stores_in_ans(expr),
            print_result=print_result,
            line=start_line,
        )

    # expressions (shunting-yard)

    @staticmethod
    def _pops_before(top: Operator, incoming: Operator) -> bool:
        """Whether a pending operator is emitted before the incoming one."""
        if incoming.is_right_assoc:
            return top.precedence > incoming.precedence
        return top.precedence >= incoming.precedence

    def parse_expr(self) -> ExprNode:
        """Parse an expression into a single node or an ArithmeticExpr.

        The token that ends the expression (terminator, separator, `]`) is
        left unconsumed for the caller.
        """
        start = self.current()
        start_i = self.i
        out: List[ExprNode] = []
        ops: List[OperatorNode] = []
        # One entry per open parenthesis: (height of ops when it opened, the '(' token)
        precedence_stack: List[Tuple[int, Token]] = []
        last_was_operand = False

        while True:
            tok = self.current()

            if tok.kind in ("NUMBER", "ID", "["):
                if last_was_operand:
                    # Inside a matrix an operand ends the current cell
                    if self.matrix_depth and not precedence_stack:
                        break
                    raise InvalidArithmeticExpressionError(
                        f"unexpected {tok.stringify()} after an operand", tok.line, tok.pos
                    )
                out.append(self.parse_operand())
                last_was_operand = True

            elif tok.kind in OPERATOR_SYMBOLS:
                if not last_was_operand:
                    raise InvalidArithmeticExpressionError(
                        f"operator '{tok.value}' has no left operand", tok.line, tok.pos
                    )
                op = Operator.from_symbol(tok.kind)
                floor = precedence_stack[-1][0] if precedence_stack else 0
                while len(ops) > floor and self._pops_before(ops[-1].op, op):
                    out.append(ops.pop())
                ops.append(OperatorNode(line=tok.line, op=op))
                self.advance()
                last_was_operand = False

            elif tok.kind == "(":
                if last_was_operand:
                    raise InvalidArithmeticExpressionError(
                        "'(' directly after an operand", tok.line, tok.pos
                    )
                precedence_stack.append((len(ops), tok))
                self.advance()
                last_was_operand = False

            elif tok.kind == ")":
                if not last_was_operand:
                    raise InvalidArithmeticExpressionError(
                        "')' without a preceding operand", tok.line, tok.pos
                    )
                if not precedence_stack:
                    raise UnmatchedCloseParenError(tok.line, tok.pos)
                floor, _ = precedence_stack.pop()
                while len(ops) > floor:
                    out.append(ops.pop())
                self.advance()
                last_was_operand = True

            else:
                break

        end_tok = self.current()
        if not last_was_operand:
            if end_tok.kind == "EOF":
                if self.matrix_depth:
                    raise IncompleteStatementError(end_tok.line, end_tok.pos)
                raise UnexpectedEndOfInputError(end_tok.line, end_tok.pos)
            if self.i == start_i:
                if end_tok.kind in STATEMENT_TERMINATORS:
                    raise UnexpectedEndOfInputError(end_tok.line, end_tok.pos)
                raise UnexpectedTokenError(
                    expected="Expression", found=end_tok.stringify(),
                    line=end_tok.line, pos=end_tok.pos
                )
            raise InvalidArithmeticExpressionError(
                f"expected an operand before {end_tok.stringify()}", end_tok.line, end_tok.pos
            )

        if precedence_stack:
            _, open_tok = precedence_stack[-1]
            raise UnmatchedOpenParenError(open_tok.line, open_tok.pos)

        while ops:
            out.append(ops.pop())

        if len(out) == 1:
            return out[0]
        return ArithmeticExpr(line=start.line, postfix=tuple(reversed(out)))

    def parse_operand(self) -> ExprNode:
        tok = self.current()
        if tok.kind == "NUMBER":
            self.advance()
            return Number(line=tok.line, value=number_value(tok))
        if tok.kind == "ID":
            self.advance()
            return Var(line=tok.line, name=tok.value)
        if tok.kind == "[":
            return self.parse_matrix_literal()
        raise UnexpectedTokenError(
            expected="Expression", found=tok.stringify(), line=tok.line, pos=tok.pos
        )

    # matrix literals

    def parse_matrix_literal(self) -> MatrixLit:
        """Parse a matrix literal: [ a, b ; c d ].

        Cells are separated by `,` or by juxtaposition; rows by `;` or a
        newline. Every row must have as many cells as the row before it.
        """
        lbrack = self.advance()
        self.matrix_depth += 1
        try:
            rows = self._parse_matrix_rows()
        finally:
            self.matrix_depth -= 1
        return MatrixLit(line=lbrack.line, rows=tuple(tuple(row) for row in rows))

    def _check_row_lengths(self, rows: List[List[ExprNode]], tok: Token) -> None:
        if len(rows) >= 2 and len(rows[-2]) != len(rows[-1]):
            raise DimensionsMismatchError(len(rows[-2]), len(rows[-1]), tok.line, tok.pos)

    def _parse_matrix_rows(self) -> List[List[ExprNode]]:
        tok = self.current()

        # Empty literal
        if tok.kind == "]":
            self.advance()
            return []
        if tok.kind == ",":
            raise EmptyMatrixElementError(tok.line, tok.pos)

        rows: List[List[ExprNode]] = [[self.parse_expr()]]
        comma_pending = False
        row_from_newline = False

        while True:
            tok = self.current()

            if tok.kind == "EOF":
                raise IncompleteStatementError(tok.line, tok.pos)

            if tok.kind == "]":
                # allow a trailing newline before ]
                if row_from_newline and not rows[-1]:
                    rows.pop()
                else:
                    self._check_row_lengths(rows, tok)
                self.advance()
                return rows

            if tok.kind == ",":
                if comma_pending:
                    raise EmptyMatrixElementError(tok.line, tok.pos)
                comma_pending = True
                self.advance()
                continue

            if tok.kind == ";" or tok.kind == "NEWLINE":
                if tok.kind == "NEWLINE" and not rows[-1]:
                    self.advance()
                    continue
                self._check_row_lengths(rows, tok)
                rows.append([])
                # a row may not start with a comma
                comma_pending = True
                row_from_newline = tok.kind == "NEWLINE"
                self.advance()
                continue

            rows[-1].append(self.parse_expr())
            comma_pending = False


def parse(tokens: List[Token]) -> Statement:
    """Parse exactly one statement from a token sequence."""
    return ExprParser(tokens).parse_statement()


__all__ = ["ExprParser", "ParseError", "parse"]
