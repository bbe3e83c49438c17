"""
INCR Semantics Analysis - Pure Functional Style
Single forward pass enforcing declare-before-use; the declared names are an
immutable set threaded through the program in order
"""

from typing import FrozenSet
from parsing import (
    Program, Stmt, Expr, VarDecl, PrintStmt, NumberLit, VarRef, IncCall
)
from error_handling import IncrSemanticError


# ============================================================================
# ANALYSIS (Pure Functions)
# ============================================================================

def check_expression(expr: Expr, declared: FrozenSet[str]) -> None:
  """Raise if the expression reads a name missing from declared"""
  # inc chains are unwrapped in a loop so nesting depth is unbounded
  while isinstance(expr, IncCall):
    expr = expr.argument

  if isinstance(expr, NumberLit):
    return
  if isinstance(expr, VarRef):
    if expr.name not in declared:
      raise IncrSemanticError(f"undeclared variable: {expr.name}", expr.line or None)
    return
  raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def check_statement(stmt: Stmt, declared: FrozenSet[str], debug: bool = False) -> FrozenSet[str]:
  """Check one statement and return the declared names after it"""
  if debug:
    print(f"Checking: {type(stmt).__name__}")

  if isinstance(stmt, VarDecl):
    # Redeclaration is legal
    if stmt.name in declared:
      return declared
    return declared | {stmt.name}
  if isinstance(stmt, PrintStmt):
    check_expression(stmt.expression, declared)
    return declared
  raise TypeError(f"Unknown statement node: {type(stmt).__name__}")


def check_program(program: Program, declared: FrozenSet[str] = frozenset(),
                  debug: bool = False) -> FrozenSet[str]:
  """
  Check a whole program in textual order and return the final declared set.
  Raises IncrSemanticError at the first use of an undeclared name.
  """
  for stmt in program.statements:
    declared = check_statement(stmt, declared, debug)
  return declared


# ============================================================================
# CHECKER OBJECT (keeps the declared set between calls, e.g. in the REPL)
# ============================================================================

class SemanticChecker:
  """Holds the declared-name set; each call threads it through the pure checks"""

  def __init__(self, debug: bool = False):
    self.debug = debug
    self._declared: FrozenSet[str] = frozenset()

  @property
  def declared(self) -> FrozenSet[str]:
    return self._declared

  def check(self, program: Program) -> None:
    """Check every statement in order; raises on the first undeclared use"""
    for stmt in program.statements:
      self.check_statement(stmt)

  def check_statement(self, stmt: Stmt) -> None:
    self._declared = check_statement(stmt, self._declared, self.debug)

  def check_expression(self, expr: Expr) -> None:
    check_expression(expr, self._declared)


# ============================================================================
# FACTORY FUNCTIONS (for compatibility with main.py)
# ============================================================================

def create_analyzer(debug: bool = False) -> SemanticChecker:
  """Create a fresh semantic checker"""
  return SemanticChecker(debug=debug)


def create_debug_analyzer() -> SemanticChecker:
  """Create a semantic checker with debug enabled"""
  return create_analyzer(debug=True)
