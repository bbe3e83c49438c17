"""
INCR Interpreter - Pure Functional Style
Direct AST interpretation; evaluation functions thread the variable store
and return updated copies, side effects (output) handled at the boundary
"""

from typing import Callable, Dict, List, Optional, Tuple
from parsing import (
    Program, Stmt, Expr, VarDecl, PrintStmt, NumberLit, VarRef, IncCall
)
from error_handling import IncrRuntimeError
from stdlib import get_builtin


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_expression(expr: Expr, memory: Dict[str, int], debug: bool = False) -> int:
  """Evaluate an expression against the variable store"""
  inc = get_builtin("inc")

  # Walk down the inc chain iteratively, then apply inc once per level
  depth = 0
  while isinstance(expr, IncCall):
    if debug:
      print("Evaluating: IncCall")
    depth += 1
    expr = expr.argument

  if debug:
    print(f"Evaluating: {type(expr).__name__}")

  if isinstance(expr, NumberLit):
    value = expr.value
  elif isinstance(expr, VarRef):
    if expr.name not in memory:
      raise IncrRuntimeError(f"used before assignment: {expr.name}", expr.line or None)
    value = memory[expr.name]
  else:
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")

  for _ in range(depth):
    value = inc(value)
  return value


def exec_statement(stmt: Stmt, memory: Dict[str, int],
                   debug: bool = False) -> Tuple[Optional[int], Dict[str, int]]:
  """
  Execute one statement and return (printed value or None, updated store).
  The store passed in is never mutated.
  """
  if debug:
    print(f"Executing: {type(stmt).__name__}")

  if isinstance(stmt, VarDecl):
    return None, {**memory, stmt.name: stmt.initializer.value}
  if isinstance(stmt, PrintStmt):
    return eval_expression(stmt.expression, memory, debug), memory
  raise TypeError(f"Unknown statement node: {type(stmt).__name__}")


def eval_program(program: Program, debug: bool = False) -> Tuple[List[int], Dict[str, int]]:
  """
  Evaluate a program from an empty store.
  Returns (printed values in order, final store)
  """
  memory: Dict[str, int] = {}
  output = []
  for stmt in program.statements:
    value, memory = exec_statement(stmt, memory, debug)
    if value is not None:
      output.append(value)
  return output, memory


# ============================================================================
# INTERPRETER OBJECT (store kept between calls, output callback)
# ============================================================================

class Interpreter:
  """Holds the variable store and reports each printed value as it happens"""

  def __init__(self, debug: bool = False,
               on_output: Optional[Callable[[int], None]] = None):
    self.debug = debug
    self.on_output = on_output
    self._memory: Dict[str, int] = {}

  @property
  def variables(self) -> Dict[str, int]:
    return dict(self._memory)

  def execute(self, program: Program) -> List[int]:
    """Execute statements left to right and return every printed value"""
    output = []
    for stmt in program.statements:
      value = self.execute_statement(stmt)
      if value is not None:
        output.append(value)
    return output

  def execute_statement(self, stmt: Stmt) -> Optional[int]:
    """Execute one statement; returns the printed value for print"""
    value, self._memory = exec_statement(stmt, self._memory, self.debug)
    if value is not None and self.on_output is not None:
      self.on_output(value)
    return value

  def evaluate(self, expr: Expr) -> int:
    return eval_expression(expr, self._memory, self.debug)


# ============================================================================
# FACTORY FUNCTIONS (for compatibility with main.py)
# ============================================================================

def create_interpreter(debug: bool = False,
                       on_output: Optional[Callable[[int], None]] = None) -> Interpreter:
  """Create a fresh interpreter with an empty store"""
  return Interpreter(debug=debug, on_output=on_output)


def create_debug_interpreter() -> Interpreter:
  """Create an interpreter with debug enabled"""
  return create_interpreter(debug=True)
