"""
INCR pipeline: lexer -> parser -> semantic checker -> interpreter
Every run builds its own components; nothing is shared between runs
"""

from enum import Enum
from typing import Callable, List, Optional

from parsing import Lexer, Parser, Program, Expr, Token, tokenize as _tokenize
from semantics import create_analyzer
from interpreter import create_interpreter
from error_handling import IncrError


class Stage(Enum):
  START = "start"
  LEXING = "lexing"
  PARSING = "parsing"
  CHECKING = "checking"
  EXECUTING = "executing"
  DONE = "done"


def _tag(error: IncrError, stage: Stage) -> IncrError:
  if error.stage is None:
    error.stage = stage.value
  return error


def tokenize(source: str) -> List[Token]:
  """Run only the lexer"""
  return _tokenize(source)


def parse_source(source: str, debug: bool = False) -> Program:
  """Lex and parse; tokens are pulled lazily as the parser needs them"""
  try:
    return Parser(Lexer(source), debug).parse()
  except IncrError as e:
    raise _tag(e, Stage.PARSING)


def check_program(program: Program, debug: bool = False) -> None:
  """Run the declare-before-use pass over a parsed program"""
  if debug:
    print("\n--- Starting Semantic Analysis ---")
  try:
    create_analyzer(debug).check(program)
  except IncrError as e:
    raise _tag(e, Stage.CHECKING)
  if debug:
    print("Semantic analysis passed successfully.")


def execute_program(program: Program, debug: bool = False,
                    on_output: Optional[Callable[[int], None]] = None) -> List[int]:
  """Interpret a checked program and return its printed values"""
  if debug:
    print("\n--- Starting Code Execution (Direct AST Interpretation) ---")
  try:
    output = create_interpreter(debug, on_output).execute(program)
  except IncrError as e:
    raise _tag(e, Stage.EXECUTING)
  if debug:
    print("Execution finished successfully.")
  return output


def run(source: str, debug: bool = False,
        on_output: Optional[Callable[[int], None]] = None) -> List[int]:
  """Run INCR source end to end.

  Returns one integer per executed print, in order. The first failing
  stage raises IncrSyntaxError, IncrSemanticError or IncrRuntimeError
  and later stages never run.
  """
  if debug:
    print("Lexing and parsing...")
  program = parse_source(source, debug)
  if debug:
    print(f"Parsed {len(program)} statements")
  check_program(program, debug)
  return execute_program(program, debug, on_output)


class Session:
  """Interactive session: one checker and one interpreter kept across inputs"""

  def __init__(self, debug: bool = False):
    self.debug = debug
    self.checker = create_analyzer(debug)
    self.interpreter = create_interpreter(debug)

  def feed(self, source: str) -> List[int]:
    """Run a chunk of source against the session's accumulated state.

    Each statement is checked and executed before the next is looked at,
    so a failing statement leaves earlier ones in effect.
    """
    program = parse_source(source, self.debug)
    output = []
    for stmt in program.statements:
      try:
        self.checker.check_statement(stmt)
      except IncrError as e:
        raise _tag(e, Stage.CHECKING)
      try:
        value = self.interpreter.execute_statement(stmt)
      except IncrError as e:
        raise _tag(e, Stage.EXECUTING)
      if value is not None:
        output.append(value)
    return output

  def evaluate(self, expression: Expr) -> int:
    """Evaluate a bare expression without printing or storing it"""
    try:
      self.checker.check_expression(expression)
    except IncrError as e:
      raise _tag(e, Stage.CHECKING)
    try:
      return self.interpreter.evaluate(expression)
    except IncrError as e:
      raise _tag(e, Stage.EXECUTING)

  @property
  def variables(self):
    return self.interpreter.variables
