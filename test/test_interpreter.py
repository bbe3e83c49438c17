"""
Interpreter tests for INCR
Evaluation, the variable store and output ordering
"""

import pytest
from parsing import Program, VarDecl, PrintStmt, NumberLit, VarRef, IncCall
from interpreter import (
    Interpreter, create_interpreter, eval_expression, exec_statement, eval_program
)
from stdlib import incr_inc, get_builtin, digits_to_int, int_to_digits, DIGIT_BLOCK
from error_handling import IncrRuntimeError


class TestExecution:
  """Test statement execution"""

  def test_reference_program(self, parser, interpreter):
    program = parser.parse_string("x=10;print(inc(x));print(inc(15));")
    assert interpreter.execute(program) == [11, 16]

  def test_later_declaration_wins(self, parser, interpreter):
    assert interpreter.execute(parser.parse_string("x=1; x=2; print(x);")) == [2]

  def test_nested_inc_is_additive(self, parser, interpreter):
    assert interpreter.execute(parser.parse_string("print(inc(inc(inc(5))));")) == [8]

  def test_declarations_produce_no_output(self, parser, interpreter):
    assert interpreter.execute(parser.parse_string("a=1;b=2;")) == []
    assert interpreter.variables == {"a": 1, "b": 2}

  def test_large_values_use_host_integers(self, parser, interpreter):
    program = parser.parse_string("big=99999999999999999999;print(inc(big));")
    assert interpreter.execute(program) == [100000000000000000000]

  def test_on_output_sees_values_in_order(self, parser):
    seen = []
    interpreter = create_interpreter(on_output=seen.append)
    output = interpreter.execute(parser.parse_string("print(1);print(inc(1));print(3);"))
    assert seen == [1, 2, 3]
    assert output == seen


class TestRuntimeErrors:
  """Test the use-before-assignment guard"""

  def test_unassigned_variable(self):
    """Only reachable when checking is skipped"""
    with pytest.raises(IncrRuntimeError) as exc_info:
      Interpreter().execute(Program((PrintStmt(VarRef("y")),)))
    assert exc_info.value.message == "used before assignment: y"

  def test_error_stops_execution(self):
    seen = []
    program = Program((
        PrintStmt(NumberLit(1)),
        PrintStmt(IncCall(VarRef("missing"))),
        PrintStmt(NumberLit(3)),
    ))
    with pytest.raises(IncrRuntimeError):
      Interpreter(on_output=seen.append).execute(program)
    assert seen == [1]

  def test_unknown_node_is_rejected(self):
    with pytest.raises(TypeError):
      Interpreter().evaluate(VarDecl("x", NumberLit(1)))


class TestBuiltins:
  """Test the standard library"""

  def test_inc(self):
    assert incr_inc(41) == 42
    assert incr_inc(-1) == 0

  def test_builtin_lookup(self):
    assert get_builtin("inc") is incr_inc

  def test_unknown_builtin(self):
    with pytest.raises(KeyError):
      get_builtin("dec")


class TestPureEvaluation:
  """Test the functions that thread the store explicitly"""

  def test_eval_program(self, parser):
    output, memory = eval_program(parser.parse_string("x=1;print(inc(x));x=5;print(x);"))
    assert output == [2, 5]
    assert memory == {"x": 5}

  def test_exec_statement_does_not_mutate(self):
    memory = {"a": 1}
    value, updated = exec_statement(VarDecl("a", NumberLit(9)), memory)
    assert value is None
    assert memory == {"a": 1}
    assert updated == {"a": 9}

  def test_exec_print(self):
    value, updated = exec_statement(PrintStmt(IncCall(VarRef("a"))), {"a": 1})
    assert value == 2
    assert updated == {"a": 1}

  def test_deep_chain(self):
    expr = NumberLit(0)
    for _ in range(5000):
      expr = IncCall(expr)
    assert eval_expression(expr, {}) == 5000


class TestDecimalConversion:
  """Test decimal conversion of integers past the host digit limit"""

  @pytest.mark.parametrize("length", [1, DIGIT_BLOCK - 1, DIGIT_BLOCK, DIGIT_BLOCK + 1, 4301, 9000])
  def test_round_trip(self, length):
    digits = "8" + "0" * (length - 1)
    assert int_to_digits(digits_to_int(digits)) == digits

  def test_inner_blocks_keep_leading_zeros(self):
    value = 10 ** (3 * DIGIT_BLOCK) + 5
    assert int_to_digits(value) == "1" + "0" * (3 * DIGIT_BLOCK - 1) + "5"

  def test_negative(self):
    assert int_to_digits(-(10 ** 5000)) == "-1" + "0" * 5000

  def test_leading_zeros_in_source(self):
    assert digits_to_int("000123") == 123
