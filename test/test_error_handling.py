"""
Error formatting tests for INCR
"""

from error_handling import (
    make_error, format_error, get_context_lines, describe_error,
    IncrError, IncrSyntaxError, IncrSemanticError, IncrRuntimeError
)


class TestErrorClasses:
  """Test the error taxonomy"""

  def test_hierarchy(self):
    for cls in (IncrSyntaxError, IncrSemanticError, IncrRuntimeError):
      assert issubclass(cls, IncrError)

  def test_syntax_error_fields(self):
    error = IncrSyntaxError("Expected ';'", 4, 2)
    assert error.message == "Expected ';'"
    assert (error.line, error.column) == (4, 2)
    assert str(error) == "Syntax error at line 4: Expected ';'"

  def test_runtime_error_without_line(self):
    assert str(IncrRuntimeError("used before assignment: x")) == (
        "Runtime error: used before assignment: x"
    )


class TestFormatting:
  """Test error rendering helpers"""

  def test_format_error_with_position(self):
    error = make_error("Syntax error", "Expected ')'", line=2, column=7, stage="parsing")
    assert format_error(error) == (
        "Syntax error at line 2, column 7: Expected ')'\n  Stage: parsing"
    )

  def test_format_error_without_position(self):
    error = make_error("Semantic error", "undeclared variable: y")
    assert format_error(error) == "Semantic error: undeclared variable: y"

  def test_context_lines_with_caret(self):
    source = "a=1;\nb=2;\nprint(inc());\nc=3;"
    context = get_context_lines(source, 3, 11, context_lines=1)
    assert context.split("\n") == [
        "   2: b=2;",
        "   3: print(inc());",
        "                ^ Error here",
        "   4: c=3;",
    ]

  def test_describe_error_without_source(self):
    error = IncrSemanticError("undeclared variable: y", 1, stage="checking")
    assert describe_error(error) == (
        "Semantic error at line 1: undeclared variable: y\n  Stage: checking"
    )
