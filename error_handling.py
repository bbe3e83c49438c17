"""
Error handling for the INCR pipeline with detailed error messages
Error taxonomy plus pure helpers for rendering errors against source text
"""

from typing import Dict, Optional


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_error(
    kind: str,
    message: str,
    line: Optional[int] = None,
    column: Optional[int] = None,
    stage: Optional[str] = None,
    context: Optional[str] = None
) -> Dict:
    """Create an immutable error structure"""
    return {
        'kind': kind,
        'message': message,
        'line': line,
        'column': column,
        'stage': stage,
        'context': context
    }


def format_error(error: Dict) -> str:
    """Format error dict as string"""
    if error['line'] is not None:
        error_msg = f"{error['kind']} at line {error['line']}"
        if error['column'] is not None:
            error_msg += f", column {error['column']}"
        error_msg += f": {error['message']}"
    else:
        error_msg = f"{error['kind']}: {error['message']}"

    if error['stage']:
        error_msg += f"\n  Stage: {error['stage']}"

    if error['context']:
        error_msg += f"\n{error['context']}"

    return error_msg


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: Optional[int] = None,
                      context_lines: int = 2) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1 and col_num is not None:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def describe_error(error: 'IncrError', source_text: Optional[str] = None) -> str:
    """Render an error, with a source excerpt when the line is known"""
    context = None
    if source_text is not None and error.line is not None:
        context = get_context_lines(source_text, error.line, error.column)
    return format_error(make_error(
        error.kind, error.message, error.line, error.column,
        error.stage, context
    ))


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class IncrError(Exception):
    """Base class for every failure the pipeline reports"""
    kind = "Error"

    def __init__(self, message: str, line: Optional[int] = None,
                 column: Optional[int] = None, stage: Optional[str] = None):
        self.message = message
        self.line = line
        self.column = column
        self.stage = stage
        super().__init__(message)

    def __str__(self) -> str:
        if self.line is not None:
            return f"{self.kind} at line {self.line}: {self.message}"
        return f"{self.kind}: {self.message}"


class IncrSyntaxError(IncrError):
    """Grammar violation detected while parsing; always carries a line"""
    kind = "Syntax error"

    def __init__(self, message: str, line: int, column: Optional[int] = None,
                 stage: Optional[str] = None):
        super().__init__(message, line, column, stage)


class IncrSemanticError(IncrError):
    """Use of a variable that was never declared"""
    kind = "Semantic error"


class IncrRuntimeError(IncrError):
    """Evaluation-time failure"""
    kind = "Runtime error"
