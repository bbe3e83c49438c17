"""
INCR Standard Library
Built-in functions for INCR, plus decimal conversions for host integers
"""

from types import MappingProxyType
from typing import Callable, List


# Interpreters cap int <-> str conversions at a few thousand digits, so
# long literals are converted in blocks that stay below the cap.
DIGIT_BLOCK = 1000
_BLOCK_BASE = 10 ** DIGIT_BLOCK


# ============================================================================
# NUMBER CONVERSION
# ============================================================================

def digits_to_int(digits: str) -> int:
  """Convert a run of decimal digits of any length to an int"""
  value = 0
  for start in range(0, len(digits), DIGIT_BLOCK):
    block = digits[start:start + DIGIT_BLOCK]
    value = value * 10 ** len(block) + int(block)
  return value


def int_to_digits(value: int) -> str:
  """Render an int of any size in decimal"""
  if value < 0:
    return "-" + int_to_digits(-value)
  if value < _BLOCK_BASE:
    return str(value)

  blocks: List[str] = []
  while value:
    value, block = divmod(value, _BLOCK_BASE)
    blocks.append(str(block))
  head = blocks.pop()
  return head + "".join(block.zfill(DIGIT_BLOCK) for block in reversed(blocks))


# ============================================================================
# ARITHMETIC
# ============================================================================

def incr_inc(value: int) -> int:
  """Increment by one; host integers, so no overflow policy applies"""
  return value + 1


# ============================================================================
# BUILT-IN TABLE
# ============================================================================

BUILTINS = MappingProxyType({
    "inc": incr_inc,
})


def get_builtin(name: str) -> Callable[[int], int]:
  """Look up a built-in by its source-level name"""
  return BUILTINS[name]
