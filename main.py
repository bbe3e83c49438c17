"""
INCR Programming Language - Main Entry Point
Integer variables, print, and the inc built-in
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional, Tuple
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from parsing import create_parser, create_debug_parser, pretty_print_ast, format_token
from semantics import create_analyzer, create_debug_analyzer
from pipeline import run, Session
from error_handling import IncrError, describe_error
from stdlib import int_to_digits


VERSION = "INCR v0.1.0 (Direct AST Interpreter)"

DEMO_PROGRAMS: List[Tuple[str, str]] = [
    ("VALID Program (Expected: 11, 16)", "x=10;print(inc(x));print(inc(15));"),
    ("INVALID Program (Undeclared Var)", "a=1;print(inc(y));"),
    ("INVALID Program (Syntax Error)", "print(inc());"),
]


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='incr',
      description='INCR Programming Language - declarations, print and inc',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.incr              # Run an INCR script
  %(prog)s -e "x=1;print(inc(x));"  # Run inline source
  %(prog)s -i                       # Interactive mode
  %(prog)s --tokens script.incr     # Show the token stream
  %(prog)s --parse script.incr      # Parse and show AST
  %(prog)s --analyze script.incr    # Parse, check and show AST
  %(prog)s --demo                   # Run the bundled example programs
  %(prog)s --debug script.incr      # Run with stage tracing
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='INCR script file to execute'
  )

  parser.add_argument(
      '-e', '--eval',
      metavar='SOURCE',
      help='Execute SOURCE instead of a script file'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--tokens',
      action='store_true',
      help='Tokenize and show the token stream (for debugging)'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse and show AST (for debugging)'
  )

  parser.add_argument(
      '--analyze',
      action='store_true',
      help='Parse and check declarations, show AST (for debugging)'
  )

  parser.add_argument(
      '--demo',
      action='store_true',
      help='Run the bundled example programs'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def read_source(script_path: str) -> str:
  """Read a script file, exiting with a hint when it cannot be read"""
  try:
    with open(script_path, 'r', encoding='utf-8') as f:
      return f.read()
  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found")
    print(f"  Hint: Check the file path and make sure the file exists")
    sys.exit(1)
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    print(f"  Hint: Make sure you have read permissions for this file")
    sys.exit(1)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}")
    print(f"  Hint: Make sure the file is a text file with UTF-8 encoding")
    sys.exit(1)


def show_tokens(source: str, label: str, debug: bool = False) -> None:
  """Print the token stream of a source text"""
  parser = create_debug_parser() if debug else create_parser()
  tokens = parser.tokenize(source)
  print(f"Tokens in {label} ({len(tokens)}):")
  for token in tokens:
    print(format_token(token))


def parse_source_text(source: str, label: str, debug: bool = False) -> None:
  """Parse a source text and show the AST"""
  parser = create_debug_parser() if debug else create_parser()
  try:
    program = parser.parse_string(source)
  except IncrError as e:
    print(f"Parse error in '{label}':\n{describe_error(e, source)}")
    sys.exit(1)

  print(f"Parsed {len(program)} statements:")
  print("=" * 50)
  print(pretty_print_ast(program), end='')


def analyze_source_text(source: str, label: str, debug: bool = False) -> None:
  """Parse and check a source text, then show the AST"""
  parser = create_debug_parser() if debug else create_parser()
  analyzer = create_debug_analyzer() if debug else create_analyzer()
  try:
    program = parser.parse_string(source)
    analyzer.check(program)
  except IncrError as e:
    print(f"Error in '{label}':\n{describe_error(e, source)}")
    sys.exit(1)

  print(f"Analyzed {len(program)} statements, declared: "
        f"{', '.join(sorted(analyzer.declared)) or '(none)'}")
  print("=" * 50)
  print(pretty_print_ast(program), end='')


def run_source_text(source: str, label: str, debug: bool = False) -> None:
  """Run a source text, printing each value as it is produced"""
  try:
    run(source, debug=debug, on_output=lambda value: print(int_to_digits(value)))
  except IncrError as e:
    print(f"Error in '{label}':\n{describe_error(e, source)}")
    sys.exit(1)


def run_demo(debug: bool = False) -> int:
  """
  Run the bundled example programs; returns how many of them failed.
  Two of them fail on purpose, so the count is informational and the
  --demo command line still exits with status 0.
  """
  failures = 0
  for name, code in DEMO_PROGRAMS:
    print(f"\n{'=' * 42}\nTEST: {name}\n{'=' * 42}")
    print(f"Source Code:\n{code}")
    try:
      run(source=code, debug=debug, on_output=lambda value: print(f"Output: {int_to_digits(value)}"))
    except IncrError as e:
      failures += 1
      print(f"\n[Caught Expected Error] {e}")
  return failures


def setup_readline():
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  # Setup history file
  history_file = os.path.expanduser("~/.incr_history")
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet, or permission denied

  readline.set_history_length(1000)

  completions = [
      # Keywords and built-ins
      "print", "inc",
      # REPL commands
      ":tokens", ":parse", ":env", ":help", "exit."
  ]

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  # Save history on exit
  import atexit
  atexit.register(lambda: readline.write_history_file(history_file))


def print_repl_help() -> None:
  print("REPL Commands:")
  print("  :tokens <src>     - Show the token stream")
  print("  :parse <src>      - Show parsed AST")
  print("  :env              - Show current variables")
  print("  :help             - Show this help")
  print("  exit.             - Exit REPL")
  print()
  print("Language features:")
  print("  x = 5;                    - Variable declaration (literal only)")
  print("  print(inc(x));            - Print an expression")
  print("  inc(inc(x))               - Evaluate an expression (no semicolon)")


def run_interactive_mode(debug: bool = False) -> None:
  """Run INCR in interactive mode"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit.' to quit, ':help' for commands")
  if READLINE_AVAILABLE:
    print("Readline enabled: Use ↑/↓ for history, Tab for completion")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  parser = create_debug_parser() if debug else create_parser()
  session = Session(debug=debug)

  while True:
    try:
      code = input("incr> ")
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    stripped = code.strip()
    if stripped == "exit.":
      break
    if not stripped:
      continue

    if stripped == ":help":
      print_repl_help()
      continue

    if stripped == ":env":
      print("Current environment:")
      variables = session.variables
      if variables:
        for name, value in variables.items():
          print(f"  {name} = {int_to_digits(value)}")
      else:
        print("  (no variables)")
      continue

    try:
      if stripped.startswith(":tokens "):
        for token in parser.tokenize(stripped[len(":tokens "):]):
          print(format_token(token))
      elif stripped.startswith(":parse "):
        text = stripped[len(":parse "):]
        if text.rstrip().endswith(";"):
          print(pretty_print_ast(parser.parse_string(text)), end='')
        else:
          print(pretty_print_ast(parser.parse_expression(text)), end='')
      elif stripped.endswith(";"):
        for value in session.feed(code):
          print(int_to_digits(value))
      else:
        print(f"=> {int_to_digits(session.evaluate(parser.parse_expression(code)))}")
    except IncrError as e:
      print(describe_error(e, code))


def show_language_info() -> None:
  """Show INCR language information"""
  print("INCR Programming Language")
  print("=" * 50)
  print("A tiny language with:")
  print("• Integer variable declarations  (x = 10;)")
  print("• A print statement              (print(x);)")
  print("• The inc built-in               (inc(x) is x + 1)")
  print()
  print("Pipeline: lexing, parsing, semantic checking, direct interpretation")
  print()


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for INCR"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.demo:
    # Failing demo programs are expected; the demo always exits 0
    run_demo(debug=args.debug)
    return

  has_source = args.eval is not None or args.script
  if (args.tokens or args.parse or args.analyze) and not has_source:
    arg_parser.error("--tokens/--parse/--analyze need a script or -e SOURCE")

  if has_source:
    if args.eval is not None:
      source, label = args.eval, "<eval>"
    else:
      if not Path(args.script).exists():
        print(f"Error: Script file '{args.script}' does not exist")
        sys.exit(1)
      source, label = read_source(args.script), args.script

    if args.tokens:
      show_tokens(source, label, debug=args.debug)
    elif args.parse:
      parse_source_text(source, label, debug=args.debug)
    elif args.analyze:
      analyze_source_text(source, label, debug=args.debug)
    else:
      run_source_text(source, label, debug=args.debug)

  elif args.interactive:
    run_interactive_mode(debug=args.debug)

  else:
    # Show help and language info
    arg_parser.print_help()
    print()
    show_language_info()


if __name__ == "__main__":
  main()
