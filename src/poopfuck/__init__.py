from .lexer import Marker, render_markers, tokenize
from .parser import Instruction, Loop, Simple, count_instructions, emit, parse, parse_source
from .executor import Executor, execute
from .errors import ErrorKind, PoopError, PoopRuntimeError, PoopSyntaxError
from .api import RunOptions, RunResult, run_file, run_string

__all__ = [
    'Marker',
    'tokenize',
    'render_markers',
    'Instruction',
    'Simple',
    'Loop',
    'parse',
    'parse_source',
    'count_instructions',
    'emit',
    'Executor',
    'execute',
    'ErrorKind',
    'PoopError',
    'PoopSyntaxError',
    'PoopRuntimeError',
    'RunOptions',
    'RunResult',
    'run_string',
    'run_file',
]
