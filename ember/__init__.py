# Ember language package
# This package provides the scanner, parser and interpreter for the Ember language.
from .errors import Diagnostic, DiagnosticKind, EmberRuntimeError
from .interpreter import Interpreter, RunResult, parse_program, run_program
from .parser import parse
from .scanner import Token, TokenType, scan
from .std.io import BufferSink, ConsoleSink, OutputSink

__all__ = [
    'BufferSink',
    'ConsoleSink',
    'Diagnostic',
    'DiagnosticKind',
    'EmberRuntimeError',
    'Interpreter',
    'OutputSink',
    'RunResult',
    'Token',
    'TokenType',
    'parse',
    'parse_program',
    'run_program',
    'scan',
]
