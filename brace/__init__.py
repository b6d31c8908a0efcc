# Brace language package
# This package provides an interpreter for the Brace register language.
from .interpreter import run_program, run_files, Interpreter
from .errors import BraceError, ScanError, ExecutionError, SourceError
from .sources import SourceSet

__all__ = [
    'run_program',
    'run_files',
    'Interpreter',
    'SourceSet',
    'BraceError',
    'ScanError',
    'ExecutionError',
    'SourceError',
]
