"""Command-line entry points for quizbank.

`main` is the `quizbank` console script; `validate_bank` checks a bank file
before it is used.
"""

from .main import main

__all__ = ["main"]
