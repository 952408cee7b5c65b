"""depresolve: resolve dependency projects from directories and repositories."""

__version__ = "0.1.0"
