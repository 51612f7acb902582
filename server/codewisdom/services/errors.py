"""Errors raised while turning a file into a report."""

from typing import Dict, Optional


class CodeWisdomError(Exception):
    """Base exception for all per-file analysis failures."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class UnsupportedLanguageError(CodeWisdomError):
    """The file maps to no known language; callers skip it quietly."""

    def __init__(self, target: str):
        super().__init__("Unsupported language", {"target": target})
        self.target = target


class ParseFailureError(CodeWisdomError):
    """The parser failed or produced a tree containing syntax errors."""

    def __init__(self, path: str, language: str, reason: str = "syntax error"):
        super().__init__(f"Failed to parse: {reason}", {"path": path, "language": language})
        self.path = path
        self.language = language
        self.reason = reason
