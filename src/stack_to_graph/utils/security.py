"""Credential redaction for log output and configuration display.

Graph store credentials reach this process through connection URIs and
configuration files. Everything that is logged passes through the
CredentialRedactor so those values never end up in log output.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()


class RedactionError(Exception):
    """Raised when credential redaction fails."""


class CredentialRedactor:
    """Detects and redacts credentials from text.

    If a pattern fails to compile or execute, an exception is raised rather
    than returning text that may still contain a credential.

    Usage:
        redactor = CredentialRedactor()
        safe_text = redactor.redact("bolt://neo4j:hunter2@db:7687")
        # 'bolt://[REDACTED]@db:7687'
    """

    DEFAULT_PATTERNS: tuple[tuple[str, str], ...] = (
        # user:password@ in any scheme://, including neo4j+s and bolt+ssc
        (r"(?<=://)[^/\s:@]+:[^/\s@]+(?=@)", "URI credentials"),
        (
            r"(?i)(?<=password)(\s*[=:]\s*)[\"']?[^\s,\"'}]+[\"']?",
            "Password assignment",
        ),
        (r"(?i)(?<=Basic )[A-Za-z0-9+/=]{8,}", "Basic auth header"),
    )

    def __init__(
        self,
        placeholder: str = "[REDACTED]",
        custom_patterns: Sequence[tuple[str, str]] | None = None,
    ) -> None:
        """Initialize the CredentialRedactor.

        Args:
            placeholder: String to replace detected credentials with.
            custom_patterns: Additional (pattern, name) tuples to detect.

        Raises:
            RedactionError: If any pattern fails to compile.
        """
        self.placeholder = placeholder
        self._pattern_names: dict[re.Pattern[str], str] = {}

        all_patterns = list(self.DEFAULT_PATTERNS)
        if custom_patterns:
            all_patterns.extend(custom_patterns)

        try:
            for pattern_str, name in all_patterns:
                self._pattern_names[re.compile(pattern_str)] = name
        except re.error as e:
            log.error("pattern_compilation_failed", pattern=pattern_str, error=str(e))
            raise RedactionError(f"Failed to compile pattern '{pattern_str}': {e}") from e

    def _replacement(self, match: re.Match[str]) -> str:
        # Keep the separator of 'password = value' assignments
        if match.lastindex:
            return f"{match.group(1)}{self.placeholder}"
        return self.placeholder

    def redact(self, text: str) -> str:
        """Redact all credentials from the given text.

        Args:
            text: The text to scan.

        Returns:
            The text with detected credentials replaced by the placeholder.

        Raises:
            RedactionError: If redaction fails for any reason.
        """
        if not text:
            return text

        try:
            result = text
            for pattern in self._pattern_names:
                result = pattern.sub(self._replacement, result)
            return result
        except Exception as e:
            log.error("redaction_failed", error=str(e))
            raise RedactionError(f"Redaction failed: {e}") from e

    def has_credentials(self, text: str) -> bool:
        """Check if text contains any credentials."""
        if not text:
            return False
        return any(pattern.search(text) for pattern in self._pattern_names)

