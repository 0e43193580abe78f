"""Error message sanitization to prevent credential leakage."""

from __future__ import annotations

import os
import re


def sanitize_error(message: str) -> str:
    """Sanitize error messages to prevent token and path leakage."""
    if not message:
        return message

    sanitized = message
    # Redact bearer and service account tokens
    sanitized = re.sub(r"Bearer\s+\S+", "Bearer [REDACTED]", sanitized)
    sanitized = re.sub(r"Authorization:\s*\S+", "Authorization: [REDACTED]", sanitized)
    sanitized = re.sub(r"eyJ[a-zA-Z0-9_-]{10,}\.[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+", "[REDACTED_TOKEN]", sanitized)

    # Redact user home paths
    home = os.environ.get("USERPROFILE") or os.environ.get("HOME") or ""
    if home and home != "/":
        sanitized = sanitized.replace(home, "[USER_HOME]")

    return sanitized
