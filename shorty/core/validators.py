"""
Input Validators

This module validates inbound link fields. The rules are bundled into a
LinkValidator which is built once at startup by create_validator() and
handed to the API layer through app.state, instead of living in a
module-level registry.

Rules:
- original_url: required, absolute, http/https scheme, host present
- short_name: 3-32 characters from [a-zA-Z0-9_-]
"""

import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

from shorty.core.setting import Settings

SHORT_NAME_PATTERN = r"^[a-zA-Z0-9_-]{3,32}$"
ALLOWED_SCHEMES = frozenset({"http", "https"})


@dataclass(frozen=True)
class LinkValidator:
    """Validates link payloads and returns a field -> message mapping."""

    short_name_re: re.Pattern = field(default_factory=lambda: re.compile(SHORT_NAME_PATTERN))
    allowed_schemes: frozenset = ALLOWED_SCHEMES

    def check_original_url(self, url: Optional[str]) -> Optional[str]:
        """
        Validate an original URL.

        Returns:
            None if the URL is acceptable, otherwise the error message
        """
        url = (url or "").strip()
        if not url:
            return "original_url is required"

        try:
            parsed = urlparse(url)
            # Raises ValueError for a non-numeric or out-of-range port
            parsed.port
        except ValueError:
            return "original_url is invalid"

        if not parsed.scheme or not parsed.netloc or not self.is_valid_host(parsed.hostname):
            return "original_url is invalid"

        if parsed.scheme.lower() not in self.allowed_schemes:
            return "original_url must start with http or https"

        return None

    @staticmethod
    def is_valid_host(hostname: Optional[str]) -> bool:
        """A host must be non-empty and free of whitespace and control characters."""
        if not hostname:
            return False
        return not any(ch.isspace() or ord(ch) < 32 or ord(ch) == 127 for ch in hostname)

    def is_valid_short_name(self, short_name: str) -> bool:
        return self.short_name_re.fullmatch(short_name) is not None

    def validate(
        self,
        original_url: Optional[str],
        short_name: Optional[str],
        short_name_required: bool = False,
    ) -> dict[str, str]:
        """
        Validate a create/update payload.

        An empty short_name is allowed unless short_name_required is set,
        in which case it is reported the same way as a malformed one.
        """
        errors: dict[str, str] = {}

        url_error = self.check_original_url(original_url)
        if url_error:
            errors["original_url"] = url_error

        short_name = (short_name or "").strip()
        if short_name or short_name_required:
            if not self.is_valid_short_name(short_name):
                errors["short_name"] = "short_name is invalid"

        return errors


def create_validator(settings: Settings) -> LinkValidator:
    """Build the validator used by the API layer."""
    # Generated codes must satisfy the same rule as caller-supplied ones.
    if not 3 <= settings.SHORT_CODE_LENGTH <= 32:
        raise ValueError(
            f"SHORT_CODE_LENGTH must be between 3 and 32, got {settings.SHORT_CODE_LENGTH}"
        )
    return LinkValidator()
