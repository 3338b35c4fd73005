"""
Response Interpreter

Turns a raw appliance response body into an OperationOutcome. Pure: no I/O,
no retries.
"""

import re
import xml.etree.ElementTree as ET
from typing import Optional

from certdeploy.models.results import OperationKind, OperationOutcome

SUCCESS_STATUS = "success"
KEYGEN_FAILURE_MESSAGE = "API key could not be generated"

# Most specific first
MESSAGE_TAGS = ("line", "msg", "result")

_STATUS_PATTERN = re.compile(r"""status\s*=\s*['"]([A-Za-z]+)['"]""")
_KEY_PATTERN = re.compile(r"<key>\s*(.*?)\s*</key>", re.DOTALL)


def _tag_pattern(tag: str) -> "re.Pattern":
    return re.compile(rf"<{tag}(?:\s[^>]*)?>\s*([^<]*?)\s*<", re.DOTALL)


_MESSAGE_PATTERNS = [(tag, _tag_pattern(tag)) for tag in MESSAGE_TAGS]


class ParsedResponse:
    """Status, key and message pulled out of one response body."""

    def __init__(self, raw: str):
        self.status: Optional[str] = None
        self.key: Optional[str] = None
        self.message: Optional[str] = None

        try:
            root = ET.fromstring(raw.strip())
        except ET.ParseError:
            self._scrape(raw)
        else:
            self._parse(root)

    def _parse(self, root: ET.Element) -> None:
        self.status = root.get("status")

        key = root.find(".//key")
        if key is not None and key.text and key.text.strip():
            self.key = key.text.strip()

        for tag in MESSAGE_TAGS:
            for element in root.iter(tag):
                if element.text and element.text.strip():
                    self.message = " ".join(element.text.split())
                    return

    def _scrape(self, raw: str) -> None:
        # Not well-formed XML (truncated body, HTML error page...)
        match = _STATUS_PATTERN.search(raw)
        if match:
            self.status = match.group(1)

        match = _KEY_PATTERN.search(raw)
        if match and match.group(1):
            self.key = match.group(1)

        for _, pattern in _MESSAGE_PATTERNS:
            for match in pattern.finditer(raw):
                if match.group(1).strip():
                    self.message = " ".join(match.group(1).split())
                    return

    @property
    def is_success(self) -> bool:
        return (self.status or "").lower() == SUCCESS_STATUS


def interpret(raw: Optional[str], kind: OperationKind) -> OperationOutcome:
    """
    Interpret a raw appliance response.

    Args:
        raw: Response body, empty or None when nothing was received
        kind: Operation the response belongs to

    Returns:
        OperationOutcome. ``reachable`` is True for any non-empty body, even a
        failure, so callers can tell "unreachable" from "rejected".
    """
    if not raw or not raw.strip():
        return OperationOutcome.unreachable(kind)

    parsed = ParsedResponse(raw)

    if kind == OperationKind.KEY_GEN:
        success = parsed.is_success and parsed.key is not None
        return OperationOutcome(
            kind=kind,
            success=success,
            reachable=True,
            message=None if success else (parsed.message or KEYGEN_FAILURE_MESSAGE),
            extracted_key=parsed.key if success else None,
        )

    return OperationOutcome(
        kind=kind,
        success=parsed.is_success,
        reachable=True,
        message=parsed.message,
    )
