"""Flat XML micro-parser for shallow tool responses.

This is deliberately not an XML parser. It recovers the shape of flat
response bodies such as::

    <email_verification>
      <email>john@example.com</email>
      <valid>true</valid>
    </email_verification>

into ``{"email_verification": {"email": "john@example.com", "valid": "true"}}``.

Limits:
  - Only the first element name is used as the root key.
  - Only leaf pairs ``<key>text</key>`` without attributes are collected.
  - Nested elements are not recursed into; every leaf lands one level under
    the root key, and a repeated key keeps its last value.
  - Values are plain strings (no type coercion, no entity decoding).
"""

from __future__ import annotations

import re

from osint_compare.normalizer.errors import ResponseParseError

# Markup that is not an element: <?xml ...?>, <!-- ... -->, <!DOCTYPE ...>
_PROLOG_PATTERN = re.compile(r"<\?.*?\?>|<!--.*?-->|<![^>]*>", re.DOTALL)

# First element name: <tag>, <tag attr="..."> or <tag/>
_ROOT_PATTERN = re.compile(r"<([^\s>/]+)[\s>/]")

# Leaf element with text content only: <key>value</key>
_LEAF_PATTERN = re.compile(r"<([^/>\s]+)>([^<]+)</\1>")


def find_root_tag(xml: str) -> str | None:
    """Return the name of the first element, skipping the prolog."""
    body = _PROLOG_PATTERN.sub("", xml)
    match = _ROOT_PATTERN.search(body)
    return match.group(1) if match else None


def parse_flat_xml(xml: str) -> dict[str, dict[str, str]]:
    """Parse a flat XML body into ``{root: {key: value}}``.

    Raises:
        ResponseParseError: if no root element can be found.
    """
    if not xml or not xml.strip():
        raise ResponseParseError("Empty XML document")

    root = find_root_tag(xml)
    if not root:
        raise ResponseParseError("No root element found in XML document")

    body = _PROLOG_PATTERN.sub("", xml)
    fields: dict[str, str] = {}
    for key, value in _LEAF_PATTERN.findall(body):
        fields[key] = value.strip()

    return {root: fields}
