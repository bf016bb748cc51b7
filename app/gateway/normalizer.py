"""Response Normalizer — splits a provider reply into the two output fields.

Every adapter funnels its raw text through ``normalize_description``:
  - Splits on the literal LONG DESCRIPTION label
  - Drops anything up to and including the ALT TEXT label (model preambles)
  - Trims whitespace plus the markdown wrapped around the labels
    ("**ALT TEXT:**", "## LONG DESCRIPTION") without touching content
    such as "C#" or "#1"
  - Rejects replies that don't yield exactly two non-empty sections
"""

from __future__ import annotations

import re

from app.gateway.errors import MalformedProviderOutput
from app.gateway.prompts import ALT_TEXT_LABEL, LONG_DESCRIPTION_LABEL
from app.gateway.types import DescriptionResult

# Colon and emphasis left behind once a label is cut off the front of a section
_LEADING_LABEL_MARKUP = re.compile(r"^[\s*_]*:?[\s*_]*")
# Emphasis closers, or a heading opener for the next label, at the end of a section.
# "#" only counts after whitespace so a trailing "C#" survives.
_TRAILING_LABEL_MARKUP = re.compile(r"(?:\s*[*_]+|\s+#+)*\s*$")


def normalize_description(text: str | None) -> DescriptionResult:
    """Parse ``ALT TEXT: <a> LONG DESCRIPTION: <b>`` into a DescriptionResult.

    Raises MalformedProviderOutput when the reply is empty, lacks the
    LONG DESCRIPTION marker, repeats it, or leaves either section empty.
    """
    if not text or not text.strip():
        raise MalformedProviderOutput("Provider returned empty text")

    parts = text.split(LONG_DESCRIPTION_LABEL)
    if len(parts) != 2:
        raise MalformedProviderOutput(
            f"Expected one {LONG_DESCRIPTION_LABEL!r} marker, found {len(parts) - 1} "
            f"(reply length {len(text)})"
        )

    alt_text = _clean_section(_after_label(parts[0], ALT_TEXT_LABEL))
    long_description = _clean_section(parts[1])

    if not alt_text:
        raise MalformedProviderOutput(f"Empty {ALT_TEXT_LABEL} section")
    if not long_description:
        raise MalformedProviderOutput(f"Empty {LONG_DESCRIPTION_LABEL} section")

    return DescriptionResult(alt_text=alt_text, long_description=long_description)


def _after_label(section: str, label: str) -> str:
    """Text following the last ``label`` in ``section``, or all of it if absent."""
    if label not in section:
        return section
    return section.rpartition(label)[2]


def _clean_section(section: str) -> str:
    cleaned = _LEADING_LABEL_MARKUP.sub("", section, count=1)
    return _TRAILING_LABEL_MARKUP.sub("", cleaned, count=1).strip()
