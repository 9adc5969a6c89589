"""Compact encodings of page elements for LLM prompts."""

from __future__ import annotations

import json
from typing import Callable, Optional, Sequence

from ..browser.base import PageElement

_FIELDS = ("ref", "tag", "role", "text", "selector")


def encode_yaml_like(elements: Sequence[PageElement]) -> str:
    """One indented block per element, omitting empty fields."""

    if not elements:
        return "(no interactive elements)"
    blocks: list[str] = []
    for element in elements:
        lines = []
        for name in _FIELDS:
            value = getattr(element, name)
            if value in (None, ""):
                continue
            prefix = "- " if not lines else "  "
            lines.append(f"{prefix}{name}: {_scalar(value)}")
        blocks.append("\n".join(lines))
    return "\n".join(blocks)


def encode_tabular(elements: Sequence[PageElement]) -> str:
    """Header row naming the fields followed by one comma-separated row per element."""

    if not elements:
        return "(no interactive elements)"
    header = f"elements[{len(elements)}]{{{','.join(_FIELDS)}}}:"
    rows = (
        "  " + ",".join(_cell(getattr(element, name)) for name in _FIELDS)
        for element in elements
    )
    return "\n".join([header, *rows])


_ENCODERS: dict[str, Callable[[Sequence[PageElement]], str]] = {
    "yaml-like": encode_yaml_like,
    "tabular": encode_tabular,
}


def get_encoder(name: str) -> Callable[[Sequence[PageElement]], str]:
    try:
        return _ENCODERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown element encoding {name!r}; expected one of {', '.join(_ENCODERS)}"
        ) from None


def _scalar(value: object) -> str:
    text = str(value)
    if isinstance(value, int) or text.replace("-", "").replace("_", "").isalnum():
        return text
    return json.dumps(text, ensure_ascii=False)


def _cell(value: Optional[object]) -> str:
    if value is None:
        return ""
    text = str(value)
    if any(ch in text for ch in ',"\n'):
        return json.dumps(text, ensure_ascii=False)
    return text
