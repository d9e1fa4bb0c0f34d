"""YAML helpers used when rendering chart templates."""

from __future__ import annotations

from typing import Any

import yaml

_DOCUMENT_END = "\n...\n"


def indent(content: str, n: int) -> str:
    """Indent every line of ``content`` by ``n`` spaces; a negative ``n`` leaves it unchanged."""
    if n < 0:
        return content
    pad = " " * n
    return (pad + content).replace("\n", "\n" + pad)


_indent = indent


def marshal(obj: Any, indent: int) -> str:
    """Serialise ``obj`` as block YAML with sorted keys, indented and without trailing blanks."""
    text = yaml.safe_dump(
        obj,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
    )
    if text.endswith(_DOCUMENT_END):
        text = text[: -len(_DOCUMENT_END) + 1]
    return _indent(text, indent).rstrip("\n ")