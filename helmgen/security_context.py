"""Container security contexts moved into chart values, plus shared helpers."""

from __future__ import annotations

import copy
from typing import Any

_ACRONYMS = {"ID": "id"}
_SEPARATORS = frozenset("_ -.")

_CONTAINER_SC_VALUE = "containerSecurityContext"
_CONTAINER_SC_TEMPLATE = (
    "{{- toYaml .Values.%(resource)s.%(container)s.containerSecurityContext | nindent 10 }}"
)


def to_lower_camel(text: str) -> str:
    """Convert ``text`` to lowerCamelCase, dropping separators and other symbols."""
    text = text.strip()
    if not text:
        return text
    text = _ACRONYMS.get(text, text)

    out = []
    cap_next = False
    for position, char in enumerate(text):
        is_upper = "A" <= char <= "Z"
        is_lower = "a" <= char <= "z"
        if cap_next:
            if is_lower:
                char = char.upper()
        elif position == 0 and is_upper:
            char = char.lower()

        if is_upper or is_lower:
            out.append(char)
            cap_next = False
        elif "0" <= char <= "9":
            out.append(char)
            cap_next = True
        else:
            cap_next = char in _SEPARATORS
    return "".join(out)


def set_nested(mapping: dict, value: Any, *args: str) -> None:
    """Store a copy of ``value`` at the key path ``args``, creating mappings on the way."""
    if not args:
        raise ValueError("a key path is required")
    current = mapping
    for depth, key in enumerate(args[:-1]):
        if key in current:
            child = current[key]
            if not isinstance(child, dict):
                path = ".".join(args[: depth + 1])
                raise ValueError(f"value cannot be set because {path} is not a mapping")
        else:
            child = {}
            current[key] = child
        current = child
    current[args[-1]] = copy.deepcopy(value)


def _set_sec_context_value(
    resource_name: str, container_name: str, container: dict, values: dict
) -> None:
    security_context = container.get("securityContext")
    if security_context is None:
        return
    set_nested(values, security_context, resource_name, container_name, _CONTAINER_SC_VALUE)
    container["securityContext"] = _CONTAINER_SC_TEMPLATE % {
        "resource": resource_name,
        "container": container_name,
    }


def process_container_security_context(name_camel: str, spec_map: dict, values: dict) -> None:
    """Move each container's ``securityContext`` into ``values`` and template it in ``spec_map``."""
    for container_type in ("containers", "initContainers"):
        for container in spec_map.get(container_type) or []:
            if "securityContext" in container:
                container_name = to_lower_camel(container["name"])
                _set_sec_context_value(name_camel, container_name, container, values)