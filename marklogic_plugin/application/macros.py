"""Run-time substitution of ``${key}`` macros in stage properties."""

import re
from typing import Any, Dict, Mapping

from marklogic_plugin.domain.entities.errors import MacroEvaluationError

_MACRO = re.compile(r"\$\{([^${}]+)\}")


def evaluate_macros(
    properties: Mapping[str, Any], arguments: Mapping[str, str]
) -> Dict[str, Any]:
    """
    Return a copy of ``properties`` with every macro replaced.

    Raises:
        MacroEvaluationError: If a macro names an argument that was not
            provided.
    """
    resolved: Dict[str, Any] = {}
    for name, value in properties.items():
        if isinstance(value, str):
            resolved[name] = _substitute(name, value, arguments)
        else:
            resolved[name] = value
    return resolved


def _substitute(name: str, value: str, arguments: Mapping[str, str]) -> str:
    def replace(match: "re.Match[str]") -> str:
        key = match.group(1).strip()
        if key not in arguments:
            raise MacroEvaluationError(
                f"Argument '{key}' is not defined for property '{name}'",
                details={"property": name, "argument": key},
            )
        return str(arguments[key])

    return _MACRO.sub(replace, value)
