from __future__ import annotations

import pytest

from marklogic_plugin.application.macros import evaluate_macros
from marklogic_plugin.domain.entities.errors import MacroEvaluationError


def test_evaluate_macros_substitutes_arguments() -> None:
    resolved = evaluate_macros(
        {"host": "${host}", "query": "collection:${c} AND year:${year}", "port": 8000},
        {"host": "ml", "c": "orders", "year": "2024"},
    )

    assert resolved == {"host": "ml", "query": "collection:orders AND year:2024", "port": 8000}


def test_evaluate_macros_rejects_undefined_argument() -> None:
    with pytest.raises(MacroEvaluationError) as exc:
        evaluate_macros({"password": "${pw}"}, {})

    assert exc.value.details == {"property": "password", "argument": "pw"}
