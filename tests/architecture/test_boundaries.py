import pytest
from pytest_archon import archrule


def test_core_independence() -> None:
    """
    The filter core is backend-agnostic.
    It must not import the SQLAlchemy backend or SQLAlchemy itself.
    """
    (
        archrule("core_is_independent")
        .match("dynamic_filters*")
        .should_not_import("dynamic_filters_sqlalchemy*")
        .should_not_import("sqlalchemy*")
        .check("dynamic_filters", only_direct_imports=True)
    )


@pytest.mark.parametrize(
    "module",
    [
        "dynamic_filters.operators",
        "dynamic_filters.keys",
        "dynamic_filters.allowlist",
        "dynamic_filters.conditions",
        "dynamic_filters.relations",
        "dynamic_filters.ordering",
        "dynamic_filters.custom",
    ],
)
def test_compilers_do_not_depend_on_request_model(module: str) -> None:
    """
    Compilers work on plain values.
    Request validation and response shaping stay at the edge.
    """
    (
        archrule(f"{module}_is_plain")
        .match(module)
        .should_not_import("pydantic*")
        .should_not_import("dynamic_filters.request")
        .should_not_import("dynamic_filters.response")
        .check(module, only_direct_imports=True)
    )


def test_operator_strategies_layering() -> None:
    """
    Operator strategies are leaves of the backend.
    They must not reach up into the query context or the record operations.
    """
    (
        archrule("sqla_operators_layering")
        .match("dynamic_filters_sqlalchemy.operators*")
        .should_not_import("dynamic_filters_sqlalchemy.context")
        .should_not_import("dynamic_filters_sqlalchemy.records")
        .check("dynamic_filters_sqlalchemy.operators", only_direct_imports=True)
    )


def test_query_context_does_not_execute() -> None:
    """
    The query context only builds statements.
    Sessions and record operations live in ``records``.
    """
    (
        archrule("sqla_context_is_pure")
        .match("dynamic_filters_sqlalchemy.context")
        .should_not_import("dynamic_filters_sqlalchemy.records")
        .should_not_import("sqlalchemy.ext.asyncio*")
        .check("dynamic_filters_sqlalchemy.context", only_direct_imports=True)
    )
