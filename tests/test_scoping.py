from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    Environment,
    FwInt,
    FwjsDuplicateDeclaration,
    parse_source,
    run_program,
    run_runtime_case,
)
from fwjs_ref.evaluator import eval_expr

SCENARIOS = [
    pytest.param("var x = 5; x;", ("int", 5), None, id="declare-then-read"),
    pytest.param("var x = 3;", ("int", 3), None, id="declaration-yields-value"),
    pytest.param("var x = 1; x = 4;", ("int", 4), None, id="assignment-yields-value"),
    pytest.param("missing;", ("null", None), None, id="undeclared-read-is-null"),
    pytest.param(
        "var x = 5; var x = 6;",
        None,
        FwjsDuplicateDeclaration,
        id="redeclare-same-scope",
    ),
    pytest.param(
        # blocks share the enclosing frame
        "var x = 1; { var x = 2; }",
        None,
        FwjsDuplicateDeclaration,
        id="block-does-not-open-scope",
    ),
    pytest.param(
        dedent(
            """\
            var x = 1;
            var f = function() { var x = 2; x; };
            f() * 10 + x;
        """
        ),
        ("int", 21),
        None,
        id="shadow-in-function-scope",
    ),
    pytest.param(
        dedent(
            """\
            var x = 1;
            var f = function() { var x = 5; x = 6; x; };
            f() * 10 + x;
        """
        ),
        ("int", 61),
        None,
        id="assign-hits-innermost-binding",
    ),
    pytest.param(
        dedent(
            """\
            var x = 1;
            var f = function() { x = 2; };
            f();
            x;
        """
        ),
        ("int", 2),
        None,
        id="assign-updates-enclosing-binding",
    ),
    # Deliberate: assignment to an unresolved name creates a global.
    pytest.param("{ x = 10; } x;", ("int", 10), None, id="implicit-global-from-block"),
    pytest.param(
        "var f = function() { y = 3; }; f(); y;",
        ("int", 3),
        None,
        id="implicit-global-from-function",
    ),
    pytest.param(
        dedent(
            """\
            var outer = function() {
              var inner = function() { z = 42; };
              inner();
            };
            outer();
            z;
        """
        ),
        ("int", 42),
        None,
        id="implicit-global-from-nested-function",
    ),
    pytest.param(
        dedent(
            """\
            var f = function() { g = 1; };
            f();
            var g = 2;
        """
        ),
        None,
        FwjsDuplicateDeclaration,
        id="implicit-global-blocks-later-declaration",
    ),
    pytest.param(
        dedent(
            """\
            var f = function(a) { var a = 2; };
            f(1);
        """
        ),
        None,
        FwjsDuplicateDeclaration,
        id="param-redeclared-in-body",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_scoping_scenarios(source, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_implicit_global_lands_in_root_frame() -> None:
    env = Environment()
    run_program("var f = function() { var g = function() { leaked = 7; }; g(); }; f();", env=env)

    assert env.has_local("leaked")
    assert env.resolve_var("leaked") == FwInt(7)


def test_reevaluation_with_fresh_environment_is_deterministic() -> None:
    ast = parse_source(
        dedent(
            """\
            var a = 2;
            var b = a * 3;
            c = a + b;
            a = c * 2;
            a + b + c;
        """
        )
    )

    snapshots = []

    for _ in range(3):
        env = Environment()
        result = eval_expr(ast, env)
        snapshots.append((result, sorted((name, env.resolve_var(name)) for name in env.names())))

    assert snapshots[0][0] == FwInt(30)
    assert snapshots[0] == snapshots[1] == snapshots[2]


def test_reevaluating_into_same_environment_fails_on_redeclaration() -> None:
    ast = parse_source("var a = 1;")
    env = Environment()
    eval_expr(ast, env)

    with pytest.raises(FwjsDuplicateDeclaration):
        eval_expr(ast, env)
