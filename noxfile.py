"""
Nox sessions for commitaddr.

Sessions:
  - lint     : ruff + black + mypy over the package and tests
  - unit     : unit tests (tests/unit)
  - property : Hypothesis property tests (tests/property); profile via HYPOTHESIS_PROFILE
  - all      : lint + unit + property on the default interpreter

Pass extra args to pytest like:
  nox -s unit -- -k "checksum" -vv
"""

from __future__ import annotations

from pathlib import Path

import nox

nox.options.reuse_venv = True
nox.options.stop_on_first_error = False

REPO_ROOT = Path(__file__).resolve().parent
PY_PATHS = ["commitaddr", "tests"]

TEST_PYTHONS = ["3.11", "3.12", "3.13"]


def _install_test_stack(session: nox.Session) -> None:
    session.run("python", "-m", "pip", "install", "--upgrade", "pip", silent=True)
    session.install("-e", f"{REPO_ROOT}[test]")


@nox.session(name="lint", python="3.11")
def lint(session: nox.Session) -> None:
    """Static analysis: ruff, black (check), mypy."""
    session.install("-e", f"{REPO_ROOT}[dev]")
    session.run("ruff", "check", *PY_PATHS)
    session.run("black", "--check", *PY_PATHS)
    session.run(
        "mypy",
        "--pretty",
        "--show-error-codes",
        "--ignore-missing-imports",
        "commitaddr",
    )


@nox.session(name="unit", python=TEST_PYTHONS)
def unit(session: nox.Session) -> None:
    """Fast unit tests."""
    _install_test_stack(session)
    session.run("pytest", "tests/unit", *session.posargs)


@nox.session(name="property", python=TEST_PYTHONS)
def property_(session: nox.Session) -> None:
    """Hypothesis property tests; CI=1 selects the deterministic 'ci' profile."""
    _install_test_stack(session)
    session.env.setdefault("HYPOTHESIS_PROFILE", "dev")
    session.run("pytest", "tests/property", *session.posargs)


@nox.session(name="all", python="3.11")
def all_(session: nox.Session) -> None:
    """Run a sensible default stack locally."""
    session.notify("lint")
    session.notify("unit-3.11")
    session.notify("property-3.11")
