"""nox sessions for Safe Space Finder.

    nox                    full suite on every supported Python
    nox -s scoring         safety-score rules only (pure, no database)
    nox -s tests -- -k api extra pytest args pass through
"""

import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

nox.options.sessions = ["tests"]

# psycopg2 ships a C extension built for one interpreter at a time
_REBUILD_PER_PYTHON = ["psycopg2"]


def _install(session: nox.Session) -> None:
    session.install("-e", ".[test]")
    session.install("--force-reinstall", "--no-cache-dir", *_REBUILD_PER_PYTHON)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def scoring(session: nox.Session) -> None:
    """Aggregator unit tests and the Gherkin scoring scenarios."""
    _install(session)
    session.run(
        "pytest",
        "tests/directory/domain/test_safety_aggregator.py",
        "tests/directory/bdd/",
        *session.posargs,
    )


@nox.session(python=PYTHON_VERSIONS)
def postgres(session: nox.Session) -> None:
    """Full suite against PostgreSQL. Needs DATABASE_URL."""
    _install(session)
    session.run("pytest", "--env", "test_postgres", *session.posargs)
