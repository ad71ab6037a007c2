"""Nox configuration for valuecheck quality assurance tasks."""

import nox  # pyright: ignore[reportMissingImports] # noqa: I001

# Configure nox to use uv for faster package installs
nox.options.default_venv_backend = "uv"

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# Centralized tool configurations
LINT_TOOL = ["uv", "tool", "run", "ruff", "check"]
LINT_PATHS = ["valuecheck/", "tests/"]
FORMAT_TOOL = ["uv", "tool", "run", "ruff", "format"]
FORMAT_PATHS = ["valuecheck/", "tests/"]
TYPECHECK_TOOL = ["uv", "tool", "run", "mypy"]
TYPECHECK_PATHS = ["valuecheck/"]


def get_lint_command(
    fix: bool = False, unsafe: bool = False, path: str = "."
) -> list[str]:
    """Get lint command for external use."""
    paths = [f"{path}/{p}" if path != "." else p for p in LINT_PATHS]
    cmd = LINT_TOOL + paths
    if fix:
        cmd.append("--fix")
        if unsafe:
            cmd.append("--unsafe-fixes")
    return cmd


def get_format_command(check: bool = False, path: str = ".") -> list[str]:
    """Get format command for external use."""
    paths = [f"{path}/{p}" if path != "." else p for p in FORMAT_PATHS]
    cmd = FORMAT_TOOL + paths
    if check:
        cmd.extend(["--check", "--diff"])
    return cmd


def get_typecheck_command(path: str = ".") -> list[str]:
    """Get typecheck command for external use."""
    paths = [f"{path}/{p}" if path != "." else p for p in TYPECHECK_PATHS]
    return TYPECHECK_TOOL + paths


@nox.session(python=PYTHON_VERSIONS[-1])
def lint(session: nox.Session) -> None:
    """Run linting with ruff check."""
    session.install("-e", ".[dev]")
    session.run(*get_lint_command(), external=True)


@nox.session(python=PYTHON_VERSIONS[-1])
def mypy(session: nox.Session) -> None:
    """Run type checking with mypy."""
    session.install("-e", ".[dev]")
    session.run(*get_typecheck_command(), external=True)


@nox.session(python=PYTHON_VERSIONS[-1])
def format_check(session: nox.Session) -> None:
    """Check code formatting with ruff format."""
    session.install("-e", ".[dev]")
    session.run(*get_format_command(check=True), external=True)


@nox.session(python=PYTHON_VERSIONS[-1])
def format(session: nox.Session) -> None:
    """Format code with ruff format."""
    session.install("-e", ".[dev]")
    session.run(*get_format_command(), external=True)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run tests with pytest."""
    session.install("-e", ".[dev]")
    session.run("pytest", "--verbose")
