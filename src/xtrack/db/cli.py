"""Schema migration commands for X-Track, wrapping Alembic.

alembic.ini and migrations/ live at the repository root, so every command
runs from there regardless of the caller's working directory.
"""
import subprocess
import sys
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[3]


def _alembic(*args: str) -> None:
    subprocess.run([sys.executable, "-m", "alembic", *args], cwd=_REPO_ROOT, check=True)


def _target(default: str) -> tuple[str, list[str]]:
    """First CLI argument as the revision target, plus whatever follows it."""
    argv = sys.argv[1:]
    if argv and not argv[0].startswith("-"):
        return argv[0], argv[1:]
    return default, argv


def generate() -> None:
    """New revision autogenerated from the SQLModel tables, e.g. ``xtrack-db-generate -m "add column"``."""
    _alembic("revision", "--autogenerate", *sys.argv[1:])


def migrate() -> None:
    """Upgrade the schema to head, or to the revision given."""
    revision, rest = _target("head")
    _alembic("upgrade", revision, *rest)


def downgrade() -> None:
    """Step back one revision, or to the revision given."""
    revision, rest = _target("-1")
    _alembic("downgrade", revision, *rest)


def current() -> None:
    """Show the revision the database is at."""
    _alembic("current", *sys.argv[1:])
