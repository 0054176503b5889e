"""
Alembic without alembic.ini.

The migration scripts ship inside the package (pipetrack/db/migrations), so
the config is built in code. Used by the `pipetrack-migrate` console script
and by application startup:

    pipetrack-migrate upgrade head
    pipetrack-migrate downgrade -1
    pipetrack-migrate stamp head
    pipetrack-migrate current
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from alembic import command
from alembic.config import Config

from pipetrack.db.config import get_db_settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


# PUBLIC_INTERFACE
def alembic_config() -> Config:
    """Alembic Config pointing at the packaged migrations and the configured database."""
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # Only read in offline mode; env.py builds its own async engine.
    cfg.set_main_option("sqlalchemy.url", get_db_settings().sync_database_url.replace("%", "%%"))
    return cfg


def _with_default(fn: Callable[..., None], default: Optional[str]) -> Callable[[Config, List[str]], None]:
    def run(cfg: Config, args: List[str]) -> None:
        if not args and default is None:
            raise SystemExit(f"{fn.__name__} needs a revision argument")
        fn(cfg, *(args or [default]))

    return run


COMMANDS: Dict[str, Callable[[Config, List[str]], None]] = {
    "upgrade": _with_default(command.upgrade, "head"),
    "downgrade": _with_default(command.downgrade, "-1"),
    "stamp": _with_default(command.stamp, None),
    "show": _with_default(command.show, None),
    "current": lambda cfg, args: command.current(cfg, *args),
    "history": lambda cfg, args: command.history(cfg, *args),
    "heads": lambda cfg, args: command.heads(cfg, *args),
}


# PUBLIC_INTERFACE
def upgrade_to_head() -> None:
    """Bring the schema up to the latest revision (blocking; call from a worker thread)."""
    logger.info("Applying migrations from %s", MIGRATIONS_DIR)
    command.upgrade(alembic_config(), "head")


# PUBLIC_INTERFACE
def main(argv: Optional[List[str]] = None) -> None:
    """Console entry point: `<command> [args...]`."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        raise SystemExit("usage: pipetrack-migrate {" + ",".join(sorted(COMMANDS)) + "} [args]")

    name, rest = args[0], args[1:]
    handler = COMMANDS.get(name)
    if handler is None:
        raise SystemExit(f"Unsupported migration command: {name}")
    handler(alembic_config(), rest)


if __name__ == "__main__":
    main()
