"""
Programmatic Alembic migration runner.

Runs migrations without an alembic.ini: the script location is the migrations
package next to this file and the URL comes from src.db.config.

Usage examples:
    python -m src.db.run_migrations upgrade head
    python -m src.db.run_migrations downgrade -1
    python -m src.db.run_migrations current
"""

import sys
from pathlib import Path
from typing import Callable, Dict, List

from alembic import command
from alembic.config import Config

from src.db.config import get_settings

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


# PUBLIC_INTERFACE
def build_config() -> Config:
    """Alembic configuration pointing at this package's migrations."""
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # Used by offline mode; online mode builds its own async engine
    cfg.set_main_option("sqlalchemy.url", get_settings().sync_database_url)
    return cfg


_COMMANDS: Dict[str, Callable[[Config, List[str]], None]] = {
    "upgrade": lambda cfg, args: command.upgrade(cfg, *(args or ["head"])),
    "downgrade": lambda cfg, args: command.downgrade(cfg, *(args or ["-1"])),
    "current": lambda cfg, args: command.current(cfg, *args),
    "history": lambda cfg, args: command.history(cfg, *args),
    "heads": lambda cfg, args: command.heads(cfg, *args),
}


# PUBLIC_INTERFACE
def main(argv: List[str] | None = None) -> None:
    """Run an Alembic command, e.g. main(["upgrade", "head"])."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    name, rest = args[0], args[1:]
    handler = _COMMANDS.get(name)
    if handler is None:
        print(f"Unsupported Alembic command: {name} (expected one of {', '.join(_COMMANDS)})")
        sys.exit(2)
    handler(build_config(), rest)


if __name__ == "__main__":
    main()
