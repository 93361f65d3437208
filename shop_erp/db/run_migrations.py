"""
Programmatic Alembic migration runner.

Allows running migrations without an alembic.ini by configuring the script location
to this package's migrations directory.

Usage examples:
    python -m shop_erp.db.run_migrations upgrade head
    python -m shop_erp.db.run_migrations downgrade -1
    python -m shop_erp.db.run_migrations history
"""

import sys
from pathlib import Path
from typing import List

from alembic import command
from alembic.config import Config

from shop_erp.db.config import get_settings

COMMANDS = {
    "upgrade": (command.upgrade, ["head"]),
    "downgrade": (command.downgrade, ["-1"]),
    "history": (command.history, []),
    "current": (command.current, []),
    "heads": (command.heads, []),
}


# PUBLIC_INTERFACE
def build_config() -> Config:
    """Alembic config pointing at the migrations folder next to this file."""
    cfg = Config()
    cfg.set_main_option("script_location", str(Path(__file__).resolve().parent / "migrations"))
    # offline mode reads this; env.py builds its own async engine online
    cfg.set_main_option("sqlalchemy.url", get_settings().sync_database_url)
    return cfg


# PUBLIC_INTERFACE
def main(argv: List[str] | None = None) -> None:
    """Run Alembic command with programmatic configuration."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    cmd, other = args[0], args[1:]
    if cmd == "show":
        if not other:
            print("Usage: show <revision>")
            sys.exit(2)
        command.show(build_config(), other[0])
        return
    if cmd not in COMMANDS:
        print(f"Unsupported Alembic command: {cmd}")
        sys.exit(2)
    func, defaults = COMMANDS[cmd]
    func(build_config(), *(other or defaults))


if __name__ == "__main__":
    main()
