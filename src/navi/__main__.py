"""Entry point: python -m navi [shell]

- No args / "shell": Interactive navigation REPL
- "show":            Print the restored location once and exit
"""

from __future__ import annotations

import asyncio
import logging
import sys

from navi.config import NaviConfig, load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_navigator(config: NaviConfig):
    """Wire store, template catalog and navigator from config."""
    from navi.core import Navigator
    from navi.store import InMemoryStore, JsonFileStore
    from navi.templates import TemplateCatalog

    if config.store.backend == "memory":
        kv = InMemoryStore()
    elif config.store.backend == "json":
        kv = JsonFileStore(config.store.data_dir, keep_versions=config.store.keep_versions)
    else:
        raise RuntimeError(f"Unknown store backend '{config.store.backend}'. Use 'json' or 'memory'.")

    if config.templates.dir:
        templates = TemplateCatalog.from_directory(config.templates.dir)
    else:
        templates = TemplateCatalog.default()

    return Navigator(kv, templates, config.navigation)


def _run_shell() -> None:
    """Interactive REPL mode."""
    config = load_config()
    _setup_logging(config.log_level)

    from navi.connectors.cli import CLIConnector

    navigator = build_navigator(config)
    cli = CLIConnector()

    try:
        asyncio.run(cli.start(navigator))
    except KeyboardInterrupt:
        pass


def _run_show() -> None:
    config = load_config()
    _setup_logging(config.log_level)

    from navi.connectors.cli import format_view

    navigator = build_navigator(config)
    view = asyncio.run(navigator.start())
    print(format_view(view))


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "shell"

    if cmd in ("shell", "repl"):
        _run_shell()
    elif cmd == "show":
        _run_show()
    else:
        print("Usage: python -m navi [shell|show]")
        print("  shell  — Interactive navigation REPL (default)")
        print("  show   — Print the current location and exit")
        sys.exit(1)


if __name__ == "__main__":
    main()
