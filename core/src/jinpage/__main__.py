from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

import uvicorn

from jinpage.app import LOG_FILENAME, create_app
from jinpage.config import load_page_config, resolve_configured_paths
from jinpage.home import ensure_jinpage_layout, resolve_jinpage_home


def main() -> None:
    home = resolve_jinpage_home()
    paths = ensure_jinpage_layout(home)
    config = load_page_config(paths)
    paths = resolve_configured_paths(paths, config)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            RotatingFileHandler(
                paths.logs_dir / LOG_FILENAME,
                maxBytes=config.logging.max_size_mb * 1024 * 1024,
                backupCount=config.logging.backup_count,
                encoding="utf-8",
            ),
            logging.StreamHandler(),
        ],
    )

    host = os.environ.get("JINPAGE_BIND") or config.network.bind_host

    env_port = os.environ.get("JINPAGE_PORT")
    port = int(env_port) if env_port else config.network.http_port

    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    main()
