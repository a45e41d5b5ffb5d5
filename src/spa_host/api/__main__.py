"""
spa_host.api.__main__

Entrypoint for running the service via `python -m spa_host.api` (or `spa-host`).

Responsibilities:
- Load settings.
- Run the bootstrap sequencer and serve until shutdown.
"""

from __future__ import annotations

import asyncio

from spa_host.api.bootstrap import serve
from spa_host.settings import get_settings


def main() -> None:
    asyncio.run(serve(get_settings()))


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# For production, this is commonly invoked behind a process manager (systemd/k8s)
# with NODE_ENV=production and the client bundle built into STATIC_DIR.
