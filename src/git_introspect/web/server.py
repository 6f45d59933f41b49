"""Launch orchestration: uvicorn in a worker thread, readiness check, wait."""
from __future__ import annotations

import sys
import threading
import time
from urllib.error import URLError
from urllib.request import urlopen


def _wait_for_api(port: int, host: str = "127.0.0.1", timeout_seconds: float = 10.0) -> bool:
    """Poll the status endpoint until it responds or timeout expires."""
    deadline = time.time() + timeout_seconds
    url = f"http://{host}:{port}/api/status"
    while time.time() < deadline:
        try:
            with urlopen(url, timeout=1) as response:
                if response.status == 200:
                    return True
        except (URLError, OSError):
            pass
        time.sleep(0.2)
    return False


def launch(
    repo_path: str,
    binary: str | None = None,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:
    """Serve the API for *repo_path* until interrupted."""
    import uvicorn

    from git_introspect.web.api import app

    app.state.repo_path = repo_path
    app.state.binary = binary

    def _run_api() -> None:
        uvicorn.run(app, host=host, port=port, log_level="warning")

    api_thread = threading.Thread(target=_run_api, daemon=True)
    api_thread.start()

    if not _wait_for_api(port, host=host):
        print(f"Failed to start API server on http://{host}:{port}", file=sys.stderr)
        sys.exit(1)

    print(f"Repository:  {repo_path}")
    print(f"API server:  http://{host}:{port}/api/status")
    print()

    try:
        api_thread.join()
    except KeyboardInterrupt:
        print("\nShutting down.")
        sys.exit(0)
