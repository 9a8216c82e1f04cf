from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.dayflow.dayflow.main import create_app


def main() -> None:
    app = create_app()
    # Session stores live in this process; the reloader would fork a second copy.
    app.run(debug=app.config["DEBUG"], use_reloader=False)


if __name__ == "__main__":
    main()
