from __future__ import annotations

import argparse
import os

from .app import create_studio_app


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the custom studio order gateway")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--db", default=os.environ.get("STUDIO_DB_PATH", "./studio.db"))
    args = parser.parse_args()

    app = create_studio_app(args.db)
    app.run(host=args.host, port=args.port, debug=False)


if __name__ == "__main__":
    main()
