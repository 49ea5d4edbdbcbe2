"""Run the Chirpy API with uvicorn.

Usage:
    python -m chirpy [--host HOST] [--port PORT] [--debug]

``--debug`` empties the user, chirp, and revoked-token stores on startup.
"""

import argparse
import os

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(prog="chirpy", description=__doc__.splitlines()[0])
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8080")))
    parser.add_argument("--debug", action="store_true", help="Reset all stores on startup")
    args = parser.parse_args()

    if args.debug:
        # Read by Settings when the app starts
        os.environ["DEBUG"] = "true"

    uvicorn.run("chirpy.main:app", host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
