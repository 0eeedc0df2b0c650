#!/usr/bin/env python3
"""
Serve the aggregation endpoints with uvicorn.

Usage:
    python run_server.py
    python run_server.py --port 8080 --reload
"""

import argparse

import uvicorn
from dotenv import load_dotenv
load_dotenv()


def main():
    parser = argparse.ArgumentParser(description="Run the institution aggregator API")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", "-p", type=int, default=8000, help="Port")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run("institution_aggregator.api:app", host=args.host, port=args.port,
                reload=args.reload)


if __name__ == "__main__":
    main()
