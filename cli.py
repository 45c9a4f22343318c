#!/usr/bin/env python3
"""
Command-line interface for the Farm2Home functions.

Usage:
    uv run python cli.py [command] [options]

Commands:
    call        Call a request/response function
    demo        Run every function once against an in-memory store
    scheduler   Run the scheduler loop
    test        Run the test suite
    serve       Start the API server

Examples:
    uv run python cli.py call sayHello --data '{"name": "Ada"}'
    uv run python cli.py demo
    uv run python cli.py scheduler --once
    uv run python cli.py serve --reload
"""

import argparse
import json
import logging
import subprocess
import sys


def _configure_logging() -> None:
    from shared.config import get_settings

    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
        datefmt="%H:%M:%S",
    )


def run_call(name: str, raw_data: str) -> None:
    """Call a function and print its JSON result or error."""
    from functions import build_functions
    from shared.errors import FunctionError

    try:
        data = json.loads(raw_data)
    except json.JSONDecodeError as e:
        print(f"Invalid --data JSON: {e}")
        sys.exit(2)

    functions = build_functions()
    try:
        result = functions.call(name, data)
    except FunctionError as e:
        print(json.dumps(e.to_response(), indent=2))
        sys.exit(1)
    print(json.dumps({"result": result.to_result()}, indent=2))


def run_demo() -> None:
    from functions.demo import run_demo as demo

    demo()


def run_scheduler(once: bool, poll_seconds: float) -> None:
    """Run due scheduled functions (once, or in a loop)."""
    from functions import build_functions

    functions = build_functions()
    if once:
        for name in [job.name for job in functions.scheduler.jobs]:
            print(f"{name}: {functions.scheduler.run(name).to_result()}")
        return
    functions.scheduler.run_forever(poll_seconds=poll_seconds)


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    cmd = ["uv", "run", "pytest"] + args
    subprocess.run(cmd)


def run_server(host: str, port: int, reload: bool) -> None:
    """Start the API server."""
    cmd = ["uv", "run", "uvicorn", "api.main:app", f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    subprocess.run(cmd)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Farm2Home Functions CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s call calculateSum --data '{"a": 1, "b": 2}'
  %(prog)s call getServerTime
  %(prog)s demo
  %(prog)s scheduler --once
  %(prog)s test -v
  %(prog)s serve --reload
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    call_parser = subparsers.add_parser("call", help="Call a request/response function")
    call_parser.add_argument(
        "function",
        choices=["sayHello", "calculateSum", "getServerTime", "sendWelcomeMessage", "processImage"],
        help="Function name",
    )
    call_parser.add_argument("--data", default="{}", help="JSON object passed as the function input")

    subparsers.add_parser("demo", help="Run every function once")

    scheduler_parser = subparsers.add_parser("scheduler", help="Run scheduled functions")
    scheduler_parser.add_argument("--once", action="store_true", help="Run every job now and exit")
    scheduler_parser.add_argument("--poll", type=float, default=30.0, help="Seconds between checks")

    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    if args.command in ("call", "demo", "scheduler"):
        _configure_logging()

    if args.command == "call":
        run_call(args.function, args.data)
    elif args.command == "demo":
        run_demo()
    elif args.command == "scheduler":
        run_scheduler(args.once, args.poll)
    elif args.command == "test":
        run_tests(args.pytest_args)
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
