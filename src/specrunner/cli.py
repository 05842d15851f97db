"""Command-line interface for the specrunner framework.

This module provides the CLI entry point for running specrunner suites.
It handles argument parsing, loading specs from Python files, query
parameter configuration, and reporter/sink setup.

The CLI supports a 'run' command that loads specs and runs all of them or a
single addressed test, a 'list' command that prints every test's address,
and a 'server' command that starts the result collection server.
"""
import argparse
import asyncio
import importlib.util
import logging
import os
import sys

import dotenv

from specrunner.channels.console import ConsoleReporter
from specrunner.channels.sinks import JsonLinesSink, WebhookSink
from specrunner.core.domain import MalformedAddressError, ResultSink
from specrunner.core.spec import Spec
from specrunner.core.suite import ADDRESS_PARAM, MUTED_PARAM, QUERY_ENV, Suite, parse_query

logger = logging.getLogger("specrunner.cli")

SPECS_FILE_ENV = "SPECRUNNER_SPECS_FILE"
REPORT_URL_ENV = "SPECRUNNER_REPORT_URL"


def load_specs(path: str) -> list[Spec]:
    """Dynamically load specs from a Python file.

    The module must define either 'specs' (a list of Spec instances) or
    'suite' (a Suite whose specs are reused, or a list of Specs).

    Args:
        path: File path to the Python module defining the specs.

    Returns:
        list[Spec]: The specs, in run order.

    Raises:
        FileNotFoundError: If the file cannot be found or the module spec
            cannot be created.
        AttributeError: If the module defines neither 'specs' nor 'suite'.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    module_spec = importlib.util.spec_from_file_location("specs", path)
    if module_spec is None or module_spec.loader is None:
        raise FileNotFoundError(path)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    if hasattr(module, "specs"):
        return list(module.specs)
    suite = module.suite
    if isinstance(suite, Suite):
        return list(suite.specs)
    if isinstance(suite, (list, tuple)):
        return list(suite)
    raise AttributeError(f"{path}: 'suite' must be a Suite or a list of Specs")


def build_query(base: str, address: str | None, muted: bool) -> dict[str, str]:
    """Merge query parameters from the environment with CLI flags.

    Args:
        base: Query string from the environment.
        address: Serialized address from --address, if given.
        muted: Whether --muted was given.

    Returns:
        dict[str, str]: Query parameters for the Suite.
    """
    query = parse_query(base)
    if address is not None:
        query[ADDRESS_PARAM] = address
    if muted:
        query[MUTED_PARAM] = ""
    return query


def _load_or_exit(specs_file: str) -> list[Spec]:
    try:
        specs = load_specs(specs_file)
    except FileNotFoundError:
        logger.error(f"Specs file not found: {specs_file}")
        print(f"Error: specs file not found: {specs_file}", file=sys.stderr)
        sys.exit(1)
    except AttributeError:
        logger.error(f"{specs_file} has no 'specs' or 'suite' attribute")
        print(f"Error: {specs_file} has no 'specs' or 'suite' attribute", file=sys.stderr)
        sys.exit(1)
    logger.info(f"Specs loaded from {specs_file}: {len(specs)}")
    return specs


def main() -> None:
    """Main entry point for the specrunner CLI.

    Commands:
        run: Run a suite with the following options:
            --specs-file: Path to Python file defining the specs
                (default: $SPECRUNNER_SPECS_FILE or specs.py)
            --address: Serialized suite address of the only test to run
            --muted: Suppress console reporting
            --report-url: POST each result to this URL
                (default: $SPECRUNNER_REPORT_URL)
            --jsonl: Write each result to stdout as a JSON line

        list: Print the address and behavior of every test
            --specs-file: As for run

        server: Start the result collection server
            --host: Host address to bind (default: 127.0.0.1)
            --port: Port number to bind (default: 8000)
            --reload: Enable auto-reload on code changes

    Raises:
        SystemExit: Exit code 0 for success, 1 for errors (file not found,
            malformed address, failing tests).

    Examples:
        specrunner run
        specrunner run --specs-file=my_specs.py --muted
        specrunner run --address '{"spec":0,"topic":[0],"test":1}'
        specrunner list
        specrunner server --port 8000
    """
    dotenv.load_dotenv()
    default_specs_file = os.environ.get(SPECS_FILE_ENV, "specs.py")

    parser = argparse.ArgumentParser(prog="specrunner")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run")
    run_parser.add_argument("--specs-file", default=default_specs_file)
    run_parser.add_argument("--address", default=None)
    run_parser.add_argument("--muted", action="store_true")
    run_parser.add_argument("--report-url", default=os.environ.get(REPORT_URL_ENV))
    run_parser.add_argument("--jsonl", action="store_true")

    list_parser = subparsers.add_parser("list")
    list_parser.add_argument("--specs-file", default=default_specs_file)

    server_parser = subparsers.add_parser("server")
    server_parser.add_argument("--host", default="127.0.0.1")
    server_parser.add_argument("--port", type=int, default=8000)
    server_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logger.debug(f"CLI args parsed: command={args.command}")

    if args.command == "run":
        specs = _load_or_exit(args.specs_file)
        sink: ResultSink | None = None
        if args.report_url:
            sink = WebhookSink(args.report_url)
        elif args.jsonl:
            sink = JsonLinesSink()

        query = build_query(os.environ.get(QUERY_ENV, ""), args.address, args.muted)
        try:
            suite = Suite(specs, query, sink=sink, reporter=ConsoleReporter())
        except MalformedAddressError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        logger.info(f"Suite created: suite_id={suite.id}")

        results = asyncio.run(suite.run())
        failed = sum(1 for result in results if not result["passed"])
        if not suite.is_muted:
            print(f"{len(results)} tests, {failed} failed")
        logger.info("Suite run complete")
        if failed:
            sys.exit(1)

    elif args.command == "list":
        suite = Suite(_load_or_exit(args.specs_file), {})
        for address, test in suite.iter_addresses():
            print(f"{address.serialize()}  {test.behavior_text}")

    elif args.command == "server":
        import uvicorn

        uvicorn.run("specrunner.server:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
