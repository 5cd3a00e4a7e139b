"""liveconfig CLI: init and serve entry points.

Usage:
    liveconfig init                      # Write liveconfig.yaml with defaults
    liveconfig init --read-policy disk   # Read the file on every request
    liveconfig serve                     # Start the HTTP server
"""

import argparse
import sys
from pathlib import Path

from .interfaces import ReadPolicy
from .server.config import LiveConfigConfig, ServerConfig, StorageConfig

CONFIG_FILE = Path("liveconfig.yaml")

CONFIG_TEMPLATE = """\
# liveconfig configuration
# PORT, LIVECONFIG_HOST, LIVECONFIG_STORAGE_PATH and LIVECONFIG_READ_POLICY
# environment variables override the values below.

server:
  host: {host}
  port: {port}

storage:
  # Single JSON file holding the current configuration record.
  # Relative paths resolve against the working directory.
  path: {path}
  # memory: serve the in-memory copy, the file only seeds restarts
  # disk:   read the file on every request; memory is served only while
  #         the last write failed to reach the file
  read_policy: {read_policy}
"""


def cmd_init(args: argparse.Namespace) -> int:
    """Write a config file with the given settings."""
    config_file = Path(args.config) if args.config else CONFIG_FILE

    if config_file.exists() and not args.force:
        print(f"Config already exists: {config_file}")
        print("   Use --force to overwrite.")
        return 1

    server = ServerConfig()
    if args.host is not None:
        server.host = args.host
    if args.port is not None:
        server.port = args.port
    storage = StorageConfig(read_policy=args.read_policy or ReadPolicy.MEMORY.value)
    if args.path is not None:
        storage.path = args.path

    errors = LiveConfigConfig(server=server, storage=storage).validate()
    if errors:
        for error in errors:
            print(f"Invalid setting: {error}")
        return 1

    config_content = CONFIG_TEMPLATE.format(
        host=server.host,
        port=server.port,
        path=storage.path,
        read_policy=storage.read_policy,
    )

    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(config_content)
    print(f"Config written: {config_file}")
    print("   Start the server with: liveconfig serve")
    return 0


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the HTTP server."""
    from .server.app import run_server

    config = LiveConfigConfig.from_env(config_path=args.config)

    run_server(
        config=config,
        host=args.host,
        port=args.port,
        log_level=args.log_level or "info",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="liveconfig",
        description="liveconfig: serve a single live configuration script over HTTP",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init
    init_parser = subparsers.add_parser("init", help="Write a config file")
    init_parser.add_argument("--config", "-c", type=str, default=None,
                             help=f"Config file to write (default: {CONFIG_FILE})")
    init_parser.add_argument("--host", type=str, default=None)
    init_parser.add_argument("--port", "-p", type=int, default=None)
    init_parser.add_argument("--path", type=str, default=None,
                             help="Storage file for the configuration record")
    init_parser.add_argument("--read-policy", type=str, default=None,
                             choices=[p.value for p in ReadPolicy])
    init_parser.add_argument("--force", action="store_true",
                             help="Overwrite existing config")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP server")
    serve_parser.add_argument("--host", type=str, default=None)
    serve_parser.add_argument("--port", "-p", type=int, default=None)
    serve_parser.add_argument("--config", "-c", type=str, default=None)
    serve_parser.add_argument("--log-level", type=str, default=None,
                              choices=["debug", "info", "warning", "error"])

    return parser


def main() -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "init":
        sys.exit(cmd_init(args))
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
