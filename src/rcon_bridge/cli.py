"""
Command-line interface for the RCON bridge.

Provides CLI commands for running and debugging the bridge:
- run: Start the HTTP server
- check-rcon: Connect to the console and run one command
- voice: Push one utterance through the full pipeline (dry run by default)
- suggest: Look up an item name in the catalog
- config: Print the effective configuration

Usage:
    rcon-bridge run [--host HOST] [--port PORT]
    rcon-bridge check-rcon [COMMAND]
    rcon-bridge voice "give me 5 bread" [--device-user NAME] [--execute]
    rcon-bridge suggest NAME [--limit N]
    rcon-bridge config

Environment Variables:
    RCON_HOST, RCON_PORT, RCON_PASSWORD: Console endpoint and credential
    DEFAULT_PLAYER: Username targeted when the caller is unknown
    PLAYER_<DEVICE>: Per-device username mapping
    BRIDGE_HOST, BRIDGE_PORT: HTTP bind address (default 0.0.0.0:3000)
"""

import argparse
import json
import sys

from rcon_bridge.errors import BridgeError


def cmd_run(args: argparse.Namespace) -> int:
    """
    Run the HTTP server.

    Returns:
        0 on clean shutdown (Ctrl+C), 1 on a startup error
    """
    from rcon_bridge.api.server import start_server
    from rcon_bridge.config import config

    try:
        start_server(config, host=getattr(args, "host", None), port=getattr(args, "port", None))
        return 0
    except KeyboardInterrupt:
        print("\nServer stopped.")
        return 0
    except BridgeError as e:
        print(f"Error starting server: {e}", file=sys.stderr)
        return 1


def cmd_check_rcon(args: argparse.Namespace) -> int:
    """
    Connect to the console, run one command, and print the reply.

    Returns:
        0 if the command ran, 1 on any connection or configuration error
    """
    from rcon_bridge.config import config
    from rcon_bridge.rcon import ConsoleSession

    print("=== RCON connectivity check ===")
    try:
        session = ConsoleSession.from_settings(config.rcon)
        with session:
            response = session.send(args.command)
    except BridgeError as e:
        print(f"RCON failed: {e}", file=sys.stderr)
        return 1

    print("RCON connected and authenticated")
    print(f"Response: {response}")
    return 0


def cmd_voice(args: argparse.Namespace) -> int:
    """
    Push one utterance through the full pipeline.

    Runs as a dry run unless --execute is given.

    Returns:
        0 if the pipeline succeeded, 1 otherwise
    """
    from rcon_bridge.config import config
    from rcon_bridge.service import build_service

    try:
        service = build_service(config)
    except BridgeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = service.handle(args.utterance, args.device_user, dry_run=not args.execute)
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.success else 1


def cmd_suggest(args: argparse.Namespace) -> int:
    """
    Look up an item name in the catalog.

    Returns:
        0 if the name is a catalog entry, 1 otherwise
    """
    from rcon_bridge.catalog import ItemCatalog
    from rcon_bridge.config import config

    catalog = ItemCatalog()
    try:
        catalog.load(config.catalog.absolute_path)
    except BridgeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if catalog.contains(args.name):
        print(f"'{args.name.lower()}' is a valid item.")
        return 0

    suggestions = catalog.suggest(args.name, args.limit)
    print(f"'{args.name}' is not a valid item.")
    if suggestions:
        print("Did you mean:")
        for suggestion in suggestions:
            print(f"  - {suggestion}")
    return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Print the effective configuration (secrets redacted)."""
    from rcon_bridge.config import print_config_summary

    print_config_summary()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    from rcon_bridge.config import config
    from rcon_bridge.logging_config import configure_logging

    parser = argparse.ArgumentParser(
        prog="rcon-bridge",
        description="RCON Bridge - voice requests to game server console commands",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run the HTTP server",
        description="Start the HTTP API that accepts voice requests.",
    )
    run_parser.add_argument(
        "--port", "-p", type=int, help="HTTP port (default: 3000, or BRIDGE_PORT env var)"
    )
    run_parser.add_argument(
        "--host", type=str, help="Host to bind to (default: 0.0.0.0, or BRIDGE_HOST env var)"
    )
    run_parser.set_defaults(func=cmd_run)

    # check-rcon command
    check_parser = subparsers.add_parser(
        "check-rcon",
        help="Test the RCON connection",
        description="Connect and authenticate to the console, then run one command.",
    )
    check_parser.add_argument(
        "command", nargs="?", default="list", help="Console command to run (default: list)"
    )
    check_parser.set_defaults(func=cmd_check_rcon)

    # voice command
    voice_parser = subparsers.add_parser(
        "voice",
        help="Run one utterance through the pipeline",
        description="Generate, validate and (with --execute) run commands for one utterance.",
    )
    voice_parser.add_argument("utterance", help='Request text, e.g. "give me 5 bread"')
    voice_parser.add_argument("--device-user", "-u", help="Speaker identity to resolve")
    voice_parser.add_argument(
        "--execute",
        action="store_true",
        help="Send the commands to the server (default is a dry run)",
    )
    voice_parser.set_defaults(func=cmd_voice)

    # suggest command
    suggest_parser = subparsers.add_parser(
        "suggest",
        help="Look up an item name",
        description="Check an item name against the catalog and suggest alternatives.",
    )
    suggest_parser.add_argument("name", help="Item name to look up")
    suggest_parser.add_argument(
        "--limit", "-n", type=int, default=5, help="Maximum suggestions (default: 5)"
    )
    suggest_parser.set_defaults(func=cmd_suggest)

    # config command
    config_parser = subparsers.add_parser("config", help="Print the effective configuration")
    config_parser.set_defaults(func=cmd_config)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(config.logging)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
