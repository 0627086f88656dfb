from __future__ import annotations

import argparse
import json
import sys

from organizeit import __version__


def _valid_port(value: str) -> int:
    """Validate port is an integer in range 1-65535."""
    port = int(value)
    if port < 1 or port > 65535:
        raise argparse.ArgumentTypeError(f"port must be 1-65535, got {port}")
    return port


def _positive_float(value: str) -> float:
    timeout = float(value)
    if timeout <= 0:
        raise argparse.ArgumentTypeError(f"timeout must be positive, got {timeout}")
    return timeout


def main(argv: list[str] | None = None) -> None:
    from organizeit.config.loader import get_api_config
    api_cfg = get_api_config()
    default_host = api_cfg.get("host", "127.0.0.1")
    default_port = api_cfg.get("port", 8080)

    parser = argparse.ArgumentParser(
        prog="organizeit",
        description="OrganizeIT -- IT operations backend",
    )
    subparsers = parser.add_subparsers(dest="command")

    start_parser = subparsers.add_parser("start", help="Start the OrganizeIT API server")
    start_parser.add_argument(
        "--port", type=_valid_port, default=default_port, help=f"Port to run on (default: {default_port})"
    )
    start_parser.add_argument(
        "--host", default=default_host, help=f"Host to bind to (default: {default_host})"
    )

    subparsers.add_parser("seed", help="Seed every collection in the configured store")

    probe_parser = subparsers.add_parser("probe", help="Check whether a running server answers /health")
    probe_parser.add_argument(
        "--url", default=f"http://{default_host}:{default_port}",
        help=f"Server base URL (default: http://{default_host}:{default_port})",
    )
    probe_parser.add_argument(
        "--timeout", type=_positive_float, default=2.0, help="Seconds to wait (default: 2)"
    )

    chat_parser = subparsers.add_parser("chat", help="Ask the assistant a question locally")
    chat_parser.add_argument("message", help="Message to send")
    chat_parser.add_argument("--user", default="cli", help="User id to record the exchange under (default: cli)")
    chat_parser.add_argument("--json", dest="output_json", action="store_true", help="Output raw JSON")

    args = parser.parse_args(argv)

    if args.command == "start":
        if args.host not in ("127.0.0.1", "localhost", "::1"):
            print("Warning: binding to non-loopback address exposes the server to the network", file=sys.stderr)
        _start_server(host=args.host, port=args.port)
    elif args.command == "seed":
        _seed()
    elif args.command == "probe":
        _probe(args.url, args.timeout)
    elif args.command == "chat":
        _chat(args.message, args.user, args.output_json)
    else:
        parser.print_help()
        sys.exit(1)


def _start_server(host: str, port: int) -> None:
    import uvicorn

    print()
    print(f"  OrganizeIT v{__version__}")
    print(f"  API:        http://{host}:{port}")
    print(f"  API docs:   http://{host}:{port}/docs")
    print()

    uvicorn.run("organizeit.api:app", host=host, port=port, log_level="warning")


def _seed() -> None:
    from organizeit.runtime import Runtime
    from organizeit.state import COLLECTIONS

    warmed = Runtime.get().warm()
    for name in list(COLLECTIONS) + ["dashboard"]:
        marker = "ok" if name in warmed else "FAILED"
        print(f"  {name:<16} {marker}")
    if len(warmed) < len(COLLECTIONS) + 1:
        sys.exit(1)


def _probe(url: str, timeout: float) -> None:
    """GET <url>/health with a short timeout. Exit 1 when unreachable."""
    import urllib.error
    import urllib.request

    target = url.rstrip("/") + "/health"
    try:
        with urllib.request.urlopen(target, timeout=timeout) as resp:
            data = json.loads(resp.read().decode("utf-8"))
    except (urllib.error.URLError, OSError, ValueError) as exc:
        print(f"  {target} unreachable: {exc}")
        sys.exit(1)

    print(f"  {target} -> {data.get('status', 'unknown')} (v{data.get('version', '?')})")
    if data.get("status") != "ok":
        sys.exit(1)


def _chat(message: str, user: str, output_json: bool) -> None:
    from organizeit.errors import OrganizeITError
    from organizeit.runtime import Runtime

    try:
        result = Runtime.get().chat.handle(message, context="cli", user_id=user)
    except OrganizeITError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        sys.exit(2)

    if output_json:
        print(json.dumps(result, indent=2))
        return

    print()
    print(result["response"])
    print()
    print("  Try next:")
    for suggestion in result["suggestions"]:
        print(f"    - {suggestion}")
    print()


if __name__ == "__main__":
    main()
