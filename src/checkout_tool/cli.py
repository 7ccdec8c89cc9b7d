"""
Interactive checkout terminal.

Usage:
    checkout --config pricing.yaml
    checkout --dump-rules
"""
import argparse
import sys
from typing import Optional, TextIO

from .config.settings import get_settings
from .engine import Checkout, CheckoutError, RulesError
from .services.rules_service import RulesService
from .utils.logger import setup_logger

MENU = """commands:
    scan <SKU>     - add an item
    remove <SKU>   - remove an item
    total          - show current total
    checkout       - show total and exit
    reload         - reload pricing rules now
    rules          - list loaded pricing rules
    help           - show this menu
    exit           - exit without checking out"""


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="checkout", description="Supermarket checkout terminal")
    parser.add_argument("--config", default=str(settings.rules_path),
                        help="path to pricing YAML (default: %(default)s)")
    parser.add_argument("--strict-refresh", action="store_true", default=settings.strict_refresh,
                        help="report rule reload failures instead of keeping the last good rules")
    parser.add_argument("--dump-rules", action="store_true",
                        help="print the loaded pricing rules and exit")
    parser.add_argument("--log-level", default=settings.log_level,
                        help="logging level (default: %(default)s)")
    return parser


def run_repl(co: Checkout, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> Optional[int]:
    """
    Read commands until checkout, exit or end of input.

    Returns the final total after `checkout`, otherwise None.
    """
    def say(*args):
        print(*args, file=stdout)

    say("Type 'help' for commands")
    say(MENU)

    while True:
        print("> ", end="", file=stdout, flush=True)
        line = stdin.readline()
        if not line:
            return None

        parts = line.split()
        if not parts:
            continue
        cmd, args = parts[0], parts[1:]

        try:
            if cmd in ("scan", "remove"):
                if len(args) != 1:
                    say(f"Command use: {cmd} <SKU>")
                    continue
                if cmd == "scan":
                    co.scan(args[0])
                else:
                    co.remove(args[0])

            elif cmd == "total":
                say(f"Total: {co.get_total_price()}")

            elif cmd == "checkout":
                receipt = co.finalize()
                say(f"Final total: {receipt.total}")
                return receipt.total

            elif cmd == "reload":
                rules = co.refresh_rules()
                say(f"Reloaded {len(rules)} rules")

            elif cmd == "rules":
                say(RulesService(co.store).describe())

            elif cmd == "help":
                say(MENU)

            elif cmd == "exit":
                return None

            else:
                say("unknown command; type 'help'")

        except CheckoutError as e:
            say("error:", e)


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logger(args.log_level, get_settings().log_dir)

    try:
        co = Checkout(args.config, strict_refresh=args.strict_refresh)
    except RulesError as e:
        print(f"error loading config: {e}", file=sys.stderr)
        return 1

    if args.dump_rules:
        print(RulesService(co.store).describe())
        return 0

    try:
        run_repl(co)
    except KeyboardInterrupt:
        print("\nCheckout stopped.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
