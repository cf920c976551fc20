"""Pre-deployment check: validate configs and show what the driver still has to resolve.

Usage:
    python -m src.deploy.cli --network testnet
    python -m src.deploy.cli --all
    python -m src.deploy.cli --network bombay --dump-msgs
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from src.deploy.constants import ENVIRONMENT_VAR
from src.deploy.errors import DeployConfigError, MalformedConfigError, UnresolvedAddressError
from src.deploy.registry import available_environments, get_config, resolve_environment
from src.deploy.resolution import unresolved_fields
from src.deploy.schema import Config
from src.deploy.validation import validate

logger = logging.getLogger(__name__)


def _check(config: Config) -> bool:
    """Print the validation report for one environment; return True if deployable."""
    result = validate(config)
    status = "OK" if result.ok else "BLOCKED"
    print(f"== {config.name}: {status} ({len(result.errors)} errors, {len(result.warnings)} warnings)")
    if result.violations:
        print(result.to_frame().to_string(index=False))

    pending = unresolved_fields(config)
    if pending:
        print(f"-- {len(pending)} placeholder(s) to resolve during deployment:")
        for p in pending:
            print(f"   [{p.stage}] {p.field_path}")
    return result.ok


def _dump_msgs(config: Config) -> None:
    """Print every instantiate message that can already be rendered."""
    msgs = {}
    for name, record in config.contract_records().items():
        try:
            msgs[name] = record.to_msg(name)
        except UnresolvedAddressError as exc:
            msgs[name] = {"pending": exc.field_path}
    assets = []
    for path, entry in config.asset_entries():
        try:
            assets.append(entry.to_msg(path))
        except UnresolvedAddressError as exc:
            assets.append({"pending": exc.field_path})
    msgs["initial_assets"] = assets
    print(json.dumps(msgs, indent=2))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate red bank deployment configurations")
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--network",
        choices=available_environments(),
        help=f"Environment to check (or env {ENVIRONMENT_VAR})",
    )
    target.add_argument("--all", action="store_true", help="Check every registered environment")
    parser.add_argument(
        "--dump-msgs",
        action="store_true",
        help="Print the instantiate messages (unresolved records are marked pending)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        names = available_environments() if args.all else (resolve_environment(args.network),)
        all_ok = True
        for name in names:
            config = get_config(name)
            all_ok = _check(config) and all_ok
            if args.dump_msgs:
                _dump_msgs(config)
    except MalformedConfigError as exc:
        logger.error("Malformed configuration: %s", exc)
        return 2
    except DeployConfigError as exc:
        logger.error("%s", exc)
        return 2

    return 0 if all_ok else 1


if __name__ == "__main__":
    sys.exit(main())
