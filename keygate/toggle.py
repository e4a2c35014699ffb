"""
Open or close public registration by rewriting the flag file.

The running gateway never writes the flag; deployments run this instead:

    keygate-registration enable
    keygate-registration status --config /srv/gateway/config.json
"""
import argparse
from pathlib import Path
from typing import List, Optional

from keygate.core.config import get_settings
from keygate.core.registration import FileConfigProvider
from keygate.models import RegistrationConfig


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Toggle Goose Hacknight registration")
    ap.add_argument("action", choices=["enable", "disable", "status"])
    ap.add_argument("--config", type=Path, default=None,
                    help="Flag file (default: REGISTRATION_CONFIG_PATH)")

    args = ap.parse_args(argv)

    path = args.config or get_settings().REGISTRATION_CONFIG_PATH
    provider = FileConfigProvider(path)

    if args.action != "status":
        provider.save(RegistrationConfig(registration_enabled=args.action == "enable"))

    enabled = provider.load().registration_enabled
    print(f"Registration is {'open' if enabled else 'closed'} ({path})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
