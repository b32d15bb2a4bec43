#!/usr/bin/env python3
"""
Activate an account by hand, e.g. when a payment was confirmed outside Stripe
or its webhook delivery was exhausted.

Usage:
  python scripts/activate_account.py --email someone@company.com
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the api package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api.services.activation_service import ActivationService  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Activate a company or self-employed account")
    ap.add_argument("--email", required=True, help="business_email of the account")
    args = ap.parse_args()

    kind = ActivationService().activate(args.email)
    if kind is None:
        raise SystemExit(f"No account found for '{args.email}'")
    print("OK: account activated")
    print(f"  Email: {args.email.strip().lower()}")
    print(f"  Type: {kind.value}")


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
