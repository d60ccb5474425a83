"""CLI wrapper for the portfolio return curve."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from app.core.logging import setup_logging
from app.schemas import PortfolioRequest
from modus.errors import ModusError
from modus.returns import total_returns
from modus.yahoo import get_yahoo_client


async def _run(path: Path) -> int:
    request = PortfolioRequest.model_validate(json.loads(path.read_text(encoding="utf-8")))
    client = get_yahoo_client()
    try:
        curve = await total_returns(request.to_domain(), client)
    except ModusError as exc:
        print(f"error: {exc.kind.value}: {exc}", file=sys.stderr)
        return 1
    finally:
        await client.aclose()
    for day, pct in curve.items():
        print(f"{day}\t{pct:.4f}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute the time-weighted return curve of a portfolio")
    parser.add_argument("--portfolio", required=True, type=Path, help="JSON file with a 'portfolio' list")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()
    setup_logging(args.log_level)
    sys.exit(asyncio.run(_run(args.portfolio)))


if __name__ == "__main__":
    main()
