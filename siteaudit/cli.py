"""Run a single audit from the command line and print the report as JSON."""

import argparse
import asyncio
import json
import logging
import sys

from . import config
from .engine import InvalidTarget, run_audit
from .fetcher import FetchError

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="siteaudit",
        description="Score one web page for performance, SEO, security, mobile and accessibility.",
    )
    parser.add_argument("url", help="Absolute URL of the page to audit")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s: %(message)s")

    try:
        report = asyncio.run(run_audit(args.url))
    except InvalidTarget as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except FetchError as e:
        print(f"Error: could not fetch {args.url}: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Audit of %s failed", args.url, exc_info=True)
        print(f"Error: audit of {args.url} failed: {e}", file=sys.stderr)
        return 1

    print(json.dumps(report, indent=args.indent, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
