"""CLI entry point — database bootstrap, statistics and the web server."""

import argparse
import logging
import os
import sys

from job_board.config import AppConfig, get_config
from job_board.utils.logging_config import setup_logging

logger = logging.getLogger("job_board")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Job Board - job postings, applications and dashboards",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to a YAML config file (default: JOB_BOARD_CONFIG or built-in defaults)",
    )
    parser.add_argument(
        "--init-db", action="store_true",
        help="Create any missing tables and exit",
    )
    parser.add_argument(
        "--seed", action="store_true",
        help="Create tables and load demo accounts and jobs when there are no jobs yet",
    )
    parser.add_argument(
        "--stats", action="store_true",
        help="Print database statistics and exit",
    )
    parser.add_argument(
        "--serve", action="store_true",
        help="Run the web server",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address for --serve")
    parser.add_argument("--port", type=int, default=8000, help="Port for --serve")
    return parser.parse_args()


def print_stats(stats: dict):
    """Print database statistics."""
    print("\n=== Job Board Statistics ===")
    for table, count in stats.items():
        print(f"{table}: {count}")
    print()


def run_database_command(config: AppConfig, seed: bool = False, stats: bool = False):
    # Models bind their engine at import time, after the config is settled
    from job_board.models import SessionLocal, engine
    from job_board.storage.database import get_stats, init_database, seed_sample_data

    init_database(engine)
    db = SessionLocal()
    try:
        if seed:
            if seed_sample_data(db, rounds=config.security.bcrypt_rounds):
                print("Sample data loaded.")
            else:
                print("Jobs already exist - sample data skipped.")
        if stats:
            print_stats(get_stats(db))
    finally:
        db.close()


def main():
    args = parse_args()

    if args.config:
        os.environ["JOB_BOARD_CONFIG"] = args.config
        get_config.cache_clear()

    # Load config
    try:
        config = get_config()
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Setup logging; config warnings are reported through it
    setup_logging(config)

    if args.init_db or args.seed or args.stats:
        run_database_command(config, seed=args.seed, stats=args.stats)
        if not args.serve:
            return

    if args.serve:
        import uvicorn
        logger.info("Serving on http://%s:%d (%s)", args.host, args.port, config.environment)
        uvicorn.run("job_board.web.app:app", host=args.host, port=args.port)
        return

    print("Nothing to do. Use --init-db, --seed, --stats or --serve.", file=sys.stderr)
    sys.exit(2)


if __name__ == "__main__":
    main()
