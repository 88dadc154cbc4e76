from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from time import perf_counter
from typing import Sequence

from sqlalchemy.orm import Session

from api.schemas import PriceResponse
from config import SEED_CSV, config
from db.db import init_db
from db.repositories import PriceRepository
from domain.base_types import ChainId, ProductId, parse_iso_datetime
from domain.pricing import PriceNotFoundError
from importers.seed_prices import load_price_records
from services.price_service import ApplicablePriceService

logger = logging.getLogger(__name__)


def seed(db_file: Path, csv_path: Path, *, reset: bool = False, echo: bool = False) -> int:
    """Append the CSV's price records to the database, replacing it first with `reset`.

    The CSV is read and validated before the database is touched.
    """
    logger.info("Loading price records from %s", csv_path)
    started = perf_counter()
    records = load_price_records(csv_path)
    if not records:
        logger.warning("No price records found in %s", csv_path)
        return 0

    logger.info("Opening DB at %s (reset=%s)", db_file, reset)
    with init_db(echo, db_file=db_file, reset=reset) as session:
        PriceRepository(session).create_many(records)
    logger.info("Loaded and stored %d price records in %.2fs", len(records), perf_counter() - started)
    return len(records)


def lookup(session: Session, chain_id: ChainId, product_id: ProductId, at: datetime, *, push_down: bool) -> int:
    service = ApplicablePriceService(PriceRepository(session), push_down=push_down)
    try:
        record = service.get(chain_id, product_id, at)
    except PriceNotFoundError as exc:
        print(exc, file=sys.stderr)
        return 1

    print(PriceResponse.from_record(record).model_dump_json(by_alias=True))
    return 0


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def _timestamp(raw: str) -> datetime:
    try:
        return parse_iso_datetime(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed and query applicable product prices.")
    parser.add_argument("--db-file", type=Path, default=None, help="SQLite database (defaults to PRICES_DB_FILE)")
    commands = parser.add_subparsers(dest="command", required=True)

    seed_parser = commands.add_parser("seed", help="Append price-list entries from a CSV file")
    seed_parser.add_argument("--csv", type=Path, default=SEED_CSV)
    seed_parser.add_argument(
        "--reset",
        action="store_true",
        help="Replace the existing database once the CSV has been validated",
    )

    price_parser = commands.add_parser("price", help="Resolve the price applicable at an instant")
    price_parser.add_argument("--chain-id", type=_positive_int, required=True)
    price_parser.add_argument("--product-id", type=_positive_int, required=True)
    price_parser.add_argument("--date", type=_timestamp, required=True, help="e.g. 2020-06-14T10:00:00")
    price_parser.add_argument(
        "--in-memory-selection",
        action="store_true",
        help="Select among all applicable records instead of letting the database do it",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = config()
    db_file = args.db_file or settings.db_file

    if args.command == "seed":
        seed(db_file, args.csv, reset=args.reset, echo=settings.sql_echo)
        return 0

    logger.info("Opening DB at %s", db_file)
    with init_db(settings.sql_echo, db_file=db_file) as session:
        push_down = settings.push_down_selection and not args.in_memory_selection
        return lookup(session, ChainId(args.chain_id), ProductId(args.product_id), args.date, push_down=push_down)


if __name__ == "__main__":
    logging.basicConfig(level=config().log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    sys.exit(main())
