# -*- coding: utf-8 -*-
"""
Batch billing from the command line.

    python billing_cli.py generate  [--year 2024 --month 3]
    python billing_cli.py issue-all [--year 2024 --month 3]
    python billing_cli.py debtors

Without --year/--month the previous month is used: run on the first days of
April, bill March.
"""

import argparse
import logging
import sys
from datetime import date

from dateutil.relativedelta import relativedelta

from langschool import config
from langschool.billing.period import period_label
from langschool.database import SessionLocal, init_db
from langschool.errors import BillingError
from langschool.models.settings import get_settings
from langschool.pdf import InvoicePDFRenderer
from langschool.services import drafts, issuance, payments

logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')


def resolve_period(year, month, today=None):
    """(year, month) from the arguments, or the month before ``today``."""
    if year and month:
        return year, month
    if year or month:
        raise SystemExit("--year and --month must be given together")
    previous = (today or date.today()) - relativedelta(months=1)
    return previous.year, previous.month


def cmd_generate(db, year, month):
    result = drafts.generate_drafts(db, year, month)
    logging.info(f"{period_label(year, month)}: {result.created} draft(s) created, {result.updated} updated, "
                 f"{result.skipped_has_invoice} already invoiced, {result.skipped_no_lines} with nothing to bill")
    return 0


def cmd_issue_all(db, year, month):
    renderer = InvoicePDFRenderer.from_settings(get_settings(db))
    result = issuance.issue_all(db, year, month, renderer)
    for path in result.pdf_paths:
        logging.info(f"-> {path}")
    for error in result.errors:
        logging.error(f"Invoice {error.invoice_id}{f' ({error.number})' if error.number else ''}: "
                      f"{error.kind}: {error.message}")
    return 1 if result.errors else 0


def cmd_debtors(db, year=None, month=None):
    debtors = payments.list_debtors(db)
    if not debtors:
        logging.info("No debtors.")
        return 0
    for row in debtors:
        print(f"{row.student_name:<40} {row.debt:>12}")
    return 0


COMMANDS = {
    "generate": cmd_generate,
    "issue-all": cmd_issue_all,
    "debtors": cmd_debtors,
}


def build_parser():
    parser = argparse.ArgumentParser(description="LangSchool monthly billing")
    parser.add_argument("command", choices=sorted(COMMANDS))
    parser.add_argument("--year", type=int, help="Billing year (e.g. 2024)")
    parser.add_argument("--month", type=int, help="Billing month (1-12)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    year, month = resolve_period(args.year, args.month)

    config.ensure_dirs()
    init_db()
    db = SessionLocal()
    try:
        return COMMANDS[args.command](db, year, month)
    except BillingError as e:
        logging.error(f"{e.kind}: {e.message}")
        return 2
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
