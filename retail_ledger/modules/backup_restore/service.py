"""
modules/backup_restore/service.py

Purpose
-------
Export the whole ledger (bills, store credit, purchases) to a JSON file and
restore it again.

Public interface
----------------
- export_backup(conn, dest_file, logger=None) -> BackupSummary
- import_backup(conn, src_file, logger=None) -> BackupSummary

A restore is all-or-nothing: the file is validated before anything is
touched, and the swap runs in one transaction. Controllers holding an
in-memory credit ledger must reload() afterwards.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ...database.repositories.bills_repo import BillsRepo
from ...database.repositories.customer_credits_repo import CustomerCreditsRepo
from ...database.repositories.purchases_repo import PurchasesRepo
from ...utils.exceptions import PersistenceError, ValidationError
from .logging_utils import get_logger, log_event
from .validators import (
    BackupPayload,
    BillModel,
    PurchaseModel,
    validate_backup_destination,
    validate_backup_payload,
    validate_backup_source,
)


@dataclass
class BackupSummary:
    path: str
    bills: int
    purchases: int
    credits: int


def build_payload(conn: sqlite3.Connection) -> BackupPayload:
    return BackupPayload(
        bills=[BillModel.model_validate(b) for b in BillsRepo(conn).list_bills()],
        credits=CustomerCreditsRepo(conn).load_all(),
        purchases=[PurchaseModel.model_validate(p) for p in PurchasesRepo(conn).list_purchases()],
    )


def export_backup(
    conn: sqlite3.Connection,
    dest_file: str | os.PathLike,
    logger: Optional[logging.Logger] = None,
) -> BackupSummary:
    logger = logger or get_logger()
    dest = Path(dest_file)

    log_event(logger, "backup", "preflight", "checking destination", {"dest": str(dest)})
    validate_backup_destination(str(dest))

    payload = build_payload(conn)
    data = payload.model_dump(mode="json", by_alias=True)

    # write next to the target, then swap in
    tmp = dest.with_suffix(dest.suffix + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False, indent=2)
        os.replace(tmp, dest)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        log_event(logger, "backup", "write", "write failed", {"error": str(exc)}, level=logging.ERROR)
        raise PersistenceError(f"Could not write the backup file: {exc}") from exc

    summary = BackupSummary(
        path=str(dest),
        bills=len(payload.bills),
        purchases=len(payload.purchases),
        credits=len(payload.credits),
    )
    log_event(logger, "backup", "done", "backup written", vars(summary))
    return summary


def import_backup(
    conn: sqlite3.Connection,
    src_file: str | os.PathLike,
    logger: Optional[logging.Logger] = None,
) -> BackupSummary:
    logger = logger or get_logger()
    src = Path(src_file)

    log_event(logger, "restore", "preflight", "reading backup", {"src": str(src)})
    validate_backup_source(str(src))
    try:
        raw = json.loads(src.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        log_event(logger, "restore", "validate", "unreadable backup", {"error": str(exc)}, level=logging.WARNING)
        raise ValidationError(f"The backup file could not be read as JSON: {exc}") from exc

    try:
        payload = validate_backup_payload(raw)
    except ValidationError as exc:
        log_event(logger, "restore", "validate", "invalid backup", {"error": str(exc)}, level=logging.WARNING)
        raise

    bills_repo = BillsRepo(conn)
    purchases_repo = PurchasesRepo(conn)
    credits_repo = CustomerCreditsRepo(conn)
    try:
        with conn:
            bills_repo.delete_all()
            purchases_repo.delete_all()
            for bill in payload.bills:
                bills_repo.insert_bill(bill.to_bill())
            for purchase in payload.purchases:
                purchases_repo.insert_purchase(purchase.to_purchase())
            credits_repo.replace_all(payload.credits)
    except sqlite3.Error as exc:
        log_event(logger, "restore", "swap", "restore rolled back", {"error": str(exc)}, level=logging.ERROR)
        raise PersistenceError(f"Could not restore the backup; existing data was kept. ({exc})") from exc

    summary = BackupSummary(
        path=str(src),
        bills=len(payload.bills),
        purchases=len(payload.purchases),
        credits=len(payload.credits),
    )
    log_event(logger, "restore", "done", "backup restored", vars(summary))
    return summary
