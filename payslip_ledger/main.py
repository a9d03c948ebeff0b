"""payslip-ledger command line.

Usage:
    payslip-ledger upload Salary_March_2024.pdf
    payslip-ledger list
    payslip-ledger edit 1710000000000-abc123 --set basicPay=50000
    payslip-ledger stats
    payslip-ledger report 2023-2024
    payslip-ledger backup --dir ~/Downloads
    payslip-ledger restore TaxCalculator_Backup_3-15-2024.rbs
"""

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from payslip_ledger.aggregation.engine import AggregationEngine
from payslip_ledger.backup.codec import SnapshotCodec
from payslip_ledger.backup.exceptions import BackupError
from payslip_ledger.config.settings import Settings
from payslip_ledger.extraction.factory import ExtractorFactory
from payslip_ledger.logging.logger import Log
from payslip_ledger.pdf.factory import PdfExtractorFactory
from payslip_ledger.records.models import SalaryDetails, UserProfile
from payslip_ledger.records.record_store import RecordStore
from payslip_ledger.records.serializer import (
    SALARY_WIRE_KEYS,
    profile_to_dict,
    record_to_dict,
    salary_details_from_dict,
    salary_details_to_dict,
)
from payslip_ledger.storage.base import BaseKeyValueStore
from payslip_ledger.storage.exceptions import StorageError
from payslip_ledger.storage.factory import StorageFactory
from payslip_ledger.upload.exceptions import UploadError
from payslip_ledger.upload.uploader import PayslipUploader


@dataclass
class Services:
    adapter: BaseKeyValueStore
    store: RecordStore
    engine: AggregationEngine
    codec: SnapshotCodec
    uploader: PayslipUploader


def build_services(settings: Settings) -> Services:
    """Wire the store, aggregation, backup and upload services from settings."""
    adapter = StorageFactory.create(settings)
    store = RecordStore(adapter, recompute_totals=settings.recompute_salary_totals)
    pdf_extractor = PdfExtractorFactory.create(settings)
    uploader = PayslipUploader(
        store,
        ExtractorFactory.create(settings, pdf_extractor=pdf_extractor),
        pdf_extractor=pdf_extractor,
    )
    return Services(
        adapter=adapter,
        store=store,
        engine=AggregationEngine(store),
        codec=SnapshotCodec(store),
        uploader=uploader,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payslip-ledger",
        description="Record payslips and build salary and tax summaries.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    upload = sub.add_parser("upload", help="Upload one or more payslip PDFs")
    upload.add_argument("paths", nargs="+", type=Path)

    sub.add_parser("list", help="List payslips, newest first")

    show = sub.add_parser("show", help="Show one payslip")
    show.add_argument("payslip_id")

    delete = sub.add_parser("delete", help="Delete a payslip")
    delete.add_argument("payslip_id")

    edit = sub.add_parser("edit", help="Edit salary figures of a payslip")
    edit.add_argument("payslip_id")
    edit.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help=f"One of: {', '.join(SALARY_WIRE_KEYS.values())}",
    )

    profile = sub.add_parser("profile", help="Show or set the profile")
    profile.add_argument("--name")

    sub.add_parser("stats", help="Total earnings and monthly statistics")

    report = sub.add_parser("report", help="Annual tax report data")
    report.add_argument("financial_year", nargs="?", help="e.g. 2023-2024; all years if omitted")

    backup = sub.add_parser("backup", help="Write a .rbs backup file")
    backup.add_argument("--dir", type=Path, default=None)

    restore = sub.add_parser("restore", help="Merge a .rbs backup into the store")
    restore.add_argument("path", type=Path)

    clear = sub.add_parser("clear", help="Delete all payslips, profile and settings")
    clear.add_argument("--yes", action="store_true", help="Confirm deletion")

    return parser


def parse_assignments(assignments: list[str], base: SalaryDetails | None) -> SalaryDetails:
    """Apply FIELD=VALUE pairs on top of existing details."""
    payload = salary_details_to_dict(base) if base else {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        key = key.strip()
        if not sep or key not in SALARY_WIRE_KEYS.values():
            raise ValueError(f"Invalid assignment '{assignment}'")
        value = value.strip()
        if key == "month":
            payload[key] = value or None
        elif not value:
            payload[key] = None
        elif key == "year":
            payload[key] = int(value)
        else:
            payload[key] = float(value)
    return salary_details_from_dict(payload)


def run_command(args: argparse.Namespace, services: Services, settings: Settings) -> Any:
    store = services.store
    command = args.command

    if command == "upload":
        return [record_to_dict(services.uploader.upload_path(path)) for path in args.paths]
    if command == "list":
        return [record_to_dict(p) for p in store.list_payslips()]
    if command == "show":
        payslip = store.get_payslip(args.payslip_id)
        if payslip is None:
            raise ValueError(f"Payslip {args.payslip_id} not found")
        return record_to_dict(payslip)
    if command == "delete":
        store.delete_payslip(args.payslip_id)
        return {"deleted": args.payslip_id}
    if command == "edit":
        payslip = store.get_payslip(args.payslip_id)
        if payslip is None:
            raise ValueError(f"Payslip {args.payslip_id} not found")
        details = parse_assignments(args.assignments, payslip.salary_details)
        store.update_salary_details(payslip.id, details)
        updated = store.get_payslip(payslip.id)
        return record_to_dict(updated) if updated else None
    if command == "profile":
        if args.name is not None:
            store.save_profile(UserProfile(name=args.name))
        profile = store.get_profile()
        return profile_to_dict(profile) if profile else None
    if command == "stats":
        return {
            "totalEarnings": services.engine.total_earnings(),
            "monthlyStats": [s.to_dict() for s in services.engine.monthly_stats()],
        }
    if command == "report":
        if args.financial_year:
            return services.engine.annual_report_data(args.financial_year).to_dict()
        return [r.to_dict() for r in services.engine.annual_reports()]
    if command == "backup":
        path = services.codec.write_backup(args.dir or Path(settings.backup_dir))
        return {"backup": str(path)}
    if command == "restore":
        snapshot = services.codec.read_backup(args.path)
        services.codec.apply_snapshot(snapshot)
        return {"restored": len(snapshot.payslips), "profile": snapshot.profile is not None}
    if command == "clear":
        if not args.yes:
            raise ValueError("Refusing to clear data without --yes")
        store.clear_all()
        return {"cleared": True}
    raise ValueError(f"Unknown command '{command}'")


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> services -> one command -> JSON on stdout."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    services = build_services(settings)

    try:
        result = run_command(args, services, settings)
    except (StorageError, BackupError, UploadError, ValueError) as exc:
        Log.error(f"{args.command} failed: {exc}")
        return 1
    finally:
        services.adapter.close()

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
