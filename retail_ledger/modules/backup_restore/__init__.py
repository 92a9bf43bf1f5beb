"""
Backup / restore of the ledger as a single JSON document.

Public API:
- export_backup(conn, dest_file)   -> BackupSummary
- import_backup(conn, src_file)    -> BackupSummary
- validate_backup_payload(data)    -> BackupPayload
"""

from .service import BackupSummary, build_payload, export_backup, import_backup
from .validators import BackupPayload, validate_backup_payload

__all__ = [
    "BackupSummary",
    "BackupPayload",
    "build_payload",
    "export_backup",
    "import_backup",
    "validate_backup_payload",
]
