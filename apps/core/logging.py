"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Centralized logging for ledger and field-mapping operations.
-------------------------------------------------------------------------
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger('apps.ledger')


def _user_label(user: Optional[object]) -> str:
    if user is None or not getattr(user, 'is_authenticated', False):
        return 'system'
    return user.get_username()


class LedgerLogger:
    """Centralized logging for ledger mutations"""

    @staticmethod
    def log_budget_set(entry, user=None):
        """Log a single budget upsert"""
        logger.info(
            f"Budget set: project {entry.project_id} | "
            f"Field: {entry.field_id} | "
            f"Year: {entry.year_number} | "
            f"Amount: {entry.amount} | "
            f"By: {_user_label(user)}",
            extra={
                'project_id': entry.project_id,
                'field_id': entry.field_id,
                'year_number': entry.year_number,
                'amount': str(entry.amount),
            }
        )

    @staticmethod
    def log_budget_replaced(project, removed: int, created: int, user=None):
        """Log a bulk replace of a project's budget table"""
        logger.info(
            f"Budget table replaced: {project.name} | "
            f"Removed: {removed} | Created: {created} | "
            f"By: {_user_label(user)}",
            extra={'project_id': project.pk, 'removed': removed, 'created': created}
        )

    @staticmethod
    def log_receipt_recorded(project, received_date, entries: Iterable, user=None):
        """Log a grant receipt fanned out over several fields"""
        entries = list(entries)
        total = sum((e.amount for e in entries), Decimal('0.00'))
        logger.info(
            f"Grant receipt recorded: {project.name} | "
            f"Date: {received_date} | "
            f"Fields: {len(entries)} | Total: {total} | "
            f"By: {_user_label(user)}",
            extra={
                'project_id': project.pk,
                'received_date': str(received_date),
                'field_ids': [e.field_id for e in entries],
                'total': str(total),
            }
        )

    @staticmethod
    def log_expenditure_recorded(project, entries: Iterable, user=None):
        """Log one or more expenditure rows"""
        entries = list(entries)
        total = sum((e.amount for e in entries), Decimal('0.00'))
        logger.info(
            f"Expenditure recorded: {project.name} | "
            f"Rows: {len(entries)} | Total: {total} | "
            f"By: {_user_label(user)}",
            extra={
                'project_id': project.pk,
                'entry_ids': [e.pk for e in entries],
                'total': str(total),
            }
        )

    @staticmethod
    def log_expenditure_deleted(entry, user=None):
        """Log expenditure removal"""
        logger.warning(
            f"Expenditure deleted: #{entry.pk} | "
            f"Project: {entry.project_id} | Field: {entry.field_id} | "
            f"Amount: {entry.amount} | By: {_user_label(user)}",
            extra={
                'project_id': entry.project_id,
                'field_id': entry.field_id,
                'amount': str(entry.amount),
            }
        )

    @staticmethod
    def log_mapping_changed(project, added: Iterable[int], removed: Iterable[int], user=None):
        """Log field mapping additions and removals"""
        added, removed = sorted(added), sorted(removed)
        logger.info(
            f"Field mapping changed: {project.name} | "
            f"Added: {added} | Removed: {removed} | "
            f"By: {_user_label(user)}",
            extra={'project_id': project.pk, 'added': added, 'removed': removed}
        )

    @staticmethod
    def log_project_deleted(project_name: str, counts: Dict[str, int], user=None):
        """Log a cascading project delete"""
        logger.warning(
            f"Project deleted: {project_name} | Cascade: {counts} | "
            f"By: {_user_label(user)}",
            extra={'counts': counts}
        )

    @staticmethod
    def log_rejected(operation: str, error: Exception, context: Dict[str, Any]):
        """Log a rejected operation with context"""
        logger.warning(
            f"Rejected {operation}: {error}",
            extra=context
        )
