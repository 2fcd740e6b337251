"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Read-through cache for report snapshots keyed by project
             and ledger revision.
-------------------------------------------------------------------------
"""
import hashlib
import logging
from typing import Any, Callable, Iterable

from django.conf import settings
from django.core.cache import cache

from apps.projects.models import Project

logger = logging.getLogger(__name__)


def _timeout() -> int:
    return getattr(settings, 'REPORT_CACHE_TIMEOUT', 900)


def snapshot_key(project: Project, report: str, *params: Any) -> str:
    suffix = '_'.join(str(p) for p in params)
    return f'pfms_report_{project.public_id}_{project.ledger_revision}_{report}_{suffix}'


def cached_report(project: Project, report: str, builder: Callable[[], Any], *params: Any) -> Any:
    """
    Return a report snapshot, building and caching it on a miss.

    The project must be freshly loaded so that its ledger_revision is
    current; a bumped revision makes every older key unreachable.

    Args:
        project: The project reported on.
        report: Report name, part of the cache key.
        builder: Zero-argument callable computing the snapshot.
        *params: Extra key components (page number, period type...).
    """
    key = snapshot_key(project, report, *params)
    data = cache.get(key)
    if data is not None:
        logger.debug(f"Report cache hit: {key}")
        return data

    data = builder()
    cache.set(key, data, _timeout())
    return data


def portfolio_key(projects: Iterable[Project]) -> str:
    """Key covering every project's current revision."""
    digest = hashlib.sha1(
        ','.join(f'{p.public_id}:{p.ledger_revision}' for p in projects).encode()
    ).hexdigest()
    return f'pfms_portfolio_{digest}'


def cached_portfolio(projects: Iterable[Project], builder: Callable[[], Any]) -> Any:
    projects = list(projects)
    key = portfolio_key(projects)
    data = cache.get(key)
    if data is None:
        data = builder()
        cache.set(key, data, _timeout())
    return data
