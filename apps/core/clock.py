"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Injectable clock so that period derivation never reads
             the wall clock directly.
-------------------------------------------------------------------------
"""
from abc import ABC, abstractmethod
from datetime import date

from django.utils import timezone


class Clock(ABC):
    """Source of the current calendar date."""

    @abstractmethod
    def today(self) -> date:
        """Get the current calendar date."""
        ...


class SystemClock(Clock):
    """Production clock: the local date in settings.TIME_ZONE."""

    def today(self) -> date:
        return timezone.localdate()


class FixedClock(Clock):
    """Clock pinned to a given date, for tests and back-dated reports."""

    def __init__(self, fixed_date: date) -> None:
        self.fixed_date = fixed_date

    def today(self) -> date:
        return self.fixed_date

    def advance_to(self, new_date: date) -> None:
        self.fixed_date = new_date


default_clock = SystemClock()
