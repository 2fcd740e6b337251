"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Reusable model mixins for public identifiers, timestamps
             and audit user tracking.
-------------------------------------------------------------------------
"""
import uuid
from typing import Optional
from django.db import models
from django.conf import settings


class UUIDMixin(models.Model):
    """
    Public UUID for projects, budget fields and mappings.

    Report snapshot cache keys use public_id so that a reused integer
    primary key never picks up another project's cached report.
    """

    public_id = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        db_index=True,
        verbose_name="Public ID",
        help_text="Unique UUID for external reference."
    )

    class Meta:
        abstract = True


class TimeStampedMixin(UUIDMixin):
    """
    Creation and modification times of registry and ledger rows.

    updated_at moves on budget upserts and expenditure corrections.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
        help_text="Timestamp when this record was created."
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
        help_text="Timestamp when this record was last modified."
    )

    class Meta:
        abstract = True


class AuditLogMixin(TimeStampedMixin):
    """
    Finance user who entered and last changed a ledger row or project.

    Budget, grant and expenditure services stamp these through
    save_with_user; rows written by seed commands and tests leave them
    empty.
    """

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="%(class)s_created",
        null=True,
        blank=True,
        verbose_name="Created By",
        help_text="User who created this record."
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="%(class)s_updated",
        null=True,
        blank=True,
        verbose_name="Updated By",
        help_text="User who last modified this record."
    )

    class Meta:
        abstract = True

    def stamp_user(self, user: Optional[object] = None) -> None:
        """
        Record the acting user on this row without saving.

        Anonymous users are ignored. created_by is only set on rows that
        have not been inserted yet.
        """
        if user is None or not getattr(user, 'is_authenticated', False):
            return
        if self.pk is None:
            self.created_by = user
        self.updated_by = user

    def save_with_user(self, user: Optional[object] = None, *args, **kwargs) -> None:
        """
        Stamp the acting user, then save.

        Used for every ledger write so that the report signals fire after
        the audit columns are filled.
        """
        self.stamp_user(user)
        self.save(*args, **kwargs)
