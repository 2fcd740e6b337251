"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Management command to seed the default budget fields.
-------------------------------------------------------------------------
"""
from django.core.management.base import BaseCommand

from apps.projects.models import BudgetField


DEFAULT_FIELDS = [
    'Manpower',
    'Equipment',
    'Consumables',
    'Travel',
    'Contingency',
    'Overheads',
]


class Command(BaseCommand):
    help = 'Seeds the default budget fields shared by all projects'

    def handle(self, *args, **options):
        self.stdout.write("Seeding default budget fields...")

        created_count = 0
        for name in DEFAULT_FIELDS:
            field, created = BudgetField.objects.get_or_create(
                name=name,
                defaults={'is_default': True}
            )
            if created:
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f"Created field: {name}"))
            elif not field.is_default:
                field.is_default = True
                field.save(update_fields=['is_default', 'updated_at'])
                self.stdout.write(self.style.WARNING(f"Marked existing field as default: {name}"))
            else:
                self.stdout.write(f"Field already exists: {name}")

        self.stdout.write(self.style.SUCCESS(f"Done. {created_count} field(s) created."))
