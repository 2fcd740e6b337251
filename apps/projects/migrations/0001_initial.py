# Initial schema for projects, budget fields and field mappings

from decimal import Decimal
import uuid

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='BudgetField',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Unique UUID for external reference.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when this record was created.', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when this record was last modified.', verbose_name='Updated At')),
                ('name', models.CharField(max_length=150, unique=True, verbose_name='Field Name')),
                ('is_default', models.BooleanField(default=False, help_text='Default fields are mapped to every new project.', verbose_name='System Default')),
            ],
            options={
                'verbose_name': 'Budget Field',
                'verbose_name_plural': 'Budget Fields',
                'ordering': ['-is_default', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Project',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Unique UUID for external reference.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when this record was created.', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when this record was last modified.', verbose_name='Updated At')),
                ('name', models.CharField(max_length=255, verbose_name='Project Name')),
                ('start_date', models.DateField(verbose_name='Start Date')),
                ('end_date', models.DateField(blank=True, null=True, verbose_name='End Date')),
                ('extension_end_date', models.DateField(blank=True, help_text='End date after any approved no-cost extension.', null=True, verbose_name='Extended End Date')),
                ('duration_years', models.DecimalField(decimal_places=1, max_digits=4, validators=[django.core.validators.MinValueValidator(Decimal('0.1'))], verbose_name='Duration (Years)')),
                ('total_value', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Total Contracted Value')),
                ('funding_agency', models.CharField(blank=True, max_length=255, verbose_name='Funding Agency')),
                ('reporting_type', models.CharField(choices=[('FY', 'Financial Year Quarter'), ('PQ', 'Project Quarter')], default='FY', max_length=2, verbose_name='Reporting Period Type')),
                ('ledger_revision', models.PositiveIntegerField(default=0, editable=False, verbose_name='Ledger Revision')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='project_created', to=settings.AUTH_USER_MODEL, verbose_name='Created By')),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last modified this record.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='project_updated', to=settings.AUTH_USER_MODEL, verbose_name='Updated By')),
            ],
            options={
                'verbose_name': 'Project',
                'verbose_name_plural': 'Projects',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ProjectFieldMapping',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Unique UUID for external reference.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when this record was created.', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when this record was last modified.', verbose_name='Updated At')),
                ('is_custom', models.BooleanField(default=False, verbose_name='Custom Field')),
                ('field', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='project_mappings', to='projects.budgetfield', verbose_name='Budget Field')),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='field_mappings', to='projects.project', verbose_name='Project')),
            ],
            options={
                'verbose_name': 'Project Field Mapping',
                'verbose_name_plural': 'Project Field Mappings',
                'ordering': ['-field__is_default', 'field__name'],
            },
        ),
        migrations.AddConstraint(
            model_name='projectfieldmapping',
            constraint=models.UniqueConstraint(fields=('project', 'field'), name='unique_project_field_mapping'),
        ),
    ]
