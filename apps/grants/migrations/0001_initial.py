# Initial schema for the grant ledger

from decimal import Decimal
import uuid

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('projects', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='GrantEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Unique UUID for external reference.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when this record was created.', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when this record was last modified.', verbose_name='Updated At')),
                ('received_date', models.DateField(verbose_name='Received Date')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))], verbose_name='Amount')),
                ('remarks', models.TextField(blank=True, verbose_name='Remarks')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='grantentry_created', to=settings.AUTH_USER_MODEL, verbose_name='Created By')),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last modified this record.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='grantentry_updated', to=settings.AUTH_USER_MODEL, verbose_name='Updated By')),
                ('field', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='grant_entries', to='projects.budgetfield', verbose_name='Budget Field')),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='grant_entries', to='projects.project', verbose_name='Project')),
            ],
            options={
                'verbose_name': 'Grant Entry',
                'verbose_name_plural': 'Grant Entries',
                'ordering': ['-received_date', '-id'],
            },
        ),
        migrations.AddIndex(
            model_name='grantentry',
            index=models.Index(fields=['project', 'field'], name='grant_project_field_idx'),
        ),
    ]
