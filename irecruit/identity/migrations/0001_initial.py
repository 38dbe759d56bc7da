import django.utils.timezone
import uuid
from django.db import migrations, models


def domain_entity_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('modified_at', models.DateTimeField(auto_now=True)),
        ('identity_ref', models.CharField(editable=False, max_length=64, unique=True)),
        ('email', models.EmailField(db_index=True, max_length=254)),
        ('first_name', models.CharField(blank=True, max_length=150)),
        ('last_name', models.CharField(blank=True, max_length=150)),
        ('email_verified', models.BooleanField(default=False)),
        ('active', models.BooleanField(default=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='ProcessedEvent',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('event_id', models.UUIDField(unique=True)),
                ('event_type', models.CharField(choices=[('USER_REGISTERED', 'Identity Created'), ('EMAIL_VERIFIED', 'Email Verified'), ('ROLE_CHANGED', 'Role Changed'), ('ACCOUNT_DISABLED', 'Account Disabled')], max_length=32)),
                ('related_entity_id', models.CharField(blank=True, max_length=64)),
                ('processed_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('status', models.CharField(choices=[('PROCESSED', 'Processed'), ('FAILED', 'Failed')], db_index=True, default='PROCESSED', max_length=16)),
                ('error_message', models.TextField(blank=True)),
                ('attempts', models.PositiveIntegerField(default=1)),
            ],
            options={
                'indexes': [models.Index(fields=['event_type', 'processed_at'], name='identity_event_type_proc_idx')],
            },
        ),
        migrations.CreateModel(
            name='JobSeeker',
            fields=domain_entity_fields() + [
                ('phone_number', models.CharField(blank=True, max_length=32)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('linkedin_profile', models.URLField(blank=True)),
                ('resume_url', models.URLField(blank=True)),
                ('current_location', models.CharField(blank=True, max_length=255)),
                ('profile_complete', models.BooleanField(default=False)),
            ],
            options={
                'ordering': ('-created_at', '-modified_at'),
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Company',
            fields=domain_entity_fields() + [
                ('name', models.CharField(blank=True, max_length=255)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('telephone', models.CharField(blank=True, max_length=32)),
                ('verified', models.BooleanField(default=False)),
            ],
            options={
                'verbose_name_plural': 'companies',
                'ordering': ('-created_at', '-modified_at'),
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='StaffMember',
            fields=domain_entity_fields() + [
                ('employer_ref', models.CharField(blank=True, db_index=True, max_length=64)),
                ('department', models.CharField(blank=True, max_length=150)),
                ('position', models.CharField(blank=True, max_length=150)),
                ('hire_date', models.DateField(blank=True, null=True)),
            ],
            options={
                'ordering': ('-created_at', '-modified_at'),
                'abstract': False,
            },
        ),
    ]
