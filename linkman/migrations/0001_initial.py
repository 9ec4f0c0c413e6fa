# Initial migration for Profile, Contact and QrToken

import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


PRESET_CHOICES = [
    ("personal", "Personal"),
    ("professional", "Professional"),
    ("custom", "Custom"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("bio", models.TextField(blank=True, verbose_name="bio")),
                ("company", models.CharField(blank=True, max_length=200, verbose_name="company")),
                ("position", models.CharField(blank=True, max_length=200, verbose_name="position")),
                ("phone", models.CharField(blank=True, max_length=32, verbose_name="phone")),
                ("education", models.CharField(blank=True, max_length=200, verbose_name="education")),
                (
                    "handles",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text='Social handles, e.g. {"github": "ada"}',
                        verbose_name="handles",
                    ),
                ),
                (
                    "avatar",
                    models.CharField(
                        blank=True,
                        help_text="Reference to the hosted avatar image",
                        max_length=500,
                        verbose_name="avatar",
                    ),
                ),
                (
                    "presets",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="preset_name -> {field: bool}. Empty means defaults.",
                        verbose_name="presets",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="linkman_profile",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="user",
                    ),
                ),
            ],
            options={
                "verbose_name": "profile",
                "verbose_name_plural": "profiles",
                "db_table": "linkman_profile",
            },
        ),
        migrations.CreateModel(
            name="Contact",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("approved", "Approved")],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "sender_preset",
                    models.CharField(
                        blank=True,
                        choices=PRESET_CHOICES,
                        max_length=20,
                        null=True,
                        verbose_name="sender preset",
                    ),
                ),
                (
                    "receiver_preset",
                    models.CharField(
                        blank=True,
                        choices=PRESET_CHOICES,
                        max_length=20,
                        null=True,
                        verbose_name="receiver preset",
                    ),
                ),
                (
                    "shared_data",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Last computed facets: {sender: {...}, receiver: {...}}",
                        verbose_name="shared data",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at"),
                ),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("approved_at", models.DateTimeField(blank=True, null=True, verbose_name="approved at")),
                (
                    "sender",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="linkman_sent_contacts",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="sender",
                    ),
                ),
                (
                    "receiver",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="linkman_received_contacts",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="receiver",
                    ),
                ),
            ],
            options={
                "verbose_name": "contact",
                "verbose_name_plural": "contacts",
                "db_table": "linkman_contact",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["sender", "status"], name="linkman_con_sender__8a1f3e_idx"),
                    models.Index(fields=["receiver", "status"], name="linkman_con_receive_5c2d9b_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("sender", "receiver"),
                        name="linkman_unique_contact_direction",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("sender", models.F("receiver")), _negated=True),
                        name="linkman_contact_not_self",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="QrToken",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("token", models.CharField(max_length=128, unique=True, verbose_name="token")),
                (
                    "preset_name",
                    models.CharField(choices=PRESET_CHOICES, max_length=20, verbose_name="preset"),
                ),
                ("consumed_at", models.DateTimeField(blank=True, null=True, verbose_name="consumed at")),
                ("expires_at", models.DateTimeField(db_index=True, verbose_name="expires at")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="linkman_qr_tokens",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="owner",
                    ),
                ),
                (
                    "consumed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="linkman_redeemed_qr_tokens",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="consumed by",
                    ),
                ),
            ],
            options={
                "verbose_name": "QR token",
                "verbose_name_plural": "QR tokens",
                "db_table": "linkman_qr_token",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["owner", "-created_at"], name="linkman_qr__owner_i_3e7b21_idx"),
                ],
            },
        ),
    ]
