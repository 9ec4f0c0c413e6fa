# Initial migration for Post

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Post",
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
                ("content", models.TextField(verbose_name="content")),
                (
                    "module",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Product area the post belongs to (e.g. updates, jobs)",
                        max_length=50,
                        verbose_name="module",
                    ),
                ),
                (
                    "visibility",
                    models.CharField(
                        choices=[
                            ("public", "Public"),
                            ("followers", "Followers"),
                            ("private", "Private"),
                        ],
                        default="public",
                        max_length=20,
                        verbose_name="visibility",
                    ),
                ),
                (
                    "network_type",
                    models.CharField(
                        choices=[
                            ("personal", "Personal"),
                            ("professional", "Professional"),
                            ("both", "Both"),
                        ],
                        default="both",
                        max_length=20,
                        verbose_name="network",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at"),
                ),
                (
                    "author",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="linkman_posts",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="author",
                    ),
                ),
            ],
            options={
                "verbose_name": "post",
                "verbose_name_plural": "posts",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["author", "-created_at"], name="linkman_fee_author__4b9c0d_idx"),
                ],
            },
        ),
    ]
