from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CalendarEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("summary", models.CharField(blank=True, max_length=255)),
                ("description", models.TextField(blank=True)),
                ("location", models.CharField(blank=True, max_length=255)),
                ("start_time", models.DateTimeField(db_index=True)),
                ("end_time", models.DateTimeField(db_index=True)),
                ("status", models.CharField(
                    choices=[("CONFIRMED", "Confirmed"), ("CANCELLED", "Cancelled")],
                    default="CONFIRMED",
                    help_text="Event lifecycle status",
                    max_length=10,
                )),
                ("idempotency_key", models.CharField(blank=True, db_index=True, max_length=255)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("cancellation_time", models.DateTimeField(
                    blank=True,
                    help_text="When the event was cancelled (if applicable).",
                    null=True,
                )),
            ],
            options={
                "ordering": ["start_time"],
            },
        ),
    ]
