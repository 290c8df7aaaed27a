import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=100)),
                ("email", models.EmailField(max_length=255, unique=True)),
                ("cpf", models.CharField(max_length=11, unique=True)),
                ("phone", models.CharField(blank=True, default="", max_length=15)),
                ("birth_date", models.DateField(blank=True, null=True)),
                ("password", models.CharField(max_length=128)),
            ],
            options={
                "db_table": "customers",
                "ordering": ["name"],
            },
        ),
    ]
