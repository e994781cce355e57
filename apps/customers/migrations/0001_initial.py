from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Customer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="Customer's display name.", max_length=150)),
                ('mobile', models.CharField(help_text="Customer's mobile number (unique per shop).", max_length=15, unique=True)),
                ('address', models.TextField(blank=True, default='')),
                ('category', models.CharField(default='Regular', help_text='Free-form customer grouping, e.g. Regular or Wholesale.', max_length=50)),
                ('notes', models.TextField(blank=True, default='')),
                ('is_active', models.BooleanField(default=True)),
                ('total_due', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Outstanding amount the customer owes the shop.', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('last_transaction_date', models.DateField(blank=True, help_text='Date of the most recently recorded transaction.', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'customers',
                'ordering': ['name', 'id'],
            },
        ),
    ]
