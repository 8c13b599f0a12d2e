from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Trip',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('trip_number', models.CharField(max_length=50, verbose_name='Trip Number')),
                ('truck_name', models.CharField(max_length=100)),
                ('truck_number', models.CharField(max_length=20)),
                ('driver1_name', models.CharField(max_length=100, verbose_name='Driver 1')),
                ('driver2_name', models.CharField(blank=True, max_length=100, null=True, verbose_name='Driver 2')),
                ('loading_point', models.CharField(max_length=150)),
                ('unloading_point', models.CharField(max_length=150)),
                ('start_date', models.DateField()),
                ('unloading_date', models.DateField()),
                ('eway_bill', models.CharField(blank=True, max_length=50, null=True, verbose_name='E-Way Bill')),
                ('lr_number', models.CharField(blank=True, max_length=50, null=True, verbose_name='LR Number')),
                ('starting_km', models.PositiveIntegerField(default=0, verbose_name='Starting KM')),
                ('closing_km', models.PositiveIntegerField(default=0, verbose_name='Closing KM')),
                ('running_km', models.IntegerField(default=0, editable=False, verbose_name='Running KM')),
                ('rent', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Rent (Revenue)')),
                ('loading_halt_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('unloading_halt_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('fastag_charges', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='FASTag Charges')),
                ('def_charges', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='DEF Charges')),
                ('rto_charges', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='RTO Charges')),
                ('police_commission', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('other_expenses_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Other Expenses')),
                ('other_expenses_text', models.TextField(blank=True, null=True, verbose_name='Other Expenses Notes')),
                ('driver_bata_type', models.CharField(choices=[('percentage', 'Percentage of Rent'), ('fixed', 'Fixed Amount')], default='percentage', max_length=20)),
                ('driver_bata_percent', models.DecimalField(blank=True, decimal_places=2, default=Decimal('10.00'), max_digits=5, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Driver Bata %')),
                ('driver_bata_fixed', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Driver Bata (Fixed Amount)')),
                ('agent_name', models.CharField(blank=True, max_length=100, null=True)),
                ('agent_mobile', models.CharField(blank=True, max_length=15, null=True)),
                ('agent_commission_type', models.CharField(choices=[('percentage', 'Percentage of Rent'), ('fixed', 'Fixed Amount')], default='fixed', max_length=20)),
                ('agent_commission_percent', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Agent Commission %')),
                ('agent_commission_fixed', models.DecimalField(blank=True, decimal_places=2, default=Decimal('0.00'), max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Agent Commission (Fixed Amount)')),
                ('diesel_cost', models.DecimalField(decimal_places=6, default=Decimal('0'), editable=False, max_digits=18)),
                ('driver_bata_amount', models.DecimalField(decimal_places=6, default=Decimal('0'), editable=False, max_digits=18)),
                ('agent_commission_amount', models.DecimalField(decimal_places=6, default=Decimal('0'), editable=False, max_digits=18)),
                ('total_expenses', models.DecimalField(decimal_places=6, default=Decimal('0'), editable=False, max_digits=18)),
                ('profit_loss', models.DecimalField(decimal_places=6, default=Decimal('0'), editable=False, max_digits=18, verbose_name='Profit/Loss')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at', '-pk'],
            },
        ),
        migrations.CreateModel(
            name='DieselEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('time', models.TimeField()),
                ('location', models.CharField(max_length=150)),
                ('litres_purchased', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('price_per_litre', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('total_cost', models.DecimalField(decimal_places=6, default=Decimal('0'), editable=False, max_digits=18)),
                ('trip', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='diesel_entries', to='trips.trip')),
            ],
            options={
                'verbose_name_plural': 'diesel entries',
                'ordering': ['date', 'time', 'pk'],
            },
        ),
    ]
