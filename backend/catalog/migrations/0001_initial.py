import django.core.validators
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Service',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(choices=[('SEO', 'SEO'), ('SOCIAL_MEDIA', 'Social Media'), ('CONTENT', 'Content'), ('ADVERTISING', 'Advertising'), ('DESIGN', 'Design'), ('DEVELOPMENT', 'Development'), ('CONSULTING', 'Consulting'), ('OTHER', 'Other')], default='OTHER', max_length=20)),
                ('default_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('currency', models.CharField(default='INR', max_length=3)),
                ('unit', models.CharField(default='Hour', max_length=50)),
                ('sac_code', models.CharField(blank=True, help_text='SAC code printed on GST invoices', max_length=20)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('INACTIVE', 'Inactive')], default='ACTIVE', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'services',
                'ordering': ['category', 'name'],
                'indexes': [models.Index(fields=['category', 'status'], name='service_category_status_idx')],
            },
        ),
    ]
