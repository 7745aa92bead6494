from django.db import migrations

SAMPLE_CUSTOMERS = [
    ('cust001', 'John Doe'),
    ('cust002', 'Jane Smith'),
]


def seed_customers(apps, schema_editor):
    Customer = apps.get_model('loans', 'Customer')
    if Customer.objects.exists():
        return
    for customer_id, name in SAMPLE_CUSTOMERS:
        Customer.objects.create(customer_id=customer_id, name=name)


def remove_customers(apps, schema_editor):
    Customer = apps.get_model('loans', 'Customer')
    Customer.objects.filter(
        customer_id__in=[customer_id for customer_id, _ in SAMPLE_CUSTOMERS],
        loans__isnull=True,
    ).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('loans', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_customers, remove_customers),
    ]
