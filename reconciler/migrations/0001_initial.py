from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ProductSnapshot',
            fields=[
                ('product_id', models.CharField(max_length=100, primary_key=True, serialize=False)),
                ('data', models.JSONField(default=dict)),
                ('data_hash', models.CharField(max_length=64)),
                ('form_hash', models.CharField(blank=True, default='', max_length=64)),
                ('captured_at', models.DateTimeField(auto_now=True)),
            ],
        ),
    ]
