from django.db import migrations, models
import listings.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Listing',
            fields=[
                ('id', models.CharField(default=listings.models.generate_listing_id, editable=False, max_length=50, primary_key=True, serialize=False)),
                ('owner_id', models.CharField(blank=True, max_length=100, null=True)),
                ('title', models.CharField(max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'listings',
                'indexes': [
                    models.Index(fields=['owner_id'], name='listings_owner_i_3c1e2a_idx'),
                ],
            },
        ),
    ]
