# Message links carry the URL-encoded text and have no fixed length

from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('messaging', '0002_seed_templates'),
    ]

    operations = [
        migrations.AlterField(
            model_name='messagelog',
            name='link',
            field=models.TextField(blank=True, default=''),
        ),
    ]
