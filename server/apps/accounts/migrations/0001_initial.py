from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='UserPreferences',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('username', models.CharField(help_text='Username from the verified identity token', max_length=128, unique=True)),
                ('delete_protection', models.BooleanField(default=True, help_text='Ask for confirmation before deleting objects')),
                ('view_mode', models.BooleanField(default=True, help_text='Open files in the preview panel instead of downloading')),
                ('items_per_page', models.PositiveSmallIntegerField(default=20, help_text='Listing page size')),
                ('default_view', models.CharField(choices=[('list', 'List'), ('grid', 'Grid'), ('preview', 'Preview')], default='list', max_length=16)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'User Preferences',
                'verbose_name_plural': 'User Preferences',
                'ordering': ['username'],
                'constraints': [models.CheckConstraint(condition=models.Q(('items_per_page__gte', 1)), name='preferences_items_per_page_positive')],
            },
        ),
    ]
