from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Story',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=255, unique=True)),
                ('category', models.CharField(blank=True, default='Feuilleton', max_length=100)),
                ('tag', models.CharField(blank=True, default='', max_length=100)),
                ('date', models.CharField(max_length=64)),
                ('read_time', models.CharField(blank=True, default='', max_length=32)),
                ('excerpt', models.TextField()),
                ('body', models.TextField(blank=True, default='')),
                ('author', models.CharField(blank=True, default='', max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Geschichte',
                'verbose_name_plural': 'Geschichten',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['tag'], name='story_tag_idx'),
                    models.Index(fields=['created_at'], name='story_created_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Comment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('author_name', models.CharField(default='Leser:in', max_length=120)),
                ('body', models.TextField()),
                ('status', models.CharField(choices=[('pending', 'Wartet auf Freigabe'), ('approved', 'Freigegeben'), ('rejected', 'Abgelehnt')], default='approved', max_length=16)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('story', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='comments', to='stories.story')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['story', 'status', 'created_at'], name='comment_story_status_idx'),
                ],
            },
        ),
    ]
