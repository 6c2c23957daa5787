# pylint: skip-file

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import model_utils.fields


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Assignment',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created', model_utils.fields.AutoCreatedField(default=django.utils.timezone.now, editable=False, verbose_name='created')),
                ('modified', model_utils.fields.AutoLastModifiedField(default=django.utils.timezone.now, editable=False, verbose_name='modified')),
                ('status', model_utils.fields.StatusField(choices=[('draft', 'draft'), ('published', 'published'), ('closed', 'closed')], default='draft', max_length=100, no_check_for_status=True, verbose_name='status')),
                ('status_changed', model_utils.fields.MonitorField(default=django.utils.timezone.now, monitor='status', verbose_name='status changed')),
                ('course_id', models.CharField(db_index=True, max_length=255)),
                ('lesson_id', models.CharField(blank=True, max_length=255, null=True)),
                ('instructor_id', models.CharField(db_index=True, max_length=40)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('instructions', models.TextField(blank=True, default='')),
                ('due_date', models.DateTimeField(blank=True, null=True)),
                ('review_due_date', models.DateTimeField(blank=True, null=True)),
                ('max_points', models.PositiveIntegerField(default=100)),
                ('min_word_count', models.PositiveIntegerField(blank=True, null=True)),
                ('max_word_count', models.PositiveIntegerField(blank=True, null=True)),
                ('peer_review_enabled', models.BooleanField(default=True)),
                ('reviews_required', models.PositiveIntegerField(default=3, validators=[django.core.validators.MinValueValidator(1)])),
                ('reviews_per_student', models.PositiveIntegerField(default=3, validators=[django.core.validators.MinValueValidator(1)])),
                ('anonymous_reviews', models.BooleanField(default=True)),
            ],
            options={
                'ordering': ['-created', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Criterion',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('description', models.TextField(blank=True, default='')),
                ('max_score', models.PositiveIntegerField(default=10, validators=[django.core.validators.MinValueValidator(1)])),
                ('weight', models.FloatField(default=1.0)),
                ('order_num', models.PositiveIntegerField()),
                ('assignment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='criteria', to='assessment.assignment')),
            ],
            options={
                'ordering': ['assignment', 'order_num'],
            },
        ),
    ]
