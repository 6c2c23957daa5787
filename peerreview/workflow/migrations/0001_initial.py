# pylint: skip-file

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import model_utils.fields


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('assessment', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Submission',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created', model_utils.fields.AutoCreatedField(default=django.utils.timezone.now, editable=False, verbose_name='created')),
                ('modified', model_utils.fields.AutoLastModifiedField(default=django.utils.timezone.now, editable=False, verbose_name='modified')),
                ('status', model_utils.fields.StatusField(choices=[('draft', 'draft'), ('submitted', 'submitted'), ('in_review', 'in_review'), ('reviewed', 'reviewed'), ('approved', 'approved')], default='draft', max_length=100, no_check_for_status=True, verbose_name='status')),
                ('status_changed', model_utils.fields.MonitorField(default=django.utils.timezone.now, monitor='status', verbose_name='status changed')),
                ('student_id', models.CharField(db_index=True, max_length=40)),
                ('content', models.TextField(blank=True, default='')),
                ('file_url', models.CharField(blank=True, default='', max_length=1024)),
                ('file_name', models.CharField(blank=True, default='', max_length=255)),
                ('file_size', models.PositiveIntegerField(blank=True, null=True)),
                ('self_assessment', models.TextField(blank=True, default='')),
                ('submitted_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('peer_score', models.FloatField(blank=True, null=True)),
                ('instructor_score', models.FloatField(blank=True, null=True)),
                ('instructor_feedback', models.TextField(blank=True, default='')),
                ('final_score', models.FloatField(blank=True, null=True)),
                ('graded_at', models.DateTimeField(blank=True, null=True)),
                ('assignment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='submissions', to='assessment.assignment')),
            ],
            options={
                'ordering': ['-submitted_at', '-id'],
                'unique_together': {('assignment', 'student_id')},
            },
        ),
    ]
