# pylint: skip-file

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    dependencies = [
        ('assessment', '0001_initial'),
        ('workflow', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PeerReview',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reviewer_id', models.CharField(db_index=True, max_length=40)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('is_completed', models.BooleanField(db_index=True, default=False)),
                ('total_score', models.FloatField(blank=True, null=True)),
                ('overall_feedback', models.TextField(blank=True, default='', max_length=10000)),
                ('strengths_note', models.TextField(blank=True, default='', max_length=10000)),
                ('improvements_note', models.TextField(blank=True, default='', max_length=10000)),
                ('helpfulness_rating', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='received_reviews', to='workflow.submission')),
            ],
            options={
                'ordering': ['created_at', 'id'],
                'unique_together': {('submission', 'reviewer_id')},
            },
        ),
        migrations.CreateModel(
            name='CriteriaScore',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('score', models.FloatField()),
                ('feedback', models.TextField(blank=True, default='')),
                ('criterion', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to='assessment.criterion')),
                ('review', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='criteria_scores', to='assessment.peerreview')),
            ],
            options={
                'ordering': ['id'],
                'unique_together': {('review', 'criterion')},
            },
        ),
    ]
