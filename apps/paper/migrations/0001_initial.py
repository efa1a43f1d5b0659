import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Paper',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('course_name', models.CharField(max_length=200, validators=[django.core.validators.MinLengthValidator(2)])),
                ('course_code', models.CharField(max_length=50)),
                ('professor_name', models.CharField(max_length=200, validators=[django.core.validators.MinLengthValidator(2)])),
                ('semester', models.CharField(max_length=20, validators=[django.core.validators.RegexValidator(message="Semester must look like 'fall-2024'.", regex='^(spring|summer|fall)-\\d{4}$')])),
                ('department', models.CharField(choices=[('computer-science', 'Computer Science'), ('mathematics', 'Mathematics'), ('physics', 'Physics'), ('chemistry', 'Chemistry'), ('biology', 'Biology'), ('engineering', 'Engineering'), ('business', 'Business'), ('economics', 'Economics'), ('psychology', 'Psychology'), ('history', 'History'), ('english', 'English'), ('other', 'Other')], max_length=50)),
                ('paper_type', models.CharField(choices=[('midterm', 'Midterm'), ('final', 'Final')], max_length=20)),
                ('paper_pdf_url', models.URLField(max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='papers', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['department'], name='paper_department_idx'),
                    models.Index(fields=['semester'], name='paper_semester_idx'),
                    models.Index(fields=['created_at'], name='paper_created_at_idx'),
                ],
            },
        ),
    ]
