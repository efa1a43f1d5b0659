from django.contrib.auth.models import User
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models


class Department(models.TextChoices):
    COMPUTER_SCIENCE = 'computer-science', 'Computer Science'
    MATHEMATICS = 'mathematics', 'Mathematics'
    PHYSICS = 'physics', 'Physics'
    CHEMISTRY = 'chemistry', 'Chemistry'
    BIOLOGY = 'biology', 'Biology'
    ENGINEERING = 'engineering', 'Engineering'
    BUSINESS = 'business', 'Business'
    ECONOMICS = 'economics', 'Economics'
    PSYCHOLOGY = 'psychology', 'Psychology'
    HISTORY = 'history', 'History'
    ENGLISH = 'english', 'English'
    OTHER = 'other', 'Other'


class PaperType(models.TextChoices):
    MIDTERM = 'midterm', 'Midterm'
    FINAL = 'final', 'Final'


# Calendar order within a year
SEMESTER_SEASONS = ('spring', 'summer', 'fall')

semester_validator = RegexValidator(
    regex=rf'^({"|".join(SEMESTER_SEASONS)})-\d{{4}}$',
    message="Semester must look like 'fall-2024'.",
)


class Paper(models.Model):
    """
    Past exam paper: course metadata plus a link to the uploaded PDF
    - semester: "<season>-<year>", e.g. "fall-2024"
    - paper_pdf_url: Supabase Storage public URL (or an already uploaded file URL)
    """
    course_name = models.CharField(max_length=200, validators=[MinLengthValidator(2)])
    course_code = models.CharField(max_length=50)
    professor_name = models.CharField(max_length=200, validators=[MinLengthValidator(2)])
    semester = models.CharField(max_length=20, validators=[semester_validator])
    department = models.CharField(max_length=50, choices=Department.choices)
    paper_type = models.CharField(max_length=20, choices=PaperType.choices)
    paper_pdf_url = models.URLField(max_length=500)
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='papers')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['department'], name='paper_department_idx'),
            models.Index(fields=['semester'], name='paper_semester_idx'),
            models.Index(fields=['created_at'], name='paper_created_at_idx'),
        ]

    def __str__(self):
        return f"{self.course_code} {self.course_name} ({self.semester}, {self.paper_type})"

    @property
    def year(self):
        return self.semester.split('-')[-1]
