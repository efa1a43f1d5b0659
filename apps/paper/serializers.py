from django.conf import settings
from rest_framework import serializers

from apps.account.serializers import AuthorSerializer
from core.supabase_utils import PDF_EXTENSIONS, upload_file_to_supabase, validate_upload

from .models import Department, Paper, PaperType, semester_validator

ALL = "All"


class PaperSerializer(serializers.ModelSerializer):
    created_by = AuthorSerializer(read_only=True)
    year = serializers.CharField(read_only=True)

    class Meta:
        model = Paper
        fields = [
            'id', 'course_name', 'course_code', 'professor_name',
            'semester', 'year', 'department', 'paper_type',
            'paper_pdf_url', 'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PaperCreateSerializer(serializers.ModelSerializer):
    """
    Create a paper from either
    - paper_pdf_url: a PDF that was already uploaded, or
    - pdf_file: a PDF sent as multipart/form-data (uploaded to Supabase here)
    """
    course_name = serializers.CharField(min_length=2, max_length=200)
    course_code = serializers.CharField(min_length=1, max_length=50)
    professor_name = serializers.CharField(min_length=2, max_length=200)
    semester = serializers.CharField(min_length=1, max_length=20, validators=[semester_validator])
    department = serializers.ChoiceField(choices=Department.choices)
    paper_type = serializers.ChoiceField(choices=PaperType.choices)
    paper_pdf_url = serializers.URLField(max_length=500, required=False, allow_blank=True)
    pdf_file = serializers.FileField(write_only=True, required=False)

    class Meta:
        model = Paper
        fields = [
            'course_name', 'course_code', 'professor_name', 'semester',
            'department', 'paper_type', 'paper_pdf_url', 'pdf_file',
        ]

    def validate_pdf_file(self, value):
        return validate_upload(value, PDF_EXTENSIONS, settings.PAPER_PDF_MAX_SIZE)

    def validate(self, data):
        if not data.get('paper_pdf_url') and not data.get('pdf_file'):
            raise serializers.ValidationError("Paper PDF is required.")
        return data

    def create(self, validated_data):
        pdf_file = validated_data.pop('pdf_file', None)
        if pdf_file is not None:
            pdf_url = upload_file_to_supabase(pdf_file, "papers")
            if not pdf_url:
                raise serializers.ValidationError("PDF upload failed. Please try again.")
            validated_data['paper_pdf_url'] = pdf_url

        return Paper.objects.create(
            created_by=self.context['request'].user,
            **validated_data
        )


class PaperSearchSerializer(serializers.Serializer):
    """
    Query parameters of GET /papers/
    "All" (or an empty value) on a filter means no filtering.
    """
    search = serializers.CharField(required=False, allow_blank=True, max_length=200)
    department = serializers.CharField(required=False, allow_blank=True)
    semester = serializers.CharField(required=False, allow_blank=True)
    paper_type = serializers.CharField(required=False, allow_blank=True)

    def validate(self, data):
        cleaned = {}
        for key, value in data.items():
            value = value.strip()
            if value and value != ALL:
                cleaned[key] = value
        return cleaned
