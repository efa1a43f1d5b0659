from django.contrib import admin
from django.utils.html import format_html

from .models import Paper


@admin.register(Paper)
class PaperAdmin(admin.ModelAdmin):
    list_display = ('id', 'course_code', 'course_name', 'professor_name', 'semester', 'paper_type', 'pdf_link', 'created_at')
    list_display_links = ('id', 'course_code')
    list_filter = ('department', 'paper_type', 'semester')
    search_fields = ('course_name', 'course_code', 'professor_name', 'created_by__email')
    readonly_fields = ('created_by', 'created_at', 'updated_at')

    def pdf_link(self, obj):
        return format_html('<a href="{}" target="_blank">PDF</a>', obj.paper_pdf_url)
    pdf_link.short_description = "PDF"
