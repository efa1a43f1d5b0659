"""
Tests for apps/paper: contribute, fetch, search and filter papers.
"""
from django.core.files.uploadedfile import SimpleUploadedFile

import pytest
from apps.paper.models import Paper

pytestmark = pytest.mark.django_db

PDF_URL = "https://files.example.edu/papers/cs101-final.pdf"


def make_paper(user, **overrides):
    fields = {
        "course_name": "Intro to Programming",
        "course_code": "CS101",
        "professor_name": "Grace Hopper",
        "semester": "fall-2024",
        "department": "computer-science",
        "paper_type": "final",
        "paper_pdf_url": PDF_URL,
        "created_by": user,
    }
    fields.update(overrides)
    return Paper.objects.create(**fields)


def payload(**overrides):
    data = {
        "course_name": "Linear Algebra",
        "course_code": "MATH201",
        "professor_name": "Emmy Noether",
        "semester": "spring-2024",
        "department": "mathematics",
        "paper_type": "midterm",
        "paper_pdf_url": PDF_URL,
    }
    data.update(overrides)
    return data


class TestCreatePaper:

    def test_create_with_url(self, auth_client, user):
        response = auth_client.post("/papers/", payload(), format="json")

        assert response.status_code == 201
        assert response.data["course_code"] == "MATH201"
        assert response.data["year"] == "2024"
        assert response.data["created_by"]["id"] == user.id
        assert response.data["created_by"]["name"] == "Alice"
        assert Paper.objects.get(id=response.data["id"]).paper_pdf_url == PDF_URL

    def test_create_with_pdf_upload(self, auth_client, supabase_client):
        data = payload()
        data.pop("paper_pdf_url")
        data["pdf_file"] = SimpleUploadedFile("exam.pdf", b"%PDF-1.4 test", content_type="application/pdf")

        response = auth_client.post("/papers/", data, format="multipart")

        assert response.status_code == 201
        assert "/papers/" in response.data["paper_pdf_url"]
        assert response.data["paper_pdf_url"].endswith(".pdf")
        supabase_client.storage.from_.return_value.upload.assert_called_once()

    def test_create_rejects_non_pdf_upload(self, auth_client):
        data = payload()
        data.pop("paper_pdf_url")
        data["pdf_file"] = SimpleUploadedFile("exam.docx", b"PK..", content_type="application/msword")

        response = auth_client.post("/papers/", data, format="multipart")

        assert response.status_code == 400
        assert response.data["error"].startswith("Unsupported file format.")

    def test_create_requires_pdf(self, auth_client):
        data = payload()
        data.pop("paper_pdf_url")

        response = auth_client.post("/papers/", data, format="json")

        assert response.status_code == 400
        assert response.data == {"error": "Paper PDF is required."}

    @pytest.mark.parametrize("field, value", [
        ("course_name", "A"),
        ("course_code", ""),
        ("professor_name", "X"),
        ("semester", "autumn-24"),
        ("department", "astrology"),
        ("paper_type", "quiz"),
    ])
    def test_create_validates_fields(self, auth_client, field, value):
        response = auth_client.post("/papers/", payload(**{field: value}), format="json")
        assert response.status_code == 400
        assert not Paper.objects.exists()

    def test_create_requires_login(self, api_client, db):
        response = api_client.post("/papers/", payload(), format="json")
        assert response.status_code == 401


class TestGetPaper:

    def test_get_by_id(self, api_client, user):
        paper = make_paper(user)

        response = api_client.get(f"/papers/{paper.id}/")

        assert response.status_code == 200
        assert response.data["course_name"] == "Intro to Programming"

    def test_get_missing(self, api_client, db):
        response = api_client.get("/papers/999/")
        assert response.status_code == 404
        assert "error" in response.data


class TestSearchPapers:

    @pytest.fixture
    def papers(self, user):
        return [
            make_paper(user, course_name="Intro to Programming", course_code="CS101",
                       professor_name="Grace Hopper", semester="fall-2023", paper_type="midterm"),
            make_paper(user, course_name="Data Structures", course_code="CS201",
                       professor_name="Donald Knuth", semester="fall-2024", paper_type="final"),
            make_paper(user, course_name="Quantum Mechanics", course_code="PHYS301",
                       professor_name="Richard Feynman", semester="spring-2024",
                       department="physics", paper_type="final"),
        ]

    def result_codes(self, response):
        return [paper["course_code"] for paper in response.data["results"]]

    def test_get_all_newest_first(self, api_client, papers):
        response = api_client.get("/papers/")

        assert response.status_code == 200
        assert response.data["count"] == 3
        assert self.result_codes(response) == ["PHYS301", "CS201", "CS101"]

    @pytest.mark.parametrize("term, expected", [
        ("structures", ["CS201"]),
        ("cs", ["PHYS301", "CS201", "CS101"]),
        ("knuth", ["CS201"]),
        ("phys3", ["PHYS301"]),
        ("nothing-matches", []),
    ])
    def test_search_term_matches_name_code_or_professor(self, api_client, papers, term, expected):
        response = api_client.get("/papers/", {"search": term})
        assert self.result_codes(response) == expected

    def test_filters_are_combined(self, api_client, papers):
        response = api_client.get(
            "/papers/", {"department": "computer-science", "paper_type": "final"}
        )
        assert self.result_codes(response) == ["CS201"]

    def test_search_and_filter(self, api_client, papers):
        response = api_client.get("/papers/", {"search": "cs", "semester": "fall-2023"})
        assert self.result_codes(response) == ["CS101"]

    def test_all_means_no_filter(self, api_client, papers):
        response = api_client.get(
            "/papers/", {"department": "All", "semester": "All", "paper_type": "All"}
        )
        assert response.data["count"] == 3

    def test_limit_and_offset(self, api_client, papers):
        response = api_client.get("/papers/", {"limit": 1, "offset": 1})

        assert response.data["count"] == 3
        assert self.result_codes(response) == ["CS201"]

    @pytest.mark.parametrize("params, message", [
        ({"limit": 0}, "limit must be between 1 and 100."),
        ({"limit": 500}, "limit must be between 1 and 100."),
        ({"limit": "abc"}, "limit must be an integer."),
        ({"offset": -1}, "offset cannot be negative."),
        ({"offset": "x"}, "offset must be an integer."),
    ])
    def test_invalid_limit_or_offset(self, api_client, papers, params, message):
        response = api_client.get("/papers/", params)

        assert response.status_code == 400
        assert response.data == {"error": message}

    def test_limit_bounds_accepted(self, api_client, papers):
        assert api_client.get("/papers/", {"limit": 100}).status_code == 200
        assert self.result_codes(api_client.get("/papers/", {"limit": 1})) == ["PHYS301"]

    def test_filter_options(self, api_client, papers):
        response = api_client.get("/papers/filters/")

        assert response.status_code == 200
        assert response.data["departments"][0] == "All"
        assert "computer-science" in response.data["departments"]
        assert response.data["paper_types"] == ["All", "midterm", "final"]
        assert response.data["semesters"] == ["All", "fall-2024", "spring-2024", "fall-2023"]
