"""Endpoint tests for the use case document API."""

import io

import pytest
from docx import Document
from fastapi.testclient import TestClient

from app.api.deps import get_orchestrator
from app.api.exports import content_disposition
from app.core.config import get_settings
from app.core.file_text import PPT_HINT
from app.main import app
from tests.fakes.fake_providers import ALL_PROVIDERS, answering, build_fake_orchestrator, failing
from tests.fixtures_use_cases import API_FORM, ENTITY_FORM, form_data

client = TestClient(app)

LONG_DESCRIPTION = " ".join(["proveedores"] * 60)
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@pytest.fixture
def use_orchestrator():
    """Swap the process orchestrator for one over fake providers."""

    def install(providers):
        orchestrator = build_fake_orchestrator(providers)
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        return orchestrator

    yield install
    app.dependency_overrides.pop(get_orchestrator, None)


@pytest.fixture
def all_failing(use_orchestrator):
    providers = [failing(p) for p in ALL_PROVIDERS]
    use_orchestrator(providers)
    return providers


class TestGenerateUseCase:
    def test_demo_generation_is_stored(self, use_orchestrator):
        orchestrator = use_orchestrator([answering("copilot", "<h1>no</h1>")])

        response = client.post("/api/use-cases/generate", json=ENTITY_FORM)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert "FLUJO PRINCIPAL DE EVENTOS" in data["content"]
        assert data["useCase"]["generatedContent"] == data["content"]
        assert data["useCase"]["useCaseName"] == "Gestionar Proveedores"
        assert orchestrator.registry.get("copilot").calls == 0

        listed = client.get("/api/use-cases").json()
        assert [r["id"] for r in listed] == [data["useCase"]["id"]]

    def test_provider_generation(self, use_orchestrator):
        use_orchestrator([answering("claude", "<h1>Gestionar Proveedores</h1>")])

        response = client.post(
            "/api/use-cases/generate",
            json=form_data(ENTITY_FORM, aiModel="claude", description=LONG_DESCRIPTION),
        )

        assert response.status_code == 200
        assert response.json()["content"] == "<h1>Gestionar Proveedores</h1>"
        assert response.json()["expandedDescription"] is None

    def test_invalid_form_is_rejected(self, use_orchestrator):
        use_orchestrator([])

        response = client.post(
            "/api/use-cases/generate", json=form_data(ENTITY_FORM, useCaseName="Proveedores")
        )

        assert response.status_code == 422
        assert client.get("/api/use-cases").json() == []

    def test_every_provider_failing(self, all_failing):
        response = client.post(
            "/api/use-cases/generate",
            json=form_data(ENTITY_FORM, aiModel="openai", description=LONG_DESCRIPTION),
        )

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["message"].startswith("No se pudo generar el contenido")
        assert [a["provider"] for a in data["attempts"]] == [
            "openai",
            "copilot",
            "gemini",
            "claude",
            "grok",
        ]
        assert client.get("/api/use-cases").json() == []


class TestUseCaseRecords:
    def _create(self) -> dict:
        return client.post("/api/use-cases/generate", json=ENTITY_FORM).json()["useCase"]

    def test_get_and_missing(self, use_orchestrator):
        use_orchestrator([])
        record = self._create()

        assert client.get(f"/api/use-cases/{record['id']}").json()["id"] == record["id"]
        missing = client.get("/api/use-cases/no-existe")
        assert missing.status_code == 404
        assert missing.json()["detail"] == "Caso de uso no encontrado"

    def test_delete(self, use_orchestrator):
        use_orchestrator([])
        record = self._create()

        assert client.delete(f"/api/use-cases/{record['id']}").status_code == 204
        assert client.get(f"/api/use-cases/{record['id']}").status_code == 404
        assert client.delete(f"/api/use-cases/{record['id']}").status_code == 404

    def test_demo_edit(self, use_orchestrator):
        use_orchestrator([])
        record = self._create()

        response = client.post(
            f"/api/use-cases/{record['id']}/edit",
            json={"instructions": "Agregar regla de CUIT", "aiModel": "demo"},
        )

        assert response.status_code == 200
        content = response.json()["content"]
        assert content.startswith(record["generatedContent"])
        assert "Agregar regla de CUIT" in content
        assert client.get(f"/api/use-cases/{record['id']}").json()["generatedContent"] == content

    def test_edit_missing(self, use_orchestrator):
        use_orchestrator([])
        response = client.post("/api/use-cases/no-existe/edit", json={"instructions": "x"})
        assert response.status_code == 404

    def test_edit_failure(self, all_failing):
        record = self._create()

        response = client.post(
            f"/api/use-cases/{record['id']}/edit",
            json={"instructions": "Cambiar", "aiModel": "grok"},
        )

        assert response.status_code == 500
        assert len(response.json()["attempts"]) == 5

    def test_legacy_export_is_gone(self):
        response = client.get("/api/use-cases/cualquiera/export")

        assert response.status_code == 410
        assert response.json()["code"] == "LEGACY_EXPORT_DEPRECATED"


class TestAiAssist:
    def test_requires_name_and_type(self, use_orchestrator):
        use_orchestrator([])
        response = client.post("/api/ai-assist", json={"fieldName": "useCaseName"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Field name and type are required"

    def test_demo_improvement(self, use_orchestrator):
        use_orchestrator([])
        response = client.post(
            "/api/ai-assist",
            json={"fieldName": "Nombre del Caso de Uso", "fieldValue": "proveedores", "fieldType": "text"},
        )

        assert response.status_code == 200
        assert response.json() == {"improvedValue": "Gestionar proveedores"}

    def test_failing_providers_still_answer(self, all_failing):
        response = client.post(
            "/api/ai-assist",
            json={"fieldName": "codigo", "fieldValue": "x", "fieldType": "text", "aiModel": "openai"},
        )

        assert response.status_code == 200
        assert response.json()["improvedValue"] == "CL005"


class TestAnalyzeMinute:
    def test_requires_content(self, use_orchestrator):
        use_orchestrator([])
        response = client.post("/api/analyze-minute", json={"minuteContent": "  "})

        assert response.status_code == 400

    def test_demo_analysis(self, use_orchestrator):
        use_orchestrator([])
        response = client.post(
            "/api/analyze-minute",
            json={"minuteContent": "Reunión con Banco Provincia", "useCaseType": "api"},
        )

        assert response.status_code == 200
        form = response.json()["formData"]
        assert form["useCaseType"] == "api"
        assert form["isAIGenerated"] is True
        assert form["apiEndpoint"] == "/api/v1/consulta-saldo"


class TestIntelligentTests:
    def test_requires_form_data(self, use_orchestrator):
        use_orchestrator([])
        response = client.post("/api/generate-intelligent-tests", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "Form data is required"

    def test_invalid_form_data(self, use_orchestrator):
        use_orchestrator([])
        response = client.post(
            "/api/generate-intelligent-tests", json={"formData": {"useCaseType": "batch"}}
        )

        assert response.status_code == 422

    def test_demo_plan(self, use_orchestrator):
        use_orchestrator([])
        response = client.post("/api/generate-intelligent-tests", json={"formData": API_FORM})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["preconditions"].startswith("1. Usuarios de prueba")
        assert [s["number"] for s in data["testSteps"]] == list(range(1, 7))
        assert data["testSteps"][0]["status"] == "pending"

    def test_generation_failure(self, all_failing):
        response = client.post(
            "/api/generate-intelligent-tests",
            json={"formData": API_FORM, "aiModel": "gemini"},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate intelligent test cases", "success": False}


class TestExportDocx:
    def test_requires_form_data(self):
        response = client.post("/api/export-docx", json={"content": "<p>x</p>"})

        assert response.status_code == 400
        assert "formData is required" in response.json()["detail"]

    def test_invalid_form_data(self):
        response = client.post("/api/export-docx", json={"formData": {"useCaseType": "batch"}})
        assert response.status_code == 422

    def test_document_attachment(self):
        response = client.post(
            "/api/export-docx",
            json={"formData": ENTITY_FORM, "fileName": "PV001GestionarProveedores.docx"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == DOCX_MEDIA_TYPE
        assert response.headers["content-disposition"] == (
            'attachment; filename="PV001GestionarProveedores.docx"'
        )
        assert "no-cache" in response.headers["cache-control"]
        texts = [p.text for p in Document(io.BytesIO(response.content)).paragraphs]
        assert "GESTIONAR PROVEEDORES" in texts

    def test_header_unsafe_file_name(self):
        response = client.post(
            "/api/export-docx",
            json={"formData": ENTITY_FORM, "fileName": 'Mal"nombre\r\nX-Injected: 1'},
        )

        assert response.status_code == 200
        assert "x-injected" not in response.headers
        assert response.headers["content-disposition"].startswith(
            'attachment; filename="Mal_nombre_X-Injected_1.docx"; filename*=UTF-8\'\''
        )

    def test_accented_file_name_keeps_utf8_form(self):
        assert content_disposition("Gestión") == (
            "attachment; filename=\"Gesti_n.docx\"; filename*=UTF-8''Gesti%C3%B3n.docx"
        )

    def test_default_file_name(self):
        response = client.post("/api/export-docx", json={"formData": {"useCaseName": "Borrador"}})

        assert response.status_code == 200
        assert 'filename="caso-de-uso.docx"' in response.headers["content-disposition"]


class TestWireframe:
    def test_search_wireframe(self):
        response = client.post(
            "/api/generate-wireframe",
            json={"type": "search", "title": "Proveedores", "filters": ["CUIT"], "columns": ["ID"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["type"] == "search"
        assert data["imageUrl"].startswith("data:image/png;base64,")

    def test_form_wireframe_with_field_specs(self):
        response = client.post(
            "/api/generate-wireframe",
            json={"type": "form", "fields": [{"name": "cuit", "mandatory": True}, "razonSocial"]},
        )
        assert response.status_code == 200

    def test_unknown_type(self):
        response = client.post("/api/generate-wireframe", json={"type": "grid"})
        assert response.status_code == 422


class TestExtractText:
    def test_text_file(self):
        response = client.post(
            "/api/extract-text", files={"file": ("minuta.txt", "Alta de proveedores".encode(), "text/plain")}
        )

        assert response.status_code == 200
        assert response.json() == {"text": "Alta de proveedores", "filename": "minuta.txt"}

    def test_legacy_ppt(self):
        response = client.post(
            "/api/extract-text",
            files={"file": ("viejo.ppt", b"\xd0\xcf\x11\xe0", "application/vnd.ms-powerpoint")},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == PPT_HINT

    def test_corrupt_docx(self):
        response = client.post(
            "/api/extract-text", files={"file": ("roto.docx", b"no es zip", DOCX_MEDIA_TYPE)}
        )
        assert response.status_code == 500

    def test_file_too_large(self, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_BYTES", "4")
        get_settings.cache_clear()
        try:
            response = client.post(
                "/api/extract-text", files={"file": ("minuta.txt", b"demasiado largo", "text/plain")}
            )
        finally:
            monkeypatch.delenv("MAX_UPLOAD_BYTES")
            get_settings.cache_clear()

        assert response.status_code == 413
