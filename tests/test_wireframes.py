"""Tests for wireframe rendering."""

import base64
import io

import pytest
from PIL import Image

from app.core.schemas_use_cases import EntityFieldSpec
from app.core.wireframes import (
    FORM_CANVAS,
    SEARCH_CANVAS,
    render_form_wireframe,
    render_search_wireframe,
    render_wireframe,
)

PREFIX = "data:image/png;base64,"


def _decode(data_uri: str) -> Image.Image:
    assert data_uri.startswith(PREFIX)
    return Image.open(io.BytesIO(base64.b64decode(data_uri[len(PREFIX):])))


class TestSearchWireframe:
    def test_scaled_to_target_width(self):
        image = _decode(render_search_wireframe("Buscar Proveedores", ["CUIT"], ["ID", "CUIT"]))

        assert image.format == "PNG"
        assert image.size == (SEARCH_CANVAS.target_width, 480)

    def test_defaults_and_overflow(self):
        many = [f"Filtro {i}" for i in range(20)]
        image = _decode(render_search_wireframe("", many, many))
        assert image.width == 800


class TestFormWireframe:
    def test_scaled_to_target_width(self):
        fields = [
            EntityFieldSpec(name="razonSocial", mandatory=True),
            EntityFieldSpec(name="fechaAlta", type="date"),
            EntityFieldSpec(name="activo", type="boolean"),
            "observaciones",
        ]
        image = _decode(render_form_wireframe("Proveedor", fields))

        assert image.size == (FORM_CANVAS.target_width, FORM_CANVAS.target_width)

    def test_no_fields(self):
        assert _decode(render_form_wireframe("", [])).width == 600


class TestRenderWireframe:
    def test_dispatch(self):
        assert _decode(render_wireframe("search", "Buscar")).width == 800
        assert _decode(render_wireframe("form", "Alta")).width == 600

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown wireframe type"):
            render_wireframe("grid")
