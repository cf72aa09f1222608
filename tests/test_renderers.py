"""Tests for the SVG and canvas renderers."""
import pytest

from canvas_renderer import CANVAS_ID, CanvasRenderer
from renderer import DEFAULT_TITLE, Renderer, html_page
from svg_renderer import SvgRenderer


class TestSvgRenderer:
    @pytest.fixture(scope="class")
    def svg(self, three_panel_layout):
        return SvgRenderer().render(three_panel_layout)

    def test_document(self, svg):
        assert "<svg" in svg
        assert 'width="1200"' in svg
        assert DEFAULT_TITLE in svg

    def test_component_groups(self, svg, three_panel_layout):
        for component in three_panel_layout.components:
            assert f'id="{component.id}"' in svg

    def test_labels(self, svg):
        assert "Inverter 1" in svg
        assert "DC Isolator 1-1" in svg
        assert "X (3 panels)" in svg

    def test_wire_colours(self, svg):
        assert "#dc2626" in svg
        assert "#000000" in svg

    def test_legend(self, svg, grid_layout):
        assert "Positive (Red)" in svg
        assert "Negative (Black)" in svg
        assert "Busbar" not in svg
        assert "Busbar" in SvgRenderer().render(grid_layout)

    def test_grid(self, grid_layout):
        svg = SvgRenderer().render(grid_layout)
        assert 'id="busbar_main"' in svg
        assert "Main Bus" in svg
        assert "PV STRING" in svg
        assert "#1f2937" in svg

    def test_deterministic(self, daisy_layout):
        assert SvgRenderer().render(daisy_layout) == SvgRenderer().render(daisy_layout)

    def test_html(self, three_panel_layout):
        page = SvgRenderer().render_html(three_panel_layout, "Roof & Carport")
        assert page.startswith("<!DOCTYPE html>")
        assert "<title>Roof &amp; Carport</title>" in page
        assert "<svg" in page
        assert "<?xml" not in page
        assert "%%" not in page


class TestCanvasRenderer:
    @pytest.fixture(scope="class")
    def script(self, three_panel_layout):
        return CanvasRenderer().render(three_panel_layout)

    def test_script(self, script, three_panel_layout):
        assert 'getContext("2d")' in script
        for component in three_panel_layout.components:
            assert f"// {component.id}" in script

    def test_symbols_and_labels(self, script):
        assert script.count("inverter(") == 2  # definition and call
        assert script.count("pvPanel(") == 4
        assert '"X (3 panels)"' in script
        assert '"Inverter 1"' in script

    def test_wires(self, script):
        assert script.count("polyline([[") >= 6
        assert '"#dc2626"' in script

    def test_html(self, three_panel_layout):
        page = CanvasRenderer().render_html(three_panel_layout)
        assert f'<canvas id="{CANVAS_ID}" width="1200" height="800"></canvas>' in page
        assert "<script>" in page
        assert "<svg" not in page

    def test_script_cannot_close_tag(self, three_panel_layout):
        page = CanvasRenderer().render_html(three_panel_layout, "</script><b>")
        assert page.count("</script>") == 1
        assert "<\\/script>" in page

    def test_grid(self, grid_layout):
        script = CanvasRenderer().render(grid_layout)
        assert "busbar(" in script
        assert '"PV STRING"' in script
        assert '"Busbar"' in script


class TestBase:
    def test_render_not_implemented(self, three_panel_layout):
        with pytest.raises(NotImplementedError):
            Renderer().render(three_panel_layout)

    def test_html_page(self):
        page = html_page("A <b>", "<p>diagram</p>")
        assert "<h1>A &lt;b&gt;</h1>" in page
        assert "<p>diagram</p>" in page
