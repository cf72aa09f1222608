"""Smoke tests for the sld command line and the file pipeline."""
import json

import pytest

from config import LayoutConfig, LayoutStyle
from sld import convert_file, infer_format, main, render_document, build_diagram


class TestPipeline:
    def test_infer_format(self):
        assert infer_format("out/diagram.svg") == "svg"
        assert infer_format("diagram.SVG") == "svg"
        assert infer_format("diagram.html") == "html"
        assert infer_format("diagram") == "html"

    def test_convert_file_returns_stats(self, system_file, tmp_path):
        out = tmp_path / "diagram.html"
        stats = convert_file(system_file, out)
        assert stats.total_panels == 3
        assert out.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_render_document_formats(self, three_panel_system):
        result = build_diagram(three_panel_system)
        assert "<svg" in render_document(result, "svg")
        assert "<!DOCTYPE html>" in render_document(result, "html")
        assert "<canvas" in render_document(result, "canvas")

    def test_build_diagram_grid(self, mixed_system):
        result = build_diagram(mixed_system, LayoutConfig(layout_style=LayoutStyle.GRID))
        assert result.style == LayoutStyle.GRID


class TestConvertCommand:
    def test_html(self, system_file, tmp_path, capsys):
        out = tmp_path / "diagram.html"
        assert main(["convert", str(system_file), str(out)]) == 0
        page = out.read_text(encoding="utf-8")
        assert "<svg" in page
        assert "Electrical Single Line Diagram" in page
        printed = capsys.readouterr().out
        assert "Inverters: 1" in printed
        assert "Total Panels: 3" in printed

    def test_svg_from_suffix(self, system_file, tmp_path):
        out = tmp_path / "diagram.svg"
        assert main(["convert", str(system_file), str(out)]) == 0
        assert "<!DOCTYPE html>" not in out.read_text(encoding="utf-8")
        assert "<svg" in out.read_text(encoding="utf-8")

    def test_canvas(self, system_file, tmp_path):
        out = tmp_path / "diagram.html"
        assert main(["convert", str(system_file), str(out), "--format", "canvas"]) == 0
        assert "<canvas" in out.read_text(encoding="utf-8")

    def test_options(self, system_file, tmp_path):
        out = tmp_path / "diagram.svg"
        args = [
            "convert",
            str(system_file),
            str(out),
            "--style",
            "grid",
            "--title",
            "Depot Roof",
            "--width",
            "1500",
            "--height",
            "900",
            "--font-size",
            "14",
        ]
        assert main(args) == 0
        svg = out.read_text(encoding="utf-8")
        assert "Depot Roof" in svg
        assert 'id="busbar_main"' in svg
        assert 'width="1500"' in svg

    def test_config_file(self, system_file, tmp_path):
        config = tmp_path / "layout.yaml"
        config.write_text("layout_style: grid\n", encoding="utf-8")
        out = tmp_path / "diagram.svg"
        assert main(["convert", str(system_file), str(out), "--config", str(config)]) == 0
        assert 'id="busbar_main"' in out.read_text(encoding="utf-8")

    def test_bad_style_rejected_by_parser(self, system_file, tmp_path):
        with pytest.raises(SystemExit):
            main(["convert", str(system_file), str(tmp_path / "x.svg"), "--style", "zigzag"])


class TestErrors:
    def test_missing_input(self, tmp_path, capsys):
        assert main(["convert", str(tmp_path / "none.json"), str(tmp_path / "x.svg")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_bad_json(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        assert main(["stats", str(path)]) == 1
        err = capsys.readouterr().err
        assert "could not parse" in err
        assert len(err.strip().splitlines()) == 1

    def test_bad_shape(self, tmp_path, capsys):
        path = tmp_path / "system.json"
        path.write_text(json.dumps({"inverters": [{"isolators": 3}]}), encoding="utf-8")
        assert main(["check", str(path)]) == 1
        assert "inverters[0].isolators" in capsys.readouterr().err

    def test_bad_config(self, system_file, tmp_path, capsys):
        config = tmp_path / "layout.yaml"
        config.write_text("margin: -1\n", encoding="utf-8")
        assert main(["check", str(system_file), "--config", str(config)]) == 1
        assert "margin" in capsys.readouterr().err

    def test_non_finite_config(self, system_file, tmp_path, capsys):
        config = tmp_path / "layout.yaml"
        config.write_text("inverter_spacing: .nan\n1: 2\n", encoding="utf-8")
        assert main(["check", str(system_file), "--config", str(config)]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error:")
        assert len(err.strip().splitlines()) == 1

    def test_input_not_utf8(self, tmp_path, capsys):
        path = tmp_path / "system.json"
        path.write_bytes(b'{"inverters": []}\xff\xfe')
        assert main(["stats", str(path)]) == 1
        err = capsys.readouterr().err
        assert "could not parse" in err
        assert len(err.strip().splitlines()) == 1

    def test_no_output_on_failure(self, tmp_path):
        path = tmp_path / "system.json"
        path.write_text("[]", encoding="utf-8")
        out = tmp_path / "diagram.svg"
        assert main(["convert", str(path), str(out)]) == 1
        assert not out.exists()


class TestStatsAndCheck:
    def test_stats(self, system_file, capsys):
        assert main(["stats", str(system_file)]) == 0
        printed = capsys.readouterr().out
        assert "Isolators: 1" in printed
        assert "PV Strings: 1" in printed
        assert "Total Panels: 3" in printed

    def test_check(self, system_file, capsys):
        assert main(["check", str(system_file), "--style", "grid"]) == 0
        assert "Layout OK" in capsys.readouterr().out

    def test_yaml_input(self, tmp_path, three_panel_data, capsys):
        path = tmp_path / "system.yml"
        path.write_text(json.dumps(three_panel_data), encoding="utf-8")
        assert main(["stats", str(path)]) == 0
        assert "Total Panels: 3" in capsys.readouterr().out
