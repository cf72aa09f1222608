"""
Renders a LayoutResult as a script for an HTML <canvas>.

The script is plain JavaScript driving a 2-D context. It draws the same
symbols, wires, labels and legend as the SVG renderer from the same routed
paths, so the two outputs show an identical diagram.
"""

# Standard library imports
import json
import math

# Local application/library specific imports
from config import LayoutStyle
from layout import ComponentKind, LayoutResult, footprint
from renderer import (
    COLOUR_MAP,
    DEFAULT_TITLE,
    LEGEND_ENTRY_WIDTH,
    LEGEND_HEIGHT,
    LEGEND_X,
    TITLE_Y,
    WIRE_WIDTH,
    Renderer,
    label_font_size,
    label_position,
    legend_entries,
)
from routing import route_all

CANVAS_ID = "sld-canvas"

# Symbol helpers shared by every generated script
SCRIPT_PRELUDE = """const canvas = document.getElementById(%%CANVAS_ID%%);
const ctx = canvas.getContext("2d");

function polyline(points, colour, width) {
    ctx.beginPath();
    ctx.moveTo(points[0][0], points[0][1]);
    for (let i = 1; i < points.length; i++) {
        ctx.lineTo(points[i][0], points[i][1]);
    }
    ctx.strokeStyle = colour;
    ctx.lineWidth = width;
    ctx.lineJoin = "miter";
    ctx.stroke();
}

function text(value, x, y, size, anchor, bold) {
    ctx.font = (bold ? "bold " : "") + size + "px Arial, sans-serif";
    ctx.textAlign = anchor === "middle" ? "center" : anchor;
    ctx.fillStyle = "black";
    ctx.fillText(value, x, y);
}

function box(x, y, w, h, fill, lineWidth) {
    ctx.fillStyle = fill;
    ctx.fillRect(x, y, w, h);
    ctx.strokeStyle = "black";
    ctx.lineWidth = lineWidth;
    ctx.strokeRect(x, y, w, h);
}

function inverter(x, y, w, h, lineWidth) {
    box(x, y, w, h, "white", lineWidth);
    text("INVERTER", x + w / 2, y + 20, 10, "middle", true);
    text("DC/AC", x + w / 2, y + 35, 8, "middle", false);
}

function isolator(x, y, w, h, lineWidth) {
    const cx = x + w / 2;
    const cy = y + h / 2;
    const r = w / 5;
    box(x, y, w, h, "white", lineWidth);
    ctx.beginPath();
    ctx.arc(cx, cy, r, 0, 2 * Math.PI);
    ctx.stroke();
    polyline([[cx - r, cy], [cx + r, cy]], "black", lineWidth);
    text("DC ISO", cx, y + h - 5, 8, "middle", false);
}

function pvPanel(x, y, w, h, caption, lineWidth) {
    box(x, y, w, h, "lightblue", lineWidth);
    text(caption, x + w / 2, y + h / 2 + 3, 8, "middle", true);
}

function busbar(x, y, w, h, lineWidth) {
    box(x, y, w, h, "black", lineWidth);
}
"""


def _js(value) -> str:
    """JavaScript literal for a string or number, safe inside a <script> block."""
    if isinstance(value, float):
        value = round(value, 3)
    return json.dumps(value).replace("</", "<\\/")


def _js_points(points) -> str:
    return "[" + ", ".join(f"[{_js(x)}, {_js(y)}]" for x, y in points) + "]"


class CanvasRenderer(Renderer):
    name = "canvas"

    def component_calls(self, result: LayoutResult) -> list[str]:
        lines = []
        caption = "PV STRING" if result.style == LayoutStyle.GRID else "PV"
        for component in result.components:
            size = footprint(component)
            geometry = ", ".join(
                _js(v) for v in (component.x, component.y, size.width, size.height)
            )
            lw = _js(self.line_thickness)
            lines.append(f"// {component.id}")
            if component.kind == ComponentKind.INVERTER:
                lines.append(f"inverter({geometry}, {lw});")
            elif component.kind == ComponentKind.ISOLATOR:
                lines.append(f"isolator({geometry}, {lw});")
            elif component.kind == ComponentKind.BUSBAR:
                lines.append(f"busbar({geometry}, {lw});")
            else:
                lines.append(f"pvPanel({geometry}, {_js(caption)}, {lw});")
            if component.label:
                x, y, anchor = label_position(
                    component.kind, component.x, component.y, size.width, size.height
                )
                font_size = label_font_size(component.kind, self.font_size)
                lines.append(
                    f"text({_js(component.label)}, {_js(x)}, {_js(y)}, "
                    f"{_js(font_size)}, {_js(anchor)}, false);"
                )
        return lines

    def legend_calls(self, result: LayoutResult) -> list[str]:
        legend_y = result.height - LEGEND_HEIGHT
        lines = [
            f'text("Legend:", {_js(LEGEND_X)}, {_js(legend_y)}, '
            f'{_js(self.font_size)}, "start", true);'
        ]
        for index, (polarity, label) in enumerate(legend_entries(result.style)):
            x = LEGEND_X + index * LEGEND_ENTRY_WIDTH
            y = legend_y + 15
            lines.append(
                f"polyline({_js_points([(x, y), (x + 30, y)])}, "
                f"{_js(COLOUR_MAP[polarity])}, {_js(WIRE_WIDTH[polarity])});"
            )
            lines.append(
                f'text({_js(label)}, {_js(x + 40)}, {_js(y + 5)}, 10, "start", false);'
            )
        return lines

    def render(self, result: LayoutResult, title: str = DEFAULT_TITLE) -> str:
        """The canvas drawing program for a layout, as JavaScript source."""
        lines = [SCRIPT_PRELUDE.replace("%%CANVAS_ID%%", _js(CANVAS_ID))]
        lines.append('ctx.fillStyle = "white";')
        lines.append(f"ctx.fillRect(0, 0, {_js(result.width)}, {_js(result.height)});")
        lines.append(
            f"text({_js(title)}, {_js(result.width / 2)}, {_js(TITLE_Y)}, 18, "
            '"middle", true);'
        )

        lines.append("// connections")
        for path in route_all(result):
            lines.append(
                f"polyline({_js_points(path.points)}, {_js(COLOUR_MAP[path.polarity])}, "
                f"{_js(WIRE_WIDTH[path.polarity])});"
            )

        lines.append("// components")
        lines.extend(self.component_calls(result))
        lines.append("// legend")
        lines.extend(self.legend_calls(result))
        return "\n".join(lines) + "\n"

    def render_fragment(self, result: LayoutResult, title: str = DEFAULT_TITLE) -> str:
        width = math.ceil(result.width)
        height = math.ceil(result.height)
        return (
            f'<canvas id="{CANVAS_ID}" width="{width}" height="{height}"></canvas>\n'
            f"<script>\n{self.render(result, title)}</script>"
        )
