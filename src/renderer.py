"""
Common base for the diagram renderers.

A renderer turns a LayoutResult into a document string. The SVG and canvas
renderers draw the same layout and the same routed wires; they only differ in
the drawing commands they emit.
"""

# Standard library imports
import html

# Local application/library specific imports
from config import LayoutStyle
from layout import ComponentKind, LayoutResult
from routing import Polarity

DEFAULT_TITLE = "Electrical Single Line Diagram"

# Wire colours and widths
COLOUR_MAP = {
    Polarity.POSITIVE: "#dc2626",
    Polarity.NEGATIVE: "#000000",
    Polarity.BUS: "#1f2937",
}
WIRE_WIDTH = {
    Polarity.POSITIVE: 3,
    Polarity.NEGATIVE: 3,
    Polarity.BUS: 4,
}
LEGEND_ENTRIES = [
    (Polarity.POSITIVE, "Positive (Red)"),
    (Polarity.NEGATIVE, "Negative (Black)"),
    (Polarity.BUS, "Busbar"),
]
LEGEND_HEIGHT = 80
LEGEND_X = 50
LEGEND_ENTRY_WIDTH = 150
TITLE_Y = 30
LABEL_GAP = 15

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>%%TITLE%%</title>
    <style>
        body {
            font-family: Arial, sans-serif;
            margin: 20px;
            background-color: #f5f5f5;
        }
        .container {
            background-color: white;
            padding: 20px;
            border-radius: 8px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
        }
        h1 {
            color: #333;
            text-align: center;
            margin-bottom: 20px;
        }
        .diagram-container {
            text-align: center;
            overflow: auto;
        }
        svg, canvas {
            border: 1px solid #ddd;
            background-color: white;
        }
    </style>
</head>
<body>
    <div class="container">
        <h1>%%TITLE%%</h1>
        <div class="diagram-container">
%%CONTENT%%
        </div>
    </div>
</body>
</html>
"""


def label_position(
    kind: ComponentKind, x: float, y: float, width: float, height: float
) -> tuple[float, float, str]:
    """(x, y, text anchor) of a component's label.

    Panel labels sit above the panel, the busbar label to its left and every
    other label centred below the symbol.
    """
    if kind == ComponentKind.PV_PANEL:
        return x + width / 2, y - 5, "middle"
    if kind == ComponentKind.BUSBAR:
        return x - 10, y + height / 2, "end"
    return x + width / 2, y + height + LABEL_GAP, "middle"


def label_font_size(kind: ComponentKind, font_size: float) -> float:
    return 9 if kind == ComponentKind.PV_PANEL else font_size


def legend_entries(style: LayoutStyle) -> list:
    """Legend rows for a layout style. Only the grid style draws a busbar."""
    if style == LayoutStyle.GRID:
        return list(LEGEND_ENTRIES)
    return [entry for entry in LEGEND_ENTRIES if entry[0] != Polarity.BUS]


def html_page(title: str, content: str) -> str:
    """Wrap rendered diagram markup in a standalone HTML page."""
    page = HTML_TEMPLATE.replace("%%TITLE%%", html.escape(title))
    return page.replace("%%CONTENT%%", content)


class Renderer:
    """Base class: subclasses implement render()."""

    name = ""

    def __init__(self, font_size: float = 12, line_thickness: float = 2):
        self.font_size = font_size
        self.line_thickness = line_thickness

    def render(self, result: LayoutResult, title: str = DEFAULT_TITLE) -> str:
        raise NotImplementedError

    def render_fragment(self, result: LayoutResult, title: str = DEFAULT_TITLE) -> str:
        """Markup to embed in an HTML page. Defaults to the rendered document."""
        return self.render(result, title)

    def render_html(self, result: LayoutResult, title: str = DEFAULT_TITLE) -> str:
        return html_page(title, self.render_fragment(result, title))
