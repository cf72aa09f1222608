"""
Renders a LayoutResult to SVG with drawsvg.

Wires are drawn first so the symbols sit on top of them. Each component is its
own <g> element carrying the component id, which keeps the output easy to
post-process and to test.
"""

# Third-party imports
import drawsvg as draw

# Local application/library specific imports
import symbols
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
from routing import RoutedPath, route_all

TITLE_FONT_SIZE = 18
LEGEND_FONT_SIZE = 10


def draw_wire(path: RoutedPath) -> draw.Lines:
    """Polyline for one routed conductor, coloured by polarity."""
    flat = []
    for x, y in path.points:
        flat.extend((x, y))
    return draw.Lines(
        *flat,
        close=False,
        fill="none",
        stroke=COLOUR_MAP[path.polarity],
        stroke_width=WIRE_WIDTH[path.polarity],
        stroke_linejoin="miter",
        class_=f"wire {path.polarity.name.lower()}",
        data_source=path.source,
        data_target=path.target,
    )


class SvgRenderer(Renderer):
    name = "svg"

    def draw_component(self, component, style: LayoutStyle = LayoutStyle.DAISY) -> draw.Group:
        size = footprint(component)
        if component.kind == ComponentKind.INVERTER:
            symbol = symbols.draw_inverter(component.x, component.y, self.line_thickness)
        elif component.kind == ComponentKind.ISOLATOR:
            symbol = symbols.draw_isolator(component.x, component.y, self.line_thickness)
        elif component.kind == ComponentKind.BUSBAR:
            symbol = symbols.draw_busbar(
                component.x, component.y, size.width, size.height, self.line_thickness
            )
        else:
            # a grid block stands for a whole string
            caption = "PV STRING" if style == LayoutStyle.GRID else "PV"
            symbol = symbols.draw_pv_panel(
                component.x, component.y, caption, self.line_thickness
            )

        obj_group = draw.Group(id=component.id, class_=component.kind.name.lower())
        obj_group.append(symbol)
        if component.label:
            x, y, anchor = label_position(
                component.kind, component.x, component.y, size.width, size.height
            )
            obj_group.append(
                draw.Text(
                    component.label,
                    font_size=label_font_size(component.kind, self.font_size),
                    x=x,
                    y=y,
                    text_anchor=anchor,
                    fill="black",
                )
            )
        return obj_group

    def draw_legend(self, result: LayoutResult) -> draw.Group:
        legend_y = result.height - LEGEND_HEIGHT
        legend = draw.Group(id="legend")
        legend.append(
            draw.Text(
                "Legend:",
                font_size=self.font_size,
                x=LEGEND_X,
                y=legend_y,
                font_weight="bold",
            )
        )
        for index, (polarity, text) in enumerate(legend_entries(result.style)):
            x = LEGEND_X + index * LEGEND_ENTRY_WIDTH
            y = legend_y + 15
            legend.append(
                draw.Line(
                    x,
                    y,
                    x + 30,
                    y,
                    stroke=COLOUR_MAP[polarity],
                    stroke_width=WIRE_WIDTH[polarity],
                )
            )
            legend.append(
                draw.Text(text, font_size=LEGEND_FONT_SIZE, x=x + 40, y=y + 5)
            )
        return legend

    def drawing(self, result: LayoutResult, title: str = DEFAULT_TITLE) -> draw.Drawing:
        """Build the drawsvg Drawing for a layout."""
        drawing = draw.Drawing(result.width, result.height, origin=(0, 0))
        drawing.append(
            draw.Rectangle(0, 0, result.width, result.height, fill="white")
        )
        drawing.append(
            draw.Text(
                title,
                font_size=TITLE_FONT_SIZE,
                x=result.width / 2,
                y=TITLE_Y,
                text_anchor="middle",
                font_weight="bold",
            )
        )

        wires = draw.Group(id="connections")
        for path in route_all(result):
            wires.append(draw_wire(path))
        drawing.append(wires)

        for component in result.components:
            drawing.append(self.draw_component(component, result.style))
        drawing.append(self.draw_legend(result))
        return drawing

    def render(self, result: LayoutResult, title: str = DEFAULT_TITLE) -> str:
        return self.drawing(result, title).as_svg()

    def render_fragment(self, result: LayoutResult, title: str = DEFAULT_TITLE) -> str:
        # the XML declaration is not valid inside an HTML body
        return "\n".join(
            line
            for line in self.render(result, title).splitlines()
            if not line.startswith("<?xml")
        )
