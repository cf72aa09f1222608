"""
drawsvg symbols for the PV single line diagram.

Each function draws one symbol with its top-left corner at (obj_x, obj_y)
using the footprint from layout.SYMBOL_SIZES, and returns the draw.Group so
the caller can label it and append it to the drawing.
"""

import drawsvg as draw

from layout import SYMBOL_SIZES, ComponentKind

PANEL_FILL = "lightblue"
OUTLINE = "black"


def draw_inverter(obj_x: float, obj_y: float, stroke_width: float = 2) -> draw.Group:
    """Draws an inverter as a rounded box marked DC/AC.

    Args:
        obj_x (float): X coordinate of the top-left corner
        obj_y (float): Y coordinate of the top-left corner
        stroke_width (float): Outline width

    Returns:
        draw.Group: the inverter geometry
    """
    size = SYMBOL_SIZES[ComponentKind.INVERTER]
    obj_group = draw.Group()
    obj_group.append(
        draw.Rectangle(
            obj_x,
            obj_y,
            size.width,
            size.height,
            rx=5,
            fill="white",
            stroke=OUTLINE,
            stroke_width=stroke_width,
        )
    )
    obj_group.append(
        draw.Text(
            "INVERTER",
            font_size=10,
            x=obj_x + size.width / 2,
            y=obj_y + 20,
            text_anchor="middle",
            font_weight="bold",
        )
    )
    obj_group.append(
        draw.Text(
            "DC/AC",
            font_size=8,
            x=obj_x + size.width / 2,
            y=obj_y + 35,
            text_anchor="middle",
        )
    )
    return obj_group


def draw_isolator(obj_x: float, obj_y: float, stroke_width: float = 2) -> draw.Group:
    """Draws a DC isolator: a box holding a circle crossed by the switch blade."""
    size = SYMBOL_SIZES[ComponentKind.ISOLATOR]
    center_x = obj_x + size.width / 2
    center_y = obj_y + size.height / 2
    radius = size.width / 5

    obj_group = draw.Group()
    obj_group.append(
        draw.Rectangle(
            obj_x,
            obj_y,
            size.width,
            size.height,
            fill="white",
            stroke=OUTLINE,
            stroke_width=stroke_width,
        )
    )
    obj_group.append(
        draw.Circle(
            center_x,
            center_y,
            radius,
            fill="none",
            stroke=OUTLINE,
            stroke_width=stroke_width,
        )
    )
    obj_group.append(
        draw.Line(
            center_x - radius,
            center_y,
            center_x + radius,
            center_y,
            stroke=OUTLINE,
            stroke_width=stroke_width,
        )
    )
    obj_group.append(
        draw.Text(
            "DC ISO",
            font_size=8,
            x=center_x,
            y=obj_y + size.height - 5,
            text_anchor="middle",
        )
    )
    return obj_group


def draw_pv_panel(
    obj_x: float, obj_y: float, caption: str = "PV", stroke_width: float = 2
) -> draw.Group:
    """Draws a PV module (daisy style) or a whole string block (grid style)."""
    size = SYMBOL_SIZES[ComponentKind.PV_PANEL]
    obj_group = draw.Group()
    obj_group.append(
        draw.Rectangle(
            obj_x,
            obj_y,
            size.width,
            size.height,
            fill=PANEL_FILL,
            stroke=OUTLINE,
            stroke_width=stroke_width,
        )
    )
    obj_group.append(
        draw.Text(
            caption,
            font_size=8,
            x=obj_x + size.width / 2,
            y=obj_y + size.height / 2 + 3,
            text_anchor="middle",
            font_weight="bold",
        )
    )
    return obj_group


def draw_busbar(
    obj_x: float, obj_y: float, width: float, height: float, stroke_width: float = 2
) -> draw.Group:
    """Draws the main busbar as a solid bar of the given size."""
    obj_group = draw.Group()
    obj_group.append(
        draw.Rectangle(
            obj_x,
            obj_y,
            width,
            height,
            fill=OUTLINE,
            stroke=OUTLINE,
            stroke_width=stroke_width,
        )
    )
    return obj_group
