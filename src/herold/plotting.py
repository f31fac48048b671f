"""SVG and Graphviz output for computed family tree layouts."""

import html

import pydot

from herold.config import LayoutConfig
from herold.models import GenerationBand, LayoutResult, ProjectSnapshot

UNION_MARKER = "⚭"
DEFAULT_SUBTITLE = "Family Tree"
GENERIC_FONT_FAMILIES = {"serif", "sans-serif", "cursive", "fantasy", "monospace", "system-ui"}


def escape_markup(text: str) -> str:
    """Escape the five reserved markup characters in user-supplied text."""
    return html.escape(text, quote=True)


def _num(value: float) -> str:
    # Two decimals at most, no trailing zeros, so identical layouts give identical bytes
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _to_roman(number: int) -> str:
    numerals = [
        (1000, "M"),
        (900, "CM"),
        (500, "D"),
        (400, "CD"),
        (100, "C"),
        (90, "XC"),
        (50, "L"),
        (40, "XL"),
        (10, "X"),
        (9, "IX"),
        (5, "V"),
        (4, "IV"),
        (1, "I"),
    ]
    result = []
    for value, symbol in numerals:
        while number >= value:
            result.append(symbol)
            number -= value
    return "".join(result)


def font_stack(config: LayoutConfig) -> str:
    """CSS font-family list: primary family first, then fallbacks in order."""
    families = [config.font_family, *config.font_fallbacks]
    quoted = [f if f in GENERIC_FONT_FAMILIES else f'"{f}"' for f in families]
    return escape_markup(", ".join(quoted))


def _defs(snapshot: ProjectSnapshot, config: LayoutConfig) -> list[str]:
    theme = snapshot.settings.theme
    lines = [
        "  <defs>",
        "    <style>",
        f"      .family-tree-font {{ font-family: {font_stack(config)}; }}",
        "    </style>",
        '    <radialGradient id="parchment" cx="50%" cy="50%" r="70%">',
        f'      <stop offset="0%" stop-color="{escape_markup(theme.background)}"/>',
        f'      <stop offset="100%" stop-color="{escape_markup(theme.accent)}"/>',
        "    </radialGradient>",
    ]
    if theme.show_shadows:
        lines += [
            '    <filter id="textShadow" x="-20%" y="-20%" width="140%" height="140%">',
            f'      <feDropShadow dx="1" dy="1" stdDeviation="0.5" '
            f'flood-color="{escape_markup(theme.lines)}" flood-opacity="0.3"/>',
            "    </filter>",
        ]
    if theme.show_corner_decorations:
        lines += [
            '    <g id="corner-decoration">',
            f'      <circle cx="0" cy="0" r="3" fill="{escape_markup(theme.lines)}"/>',
            f'      <circle cx="6" cy="0" r="2" fill="{escape_markup(theme.accent)}"/>',
            f'      <circle cx="0" cy="6" r="2" fill="{escape_markup(theme.accent)}"/>',
            "    </g>",
        ]
    lines.append("  </defs>")
    return lines


def _frame(snapshot: ProjectSnapshot, width: float, height: float) -> list[str]:
    theme = snapshot.settings.theme
    lines = [
        f'  <rect width="{_num(width)}" height="{_num(height)}" fill="url(#parchment)" '
        f'stroke="{escape_markup(theme.accent)}" stroke-width="3"/>'
    ]
    if theme.show_border:
        lines.append(
            f'  <rect x="20" y="20" width="{_num(width - 40)}" height="{_num(height - 40)}" '
            f'fill="none" stroke="{escape_markup(theme.lines)}" stroke-width="2" '
            'stroke-dasharray="5,3"/>'
        )
    if theme.show_corner_decorations:
        corners = [(28, 28, 0), (width - 28, 28, 90), (width - 28, height - 28, 180), (28, height - 28, 270)]
        for x, y, angle in corners:
            lines.append(
                f'  <use href="#corner-decoration" transform="translate({_num(x)} {_num(y)}) rotate({angle})"/>'
            )
    return lines


def _title(snapshot: ProjectSnapshot, config: LayoutConfig, width: float) -> list[str]:
    theme = snapshot.settings.theme
    center = _num(width / 2)
    shadow = ' filter="url(#textShadow)"' if theme.show_shadows else ""
    subtitle = snapshot.description or DEFAULT_SUBTITLE
    return [
        f'  <text x="{center}" y="60" text-anchor="middle" class="family-tree-font" '
        f'font-size="{_num(config.title_size)}" font-weight="bold" '
        f'fill="{escape_markup(theme.text)}"{shadow}>{escape_markup(snapshot.name)}</text>',
        f'  <text x="{center}" y="85" text-anchor="middle" class="family-tree-font" '
        f'font-size="{_num(config.subtitle_size)}" '
        f'fill="{escape_markup(theme.lines)}">{escape_markup(subtitle)}</text>',
    ]


def _generation_labels(
    snapshot: ProjectSnapshot, config: LayoutConfig, bands: list[GenerationBand], offset_x: float
) -> list[str]:
    x = _num((offset_x + config.margin_left) / 2)
    size = _num(snapshot.settings.font.relationships_size)
    color = escape_markup(snapshot.settings.theme.lines)
    return [
        f'  <text x="{x}" y="{_num(band.y)}" text-anchor="middle" class="family-tree-font" '
        f'font-size="{size}" fill="{color}">{_to_roman(index)}</text>'
        for index, band in enumerate(bands, start=1)
    ]


def _connections(layout: LayoutResult, config: LayoutConfig) -> list[str]:
    stroke = f'stroke="{escape_markup(config.line_color)}" stroke-width="{_num(config.line_width)}"'
    lines = []
    for conn in layout.connections:
        mid = _num(conn.mid_y)
        lines.append(
            f'    <path d="M {_num(conn.x1)} {_num(conn.y1)} L {_num(conn.x1)} {mid} '
            f'L {_num(conn.x2)} {mid} L {_num(conn.x2)} {_num(conn.y2)}" {stroke} fill="none"/>'
        )
    return lines


def _marriages(snapshot: ProjectSnapshot, layout: LayoutResult, config: LayoutConfig) -> list[str]:
    stroke = f'stroke="{escape_markup(config.line_color)}" stroke-width="{_num(config.line_width)}"'
    show_symbols = snapshot.settings.layout.show_marriage_symbols
    lines = []
    for marriage in layout.marriages:
        a, b = marriage.person1, marriage.person2
        lines.append(
            f'    <line x1="{_num(a.x)}" y1="{_num(a.y)}" x2="{_num(b.x)}" y2="{_num(b.y)}" {stroke}/>'
        )
        if show_symbols:
            lines.append(
                f'    <text x="{_num(marriage.symbol_x)}" y="{_num(marriage.symbol_y + 6)}" '
                f'text-anchor="middle" class="family-tree-font" font-size="14" '
                f'fill="{escape_markup(config.line_color)}">{UNION_MARKER}</text>'
            )
    return lines


def _people(snapshot: ProjectSnapshot, layout: LayoutResult, config: LayoutConfig) -> list[str]:
    color = escape_markup(snapshot.settings.theme.text)
    lines = []
    for placement in layout.people:
        person = placement.person
        tooltip = f"<title>{escape_markup(person.notes)}</title>" if person.notes else ""
        lines.append(
            f'    <text x="{_num(placement.x)}" y="{_num(placement.y)}" text-anchor="middle" '
            f'class="family-tree-font" font-size="{_num(config.font_size)}" '
            f'fill="{color}">{tooltip}{escape_markup(person.name)}</text>'
        )
    return lines


def generate_svg(snapshot: ProjectSnapshot, layout: LayoutResult, config: LayoutConfig) -> str:
    """
    Serialize a layout into one self-contained SVG document.

    Draw order: background and frame, title, generation labels, then the
    tree itself (connections, marriages, names) shifted by the canvas offset.
    """
    width = layout.dimensions.width
    height = layout.dimensions.height
    offset_x = layout.dimensions.offset_x

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg width="{_num(width)}" height="{_num(height)}" '
        f'viewBox="0 0 {_num(width)} {_num(height)}" xmlns="http://www.w3.org/2000/svg">',
    ]
    lines += _defs(snapshot, config)
    lines += _frame(snapshot, width, height)
    lines += _title(snapshot, config, width)
    if snapshot.settings.layout.show_generation_labels:
        lines += _generation_labels(snapshot, config, layout.generations, offset_x)

    lines.append(f'  <g transform="translate({_num(offset_x)} 0)">')
    lines += _connections(layout, config)
    lines += _marriages(snapshot, layout, config)
    lines += _people(snapshot, layout, config)
    lines.append("  </g>")
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def build_dot_graph(layout: LayoutResult, title: str = "") -> pydot.Dot:
    """
    Export a computed layout as a Graphviz graph with pinned node positions.

    Positions are in points with y flipped (Graphviz's origin is bottom-left),
    so `neato -n2` reproduces the same geometry as the SVG output.
    """
    P = pydot.Dot("family_tree", graph_type="graph")
    P.set("splines", "ortho")
    if title:
        P.set("label", title)
        P.set("labelloc", "t")

    height = layout.dimensions.height
    for placement in layout.people:
        P.add_node(
            pydot.Node(
                placement.person.id,
                label=placement.person.name,
                shape="plaintext",
                pos=f"{_num(placement.x + layout.dimensions.offset_x)},{_num(height - placement.y)}!",
            )
        )

    for conn in layout.connections:
        P.add_edge(pydot.Edge(conn.source_id, conn.target_id, color="darkgray"))

    for marriage in layout.marriages:
        P.add_edge(
            pydot.Edge(
                marriage.person1.person.id,
                marriage.person2.person.id,
                style="bold",
                label=UNION_MARKER,
            )
        )

    return P
