from .canvas import blend_mask, blit, blit_region, draw_hline, draw_vline, fill_rect, new_canvas, stroke_rect
from .draw_lines import LineStyle, draw_polyline, draw_segment
from .draw_markers import MarkerStyle, draw_markers, marker_radius
from .draw_text import draw_text, text_size

__all__ = [
    "LineStyle",
    "MarkerStyle",
    "blend_mask",
    "blit",
    "blit_region",
    "draw_hline",
    "draw_vline",
    "draw_markers",
    "draw_polyline",
    "draw_segment",
    "draw_text",
    "fill_rect",
    "marker_radius",
    "new_canvas",
    "stroke_rect",
    "text_size",
]
