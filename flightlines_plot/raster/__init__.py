from .canvas import blend_mask, fill_rect, hex_to_rgba, new_canvas, stroke_rect
from .draw_lines import draw_hline_dashed, draw_polyline, draw_vline_dashed, polyline_mask
from .draw_markers import disc_mask, draw_active_point
from .draw_text import draw_text, text_size

__all__ = [
    "blend_mask",
    "disc_mask",
    "draw_active_point",
    "draw_hline_dashed",
    "draw_polyline",
    "draw_text",
    "draw_vline_dashed",
    "fill_rect",
    "hex_to_rgba",
    "new_canvas",
    "polyline_mask",
    "stroke_rect",
    "text_size",
]
