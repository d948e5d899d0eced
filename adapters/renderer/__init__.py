from .ruby_renderer import check_spans, render_furigana, select_annotations

__all__ = ["check_spans", "render_furigana", "select_annotations"]
