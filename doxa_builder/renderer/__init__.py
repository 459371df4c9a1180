from .html import INVALID_MESSAGE, UNKNOWN_MESSAGE, css_declarations, css_url, render_block
from .forms import form_values, render_controls, render_form
from .page import render_page, render_sections
from .builder import EMPTY_PAGE, LOAD_ERROR, render_builder_content, render_builder_page

__all__ = [
    "INVALID_MESSAGE", "UNKNOWN_MESSAGE", "css_declarations", "css_url", "render_block",
    "form_values", "render_controls", "render_form",
    "render_page", "render_sections",
    "EMPTY_PAGE", "LOAD_ERROR", "render_builder_content", "render_builder_page",
]
