"""merry renderers.

Renderers convert a resolved Document into an output format.

Available Renderers:
- HtmlRenderer: Renders a Document to semantic HTML using StringBuilder

Thread Safety:
Renderers keep per-render state in a context local to each render() call.

"""

from merry.renderers.html import HeadingInfo, HtmlRenderer, extract_text, render_page

__all__ = ["HeadingInfo", "HtmlRenderer", "extract_text", "render_page"]
