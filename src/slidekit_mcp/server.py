"""Slide Overlay MCP Server - MCP tools for placing text on slide images and exporting them."""

from mcp.server.fastmcp import FastMCP, Context, Image
import json
import logging
from dataclasses import dataclass, field
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Any, Optional
import os
from pathlib import Path

# SDK imports
from slidekit.core.config import RenderConfig
from slidekit.core.errors import SlideKitError
from slidekit.core.state import EditorState
from slidekit.core.workspace import Workspace
from slidekit.render.images import ImageLoader
from slidekit.render.overlay import overlay_boxes
from slidekit.export.coordinator import ExportCoordinator
from slidekit.export.pdf import DEFAULT_PDF_FILENAME

# Configure logging
logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("SlideOverlayMCP")

# Default configuration
DEFAULT_PROJECTS_DIR = "./projects"


@dataclass
class EditorSession:
    """One open deck: editor state, optional workspace and the export driver."""
    config: RenderConfig = field(default_factory=RenderConfig.from_env)
    state: EditorState = field(default_factory=EditorState)
    workspace: Optional[Workspace] = None
    exporter: Optional[ExportCoordinator] = None

    def __post_init__(self):
        self.attach(self.workspace)

    def attach(self, workspace: Optional[Workspace]):
        self.workspace = workspace
        base_dir = workspace.root_path if workspace else None
        self.exporter = ExportCoordinator(ImageLoader(base_dir, self.config), config=self.config)

    def auto_save(self):
        if self.workspace:
            self.state.save(self.workspace.slides_path)


def _session(ctx: Context) -> EditorSession:
    return ctx.request_context.lifespan_context["session"]


def _element_json(element) -> str:
    return json.dumps({"status": "updated", "element": element.to_record()}, indent=2)


NO_SELECTION = "Error: No text element selected. Use add_text or select_text first."


# ── Server Setup ────────────────────────────────────────────────────────

@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncIterator[Dict[str, Any]]:
    try:
        logger.info("SlideOverlayMCP server starting up")
        yield {"session": EditorSession()}
    finally:
        logger.info("SlideOverlayMCP server shut down")


mcp = FastMCP("SlideOverlayMCP", lifespan=server_lifespan)


# ═══════════════════════════════════════════════════════════════════════
# PROJECT MANAGEMENT TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def create_project(ctx: Context, project_name: str, base_path: str = "") -> str:
    """Create a new slide project with standard directory structure.

    Parameters:
    - project_name: Name for the project (used as directory name)
    - base_path: Optional base directory (defaults to SLIDEKIT_PROJECTS_DIR or ./projects/)
    """
    session = _session(ctx)
    base = Path(base_path or os.getenv("SLIDEKIT_PROJECTS_DIR", DEFAULT_PROJECTS_DIR))
    project_path = base / project_name

    if project_path.exists():
        return f"Error: Project directory already exists at {project_path}"

    workspace = Workspace(project_name=project_name, root_path=project_path).initialize()
    session.state = EditorState()
    session.attach(workspace)
    session.auto_save()

    return json.dumps({
        "status": "created",
        "project_name": project_name,
        "path": str(project_path),
        "directories": ["assets/images/", "exports/"],
    }, indent=2)


@mcp.tool()
def load_project(ctx: Context, project_path: str) -> str:
    """Load an existing slide project.

    Parameters:
    - project_path: Path to the project directory
    """
    session = _session(ctx)
    try:
        workspace = Workspace.load(Path(project_path))
        session.state = EditorState()
        session.state.load(workspace.slides_path)
        session.attach(workspace)
        return json.dumps({
            "status": "loaded",
            "project_name": workspace.project_name,
            "path": str(workspace.root_path),
            "image_count": len(workspace.images),
            "slide_count": len(session.state.slides),
        }, indent=2)
    except Exception as e:
        return f"Error loading project: {str(e)}"


@mcp.tool()
def save_project(ctx: Context) -> str:
    """Save the current slides and manifest."""
    session = _session(ctx)
    if not session.workspace:
        return "Error: No project is currently open. Use create_project or load_project first."
    session.auto_save()
    session.workspace.save_manifest()
    return f"Project '{session.workspace.project_name}' saved successfully."


@mcp.tool()
def get_project_status(ctx: Context) -> str:
    """Get the current project status: slide count, current slide, selection, export state."""
    session = _session(ctx)
    state = session.state
    return json.dumps({
        "project_loaded": session.workspace is not None,
        "project_name": session.workspace.project_name if session.workspace else None,
        "slide_count": len(state.slides),
        "current_slide": state.current_slide_index + 1 if state.slides else None,
        "selected_text_id": state.selected_text_id,
        "export_running": session.exporter.busy,
    }, indent=2)


# ═══════════════════════════════════════════════════════════════════════
# SLIDE TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def get_slides(ctx: Context) -> str:
    """List all slides with their IDs, background images and text counts."""
    state = _session(ctx).state
    if not state.slides:
        return "No slides yet. Use add_slide with a background image."
    return json.dumps([
        {
            "position": i + 1,
            "id": s.id,
            "image_src": s.image_src if not s.image_src.startswith("data:") else "(embedded)",
            "text_count": len(s.text_elements),
            "current": i == state.current_slide_index,
        }
        for i, s in enumerate(state.slides)
    ], indent=2)


@mcp.tool()
def get_slide(ctx: Context, position: int = 0) -> str:
    """Get the full record of a slide, with its overlay layout.

    Parameters:
    - position: 1-based slide position (defaults to the current slide)
    """
    state = _session(ctx).state
    index = position - 1 if position else state.current_slide_index
    if not 0 <= index < len(state.slides):
        return f"Error: No slide at position {position}."
    slide = state.slides[index]
    return json.dumps({
        "slide": slide.to_record(),
        "overlay": [
            {"id": b.element_id, "style": b.style, "selected": b.selected}
            for b in overlay_boxes(slide, state.selected_text_id)
        ],
    }, indent=2)


@mcp.tool()
def add_slide(ctx: Context, image: str) -> str:
    """Add a slide with a background image and make it current.

    Parameters:
    - image: Local image path, http(s) URL or data: URI. Local files are
      copied into the project when one is open.
    """
    session = _session(ctx)
    image_src = image
    try:
        workspace = session.workspace
        is_local = not image.startswith(("data:", "http://", "https://"))
        if workspace and is_local and Path(image).is_file():
            asset = workspace.import_image(Path(image))
            image_path = workspace.get_image_path(asset.asset_id)
            image_src = image_path.relative_to(workspace.root_path).as_posix()
        slide = session.state.add_slide(image_src)
    except (ValueError, OSError) as e:
        return f"Error adding slide: {str(e)}"
    session.auto_save()
    return json.dumps({
        "status": "added",
        "slide_id": slide.id,
        "position": session.state.current_slide_index + 1,
    }, indent=2)


@mcp.tool()
def delete_slide(ctx: Context, position: int) -> str:
    """Delete a slide. The last remaining slide cannot be deleted.

    Parameters:
    - position: 1-based slide position
    """
    session = _session(ctx)
    try:
        removed = session.state.delete_slide(position - 1)
    except (SlideKitError, IndexError) as e:
        return f"Error: {str(e)}"
    session.auto_save()
    return f"Deleted slide {removed.id}. {len(session.state.slides)} slide(s) remain."


@mcp.tool()
def switch_slide(ctx: Context, position: int) -> str:
    """Make another slide current (clears the text selection).

    Parameters:
    - position: 1-based slide position
    """
    state = _session(ctx).state
    if not state.switch_to_slide(position - 1):
        return f"Error: No slide at position {position}."
    return f"Slide {position} of {len(state.slides)}"


# ═══════════════════════════════════════════════════════════════════════
# TEXT ELEMENT TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def add_text(ctx: Context) -> str:
    """Add a 'New Text' element at the center of the current slide and select it."""
    session = _session(ctx)
    element = session.state.add_text()
    if element is None:
        return "Error: There is no current slide."
    session.auto_save()
    return json.dumps({"status": "added", "element": element.to_record()}, indent=2)


@mcp.tool()
def select_text(ctx: Context, text_id: str) -> str:
    """Select a text element on the current slide.

    Parameters:
    - text_id: Element id, e.g. text-1
    """
    element = _session(ctx).state.select_text(text_id)
    if element is None:
        return f"Error: Text element '{text_id}' not found on the current slide."
    return json.dumps(element.to_record(), indent=2)


@mcp.tool()
def delete_text(ctx: Context) -> str:
    """Delete the selected text element."""
    session = _session(ctx)
    element = session.state.delete_selected_text()
    if element is None:
        return NO_SELECTION
    session.auto_save()
    return f"Deleted text element {element.id}."


@mcp.tool()
def update_text(ctx: Context, text: str = None, font_family: str = None,
                font_size: float = None, color: str = None, align: str = None,
                x: float = None, y: float = None,
                start_animation: str = None, end_animation: str = None) -> str:
    """Edit the selected text element. Only the given fields change.

    Parameters:
    - text: New text; use \\n for line breaks
    - font_family: Font family name, e.g. Arial
    - font_size: Size in display pixels
    - color: Hex color, e.g. #FF0000
    - align: left, center or right
    - x, y: Anchor position in percent of the slide (0-100)
    - start_animation, end_animation: Animation tags (stored only)
    """
    session = _session(ctx)
    state = session.state
    if state.selected_text() is None:
        return NO_SELECTION
    changes = {
        name: value for name, value in {
            "text": text,
            "font_family": font_family,
            "font_size": font_size,
            "color": color,
            "align": align,
            "x": x,
            "y": y,
            "start_animation": start_animation,
            "end_animation": end_animation,
        }.items() if value is not None
    }
    try:
        state.update_selected(**changes)
    except ValueError as e:
        return f"Error: Invalid value: {str(e)}"
    session.auto_save()
    return _element_json(state.selected_text())


@mcp.tool()
def toggle_style(ctx: Context, style: str) -> str:
    """Toggle bold or italic on the selected text element.

    Parameters:
    - style: bold or italic
    """
    session = _session(ctx)
    try:
        element = session.state.toggle_style(style)
    except ValueError as e:
        return f"Error: {str(e)}"
    if element is None:
        return NO_SELECTION
    session.auto_save()
    return _element_json(element)


@mcp.tool()
def place_at_corner(ctx: Context, corner: str) -> str:
    """Move the selected text element to a corner of the slide.

    Parameters:
    - corner: tl, tr, bl or br
    """
    session = _session(ctx)
    try:
        element = session.state.place_at_corner(corner)
    except ValueError as e:
        return f"Error: {str(e)}"
    if element is None:
        return NO_SELECTION
    session.auto_save()
    return _element_json(element)


@mcp.tool()
def adjust_z_order(ctx: Context, direction: int) -> str:
    """Bring the selected element forward (positive) or send it backward (negative).

    Parameters:
    - direction: Amount to add to the z-index (never drops below 1)
    """
    session = _session(ctx)
    element = session.state.adjust_z_order(direction)
    if element is None:
        return NO_SELECTION
    session.auto_save()
    return _element_json(element)


@mcp.tool()
def nudge_text(ctx: Context, dx: int = 0, dy: int = 0, large: bool = False) -> str:
    """Nudge the selected element by whole steps (1%, or 10% when large).

    Parameters:
    - dx: Steps right (negative for left)
    - dy: Steps down (negative for up)
    - large: Use the large step
    """
    session = _session(ctx)
    element = session.state.nudge_selected(dx, dy, large=large)
    if element is None:
        return NO_SELECTION
    session.auto_save()
    return _element_json(element)


# ═══════════════════════════════════════════════════════════════════════
# EXPORT TOOLS
# ═══════════════════════════════════════════════════════════════════════

def _export_dir(session: EditorSession, output_dir: str) -> Optional[Path]:
    if output_dir:
        return Path(output_dir)
    if session.workspace:
        return session.workspace.exports_dir
    return None


@mcp.tool()
async def export_png(ctx: Context, display_width: float = 0, output_dir: str = "") -> str:
    """Export the current slide as a PNG at the background image's native resolution.

    Parameters:
    - display_width: Width the slide image is shown at while editing; font
      sizes are scaled by native width / display width (0 = no scaling)
    - output_dir: Directory to write slide-<n>.png (defaults to project exports/)
    """
    session = _session(ctx)
    save_to = _export_dir(session, output_dir)
    try:
        result = await session.exporter.export_png(
            session.state, display_width=display_width or None, save_to=save_to,
        )
    except SlideKitError as e:
        logger.error(f"PNG export failed: {str(e)}")
        return f"Error: Export to PNG failed: {str(e)}"
    return json.dumps({
        "status": "exported",
        "filename": result.filename,
        "path": str(save_to / result.filename) if save_to else None,
        "size": f"{result.width}x{result.height}",
        "font_scale": round(result.scale_factor, 4),
        "bytes": len(result.data),
    }, indent=2)


@mcp.tool()
async def export_pdf(ctx: Context, filename: str = DEFAULT_PDF_FILENAME, output_dir: str = "") -> str:
    """Export all slides, in order, to a multi-page PDF.

    Parameters:
    - filename: Output file name (default slides.pdf)
    - output_dir: Directory to write to (defaults to project exports/)
    """
    session = _session(ctx)
    save_to = _export_dir(session, output_dir)
    try:
        result = await session.exporter.export_pdf(session.state, filename=filename, save_to=save_to)
    except SlideKitError as e:
        logger.error(f"PDF export failed: {str(e)}")
        return f"Error: Export to PDF failed: {str(e)}"
    return json.dumps({
        "status": "exported",
        "filename": result.filename,
        "path": str(save_to / result.filename) if save_to else None,
        "page_count": len(result.pages),
        "bytes": len(result.data),
    }, indent=2)


@mcp.tool()
async def preview_slide(ctx: Context, display_width: float = 0):
    """Render the current slide to a PNG image for preview.

    Parameters:
    - display_width: Display width used for font scaling (0 = no scaling)
    """
    session = _session(ctx)
    try:
        result = await session.exporter.export_png(session.state, display_width=display_width or None)
    except SlideKitError as e:
        raise Exception(f"Preview render failed: {str(e)}")
    return Image(data=result.data, format="png")


# ═══════════════════════════════════════════════════════════════════════
# MCP PROMPT
# ═══════════════════════════════════════════════════════════════════════

@mcp.prompt()
def slide_overlay_workflow() -> str:
    """Recommended workflow for captioning slide images"""
    return """You are helping the user put text on slide images. Follow this workflow:

1. **Create Project**: Use create_project() to set up a workspace, or load_project().

2. **Add Slides**: Use add_slide() with each background image (path, URL or data URI).

3. **Add Text**: Use add_text() on the current slide, then:
   - Use update_text() to set the text, font, size, color and alignment
   - Use place_at_corner() or nudge_text() to position it
   - Use toggle_style() for bold/italic and adjust_z_order() for stacking

4. **Review**: Use get_slide() to inspect the layout and preview_slide() to see it.

5. **Export**: Use export_png() for the current slide or export_pdf() for the deck.

Tips:
- Positions are percentages, so layouts survive any image resolution
- Font sizes are in display pixels; pass display_width to export_png to match the editor
- Use save_project() periodically to persist state
"""


# ── Main ────────────────────────────────────────────────────────────────

def main():
    """Run the MCP server"""
    mcp.run()


if __name__ == "__main__":
    main()
