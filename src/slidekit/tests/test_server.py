"""Tests for slidekit_mcp.server — tool functions driven with a stub context."""

import asyncio
import json
from types import SimpleNamespace

import pytest

from slidekit_mcp import server
from slidekit_mcp.server import EditorSession
from conftest import data_uri, png_bytes


@pytest.fixture
def ctx():
    session = EditorSession()
    return SimpleNamespace(request_context=SimpleNamespace(lifespan_context={"session": session}))


@pytest.fixture
def project(ctx, tmp_path):
    server.create_project(ctx, "talk", base_path=str(tmp_path))
    return tmp_path / "talk"


# ── Project tools ───────────────────────────────────────────────────────

class TestProjectTools:
    def test_create_project(self, ctx, project):
        assert (project / "project.json").exists()
        assert (project / "slides.json").exists()
        status = json.loads(server.get_project_status(ctx))
        assert status["project_name"] == "talk"
        assert status["slide_count"] == 0

    def test_create_existing_project(self, ctx, project, tmp_path):
        assert server.create_project(ctx, "talk", base_path=str(tmp_path)).startswith("Error")

    def test_add_slide_imports_file(self, ctx, project, tmp_path):
        image = tmp_path / "bg.png"
        image.write_bytes(png_bytes(64, 36))
        result = json.loads(server.add_slide(ctx, str(image)))
        assert result["slide_id"] == 1
        slides = json.loads(server.get_slides(ctx))
        assert slides[0]["image_src"].startswith("assets/images/img_")

    def test_load_project_restores_slides(self, ctx, project):
        server.add_slide(ctx, data_uri(8, 8))
        server.add_text(ctx)
        server.update_text(ctx, text="Saved")

        other = SimpleNamespace(request_context=SimpleNamespace(
            lifespan_context={"session": EditorSession()}))
        loaded = json.loads(server.load_project(other, str(project)))
        assert loaded["slide_count"] == 1
        slide = json.loads(server.get_slide(other))["slide"]
        assert slide["textElements"][0]["text"] == "Saved"


# ── Editing tools ───────────────────────────────────────────────────────

class TestEditingTools:
    def test_text_workflow(self, ctx):
        server.add_slide(ctx, data_uri(16, 9))
        added = json.loads(server.add_text(ctx))
        assert added["element"]["id"] == "text-1"

        updated = json.loads(server.update_text(ctx, text="Hi", align="right", x=70))
        assert updated["element"]["align"] == "right"
        assert updated["element"]["x"] == 70
        assert updated["element"]["y"] == 50

        assert json.loads(server.toggle_style(ctx, "bold"))["element"]["bold"] is True
        assert json.loads(server.place_at_corner(ctx, "br"))["element"]["x"] == 98
        assert json.loads(server.adjust_z_order(ctx, -3))["element"]["zIndex"] == 1

        overlay = json.loads(server.get_slide(ctx))["overlay"]
        assert overlay[0]["selected"] is True
        assert overlay[0]["style"]["transform"] == "translateX(-100%)"

    def test_invalid_update(self, ctx):
        server.add_slide(ctx, data_uri(16, 9))
        server.add_text(ctx)
        assert server.update_text(ctx, align="justify").startswith("Error")

    def test_rejected_update_changes_nothing(self, ctx, project):
        server.add_slide(ctx, data_uri(16, 9))
        server.add_text(ctx)
        result = server.update_text(ctx, text="Changed", x=10, font_size=-5)
        assert result.startswith("Error")
        element = json.loads(server.get_slide(ctx))["slide"]["textElements"][0]
        assert element["text"] == "New Text"
        assert element["x"] == 50
        saved = json.loads((project / "slides.json").read_text())
        assert saved["slides"][0]["textElements"][0] == element

    def test_update_only_given_fields(self, ctx):
        server.add_slide(ctx, data_uri(16, 9))
        server.add_text(ctx)
        element = json.loads(server.update_text(ctx, y=120))["element"]
        assert (element["x"], element["y"]) == (50, 100)
        assert element["text"] == "New Text"

    def test_no_selection(self, ctx):
        server.add_slide(ctx, data_uri(16, 9))
        assert server.nudge_text(ctx, dx=1) == server.NO_SELECTION

    def test_cannot_delete_last_slide(self, ctx):
        server.add_slide(ctx, data_uri(16, 9))
        assert server.delete_slide(ctx, 1).startswith("Error")


# ── Export tools ────────────────────────────────────────────────────────

class TestExportTools:
    def test_export_png_and_pdf(self, ctx, tmp_path):
        server.add_slide(ctx, data_uri(64, 32))
        server.add_slide(ctx, data_uri(32, 64))
        server.add_text(ctx)

        png = json.loads(asyncio.run(server.export_png(ctx, display_width=32, output_dir=str(tmp_path))))
        assert png["filename"] == "slide-2.png"
        assert png["size"] == "32x64"
        assert (tmp_path / "slide-2.png").exists()

        pdf = json.loads(asyncio.run(server.export_pdf(ctx, output_dir=str(tmp_path))))
        assert pdf["page_count"] == 2
        assert (tmp_path / "slides.pdf").exists()

    def test_export_failure_reported(self, ctx, tmp_path):
        server.add_slide(ctx, str(tmp_path / "missing.png"))
        result = asyncio.run(server.export_pdf(ctx, output_dir=str(tmp_path)))
        assert result.startswith("Error: Export to PDF failed")
