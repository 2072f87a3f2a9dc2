"""
Verify package imports work correctly.

These tests ensure the package is properly installed and modules
can be imported. Critical for catching setup.py/installation issues
in CI environments.
"""


def test_markdown2pdf_package_structure():
    """Verify markdown2pdf package is importable and versioned."""
    import importlib
    spec = importlib.util.find_spec('markdown2pdf')
    assert spec is not None, "markdown2pdf should be importable (package must be installed)"

    import markdown2pdf
    assert markdown2pdf.__version__


def test_pipeline_modules_can_be_imported():
    """Verify pipeline modules import with their public functions."""
    from markdown2pdf.diagrams import protect_diagrams, restore_diagrams
    from markdown2pdf.markdown_renderer import render_markdown
    from markdown2pdf.composer import compose_document
    from markdown2pdf.paths import prepare_output_path
    from markdown2pdf.renderer import render_pdf
    assert callable(protect_diagrams)
    assert callable(restore_diagrams)
    assert callable(render_markdown)
    assert callable(compose_document)
    assert callable(prepare_output_path)
    assert callable(render_pdf)


def test_http_app_can_be_imported():
    """Verify the FastAPI app can be imported."""
    from markdown2pdf.app import app
    assert app is not None
    assert hasattr(app, 'routes')


def test_mcp_server_can_be_imported():
    """Verify the MCP server object can be imported."""
    from markdown2pdf.mcp_server import server
    assert server.name == "markdown2pdf"


def test_packaged_assets_present():
    """Verify the stylesheet and runnings ship with the package."""
    from markdown2pdf.config import ASSETS_DIR
    assert (ASSETS_DIR / "pdf.css").is_file()
    assert (ASSETS_DIR / "runnings.json").is_file()
