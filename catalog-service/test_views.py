"""
Unit tests for template loading.
"""
import pytest
from jinja2 import TemplateNotFound
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from views import TEMPLATE_NAMES, load_templates

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")


class TestLoadTemplates:

    def test_loads_every_template(self):
        templates = load_templates(TEMPLATES_DIR)
        for name in TEMPLATE_NAMES:
            assert templates.env.get_template(name) is not None

    def test_empty_directory_fails_fast(self, tmp_path):
        """A missing template aborts startup instead of failing on first request."""
        with pytest.raises(TemplateNotFound):
            load_templates(str(tmp_path))

    def test_one_missing_template_fails(self, tmp_path):
        (tmp_path / "index.html").write_text("<html></html>")
        with pytest.raises(TemplateNotFound):
            load_templates(str(tmp_path))
