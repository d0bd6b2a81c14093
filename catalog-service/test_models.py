"""
Unit tests for the catalog store, the search filter and the page state.
"""
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from models import Catalog, Product, filter_products, new_catalog, new_page


def make_products():
    catalog = Catalog()
    catalog.create("Hammer", "Smashing hammer", 1000)
    catalog.create("Saw", "Hand saw", 1250)
    catalog.create("Drill", "Cordless, hammer action", 8999)
    return catalog


class TestCatalog:
    """Tests for the in-memory catalog store."""

    def test_seed_catalog(self):
        catalog = new_catalog()
        assert len(catalog.products) == 1
        hammer = catalog.products[0]
        assert (hammer.id, hammer.name, hammer.descr, hammer.price) == (1, "Hammer", "Smashing hammer", 1000)

    def test_create_assigns_increasing_ids(self):
        catalog = make_products()
        assert [p.id for p in catalog.products] == [1, 2, 3]
        assert catalog.last_id == 3

    def test_ids_never_reused(self):
        catalog = make_products()
        catalog.remove(catalog.index_of(3))
        product = catalog.create("Chisel", "", 500)
        assert product.id == 4

    def test_index_of(self):
        catalog = make_products()
        assert catalog.index_of(2) == 1
        assert catalog.index_of(99) == -1

    def test_has_name_is_case_sensitive(self):
        catalog = make_products()
        assert catalog.has_name("Saw")
        assert not catalog.has_name("saw")

    def test_remove_preserves_order(self):
        catalog = make_products()
        removed = catalog.remove(1)
        assert removed.name == "Saw"
        assert [p.name for p in catalog.products] == ["Hammer", "Drill"]

    def test_euro_price(self):
        product = Product(id=1, name="Saw", descr="", price=1050)
        assert product.euro_price == 10.5


class TestFilterProducts:
    """Tests for the case-insensitive search filter."""

    def test_empty_search_returns_everything_in_order(self):
        products = make_products().products
        assert filter_products(products, "") == products

    def test_matches_name_case_insensitively(self):
        products = make_products().products
        assert [p.name for p in filter_products(products, "SAW")] == ["Saw"]

    def test_matches_description(self):
        products = make_products().products
        assert [p.name for p in filter_products(products, "hammer")] == ["Hammer", "Drill"]

    def test_no_match(self):
        assert filter_products(make_products().products, "lathe") == []


class TestPage:
    """Tests for the shared page state."""

    def test_new_page_shows_whole_catalog(self):
        page = new_page()
        assert page.search_text == ""
        assert page.filtered_products == page.catalog.products
        assert page.form.values == {} and page.form.errors == {}

    def test_refresh_follows_search_text(self):
        page = new_page()
        page.catalog.create("Saw", "Hand saw", 1250)
        page.search_text = "saw"
        page.refresh()
        assert [p.name for p in page.filtered_products] == ["Saw"]

    def test_reset_form(self):
        page = new_page()
        page.form.errors["name"] = "Name already exists"
        form = page.reset_form()
        assert form is page.form
        assert form.errors == {}
