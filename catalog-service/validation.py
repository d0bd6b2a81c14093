"""
Validation des identifiants et des formulaires produit.

Les erreurs d'identifiant sont levées comme exceptions et converties en
réponse texte par main.py; les erreurs de formulaire sont attachées à
l'état de la page pour que le fragment soit re-rendu avec les valeurs saisies.
"""
import math
import re
from typing import Optional, Tuple

from models import FormData, Page


_ID_RE = re.compile(r"[+-]?[0-9]+")


class ProductIdError(Exception):
    status_code = 400
    message = "Invalid id"

    def __init__(self, raw_id: str):
        super().__init__(self.message)
        self.raw_id = raw_id


class InvalidId(ProductIdError):
    pass


class ProductNotFound(ProductIdError):
    status_code = 404
    message = "Product not found"


def validate_product_id(raw_id: str, page: Page) -> int:
    """Retourne l'index du produit, ou lève InvalidId / ProductNotFound"""
    # chiffres ASCII uniquement, sans espaces ni "_"
    if not _ID_RE.fullmatch(raw_id):
        raise InvalidId(raw_id)
    product_id = int(raw_id)

    index = page.catalog.index_of(product_id)
    if index == -1:
        raise ProductNotFound(raw_id)
    return index


def parse_price(raw: str) -> Optional[float]:
    if "_" in raw or raw != raw.strip() or not raw.isascii():
        return None
    try:
        price = float(raw)
    except ValueError:
        return None
    if not math.isfinite(price * 100) or price < 0:
        return None
    return price


def price_to_cents(price: float) -> int:
    return int(round(price * 100))


def validate_product_form(
    name: str,
    descr: str,
    price: str,
    product_id: str,
    check_name: bool,
    page: Page,
) -> Tuple[Optional[float], bool]:
    form = FormData()
    form.values["name"] = name
    form.values["descr"] = descr
    form.values["price"] = price
    if product_id:
        form.values["id"] = product_id

    parsed_price = parse_price(price)
    if parsed_price is None:
        form.errors["price"] = "Invalid price"

    if not name:
        form.errors["name"] = "Name is required"
    elif check_name and page.catalog.has_name(name):
        form.errors["name"] = "Name already exists"

    is_valid = not form.errors
    if not is_valid:
        page.form = form
    return parsed_price, is_valid
