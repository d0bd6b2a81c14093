import asyncio
from typing import Dict, List
from pydantic import BaseModel, Field


class Product(BaseModel):
    id: int
    name: str
    descr: str = ""
    price: int  # en centimes

    @property
    def euro_price(self) -> float:
        return self.price / 100


class Catalog(BaseModel):
    products: List[Product] = Field(default_factory=list)
    last_id: int = 0  # jamais remis à zéro, un id supprimé n'est pas réutilisé

    def index_of(self, product_id: int) -> int:
        for i, product in enumerate(self.products):
            if product.id == product_id:
                return i
        return -1

    def has_name(self, name: str) -> bool:
        return any(p.name == name for p in self.products)

    def get(self, index: int) -> Product:
        return self.products[index]

    def create(self, name: str, descr: str, price: int) -> Product:
        self.last_id += 1
        product = Product(id=self.last_id, name=name, descr=descr, price=price)
        self.products.append(product)
        return product

    def remove(self, index: int) -> Product:
        return self.products.pop(index)


def new_catalog() -> Catalog:
    catalog = Catalog()
    catalog.create("Hammer", "Smashing hammer", 1000)
    return catalog


class FormData(BaseModel):
    values: Dict[str, str] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)


def _contains(text: str, search: str) -> bool:
    return search.lower() in text.lower()


def filter_products(products: List[Product], search_text: str) -> List[Product]:
    """Produits dont le nom ou la description contient search_text (insensible à la casse)"""
    if search_text == "":
        return list(products)
    return [p for p in products if _contains(p.name, search_text) or _contains(p.descr, search_text)]


class Page:
    """
    État partagé de la page: catalogue, recherche courante, vue filtrée et
    dernier formulaire soumis. Toute lecture-modification passe par `lock`.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self.form = FormData()
        self.search_text = ""
        self.filtered_products: List[Product] = list(catalog.products)
        self.lock = asyncio.Lock()

    def refresh(self):
        self.filtered_products = filter_products(self.catalog.products, self.search_text)

    def reset_form(self) -> FormData:
        self.form = FormData()
        return self.form


def new_page() -> Page:
    return Page(new_catalog())


# Stockage en mémoire, partagé par toutes les requêtes
page = new_page()
