from pydantic import BaseModel, field_validator

_TRAILING_WS = "\t\n\r "


class ProductForm(BaseModel):
    """Champs bruts d'un formulaire produit, nettoyés des espaces"""
    name: str = ""
    descr: str = ""
    price: str = ""  # texte brut, parsé par validate_product_form

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("descr")
    @classmethod
    def rstrip_descr(cls, v: str) -> str:
        return v.rstrip(_TRAILING_WS)


class SearchForm(BaseModel):
    search: str = ""

    @field_validator("search")
    @classmethod
    def rstrip_search(cls, v: str) -> str:
        return v.rstrip(_TRAILING_WS)
