"""Conventions htmx: en-têtes de requête/réponse et mode de rendu"""
from enum import Enum
from typing import Dict

from fastapi import Request

# En-têtes de requête: https://htmx.org/docs/#request-headers
HEADER_REQUEST = "HX-Request"

# En-têtes de réponse: https://htmx.org/docs/#response-headers
HEADER_REPLACE_URL = "HX-Replace-Url"
HEADER_RETARGET = "HX-Retarget"
HEADER_RESWAP = "HX-Reswap"

PRODUCT_LIST_URL = "/product-list"


class RenderMode(str, Enum):
    FULL_PAGE = "full_page"
    FRAGMENT = "fragment"


def render_mode(request: Request) -> RenderMode:
    """Dépendance FastAPI: décide une fois par requête page complète ou fragment"""
    if request.headers.get(HEADER_REQUEST) == "true":
        return RenderMode.FRAGMENT
    return RenderMode.FULL_PAGE


def replace_url_headers() -> Dict[str, str]:
    return {HEADER_REPLACE_URL: PRODUCT_LIST_URL}


def product_list_swap_headers() -> Dict[str, str]:
    headers = replace_url_headers()
    headers[HEADER_RETARGET] = "#main"
    headers[HEADER_RESWAP] = "outerHTML"
    return headers
