from typing import Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates
from loguru import logger

from models import Page

# Tous les templates doivent être présents au démarrage
TEMPLATE_NAMES = (
    "index.html",
    "index_main.html",
    "search_results.html",
    "add_product.html",
    "add_product_form.html",
    "edit_product.html",
    "edit_product_form.html",
    "del_product.html",
)


def load_templates(directory: str) -> Jinja2Templates:
    """Charge et compile les templates; toute erreur est fatale"""
    templates = Jinja2Templates(directory=directory)
    for name in TEMPLATE_NAMES:
        try:
            templates.env.get_template(name)
        except Exception:
            logger.critical(f"Unable to load template {name} from {directory}")
            raise
    logger.info(f"Loaded {len(TEMPLATE_NAMES)} templates from {directory}")
    return templates


def render(
    templates: Jinja2Templates,
    request: Request,
    name: str,
    page: Page,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
):
    return templates.TemplateResponse(
        request,
        name,
        {"page": page},
        status_code=status_code,
        headers=headers,
    )
