import os
import time
import uuid
from urllib.parse import quote, unquote
from fastapi import Depends, FastAPI, Form, Request, Response
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from dotenv import load_dotenv
from prometheus_client import Counter, Gauge, Histogram, generate_latest, CONTENT_TYPE_LATEST
from htmx import RenderMode, render_mode, replace_url_headers, product_list_swap_headers, PRODUCT_LIST_URL
from models import page
from schemas import ProductForm, SearchForm
from validation import ProductIdError, validate_product_id, validate_product_form, price_to_cents
from views import load_templates, render

# Chargement des variables d'environnement
load_dotenv()

SERVICE_NAME = "catalog-service"
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
TEMPLATES_DIR = os.getenv("TEMPLATES_DIR", os.path.join(BASE_DIR, "templates"))
STATIC_DIR = os.getenv("STATIC_DIR", os.path.join(BASE_DIR, "css"))
PRODUCT_SEARCH_COOKIE = "product-search"

# Config logging JSON (niveaux INFO, WARNING, ERROR)
logger.remove()
logger.add(
    sink=os.getenv("LOG_FILE", "logs.json"),
    format="{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level} | {message} | {extra}",
    level=os.getenv("LOG_LEVEL", "INFO"),
    serialize=True,
    rotation="1 day",
)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["service", "method", "endpoint"]
)
ERROR_COUNT = Counter(
    "http_errors_total",
    "Total HTTP errors",
    ["service", "endpoint", "error_type"]
)
MUTATION_COUNT = Counter(
    "catalog_mutations_total",
    "Total catalog mutations",
    ["service", "operation"]
)
PRODUCT_GAUGE = Gauge(
    "catalog_products",
    "Number of products in the catalog",
    ["service"]
)
PRODUCT_GAUGE.labels(service=SERVICE_NAME).set(len(page.catalog.products))

# Échec de chargement des templates = arrêt du process
templates = load_templates(TEMPLATES_DIR)

app = FastAPI(title="Catalog Service")
app.mount("/css", StaticFiles(directory=STATIC_DIR), name="css")


# Middleware pour logger les requests avec correlation ID
@app.middleware("http")
async def log_requests(request: Request, call_next):
    # Generate or propagate correlation ID (trace-id)
    trace_id = request.headers.get("X-Trace-ID", str(uuid.uuid4()))
    start_time = time.time()

    # Bind trace_id to logger context
    with logger.contextualize(trace_id=trace_id, service=SERVICE_NAME):
        logger.info(
            f"Request: {request.method} {request.url.path}",
            extra={"method": request.method, "url": str(request.url), "trace_id": trace_id}
        )

        response = await call_next(request)

        # Calculate latency
        latency = time.time() - start_time

        # Record metrics
        REQUEST_COUNT.labels(
            service=SERVICE_NAME,
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code
        ).inc()
        REQUEST_LATENCY.labels(
            service=SERVICE_NAME,
            method=request.method,
            endpoint=request.url.path
        ).observe(latency)

        logger.info(
            f"Response status: {response.status_code}",
            extra={"status": response.status_code, "latency": latency, "trace_id": trace_id}
        )

        # Add trace_id to response headers for tracing
        response.headers["X-Trace-ID"] = trace_id
        return response


@app.exception_handler(ProductIdError)
async def product_id_error_handler(request: Request, exc: ProductIdError):
    """Identifiant invalide ou inconnu: réponse texte avec le code du validateur"""
    error_type = "not_found" if exc.status_code == 404 else "invalid_id"
    logger.warning(f"{exc.message}: {exc.raw_id!r}", extra={"path": request.url.path})
    ERROR_COUNT.labels(service=SERVICE_NAME, endpoint=request.url.path, error_type=error_type).inc()
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def _validation_failed(endpoint: str):
    logger.warning(f"Product form rejected: {page.form.errors}")
    ERROR_COUNT.labels(service=SERVICE_NAME, endpoint=endpoint, error_type="validation_failed").inc()


def _record_mutation(operation: str):
    MUTATION_COUNT.labels(service=SERVICE_NAME, operation=operation).inc()
    PRODUCT_GAUGE.labels(service=SERVICE_NAME).set(len(page.catalog.products))


@app.get("/metrics")
async def metrics():
    """Endpoint /metrics compatible Prometheus"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy", "service": SERVICE_NAME}


@app.get("/")
async def root():
    return RedirectResponse(PRODUCT_LIST_URL, status_code=301)


@app.get("/product-list")
async def product_list(request: Request, mode: RenderMode = Depends(render_mode)):
    async with page.lock:
        page.search_text = unquote(request.cookies.get(PRODUCT_SEARCH_COOKIE, ""))
        page.refresh()
        name = "index_main.html" if mode == RenderMode.FRAGMENT else "index.html"
        return render(templates, request, name, page)


@app.get("/add-product")
async def show_add_form(request: Request, mode: RenderMode = Depends(render_mode)):
    if mode != RenderMode.FRAGMENT:
        return RedirectResponse(PRODUCT_LIST_URL, status_code=307)
    async with page.lock:
        page.reset_form()
        return render(templates, request, "add_product.html", page)


@app.get("/product/{product_id}/delete")
async def show_delete_form(product_id: str, request: Request, mode: RenderMode = Depends(render_mode)):
    if mode != RenderMode.FRAGMENT:
        return RedirectResponse(PRODUCT_LIST_URL, status_code=307)
    async with page.lock:
        product = page.catalog.get(validate_product_id(product_id, page))
        form = page.reset_form()
        form.values["id"] = product_id
        form.values["name"] = product.name
        form.values["descr"] = product.descr
        return render(templates, request, "del_product.html", page)


@app.get("/product/{product_id}/edit")
async def show_edit_form(product_id: str, request: Request, mode: RenderMode = Depends(render_mode)):
    if mode != RenderMode.FRAGMENT:
        return RedirectResponse(PRODUCT_LIST_URL, status_code=307)
    async with page.lock:
        product = page.catalog.get(validate_product_id(product_id, page))
        form = page.reset_form()
        form.values["id"] = product_id
        form.values["name"] = product.name
        form.values["descr"] = product.descr
        form.values["price"] = f"{product.euro_price:.2f}"
        return render(templates, request, "edit_product.html", page)


@app.post("/product-list/search")
async def search_products(request: Request, search: str = Form("")):
    form = SearchForm(search=search)
    # les en-têtes Set-Cookie sont encodés en latin-1
    cookie_value = quote(form.search)
    async with page.lock:
        page.search_text = form.search
        page.refresh()
        logger.info(f"Search '{page.search_text}': {len(page.filtered_products)} products")
        response = render(templates, request, "search_results.html", page)
    response.set_cookie(PRODUCT_SEARCH_COOKIE, cookie_value)
    return response


@app.post("/add-product")
async def create_product(
    request: Request,
    name: str = Form(""),
    descr: str = Form(""),
    price: str = Form(""),
):
    form = ProductForm(name=name, descr=descr, price=price)
    logger.info(f"Creating product: {form.name}")
    async with page.lock:
        parsed_price, is_valid = validate_product_form(form.name, form.descr, form.price, "", True, page)
        if not is_valid:
            _validation_failed("/add-product")
            return render(templates, request, "add_product_form.html", page, status_code=422)

        product = page.catalog.create(form.name, form.descr, price_to_cents(parsed_price))
        page.refresh()
        page.reset_form()
        _record_mutation("create")
        logger.info(f"Product created with ID {product.id}")
        return render(templates, request, "index_main.html", page, headers=product_list_swap_headers())


@app.post("/product/{product_id}/edit")
async def update_product(
    product_id: str,
    request: Request,
    name: str = Form(""),
    descr: str = Form(""),
    price: str = Form(""),
):
    form = ProductForm(name=name, descr=descr, price=price)
    async with page.lock:
        product = page.catalog.get(validate_product_id(product_id, page))
        logger.info(f"Updating product {product.id}")

        check_name = product.name != form.name
        parsed_price, is_valid = validate_product_form(form.name, form.descr, form.price, product_id, check_name, page)
        if not is_valid:
            _validation_failed("/product/{product_id}/edit")
            return render(templates, request, "edit_product_form.html", page, status_code=422)

        product.name = form.name
        product.descr = form.descr
        product.price = price_to_cents(parsed_price)
        page.refresh()
        page.reset_form()
        _record_mutation("update")
        return render(templates, request, "index_main.html", page, headers=product_list_swap_headers())


@app.post("/product/{product_id}/delete")
async def delete_product(product_id: str, request: Request):
    async with page.lock:
        removed = page.catalog.remove(validate_product_id(product_id, page))
        page.refresh()
        _record_mutation("delete")
        logger.info(f"Product {removed.id} deleted")
        return render(templates, request, "index_main.html", page, headers=replace_url_headers())


if __name__ == "__main__":
    port = int(os.getenv("PORT", 8778))
    logger.info(f"Starting Catalog Service on port {port}")
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=port)
