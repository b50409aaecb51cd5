"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from storefront.api.sessions import ClientSession, SessionRegistry
from storefront.catalog import Catalog, FilterSynchronizer, build_filter_options, list_products, localize_product, related_products
from storefront.commerce import (
    CartStore,
    CheckoutValidationError,
    EventBus,
    FavoritesStore,
    ShippingTable,
    build_cart_lines,
    build_checkout_summary,
    place_order,
)
from storefront.database import create_storage
from storefront.error_handler import ErrorHandler
from storefront.integrations.clients import create_catalog_client
from storefront.integrations.contracts import CatalogUnavailable
from storefront.language_preference import LanguagePreference
from storefront.utils.config_loader import StorefrontConfig, load_storefront_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent

# Initialize FastAPI app
app = FastAPI(
    title="Storefront Engine API",
    description="Bilingual catalog resolution, cart, favorites and checkout",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

try:
    config = load_storefront_config()
except FileNotFoundError as e:
    logger.warning("%s; using built-in defaults", e)
    config = StorefrontConfig()

languages = config.languages.as_languages()

# REDIS_URL in the environment switches to Redis regardless of storage.backend
storage = create_storage(backend=config.storage.backend, namespace=config.storage.namespace)

_local_path = Path(config.catalog.local_path)
catalog_client = create_catalog_client(
    source=config.catalog.source,
    base_url=config.catalog.base_url,
    local_path=str(_local_path if _local_path.is_absolute() else PROJECT_ROOT / _local_path),
    timeout_seconds=config.catalog.timeout_seconds,
    languages=languages,
)

error_handler = ErrorHandler()

_catalog: Optional[Catalog] = None
_shipping_table: Optional[ShippingTable] = None


def _open_session(client_id: str) -> ClientSession:
    view = storage.view(client_id)
    events = EventBus()
    return ClientSession(
        view=view,
        events=events,
        cart=CartStore(view, events),
        favorites=FavoritesStore(view, events),
        language=LanguagePreference(view, languages, default=config.languages.default),
    )


sessions = SessionRegistry(
    _open_session,
    max_sessions=config.storage.max_sessions,
    idle_seconds=config.storage.session_idle_seconds,
)


async def get_session(x_storefront_client: str = Header(default="default")) -> ClientSession:
    # must stay async: the registry is only touched from the event loop
    session = sessions.get(x_storefront_client)
    session.view.dispatch_pending()
    return session


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    payload = error_handler.handle_exception(exc, {"method": request.method, "path": request.url.path})
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


async def get_catalog() -> Catalog:
    global _catalog
    if _catalog is None:
        try:
            _catalog = await catalog_client.load_catalog()
        except CatalogUnavailable as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=error_handler.handle_catalog_failure(e, {"source": type(catalog_client).__name__}),
            )
    return _catalog


async def get_shipping_table() -> ShippingTable:
    """Shipping options from the catalog source, else the configured destinations."""
    global _shipping_table
    if _shipping_table is None:
        try:
            options = await catalog_client.list_shipping_options()
        except CatalogUnavailable as e:
            logger.warning("Shipping options unavailable (%s); using configured destinations", e)
            options = []
        _shipping_table = ShippingTable(options) if options else ShippingTable.from_costs(config.shipping.destinations)
    return _shipping_table


def _language(lang: Optional[str], session: ClientSession) -> str:
    if not lang:
        return session.language.current
    if lang not in languages.codes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unsupported language: {lang}")
    return lang


# ============================================================================
# REQUEST MODELS
# ============================================================================


class CartAddRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1)


class CartQuantityRequest(BaseModel):
    quantity: int


class LanguageRequest(BaseModel):
    language: str


class CheckoutRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    destination: Optional[str] = None
    address: Optional[str] = None
    order_notes: Optional[str] = None
    payment_method: Optional[str] = None
    terms_accepted: Any = False


# ============================================================================
# HEALTH
# ============================================================================


@app.get("/health", tags=["Health"])
async def health_check():
    try:
        storage_ok = storage.ping()
    except Exception as e:
        logger.warning("Storage health check failed: %s", e)
        storage_ok = False
    return {
        "status": "healthy" if storage_ok else "degraded",
        "storage": "connected" if storage_ok else "unavailable",
        "catalog_loaded": _catalog is not None,
        "timestamp": datetime.now().isoformat(),
    }


api_router = APIRouter()

# ============================================================================
# CATALOG
# ============================================================================


@api_router.get("/products", tags=["Products"])
async def get_products(
    category: Optional[str] = Query(default=None),
    subcategory: Optional[str] = Query(default=None),
    lang: Optional[str] = Query(default=None),
    q: str = Query(default=""),
    sort: str = Query(default="name"),
    session: ClientSession = Depends(get_session),
):
    catalog = await get_catalog()
    language = _language(lang, session)
    sync = FilterSynchronizer(
        catalog.categories,
        catalog.subcategories,
        language,
        {"category": category or "", "subcategory": subcategory or ""},
        languages,
    )
    products = list_products(catalog, language, sync.selection, q, sort, languages)
    return {
        "language": language,
        "selection": sync.selection,
        "count": len(products),
        "products": [p.to_dict() for p in products],
    }


@api_router.get("/filters", tags=["Products"])
async def get_filters(
    category: Optional[str] = Query(default=None),
    subcategory: Optional[str] = Query(default=None),
    lang: Optional[str] = Query(default=None),
    previous_lang: Optional[str] = Query(default=None),
    session: ClientSession = Depends(get_session),
):
    """Filter options plus the active selection.

    With `previous_lang`, the query parameters are read as labels in that
    language and translated into `lang`, returning the rewritten query string.
    """
    catalog = await get_catalog()
    language = _language(lang, session)
    query = {"category": category or "", "subcategory": subcategory or ""}
    if previous_lang:
        sync = FilterSynchronizer(catalog.categories, catalog.subcategories, _language(previous_lang, session), query, languages)
        sync.on_language_change(language)
    else:
        sync = FilterSynchronizer(catalog.categories, catalog.subcategories, language, query, languages)
    return {
        "language": language,
        "options": build_filter_options(catalog.categories, catalog.subcategories, catalog.products, language, languages),
        "selection": sync.selection,
        "query": sync.query_string(),
    }


@api_router.get("/products/{product_id}", tags=["Products"])
async def get_product(
    product_id: str,
    lang: Optional[str] = Query(default=None),
    session: ClientSession = Depends(get_session),
):
    catalog = await get_catalog()
    language = _language(lang, session)
    product = catalog.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return {
        "product": localize_product(product, language, languages).to_dict(),
        "related": [p.to_dict() for p in related_products(catalog, product_id, language, languages=languages)],
        "in_cart": session.cart.is_in_cart(product_id),
        "is_favorite": session.favorites.is_favorite(product_id),
    }


# ============================================================================
# CART
# ============================================================================


async def _cart_response(session: ClientSession, language: str) -> Dict[str, Any]:
    catalog = await get_catalog()
    entries = session.cart.get()
    return {
        "items": [entry.to_dict() for entry in entries],
        "lines": [line.to_dict() for line in build_cart_lines(entries, catalog, language, languages)],
        "item_count": session.cart.item_count(),
        "subtotal": session.cart.total(catalog.price_by_id()),
        "currency": config.commerce.currency,
    }


@api_router.get("/cart", tags=["Cart"])
async def get_cart(lang: Optional[str] = Query(default=None), session: ClientSession = Depends(get_session)):
    return await _cart_response(session, _language(lang, session))


@api_router.post("/cart", tags=["Cart"])
async def add_to_cart(
    request: CartAddRequest,
    lang: Optional[str] = Query(default=None),
    session: ClientSession = Depends(get_session),
):
    catalog = await get_catalog()
    if catalog.get_product(request.product_id) is None:
        raise HTTPException(status_code=404, detail="Product not found")
    session.cart.add(request.product_id, request.quantity)
    return await _cart_response(session, _language(lang, session))


@api_router.patch("/cart/{product_id}", tags=["Cart"])
async def update_cart_quantity(
    product_id: str,
    request: CartQuantityRequest,
    lang: Optional[str] = Query(default=None),
    session: ClientSession = Depends(get_session),
):
    session.cart.set_quantity(product_id, request.quantity)
    return await _cart_response(session, _language(lang, session))


@api_router.delete("/cart/{product_id}", tags=["Cart"])
async def remove_from_cart(
    product_id: str,
    lang: Optional[str] = Query(default=None),
    session: ClientSession = Depends(get_session),
):
    session.cart.remove(product_id)
    return await _cart_response(session, _language(lang, session))


@api_router.delete("/cart", tags=["Cart"])
async def clear_cart(lang: Optional[str] = Query(default=None), session: ClientSession = Depends(get_session)):
    session.cart.clear()
    return await _cart_response(session, _language(lang, session))


# ============================================================================
# FAVORITES
# ============================================================================


@api_router.get("/favorites", tags=["Favorites"])
async def get_favorites(lang: Optional[str] = Query(default=None), session: ClientSession = Depends(get_session)):
    catalog = await get_catalog()
    language = _language(lang, session)
    ids = session.favorites.get()
    products = [catalog.get_product(pid) for pid in ids]
    return {
        "ids": ids,
        "products": [localize_product(p, language, languages).to_dict() for p in products if p is not None],
    }


@api_router.post("/favorites/{product_id}/toggle", tags=["Favorites"])
async def toggle_favorite(product_id: str, session: ClientSession = Depends(get_session)):
    ids = session.favorites.toggle(product_id)
    return {"ids": ids, "is_favorite": product_id in ids}


# ============================================================================
# LANGUAGE
# ============================================================================


@api_router.get("/language", tags=["Language"])
async def get_language(session: ClientSession = Depends(get_session)):
    return {"language": session.language.current, "rtl": session.language.is_rtl, "available": list(languages.codes)}


@api_router.put("/language", tags=["Language"])
async def set_language(request: LanguageRequest, session: ClientSession = Depends(get_session)):
    try:
        current = session.language.change(request.language)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"language": current, "rtl": session.language.is_rtl, "available": list(languages.codes)}


# ============================================================================
# CHECKOUT
# ============================================================================


@api_router.get("/checkout/summary", tags=["Checkout"])
async def get_checkout_summary(
    destination: Optional[str] = Query(default=None),
    lang: Optional[str] = Query(default=None),
    session: ClientSession = Depends(get_session),
):
    catalog = await get_catalog()
    shipping_table = await get_shipping_table()
    summary = build_checkout_summary(
        session.cart,
        catalog,
        _language(lang, session),
        config.commerce.tax_rate,
        shipping_table=shipping_table,
        destination=destination,
        languages=languages,
    )
    payload = summary.to_dict()
    payload["currency"] = config.commerce.currency
    payload["tax_rate"] = config.commerce.tax_rate
    payload["destinations"] = shipping_table.to_dict()
    return payload


@api_router.post("/checkout", tags=["Checkout"])
async def checkout(
    request: CheckoutRequest,
    lang: Optional[str] = Query(default=None),
    session: ClientSession = Depends(get_session),
):
    catalog = await get_catalog()
    shipping_table = await get_shipping_table()
    try:
        order = place_order(
            request.model_dump(),
            session.cart,
            catalog,
            _language(lang, session),
            config.commerce.tax_rate,
            shipping_table,
            languages,
        )
    except CheckoutValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "validation_error",
                "message": e.message,
                "field_errors": e.field_errors,
            },
        )
    payload = order.to_dict()
    payload["currency"] = config.commerce.currency
    return payload


# ============================================================================
# SHUTDOWN
# ============================================================================


@app.on_event("shutdown")
async def shutdown_event():
    """Close every open client view."""
    logger.info("Shutting down Storefront Engine API (%d open sessions)", len(sessions))
    sessions.close_all()


app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
