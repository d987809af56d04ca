#shoppingcart/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from requests import RequestException
from sqlalchemy.orm import Session

from shoppingcart.data.database import get_db
from shoppingcart.domain.errors import (
    CurrencyMismatch,
    InvalidInput,
    ProductNotFound,
    RowNotFound,
    ShoppingCartNotFound,
    StaleCartError,
)
from shoppingcart.domain.schemas import (
    BuyableIn,
    CartOut,
    ItemIn,
    UpdateItemIn,
)
from shoppingcart.domain.shopping_cart import CartConfig
from shoppingcart.services.cart_service import CartService
from shoppingcart.services.product_client import ProductClient

router = APIRouter(prefix="/carts", tags=["carts"])


def get_product_client() -> ProductClient:
    return ProductClient()


def get_config() -> CartConfig:
    return CartConfig.from_settings()


def get_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
    config: CartConfig = Depends(get_config),
) -> CartService:
    return CartService(db=db, product_client=product_client, config=config)


def _raise_http(e: Exception):
    if isinstance(e, (RowNotFound, ShoppingCartNotFound, ProductNotFound)):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, StaleCartError):
        raise HTTPException(status_code=409, detail=str(e))
    if isinstance(e, (InvalidInput, CurrencyMismatch)):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, RequestException):
        raise HTTPException(status_code=502, detail=f"Product service error: {e}")
    raise e


@router.get("/{identifier}", response_model=CartOut)
def get_cart(
    identifier: str,
    name: str | None = Query(None),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.get_cart(identifier, name)
    except CurrencyMismatch as e:
        _raise_http(e)


@router.post("/{identifier}/items", response_model=CartOut)
def add_item(
    identifier: str,
    payload: ItemIn,
    name: str | None = Query(None),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.add_item(
            identifier=identifier,
            product_id=payload.product_id,
            name=payload.name,
            item_type=payload.type,
            quantity=payload.quantity,
            price=payload.price,
            currency=payload.currency,
            uri=payload.uri,
            options=payload.options,
            cart_name=name,
        )
    except (InvalidInput, CurrencyMismatch, StaleCartError) as e:
        _raise_http(e)


@router.post("/{identifier}/products", response_model=CartOut)
def add_product(
    identifier: str,
    payload: BuyableIn,
    name: str | None = Query(None),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.add_product(
            identifier=identifier,
            product_id=payload.product_id,
            quantity=payload.quantity,
            options=payload.options,
            cart_name=name,
        )
    except (InvalidInput, CurrencyMismatch, StaleCartError, ProductNotFound, RequestException) as e:
        _raise_http(e)


@router.patch("/{identifier}/items/{row_id}", response_model=CartOut)
def update_item(
    identifier: str,
    row_id: str,
    payload: UpdateItemIn,
    name: str | None = Query(None),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.update_item(identifier, row_id, payload.quantity, payload.options, cart_name=name)
    except (RowNotFound, InvalidInput, CurrencyMismatch, StaleCartError) as e:
        _raise_http(e)


@router.delete("/{identifier}/items/{row_id}", response_model=CartOut)
def remove_item(
    identifier: str,
    row_id: str,
    name: str | None = Query(None),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.remove_item(identifier, row_id, cart_name=name)
    except (CurrencyMismatch, StaleCartError) as e:
        _raise_http(e)


@router.get("/{identifier}/items/{row_id}/model")
def get_item_model(
    identifier: str,
    row_id: str,
    name: str | None = Query(None),
    svc: CartService = Depends(get_service),
):
    try:
        model = svc.resolve_item_model(identifier, row_id, cart_name=name)
    except RowNotFound as e:
        _raise_http(e)

    if model is None:
        raise HTTPException(status_code=404, detail="Brak powiazanego modelu")
    return model


@router.delete("/{identifier}", status_code=204)
def clear_cart(
    identifier: str,
    name: str | None = Query(None),
    svc: CartService = Depends(get_service),
):
    try:
        svc.clear(identifier, name)
    except ShoppingCartNotFound as e:
        _raise_http(e)
    return Response(status_code=204)
