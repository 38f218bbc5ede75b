"""
Catalog API endpoints: brands, toners and drums.

Toners and drums share one set of routes under /supplies/{kind}.
Domain errors propagate to the handler registered in main, which
renders them with their code and status.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from supply_ledger.exceptions import SupplyLedgerError
from supply_ledger.models.base import get_db
from supply_ledger.services.catalog_service import CatalogService
from supply_ledger.services.stock_ledger import StockLedger
from supply_ledger.schemas.catalog import (
    BrandCreate,
    BrandUpdate,
    BrandResponse,
    SupplyPath,
    SupplyItemCreate,
    SupplyItemUpdate,
    SupplyItemResponse,
    StockResponse,
    StockIntegrityResponse,
)

router = APIRouter(tags=["Catalog"])


# --- Brand Endpoints ---

@router.post("/brands", response_model=BrandResponse, status_code=201)
def create_brand(
    request: BrandCreate,
    db: Session = Depends(get_db),
):
    service = CatalogService(db)
    try:
        brand = service.create_brand(request)
        db.commit()
        return brand
    except SupplyLedgerError:
        db.rollback()
        raise


@router.get("/brands", response_model=list[BrandResponse])
def list_brands(db: Session = Depends(get_db)):
    return CatalogService(db).list_brands()


@router.get("/brands/{brand_id}", response_model=BrandResponse)
def get_brand(brand_id: uuid.UUID, db: Session = Depends(get_db)):
    return CatalogService(db).get_brand(brand_id)


@router.patch("/brands/{brand_id}", response_model=BrandResponse)
def update_brand(
    brand_id: uuid.UUID,
    request: BrandUpdate,
    db: Session = Depends(get_db),
):
    service = CatalogService(db)
    try:
        brand = service.update_brand(brand_id, request)
        db.commit()
        return brand
    except SupplyLedgerError:
        db.rollback()
        raise


@router.delete("/brands/{brand_id}", status_code=204)
def delete_brand(brand_id: uuid.UUID, db: Session = Depends(get_db)):
    """Delete a brand. Printers of the brand are kept."""
    service = CatalogService(db)
    try:
        service.delete_brand(brand_id)
        db.commit()
    except SupplyLedgerError:
        db.rollback()
        raise


# --- Supply Item Endpoints ---

@router.post(
    "/supplies/{kind}", response_model=SupplyItemResponse, status_code=201
)
def create_item(
    kind: SupplyPath,
    request: SupplyItemCreate,
    db: Session = Depends(get_db),
):
    """Add a toner or drum with its initial stock."""
    service = CatalogService(db)
    try:
        item = service.create_item(kind.kind, request)
        db.commit()
        return item
    except SupplyLedgerError:
        db.rollback()
        raise


@router.get("/supplies/{kind}", response_model=list[SupplyItemResponse])
def list_items(kind: SupplyPath, db: Session = Depends(get_db)):
    return CatalogService(db).list_items(kind.kind)


@router.get("/supplies/{kind}/count", response_model=int)
def count_items(kind: SupplyPath, db: Session = Depends(get_db)):
    return CatalogService(db).count_items(kind.kind)


@router.get("/supplies/{kind}/{item_id}", response_model=SupplyItemResponse)
def get_item(
    kind: SupplyPath,
    item_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    return CatalogService(db).get_item(item_id, kind.kind)


@router.patch("/supplies/{kind}/{item_id}", response_model=SupplyItemResponse)
def update_item(
    kind: SupplyPath,
    item_id: uuid.UUID,
    request: SupplyItemUpdate,
    db: Session = Depends(get_db),
):
    """Update name, color or price. Stock cannot be set here."""
    service = CatalogService(db)
    try:
        item = service.update_item(item_id, kind.kind, request)
        db.commit()
        return item
    except SupplyLedgerError:
        db.rollback()
        raise


@router.delete("/supplies/{kind}/{item_id}", status_code=204)
def delete_item(
    kind: SupplyPath,
    item_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    """
    Delete a toner or drum.

    Its movements are kept as history with the item reference
    cleared.
    """
    service = CatalogService(db)
    try:
        service.delete_item(item_id, kind.kind)
        db.commit()
    except SupplyLedgerError:
        db.rollback()
        raise


@router.get("/supplies/{kind}/{item_id}/stock", response_model=StockResponse)
def get_stock(
    kind: SupplyPath,
    item_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    """Current stock, read from the materialized aggregate."""
    CatalogService(db).get_item(item_id, kind.kind)
    stock = StockLedger(db).current_stock(item_id)
    return StockResponse(item_id=item_id, kind=kind.kind, stock=stock)


@router.get(
    "/supplies/{kind}/{item_id}/integrity",
    response_model=StockIntegrityResponse,
)
def verify_stock(
    kind: SupplyPath,
    item_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    """Compare stored stock with baseline plus surviving movements."""
    CatalogService(db).get_item(item_id, kind.kind)
    return StockLedger(db).verify_stock(item_id)
