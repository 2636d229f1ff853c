from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud import crud_product, crud_category
from app.core.pricing import quote_product
from app.schemas.category import MasterCategory
from app.schemas.product import Product, ProductCreate, ProductUpdate, PriceQuote
from app.db.session import get_db
from app.core.dependencies import get_current_active_admin, get_current_active_user
from app.models.user import User as UserModel

router = APIRouter()

def _check_category(db: Session, category_id: Optional[int]):
    if category_id is not None and not crud_category.get_category(db, category_id):
        raise HTTPException(status_code=404, detail=f"Category with id {category_id} not found.")

@router.post("/", response_model=Product, status_code=201)
def create_product(
    product_in: ProductCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin) # Admin only
):
    _check_category(db, product_in.category_id)
    return crud_product.create_product(db=db, obj_in=product_in)

@router.get("/", response_model=List[Product])
def read_products(
    db: Session = Depends(get_db),
    master_category: Optional[MasterCategory] = Query(None, description="Filter by master category (MTN Fixed / MTN GSM)"),
    status: Optional[str] = Query(None, pattern="^(active|limited|outofstock)$"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    """
    Retrieve the product catalog.
    """
    if master_category:
        return crud_product.get_products_by_master_category(
            db=db, master_category=master_category, status=status, skip=skip, limit=limit
        )
    return crud_product.get_products(db=db, status=status, skip=skip, limit=limit)

@router.get("/{product_id}", response_model=Product)
def read_product(product_id: int, db: Session = Depends(get_db)):
    db_product = crud_product.get_product(db, product_id=product_id)
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_product

@router.get("/{product_id}/quote", response_model=PriceQuote)
def read_product_quote(
    product_id: int,
    on: Optional[date] = Query(None, description="Purchase date, defaults to today"),
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user)
):
    """
    Price the current user would pay for a product: their reseller-group price with the pro-rata discount applied.
    """
    db_product = crud_product.get_product(db, product_id=product_id)
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")

    reference_date = on or date.today()
    quote = quote_product(db_product, current_user.reseller_group, reference_date)
    return PriceQuote(
        product_id=db_product.id,
        reseller_group=current_user.reseller_group,
        reference_date=reference_date,
        original_price=quote.original_price,
        discount_percentage=quote.discount_percentage,
        final_price=quote.final_price,
        currency=quote.currency,
    )

@router.put("/{product_id}", response_model=Product)
def update_product(
    product_id: int,
    product_in: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin) # Admin only
):
    db_product = crud_product.get_product(db, product_id=product_id)
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")
    if "category_id" in product_in.model_fields_set:
        _check_category(db, product_in.category_id)
    return crud_product.update_product(db=db, db_obj=db_product, obj_in=product_in)

@router.delete("/{product_id}", response_model=Product)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin) # Admin only
):
    """
    Delete a product. Products still referenced by orders or user products cannot be deleted.
    """
    db_product = crud_product.get_product(db, product_id=product_id)
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")
    deleted = Product.model_validate(db_product)
    try:
        crud_product.delete_product(db=db, product_id=product_id)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Product is referenced by orders or user products")
    return deleted
