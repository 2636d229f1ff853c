from sqlalchemy.orm import Session, joinedload
from typing import Optional, List

from app.models.product import Product
from app.models.category import ProductCategory
from app.schemas.product import ProductCreate, ProductUpdate

def get_product(db: Session, product_id: int) -> Optional[Product]:
    """
    Get a single product by ID with its category, which carries the master category.
    """
    return (
        db.query(Product)
        .options(joinedload(Product.category))
        .filter(Product.id == product_id)
        .first()
    )

def get_products(
    db: Session, *, status: Optional[str] = None, skip: int = 0, limit: int = 100
) -> List[Product]:
    """
    Get all products, optionally filtered by status. Ordered by name.
    """
    query = db.query(Product).options(joinedload(Product.category))
    if status is not None:
        query = query.filter(Product.status == status)
    return query.order_by(Product.name).offset(skip).limit(limit).all()

def get_products_by_master_category(
    db: Session, *, master_category: str, status: Optional[str] = None, skip: int = 0, limit: int = 100
) -> List[Product]:
    """
    Get products whose category belongs to the given master category ("MTN Fixed" / "MTN GSM"),
    optionally filtered by status.
    """
    query = (
        db.query(Product)
        .join(ProductCategory, Product.category_id == ProductCategory.id)
        .options(joinedload(Product.category))
        .filter(ProductCategory.master_category == master_category)
    )
    if status is not None:
        query = query.filter(Product.status == status)
    return (
        query
        .order_by(Product.name)
        .offset(skip)
        .limit(limit)
        .all()
    )

def get_products_by_category(db: Session, *, category_id: int) -> List[Product]:
    return db.query(Product).filter(Product.category_id == category_id).order_by(Product.name).all()

def create_product(db: Session, *, obj_in: ProductCreate) -> Product:
    db_obj = Product(**obj_in.model_dump())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def update_product(db: Session, *, db_obj: Product, obj_in: ProductUpdate) -> Product:
    # exclude_unset keeps partial updates partial
    update_data = obj_in.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        setattr(db_obj, field, value)

    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def delete_product(db: Session, *, product_id: int) -> Optional[Product]:
    """
    Permanently delete a product.
    Returns the deleted product if found and deleted, otherwise None.
    """
    db_obj = db.query(Product).filter(Product.id == product_id).first()
    if db_obj:
        db.delete(db_obj)
        db.commit()
        return db_obj
    return None
