from sqlalchemy.orm import Session
from typing import Optional, List

from app.models.category import ProductCategory
from app.models.product import Product
from app.schemas.category import ProductCategoryCreate, ProductCategoryUpdate

def get_category(db: Session, category_id: int) -> Optional[ProductCategory]:
    return db.query(ProductCategory).filter(ProductCategory.id == category_id).first()

def get_categories(db: Session, *, master_category: Optional[str] = None) -> List[ProductCategory]:
    query = db.query(ProductCategory)
    if master_category:
        query = query.filter(ProductCategory.master_category == master_category)
    return query.order_by(ProductCategory.name).all()

def create_category(db: Session, *, obj_in: ProductCategoryCreate) -> ProductCategory:
    db_obj = ProductCategory(**obj_in.model_dump())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def update_category(db: Session, *, db_obj: ProductCategory, obj_in: ProductCategoryUpdate) -> ProductCategory:
    for field, value in obj_in.model_dump(exclude_unset=True).items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def count_products_in_category(db: Session, *, category_id: int) -> int:
    return db.query(Product).filter(Product.category_id == category_id).count()

def delete_category(db: Session, *, category_id: int) -> Optional[ProductCategory]:
    """
    Permanently delete a category. Callers must check it has no products first.
    Returns the deleted category if found, otherwise None.
    """
    db_obj = get_category(db, category_id)
    if db_obj:
        db.delete(db_obj)
        db.commit()
        return db_obj
    return None
