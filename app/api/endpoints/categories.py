from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud import crud_category
from app.core.dependencies import get_current_active_admin
from app.db.session import get_db
from app.models.user import User as UserModel
from app.schemas.category import ProductCategory, ProductCategoryCreate, ProductCategoryUpdate, MasterCategory

router = APIRouter()

@router.get("/", response_model=List[ProductCategory])
def read_categories(
    db: Session = Depends(get_db),
    master_category: Optional[MasterCategory] = Query(None, description="Filter by master category")
):
    return crud_category.get_categories(db, master_category=master_category)

@router.post("/", response_model=ProductCategory, status_code=201)
def create_category(
    category_in: ProductCategoryCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    return crud_category.create_category(db=db, obj_in=category_in)

@router.patch("/{category_id}", response_model=ProductCategory)
def update_category(
    category_id: int,
    category_in: ProductCategoryUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    db_category = crud_category.get_category(db, category_id)
    if not db_category:
        raise HTTPException(status_code=404, detail="Category not found")
    return crud_category.update_category(db=db, db_obj=db_category, obj_in=category_in)

@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Delete a category. Refused while any product still belongs to it.
    """
    if not crud_category.get_category(db, category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    if crud_category.count_products_in_category(db, category_id=category_id) > 0:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete category with products. Please move or delete the products first.",
        )
    crud_category.delete_category(db, category_id=category_id)
    return Response(status_code=204)
