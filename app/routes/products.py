from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from app.config import settings
from app.database import get_session
from app.models.product import Product, ProductOptionValue
from app.schemas.product_schemas import ProductOut, ProductOptionOut
from app.utils.money import format_money
from app.utils.pagination import paginate

router = APIRouter()


def _product_out(session: Session, product: Product) -> ProductOut:
    options = session.exec(
        select(ProductOptionValue)
        .where(ProductOptionValue.product_id == product.id)
        .order_by(ProductOptionValue.group_key, ProductOptionValue.id)
    ).all()

    return ProductOut(
        id=product.id,
        name=product.name,
        slug=product.slug,
        description=product.description,
        base_price_cents=product.base_price_cents,
        price_label=format_money(product.base_price_cents, settings.currency),
        image=product.image,
        options=[
            ProductOptionOut(
                group_key=o.group_key,
                value=o.value,
                price_delta_cents=o.price_delta_cents,
            )
            for o in options
        ],
    )


@router.get("/")
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None),
    session: Session = Depends(get_session),
):
    query = select(Product).where(Product.is_active == True)  # noqa: E712

    if search:
        query = query.where(Product.name.ilike(f"%{search.strip()}%"))

    page_data = paginate(
        session=session,
        query=query.order_by(Product.id),
        page=page,
        limit=limit,
    )
    page_data["results"] = [_product_out(session, p) for p in page_data["results"]]
    return page_data


@router.get("/{slug}", response_model=ProductOut)
def get_product(slug: str, session: Session = Depends(get_session)):
    product = session.exec(
        select(Product).where(Product.slug == slug, Product.is_active == True)  # noqa: E712
    ).first()

    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    return _product_out(session, product)
