from datetime import datetime, timezone
from pathlib import PurePosixPath
from uuid import UUID

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill.core.config import settings
from quickbill.core.metrics import PRODUCTS_DB_OPERATIONS_TOTAL
from quickbill.core.storage import StorageClient, StorageError
from quickbill.models.product import Product
from quickbill.schemas.product import ProductCreate, ProductRead, ProductUpdate

SERVICE_NAME = settings.SERVICE_NAME

ALLOWED_IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}


def _count(operation: str, result: str) -> None:
    PRODUCTS_DB_OPERATIONS_TOTAL.labels(
        service=SERVICE_NAME,
        operation=operation,
        status=result,
    ).inc()


async def _get_owned_product(product_id: UUID, user_id: UUID, db: AsyncSession, operation: str) -> Product:
    result = await db.execute(
        select(Product).where(Product.id == product_id, Product.user_id == user_id)
    )
    product = result.scalar_one_or_none()
    if not product:
        logger.warning(
            "Product not found for user. product_id='{product_id}', user_id='{user_id}'",
            product_id=str(product_id),
            user_id=str(user_id),
        )
        _count(operation, "not_found")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


async def get_all_products_from_db(
    user_id: UUID,
    db: AsyncSession,
    search: str | None = None,
    category: str | None = None,
    available: bool | None = None,
) -> list[ProductRead]:
    logger.info(
        "Request to get products from DB for user_id='{user_id}', search={search}, category={category}, available={available}",
        user_id=str(user_id),
        search=search,
        category=category,
        available=available,
    )

    q = select(Product).where(Product.user_id == user_id)
    if search:
        pattern = f"%{search.lower()}%"
        q = q.where(
            or_(
                func.lower(Product.name).like(pattern),
                func.lower(Product.description).like(pattern),
            )
        )
    if category:
        q = q.where(Product.category == category)
    if available is not None:
        q = q.where(Product.is_available == available)
    q = q.order_by(Product.created_at.desc())

    result = await db.execute(q)
    products = result.scalars().all()

    logger.info(
        "Products list retrieved from DB, count={count}",
        count=len(products),
    )
    _count("list", "success")
    return [ProductRead.model_validate(p) for p in products]


async def get_categories_from_db(user_id: UUID, db: AsyncSession) -> list[str]:
    result = await db.execute(
        select(Product.category)
        .where(Product.user_id == user_id, Product.category.is_not(None), Product.category != "")
        .distinct()
        .order_by(Product.category)
    )
    categories = list(result.scalars().all())
    logger.info(
        "Categories retrieved for user_id='{user_id}', count={count}",
        user_id=str(user_id),
        count=len(categories),
    )
    return categories


async def get_product_from_db(product_id: UUID, user_id: UUID, db: AsyncSession) -> ProductRead:
    logger.info(
        "Request to get product from DB with id={id}",
        id=str(product_id),
    )
    product = await _get_owned_product(product_id, user_id, db, "get")
    _count("get", "success")
    return ProductRead.model_validate(product)


async def create_product_in_db(data: ProductCreate, user_id: UUID, db: AsyncSession) -> ProductRead:
    logger.info(
        "Attempt to create a new product for user_id='{user_id}' with name='{name}'",
        user_id=str(user_id),
        name=data.name,
    )

    new_product = Product(user_id=user_id, **data.model_dump())
    db.add(new_product)
    await db.commit()
    await db.refresh(new_product)

    logger.info(
        "Product successfully created in DB: id={id}",
        id=str(new_product.id),
    )
    _count("create", "success")
    return ProductRead.model_validate(new_product)


async def update_product_in_db(product_id: UUID, data: ProductUpdate, user_id: UUID, db: AsyncSession) -> ProductRead:
    logger.info(
        "Attempt to update product with id={id}",
        id=str(product_id),
    )
    product = await _get_owned_product(product_id, user_id, db, "update")

    changes = data.model_dump(exclude_unset=True)
    logger.debug(
        "Applying updates to product id={id}: fields={fields}",
        id=str(product_id),
        fields=list(changes.keys()),
    )
    for field, value in changes.items():
        if field in ("name", "price", "is_available") and value is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"'{field}' cannot be null")
        setattr(product, field, value)

    await db.commit()
    await db.refresh(product)

    logger.info(
        "Product successfully updated in DB: id={id}",
        id=str(product_id),
    )
    _count("update", "success")
    return ProductRead.model_validate(product)


async def delete_product_from_db(product_id: UUID, user_id: UUID, db: AsyncSession) -> None:
    logger.info(
        "Attempt to delete product with id={id}",
        id=str(product_id),
    )
    product = await _get_owned_product(product_id, user_id, db, "delete")

    await db.delete(product)
    await db.commit()

    logger.info(
        "Product with id={id} successfully deleted from DB",
        id=str(product_id),
    )
    _count("delete", "success")


async def upload_product_image(
    product_id: UUID,
    user_id: UUID,
    filename: str,
    content: bytes,
    content_type: str | None,
    storage: StorageClient,
    db: AsyncSession,
) -> ProductRead:
    product = await _get_owned_product(product_id, user_id, db, "upload_image")

    ext = PurePosixPath(filename or "").suffix.lower()
    if ext not in ALLOWED_IMAGE_EXTS:
        _count("upload_image", "bad_extension")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported image type '{ext or filename}'",
        )
    if not content:
        _count("upload_image", "empty")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty image file")

    stamp = int(datetime.now(timezone.utc).timestamp() * 1000)
    path = f"{user_id}/{stamp}{ext}"
    try:
        url = await storage.upload(path, content, content_type)
    except StorageError as e:
        logger.error(
            "Image upload failed for product_id='{product_id}': {error}",
            product_id=str(product_id),
            error=str(e),
        )
        _count("upload_image", "storage_error")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to upload image")

    product.image_url = url
    await db.commit()
    await db.refresh(product)

    logger.info(
        "Image stored for product_id='{product_id}' at '{url}'",
        product_id=str(product_id),
        url=url,
    )
    _count("upload_image", "success")
    return ProductRead.model_validate(product)
