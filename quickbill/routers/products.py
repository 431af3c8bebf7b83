from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill.core.storage import StorageClient, get_storage_client
from quickbill.crud.products import (
    create_product_in_db,
    delete_product_from_db,
    get_all_products_from_db,
    get_categories_from_db,
    get_product_from_db,
    update_product_in_db,
    upload_product_image,
)
from quickbill.db import get_db
from quickbill.dependencies.depend import authentication_get_current_user
from quickbill.schemas.auth import CurrentUser
from quickbill.schemas.product import ProductCreate, ProductRead, ProductUpdate

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("/", response_model=list[ProductRead])
async def get_all_products(
    search: str | None = Query(default=None, max_length=100),
    category: str | None = None,
    available: bool | None = None,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(authentication_get_current_user),
):
    logger.info("Request to GET all products")

    try:
        response = await get_all_products_from_db(user.id, db, search=search, category=category, available=available)
        logger.info(
            "Successfully retrieved products list, count={count}",
            count=len(response),
        )
        return response
    except Exception:
        logger.exception("Error while getting all products")
        raise


@router.get("/categories", response_model=list[str])
async def get_categories(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(authentication_get_current_user),
):
    return await get_categories_from_db(user.id, db)


@router.get("/{id}", response_model=ProductRead)
async def get_product(
    id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(authentication_get_current_user),
):
    logger.info(
        "Request to GET product with id={id}",
        id=str(id),
    )
    return await get_product_from_db(id, user.id, db)


@router.post("/", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    product: ProductCreate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(authentication_get_current_user),
):
    logger.info(
        "Request to CREATE product with name={name}",
        name=product.name,
    )

    try:
        response = await create_product_in_db(product, user.id, db)
        logger.info(
            "Product successfully created: id={id}",
            id=str(response.id),
        )
        return response
    except Exception:
        logger.exception("Error while creating product")
        raise


@router.patch("/{id}", response_model=ProductRead)
async def update_product(
    id: UUID,
    data: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(authentication_get_current_user),
):
    logger.info(
        "Request to UPDATE product with id={id}",
        id=str(id),
    )
    return await update_product_in_db(id, data, user.id, db)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(authentication_get_current_user),
):
    logger.info(
        "Request to DELETE product with id={id}",
        id=str(id),
    )
    await delete_product_from_db(id, user.id, db)


@router.post("/{id}/image", response_model=ProductRead)
async def upload_image(
    id: UUID,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client),
    user: CurrentUser = Depends(authentication_get_current_user),
):
    logger.info(
        "Request to UPLOAD image for product id={id}, filename={filename}",
        id=str(id),
        filename=file.filename,
    )
    content = await file.read()
    return await upload_product_image(
        id,
        user.id,
        file.filename or "",
        content,
        file.content_type,
        storage,
        db,
    )
