"""Tests for the catalog provider"""
from decimal import Decimal

import pytest

from smartcart.services.catalog import CatalogService
from smartcart.services.repositories import ProductRepository


@pytest.fixture
def catalog_service(mock_supabase_client):
    return CatalogService(ProductRepository(mock_supabase_client))


@pytest.mark.asyncio
async def test_fetch_all(catalog_service, mock_supabase_client, sample_product_row):
    mock_supabase_client.table.return_value.execute.return_value.data = [sample_product_row]

    products = await catalog_service.fetch_all()

    mock_supabase_client.table.assert_called_with("products")
    assert len(products) == 1
    assert products[0].name == "Apple"
    assert products[0].price == Decimal("2.0")


@pytest.mark.asyncio
async def test_fetch_all_tolerates_null_columns(catalog_service, mock_supabase_client, sample_product_row):
    sparse_row = {
        "id": 7,
        "name": "Mango",
        "price": 1.5,
        "category": None,
        "stock": None,
        "description": None,
        "image_url": None,
        "rating": None,
    }
    mock_supabase_client.table.return_value.execute.return_value.data = [sample_product_row, sparse_row]

    products = await catalog_service.fetch_all()

    assert [p.name for p in products] == ["Apple", "Mango"]
    mango = products[1]
    assert mango.id == "7"
    assert (mango.category, mango.description, mango.image_url) == ("", "", "")
    assert (mango.stock, mango.rating) == (0, 0.0)


@pytest.mark.asyncio
async def test_fetch_all_skips_invalid_rows(catalog_service, mock_supabase_client, sample_product_row):
    broken_row = {"id": "8", "name": None, "price": -3}
    mock_supabase_client.table.return_value.execute.return_value.data = [broken_row, sample_product_row]

    products = await catalog_service.fetch_all()

    assert [p.name for p in products] == ["Apple"]


@pytest.mark.asyncio
async def test_fetch_all_failure_returns_empty(catalog_service, mock_supabase_client):
    mock_supabase_client.table.return_value.execute.side_effect = ConnectionError("supabase down")

    assert await catalog_service.fetch_all() == []


@pytest.mark.asyncio
async def test_fetch_by_id(catalog_service, mock_supabase_client, sample_product_row):
    mock_supabase_client.table.return_value.execute.return_value.data = [sample_product_row]

    product = await catalog_service.fetch_by_id("product-123")

    mock_supabase_client.table.return_value.eq.assert_called_with("id", "product-123")
    assert product.id == "product-123"


@pytest.mark.asyncio
async def test_fetch_by_id_not_found(catalog_service, mock_supabase_client):
    mock_supabase_client.table.return_value.execute.return_value.data = []

    assert await catalog_service.fetch_by_id("missing") is None


@pytest.mark.asyncio
async def test_fetch_by_id_failure_returns_none(catalog_service, mock_supabase_client):
    mock_supabase_client.table.return_value.execute.side_effect = TimeoutError()

    assert await catalog_service.fetch_by_id("product-123") is None


@pytest.mark.asyncio
async def test_fetch_by_category(catalog_service, mock_supabase_client, sample_product_row):
    mock_supabase_client.table.return_value.execute.return_value.data = [sample_product_row]

    products = await catalog_service.fetch_by_category("Fruit")

    mock_supabase_client.table.return_value.eq.assert_called_with("category", "Fruit")
    assert [p.category for p in products] == ["Fruit"]


@pytest.mark.asyncio
async def test_create_propagates_errors(catalog_service, mock_supabase_client):
    mock_supabase_client.table.return_value.execute.side_effect = ConnectionError("supabase down")

    with pytest.raises(ConnectionError):
        await catalog_service.create({"name": "Pear", "price": "1.00"})


@pytest.mark.asyncio
async def test_update_and_delete(catalog_service, mock_supabase_client, sample_product_row):
    mock_supabase_client.table.return_value.execute.return_value.data = [{**sample_product_row, "stock": 3}]

    product = await catalog_service.update("product-123", {"stock": 3})
    assert product.stock == 3

    assert await catalog_service.delete("product-123") is True

    mock_supabase_client.table.return_value.execute.return_value.data = []
    assert await catalog_service.delete("product-123") is False
