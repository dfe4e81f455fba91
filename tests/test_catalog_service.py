"""Tests for CatalogService."""

import pytest

from src.services.catalog_service import CatalogService, build_catalog_query, parse_category_ids
from src.utils.errors import InvalidInputError, NotFoundError
from src.utils.pagination import format_pagination_response


class TestBuildCatalogQuery:
    def test_blank_text_is_no_filter(self):
        assert build_catalog_query(q="   ").text is None

    def test_non_numeric_store_is_ignored(self):
        assert build_catalog_query(store_id="amazon").store_id is None

    def test_category_ids_forms(self):
        assert parse_category_ids("3") == (3,)
        assert parse_category_ids(["1", "2", "1"]) == (1, 2)
        assert parse_category_ids("4,x,-1,5") == (4, 5)
        assert parse_category_ids(None) == ()


class TestCatalogService:
    @pytest.fixture
    def service(self, db):
        return CatalogService(db)

    @pytest.mark.asyncio
    async def test_lists_only_active_products(self, service, catalog):
        items, total = await service.list_products(build_catalog_query())

        assert total == 3
        assert catalog["products"]["fone_inativo"] not in {item.id for item in items}

    @pytest.mark.asyncio
    async def test_newest_first(self, service, catalog):
        items, _ = await service.list_products(build_catalog_query())
        ids = [item.id for item in items]
        assert ids == sorted(ids, reverse=True)

    @pytest.mark.asyncio
    async def test_text_search_skips_inactive(self, service, catalog):
        items, total = await service.list_products(build_catalog_query(q="FONE"))

        assert total == 1
        assert items[0].id == catalog["products"]["fone"]
        assert items[0].store.name == "Amazon Brasil"

    @pytest.mark.asyncio
    async def test_text_search_escapes_wildcards(self, service, catalog):
        _, total = await service.list_products(build_catalog_query(q="%"))
        assert total == 0

    @pytest.mark.asyncio
    async def test_store_filter(self, service, catalog):
        query = build_catalog_query(store_id=str(catalog["stores"]["aliexpress"]))
        items, total = await service.list_products(query)

        assert total == 2
        assert {item.store_id for item in items} == {catalog["stores"]["aliexpress"]}

    @pytest.mark.asyncio
    async def test_category_filter_matches_any(self, service, catalog):
        categories = catalog["categories"]
        query = build_catalog_query(category_ids=[str(categories["casa"]), str(categories["esportes"])])
        items, total = await service.list_products(query)

        assert total == 2
        assert {item.id for item in items} == {catalog["products"]["aspirador"], catalog["products"]["tenis"]}

    @pytest.mark.asyncio
    async def test_pagination_counts_all_matches(self, service, catalog):
        items, total = await service.list_products(build_catalog_query(page="2", per_page="2"))

        assert total == 3
        assert len(items) == 1

    def test_get_product_with_relations(self, service, catalog):
        product = service.get_product(str(catalog["products"]["aspirador"]))

        assert product.title == "Aspirador Robô"
        assert [category.slug for category in product.categories] == ["casa-jardim", "eletronicos"]

    @pytest.mark.parametrize("raw_id", ["abc", "0", "-5", "1.5"])
    def test_get_product_invalid_id(self, service, raw_id):
        with pytest.raises(InvalidInputError):
            service.get_product(raw_id)

    def test_get_product_missing(self, service, catalog):
        with pytest.raises(NotFoundError):
            service.get_product("9999")

    def test_get_product_inactive_is_not_found(self, service, catalog):
        with pytest.raises(NotFoundError):
            service.get_product(catalog["products"]["fone_inativo"])

    def test_list_categories_counts_active_products(self, service, catalog, make_category):
        make_category("Automotivo", "automotivo")

        categories = {category.slug: category.product_count for category in service.list_categories()}

        assert categories == {"eletronicos": 2, "casa-jardim": 1, "esportes-lazer": 1}


class TestCatalogPaging:
    @pytest.mark.asyncio
    async def test_last_page_of_twenty_five(self, db, make_store, make_product):
        store_id = make_store()
        for i in range(25):
            make_product(store_id, f"Produto {i:02d}")

        query = build_catalog_query(page="3", per_page="12")
        items, total = await CatalogService(db).list_products(query)
        body = format_pagination_response(items, total, query.page.page, query.page.per_page)

        assert len(body["data"]) == 1
        assert body["pagination"]["totalItems"] == 25
        assert body["pagination"]["totalPages"] == 3
        assert body["pagination"]["hasNext"] is False
        assert body["pagination"]["hasPrev"] is True
