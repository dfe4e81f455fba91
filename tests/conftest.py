"""Shared fixtures: a throwaway SQLite database and row factories."""

from decimal import Decimal

import pytest

from src.db.postgres_client import Database
from src.models import Category, Product, ProductCategory, Store


@pytest.fixture
def db(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'test.db'}")
    database.create_tables()
    yield database
    database.dispose()


@pytest.fixture
def make_store(db):
    def _make_store(name="Amazon Brasil", domain="amazon.com.br", **kwargs):
        with db.session() as session:
            store = Store(name=name, domain=domain, **kwargs)
            session.add(store)
            session.flush()
            return store.id

    return _make_store


@pytest.fixture
def make_category(db):
    def _make_category(name, slug, description=None):
        with db.session() as session:
            category = Category(name=name, slug=slug, description=description)
            session.add(category)
            session.flush()
            return category.id

    return _make_category


@pytest.fixture
def make_product(db):
    def _make_product(store_id, title="Produto de teste", category_ids=(), **kwargs):
        values = {
            "description": "Descrição do produto de teste",
            "price": Decimal("99.90"),
            "image_url": "https://images.example.com/produto.jpg",
            "affiliate_url": "https://amzn.to/teste",
            "tags": "",
            "is_active": True,
        }
        values.update(kwargs)
        with db.session() as session:
            product = Product(title=title, store_id=store_id, **values)
            session.add(product)
            session.flush()
            session.add_all(ProductCategory(product_id=product.id, category_id=cid) for cid in category_ids)
            return product.id

    return _make_product


@pytest.fixture
def catalog(make_store, make_category, make_product):
    """Two stores, three categories and a mix of active and inactive products."""
    amazon = make_store("Amazon Brasil", "amazon.com.br")
    aliexpress = make_store("AliExpress", "aliexpress.com")
    eletronicos = make_category("Eletrônicos", "eletronicos")
    casa = make_category("Casa & Jardim", "casa-jardim")
    esportes = make_category("Esportes & Lazer", "esportes-lazer")

    products = {
        "fone": make_product(
            amazon,
            "Fone de Ouvido Bluetooth JBL Tune 510BT",
            category_ids=[eletronicos],
            tags="fone,áudio,bluetooth,jbl,música",
            price=Decimal("199.90"),
        ),
        "fone_inativo": make_product(
            amazon, "Fone com fio antigo", category_ids=[eletronicos], tags="fone", is_active=False
        ),
        "aspirador": make_product(
            aliexpress, "Aspirador Robô", category_ids=[eletronicos, casa], tags="aspirador,casa"
        ),
        "tenis": make_product(aliexpress, "Tênis de corrida", category_ids=[esportes], tags="tênis,esporte"),
    }
    return {
        "stores": {"amazon": amazon, "aliexpress": aliexpress},
        "categories": {"eletronicos": eletronicos, "casa": casa, "esportes": esportes},
        "products": products,
    }
