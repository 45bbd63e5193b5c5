import pytest

from bizmetrics.models import BusinessRecords, Sale
from bizmetrics.repository import CsvDirectoryRepository, InMemoryRepository


def test_in_memory_repository() -> None:
    shop = BusinessRecords(business_id="shop", sales=(Sale(total=10.0),))
    repo = InMemoryRepository([shop, BusinessRecords(business_id="bakery")])

    assert repo.list_businesses() == ["bakery", "shop"]
    assert repo.load("shop") is shop

    with pytest.raises(KeyError, match="Unknown business"):
        repo.load("garage")


def test_in_memory_repositories_do_not_share_state() -> None:
    first = InMemoryRepository()
    second = InMemoryRepository()

    first.add(BusinessRecords(business_id="shop"))

    assert first.list_businesses() == ["shop"]
    assert second.list_businesses() == []


def test_csv_directory_repository_loads_business(tmp_path) -> None:
    shop = tmp_path / "shop"
    shop.mkdir()
    (shop / "sales.csv").write_text(
        "date,total,quantity,product_id\n2025-01-05,2500,5,p1\n", encoding="utf-8"
    )
    (shop / "products.csv").write_text(
        "id,stock,wholesale_price\np1,10,450\n", encoding="utf-8"
    )
    (shop / "name.txt").write_text("Corner Shop\n", encoding="utf-8")
    (tmp_path / "bakery").mkdir()
    (tmp_path / "notes.txt").write_text("not a business", encoding="utf-8")

    repo = CsvDirectoryRepository(tmp_path)

    assert repo.list_businesses() == ["bakery", "shop"]

    records = repo.load("shop")
    assert records.name == "Corner Shop"
    assert len(records.sales) == 1
    assert records.expenses == ()
    assert records.products[0].wholesale_price == 450.0

    bakery = repo.load("bakery")
    assert bakery.name == "bakery"
    assert (bakery.sales, bakery.expenses, bakery.products) == ((), (), ())


def test_csv_directory_repository_unknown_business(tmp_path) -> None:
    repo = CsvDirectoryRepository(tmp_path)

    with pytest.raises(KeyError):
        repo.load("ghost")


def test_csv_directory_repository_missing_root(tmp_path) -> None:
    repo = CsvDirectoryRepository(tmp_path / "missing")

    assert repo.list_businesses() == []
