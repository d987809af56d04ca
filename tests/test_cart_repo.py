import pytest

from shoppingcart.domain.errors import ShoppingCartNotFound, StaleCartError


def test_find_or_new_does_not_persist(repo, db):
    record = repo.find_or_new("user-1", "default")

    assert record.id is None
    assert record.version == 0
    assert repo.find("user-1", "default") is None


def test_get_missing_cart_raises(repo):
    with pytest.raises(ShoppingCartNotFound):
        repo.get("nobody", "default")


def test_save_content_inserts_then_bumps_version(repo):
    record = repo.save_content(repo.new_record("user-1", "default"), "[]")

    assert record.id is not None
    assert record.version == 1

    record = repo.save_content(record, '[{"x": 1}]')

    assert record.version == 2
    assert repo.get("user-1", "default").content == '[{"x": 1}]'


def test_stale_version_is_rejected(repo):
    record = repo.save_content(repo.new_record("user-1", "default"), "[]")

    # inny zapis w miedzyczasie podbija wersje
    assert repo.update_cart_version(record.id, record.version, {"version": record.version + 1}) == 1
    repo.commit()

    with pytest.raises(StaleCartError):
        repo.save_content(record, '["lost"]')


def test_duplicate_new_cart_is_rejected(repo):
    repo.save_content(repo.new_record("user-1", "default"), "[]")

    with pytest.raises(StaleCartError):
        repo.save_content(repo.new_record("user-1", "default"), "[]")

    assert repo.get("user-1", "default").content == "[]"


def test_delete_unpersisted_record_is_noop(repo):
    repo.delete(repo.new_record("user-1", "default"))

    assert repo.find("user-1", "default") is None
