"""Tests for the Product aggregate."""

import pytest
from catalogue.product.product import Product
from protean.exceptions import ValidationError
from protean.utils import DomainObjects
from shared.errors import Unauthorized


def _make_product(**overrides):
    fields = {"user_id": "seller-001", "title": "A Book", "price": "10"}
    fields.update(overrides)
    return Product.create(**fields)


def test_product_element_type():
    assert Product.element_type == DomainObjects.AGGREGATE


class TestProductCreation:
    def test_price_is_numeric(self):
        assert _make_product(price="10").price == 10.0

    def test_title_is_trimmed(self):
        product = _make_product(title="  A Book  ")
        assert product.title == "A Book"

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(title="   ")

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(price="-1.00")

    def test_optional_fields_may_be_omitted(self):
        product = _make_product(description=None, image_url=None)
        assert not product.description
        assert not product.image_url

    def test_timestamps_are_set(self):
        product = _make_product()
        assert product.created_at is not None
        assert product.updated_at == product.created_at

    def test_each_product_gets_its_own_id(self):
        assert _make_product().id != _make_product().id


class TestProductOwnership:
    def test_owner_passes(self):
        _make_product().assert_owned_by("seller-001")

    def test_other_user_is_unauthorized(self):
        with pytest.raises(Unauthorized):
            _make_product().assert_owned_by("someone-else")


class TestUpdateDetails:
    def test_only_given_fields_change(self):
        product = _make_product(description="Old")
        product.update_details(price="12.5")
        assert product.price == 12.5
        assert product.title == "A Book"
        assert product.description == "Old"

    def test_update_bumps_updated_at(self):
        product = _make_product()
        before = product.updated_at
        product.update_details(title="New title")
        assert product.title == "New title"
        assert product.updated_at >= before

    def test_update_is_revalidated(self):
        with pytest.raises(ValidationError):
            _make_product().update_details(title=" ")
