"""Tests for the Category aggregate."""

import pytest
from protean.exceptions import ValidationError
from storefront.catalogue.category import Category
from storefront.catalogue.events import CategoryCreated, CategoryUpdated


class TestCategoryCreation:
    def test_create_strips_name(self):
        category = Category.create(name="  Garden  ", description="Outdoor things")
        assert category.name == "Garden"
        assert category.is_active is True
        assert isinstance(category._events[0], CategoryCreated)

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Category.create(name="   ")
        assert "name" in exc.value.messages


class TestCategoryUpdate:
    def test_update_details(self):
        category = Category.create(name="Garden")
        category._events.clear()
        category.update_details(name="Garden & Patio", is_active=False)
        assert category.name == "Garden & Patio"
        assert category.is_active is False
        assert isinstance(category._events[0], CategoryUpdated)

    def test_unchanged_fields_are_kept(self):
        category = Category.create(name="Garden", description="Outdoor")
        category.update_details(image_url="/img/garden.png")
        assert category.description == "Outdoor"
        assert category.name == "Garden"

    def test_blank_rename_rejected(self):
        category = Category.create(name="Garden")
        with pytest.raises(ValidationError):
            category.update_details(name=" ")
