"""Category management — commands and handlers."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.lookups import find_category_by_name, load_category
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import DuplicateCategory


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: Text()
    image_url: String(max_length=500)


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=100)
    description: Text()
    image_url: String(max_length=500)
    is_active: Boolean()


@storefront.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        if find_category_by_name(command.name) is not None:
            raise DuplicateCategory(command.name.strip())

        category = Category.create(
            name=command.name,
            description=command.description,
            image_url=command.image_url,
        )
        current_domain.repository_for(Category).add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        category = load_category(command.category_id)

        if command.name:
            clash = find_category_by_name(command.name)
            if clash is not None and str(clash.id) != str(category.id):
                raise DuplicateCategory(command.name.strip())

        category.update_details(
            name=command.name,
            description=command.description,
            image_url=command.image_url,
            is_active=command.is_active,
        )
        current_domain.repository_for(Category).add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        category = load_category(command.category_id)

        in_use = current_domain.repository_for(Product)._dao.query.filter(category_id=str(category.id)).all()
        if in_use.total:
            raise ValidationError(
                {"category_id": [f"Category is used by {in_use.total} product(s) and cannot be deleted"]}
            )

        current_domain.repository_for(Category)._dao.delete(category)
