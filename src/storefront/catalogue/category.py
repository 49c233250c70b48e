"""Category aggregate root for grouping products."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, Text

from storefront.catalogue.events import CategoryCreated, CategoryUpdated
from storefront.domain import storefront


@storefront.aggregate
class Category:
    """A flat grouping used to browse and filter the catalogue.

    Category names are unique, compared case-insensitively; the uniqueness
    check is done by the command handler because it needs the repository.
    """

    name: String(required=True, max_length=100)
    description: Text()
    image_url: String(max_length=500)
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, description=None, image_url=None):
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["Category name is required"]})

        now = datetime.now(UTC)
        category = cls(
            name=name,
            description=description,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        category.raise_(CategoryCreated(category_id=category.id, name=name))
        return category

    def update_details(self, name=None, description=None, image_url=None, is_active=None):
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError({"name": ["Category name cannot be blank"]})
            self.name = name
        if description is not None:
            self.description = description
        if image_url is not None:
            self.image_url = image_url
        if is_active is not None:
            self.is_active = is_active

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CategoryUpdated(
                category_id=self.id,
                name=self.name,
                is_active=self.is_active,
            )
        )
