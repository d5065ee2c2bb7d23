"""Product aggregate — a sellable catalogue entry owned by the user who listed it."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text

from shared.domain import storefront
from shared.errors import Unauthorized


@storefront.aggregate
class Product:
    """Product aggregate root.

    ``price`` is held at the storefront currency's precision; callers round it
    with ``shared.money.to_amount`` before it gets here.
    """

    user_id: Identifier(required=True)
    title: String(required=True, max_length=255)
    description: Text()
    image_url: String(max_length=2048)
    price: Float(required=True, min_value=0.0)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def title_must_not_be_blank(self):
        if self.title is not None and not self.title.strip():
            raise ValidationError({"title": ["Title must not be blank"]})

    @classmethod
    def create(cls, user_id, title, price, description=None, image_url=None):
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            title=title.strip() if title else title,
            price=float(price),
            description=description or None,
            image_url=image_url or None,
            created_at=now,
            updated_at=now,
        )

    def assert_owned_by(self, user_id: str) -> None:
        if str(self.user_id) != str(user_id):
            raise Unauthorized("Product belongs to another user", product_id=str(self.id), user_id=user_id)

    def update_details(self, title=None, description=None, image_url=None, price=None) -> None:
        """Replace the given fields; ``None`` leaves a field as it is."""
        if title is not None:
            self.title = title.strip()
        if description is not None:
            self.description = description or None
        if image_url is not None:
            self.image_url = image_url or None
        if price is not None:
            self.price = float(price)
        self.updated_at = datetime.now(UTC)
