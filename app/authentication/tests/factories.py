"""
Factory Boy factories for authentication models.

Provides realistic test data generation for:
- User: Custom user model with email-based authentication
- Address: Postal address attached to a user

Profiles are not built by a factory: the post_save signal creates one for
every new user.

Usage:
    from authentication.tests.factories import UserFactory

    # Create a user with default values
    user = UserFactory()

    # Create a deactivated user
    user = UserFactory(is_active=False)
"""

import factory

from authentication.models import Address, User

DEFAULT_PASSWORD = "TestPass123!"


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Creates active users through UserManager.create_user() so the password
    is hashed. The plain password is DEFAULT_PASSWORD unless overridden.

    Examples:
        user = UserFactory()
        user = UserFactory(name="Alice", email="alice@example.com")
        user = UserFactory(password="123456")
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    name = factory.Sequence(lambda n: f"User {n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", DEFAULT_PASSWORD)
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )


class AddressFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Address

    user = factory.SubFactory(UserFactory)
    street = factory.Sequence(lambda n: f"{n} Main Street")
    city = "Lisbon"
    country = "Portugal"
