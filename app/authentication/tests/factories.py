"""
Factory Boy factories for authentication models.

Provides realistic test data generation for:
- User: Customers (role=user)
- AdminFactory: Support staff (role=admin)

Usage:
    from authentication.tests.factories import AdminFactory, UserFactory

    customer = UserFactory(full_name="Jane Doe")
    support = AdminFactory()
    inactive = UserFactory(is_active=False)
"""

import factory

from authentication.models import User, UserRole


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Creates active customers with email-based authentication.

    Examples:
        user = UserFactory()
        user = UserFactory(full_name="Jane Doe")
        user = UserFactory(is_active=False)
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    full_name = factory.Faker("name")
    role = UserRole.USER
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )


class AdminFactory(UserFactory):
    """Factory for support staff (privileged chat identities)."""

    email = factory.Sequence(lambda n: f"support{n}@example.com")
    role = UserRole.ADMIN
    is_staff = True
