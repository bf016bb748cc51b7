from app.gateway.gateway import DescriptionGateway

_gateway = DescriptionGateway()


def get_description_gateway() -> DescriptionGateway:
    """Shared gateway instance; overridden in tests via app.dependency_overrides."""
    return _gateway
