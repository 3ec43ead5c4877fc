class PricingError(ValueError):
    """Base class for every error the pricing engine raises."""


class InvalidInput(PricingError):
    """Malformed engine input: negative counts, out-of-range weights or rates."""


class InvalidProductType(PricingError):
    """Product type with no entry in the base price table."""

    def __init__(self, product_type: str):
        self.product_type = product_type
        super().__init__(f"Unknown product type: {product_type!r}")
