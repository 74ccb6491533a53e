from .pyth import PythOracle, base_price_in_quote

__all__ = ["PythOracle", "base_price_in_quote"]
