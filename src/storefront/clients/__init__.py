from .microlink import MicrolinkClient
from .products import ProductSourceClient

__all__ = ["MicrolinkClient", "ProductSourceClient"]
