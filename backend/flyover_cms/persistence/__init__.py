from .gateway import MongoGateway

__all__ = ["MongoGateway"]
