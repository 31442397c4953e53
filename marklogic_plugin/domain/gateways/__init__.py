"""Domain gateway interfaces."""

from .marklogic_gateway import IMarkLogicGateway

__all__ = ["IMarkLogicGateway"]
