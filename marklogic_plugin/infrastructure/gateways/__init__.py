"""Gateway implementations."""

from .marklogic_gateway import MarkLogicGateway, MarkLogicGatewayError

__all__ = ["MarkLogicGateway", "MarkLogicGatewayError"]
