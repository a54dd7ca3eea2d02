"""Market endpoint - Base class and utilities

An endpoint exposes a service as a table of named methods. Every handler
takes ``(args, invoker_id)`` and returns a result dict that always carries
``success``; failures use the structured error responses from
``market.errors``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from ..errors import ErrorCode, RegistryError, resource_error
from .types import EndpointDict, MethodInfo


logger = logging.getLogger(__name__)

Handler = Callable[[list[Any], str], dict[str, Any]]


@dataclass
class EndpointMethod:
    """A method exposed by an endpoint"""
    name: str
    handler: Handler
    description: str


class MarketEndpoint:
    """Base class for method-dispatch endpoints"""

    id: str
    description: str
    methods: dict[str, EndpointMethod]

    def __init__(self, endpoint_id: str, description: str) -> None:
        self.id = endpoint_id
        self.description = description
        self.methods = {}

    def register_method(
        self,
        name: str,
        handler: Handler,
        description: str = ""
    ) -> None:
        """Register a callable method on this endpoint"""
        self.methods[name] = EndpointMethod(
            name=name,
            handler=handler,
            description=description
        )

    def get_method(self, method_name: str) -> EndpointMethod | None:
        """Get a method by name"""
        return self.methods.get(method_name)

    def list_methods(self) -> list[MethodInfo]:
        """List available methods"""
        return [
            {"name": m.name, "description": m.description}
            for m in self.methods.values()
        ]

    def invoke(self, method_name: str, args: list[Any], invoker_id: str) -> dict[str, Any]:
        """Dispatch ``method_name`` on behalf of ``invoker_id``.

        Registry failures raised by a handler are returned as error
        responses. Anything else propagates.
        """
        method = self.get_method(method_name)
        if method is None:
            return resource_error(
                f"{self.id} has no method '{method_name}'. "
                f"Available: {', '.join(sorted(self.methods))}",
                code=ErrorCode.NOT_FOUND,
                method=method_name,
            )
        try:
            return method.handler(list(args or []), invoker_id)
        except RegistryError as e:
            logger.debug("%s.%s failed for %s: %s", self.id, method_name, invoker_id, e)
            return e.to_response()

    def get_interface(self) -> dict[str, Any]:
        """Get the interface schema for this endpoint.

        Override in subclasses to add detailed inputSchema for each method.
        """
        return {
            "description": self.description,
            "tools": [
                {"name": m.name, "description": m.description}
                for m in self.methods.values()
            ],
        }

    def to_dict(self) -> EndpointDict:
        """Convert to dict for discovery"""
        return {
            "id": self.id,
            "description": self.description,
            "methods": self.list_methods(),
        }
