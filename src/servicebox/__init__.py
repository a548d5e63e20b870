"""servicebox: typed services over a batched JSON-RPC protocol.

Public API:
- Service: builder for methods, events and handlers sharing middleware
- Signature: parameter and return schemas of a method
- Host: dispatches HTTP batches to namespaced services
- Context: caller identity passed to every callback
- Client: async client for calling a host

Protocol:
- ProtocolRequest, ProtocolResponse: batch message types
- ServiceException and its subclasses: errors carrying protocol codes
"""

from servicebox.client import Client, MethodCall
from servicebox.context import ConnectionControl, Context
from servicebox.event import Event
from servicebox.exceptions import (
    ErrorCode,
    InternalErrorException,
    InvalidParamsException,
    InvalidRequestException,
    MethodNotFoundException,
    ParseException,
    RemoteError,
    ServiceException,
)
from servicebox.handler import Handler
from servicebox.host import Host, HostResponse
from servicebox.method import Method, Signature
from servicebox.middleware import Middleware, merge_identity, middleware
from servicebox.protocol import ProtocolErrorBody, ProtocolRequest, ProtocolResponse
from servicebox.service import Service, ServiceRegistry
from servicebox.validator import SchemaCompiler, Validator, configure_compiler

__all__ = [
    # Services
    "Service",
    "ServiceRegistry",
    "Method",
    "Signature",
    "Event",
    "Handler",
    "Middleware",
    "middleware",
    "merge_identity",
    "Context",
    "ConnectionControl",
    # Host
    "Host",
    "HostResponse",
    # Client
    "Client",
    "MethodCall",
    # Schemas
    "SchemaCompiler",
    "Validator",
    "configure_compiler",
    # Protocol
    "ProtocolRequest",
    "ProtocolResponse",
    "ProtocolErrorBody",
    # Errors
    "ErrorCode",
    "ServiceException",
    "ParseException",
    "InvalidRequestException",
    "MethodNotFoundException",
    "InvalidParamsException",
    "InternalErrorException",
    "RemoteError",
]
