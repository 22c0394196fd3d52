from castway.channels import Channel, ChannelRegistry
from castway.framework import Framework
from castway.interceptor import TemplateInterceptor
from castway.pipeline import Action, Interceptor, InterceptorChain, Priority
from castway.registry import HandlerRegistration, HandlerRegistry
from castway.remapper import ChannelRemapper, RemapStrategy
from castway.requests import Request
from castway.resolver import resolve_path
from castway.strategies import ForkingStrategy, RebindStrategy
from castway.templates import has_templates

__all__ = [
    "Action",
    "Channel",
    "ChannelRegistry",
    "ChannelRemapper",
    "ForkingStrategy",
    "Framework",
    "HandlerRegistration",
    "HandlerRegistry",
    "Interceptor",
    "InterceptorChain",
    "Priority",
    "RebindStrategy",
    "RemapStrategy",
    "Request",
    "TemplateInterceptor",
    "has_templates",
    "resolve_path",
]
__version__ = "0.1.0"
