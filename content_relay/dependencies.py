from fastapi import Request

from content_relay.config import Settings
from content_relay.observability import MetricsRegistry
from content_relay.relay.graphql import GraphQLRelay
from content_relay.relay.image import ImageRelay


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_graphql_relay(request: Request) -> GraphQLRelay:
    return request.app.state.graphql_relay


def get_image_relay(request: Request) -> ImageRelay:
    return request.app.state.image_relay


def get_metrics(request: Request) -> MetricsRegistry:
    return request.app.state.metrics
