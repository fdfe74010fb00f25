# src/lane_route/io/config.py
import json
import os

from lane_route.config.models import RouteConfigModel


def load_route_config(path: str) -> RouteConfigModel:
    """Read a JSON route definition; raises pydantic.ValidationError on bad content."""
    path = os.path.expandvars(os.path.expanduser(path))
    with open(path, encoding="utf-8") as f:
        return RouteConfigModel.model_validate(json.load(f))
