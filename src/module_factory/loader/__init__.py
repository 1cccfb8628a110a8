"""Module resolution and the load operations."""

from module_factory.loader.instance_loader import (
    TargetKind,
    load_from_module,
    load_from_module_sync,
    load_instance,
    select_target,
)
from module_factory.loader.json_loader import (
    load_json_from_module,
    load_json_from_module_sync,
    load_json_resource,
    load_json_resource_sync,
)
from module_factory.loader.resolution import is_relative_path, to_absolute_load_target

__all__ = [
    "TargetKind",
    "is_relative_path",
    "load_from_module",
    "load_from_module_sync",
    "load_instance",
    "load_json_from_module",
    "load_json_from_module_sync",
    "load_json_resource",
    "load_json_resource_sync",
    "select_target",
    "to_absolute_load_target",
]
