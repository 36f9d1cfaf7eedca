from ember_nav.resolution.addons import AddonResolver, AddonRootsCache, AddonRootsLoader, has_addon_folder
from ember_nav.resolution.layout import (
    collection_paths,
    component_name_from_path,
    component_script_paths,
    component_template_paths,
    helper_paths,
    is_template_path,
    kebab_case,
    model_paths,
    paths_for_component_scripts,
    paths_for_component_templates,
    transform_paths,
)
from ember_nav.resolution.locations import first_text_position, to_locations, to_locations_with_position

__all__ = [
    "AddonResolver",
    "AddonRootsCache",
    "AddonRootsLoader",
    "collection_paths",
    "component_name_from_path",
    "component_script_paths",
    "component_template_paths",
    "first_text_position",
    "has_addon_folder",
    "helper_paths",
    "is_template_path",
    "kebab_case",
    "model_paths",
    "paths_for_component_scripts",
    "paths_for_component_templates",
    "to_locations",
    "to_locations_with_position",
    "transform_paths",
]
