"""
Generic key/value IR format.

Editors emit trees as nested `{"type", "settings", "children"}` nodes
whose settings are string key/value pairs.  This module converts that
IR into the tagged definition models, which then build the runtime
tree.  It also hosts the format detection used by the mutation entry
points: an object with a `type` key is IR, anything else is tagged.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, Field, ValidationError

from ..engine import CompositionTree, CompositionTreeNode, CompositionScheme, GlobalConf, InputTransformation
from ..errors import ConfigError, ParseError
from ..procgen import ConfFragment, GeneratorCatalog, default_catalog
from ..procgen.grammar import MODULE_TYPE_KEY, map_setting_to_fragment
from .definition import (
    ComposedBody, ComposedDefinition, HigherOrderNoiseModuleBody,
    HigherOrderNoiseModuleTransformation, LeafBody, LeafDefinition, NodeDefinition,
    ScaleAllTransformation, SchemeDefinition, TransformationDefinition, TreeDefinition,
    WeightedAverageScheme, ZoomScaleBody, ZoomScaleTransformation, build_node, build_scheme,
    build_transformation, build_tree, load_json, parse_tagged_node, parse_tagged_scheme,
    parse_tagged_transformation, parse_tree_definition, wrap_fragment
)

logger = logging.getLogger(__name__)

NOISE_MODULE = "noiseModule"
COMPOSITION_SCHEME = "compositionScheme"
INPUT_TRANSFORMATIONS = "inputTransformations"
INPUT_TRANSFORMATION = "inputTransformation"
GLOBAL_CONF = "globalConf"

# globalConf setting key -> GlobalConf field
GLOBAL_CONF_KEYS: Dict[str, str] = {
    "speed": "speed",
    "zoom": "zoom",
    "canvasSize": "canvas_size",
    "xOffset": "x_offset",
    "yOffset": "y_offset",
    "zOffset": "z_offset",
    "colorFunction": "color_function",
}


class IrSetting(BaseModel):
    key: str
    value: str


class IrNode(BaseModel):
    """One IR node.  Extra keys such as editor ids are ignored."""

    type: str
    settings: List[IrSetting] = Field(default_factory=list)
    children: List["IrNode"] = Field(default_factory=list)

    def find_setting(self, key: str) -> Optional[str]:
        for setting in self.settings:
            if setting.key == key:
                return setting.value
        return None

    def require_setting(self, key: str) -> str:
        value = self.find_setting(key)
        if value is None:
            raise ParseError(f"No `{key}` setting provided to node of type `{self.type}`!")
        return value

    def find_child(self, child_type: str) -> Optional["IrNode"]:
        for child in self.children:
            if child.type == child_type:
                return child
        return None

    def require_child(self, child_type: str) -> "IrNode":
        child = self.find_child(child_type)
        if child is None:
            raise ParseError(f"No child of type `{child_type}` found for node of type `{self.type}`!")
        return child

    def children_of(self, child_type: str) -> List["IrNode"]:
        return [child for child in self.children if child.type == child_type]


IrNode.model_rebuild()


def parse_ir(data: Any) -> IrNode:
    """Validate an IR node from JSON text or decoded JSON."""
    try:
        if isinstance(data, (str, bytes)):
            return IrNode.model_validate_json(data)
        return IrNode.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"Error while parsing the provided IR definition: {e}") from e


def _expect_type(node: IrNode, expected: str) -> None:
    if node.type != expected:
        raise ParseError(f"Expected IR node of type `{expected}` but it's of type `{node.type}`.")


def _parse_float(key: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ParseError(f"Unable to convert value of `{key}` from string: {raw}") from None


# Fragments

def build_fragments(settings: List[IrSetting]) -> List[ConfFragment]:
    """
    Group leaf settings into configuration fragments.

    Settings are grouped by the fragment their key belongs to, in the
    order each fragment is first seen.  Fields a present fragment does
    not mention keep their defaults.

    Raises:
        ConfigError: For a key with no fragment mapping
        ParseError: For a value that does not parse as its field's type
    """

    grouped: Dict[Type[ConfFragment], Dict[str, str]] = {}
    for setting in settings:
        mapping = map_setting_to_fragment(setting.key)
        if mapping is None:
            continue
        fragment_cls, field_name = mapping
        grouped.setdefault(fragment_cls, {})[field_name] = setting.value

    fragments = []
    for fragment_cls, values in grouped.items():
        try:
            fragments.append(fragment_cls.model_validate(values))
        except ValidationError as e:
            raise ParseError(f"Unable to build `{fragment_cls.fragment}` configuration: {e}") from e

    return fragments


# Schemes and transformations

def ir_to_scheme(node: IrNode) -> SchemeDefinition:
    _expect_type(node, COMPOSITION_SCHEME)
    scheme = node.require_setting("compositionScheme")

    if scheme == "average":
        return "Average"
    if scheme == "weightedAverage":
        raw = node.require_setting("weights")
        try:
            weights = json.loads(raw)
        except ValueError:
            raise ParseError(f"Unable to parse `weights` vector from string: {raw}") from None
        if not isinstance(weights, list):
            raise ParseError(f"Unable to parse `weights` vector from string: {raw}")
        try:
            return WeightedAverageScheme(WeightedAverage=weights)
        except ValidationError as e:
            raise ParseError(f"Unable to parse `weights` vector from string: {raw}") from e

    raise ParseError(f"Unknown composition scheme \"{scheme}\" provided!")


def ir_to_transformation(node: IrNode) -> TransformationDefinition:
    _expect_type(node, INPUT_TRANSFORMATION)
    transformation_type = node.require_setting("inputTransformationType")

    if transformation_type == "zoomScale":
        return ZoomScaleTransformation(ZoomScale=ZoomScaleBody(
            speed=_parse_float("speed", node.require_setting("speed")),
            zoom=_parse_float("zoom", node.require_setting("zoom")),
        ))
    if transformation_type == "scaleAll":
        return ScaleAllTransformation(
            ScaleAll=_parse_float("scaleFactor", node.require_setting("scaleFactor"))
        )
    if transformation_type == "honf":
        replaced_dim = node.require_setting("replacedDim")
        try:
            body = HigherOrderNoiseModuleBody(
                node_def=ir_to_node(node.require_child(NOISE_MODULE)),
                replaced_dim=replaced_dim.upper(),
            )
        except ValidationError as e:
            raise ParseError(f"Invalid `replacedDim` provided: {replaced_dim}") from e
        return HigherOrderNoiseModuleTransformation(HigherOrderNoiseModule=body)

    raise ParseError(f"Invalid input transformation type provided: {transformation_type}")


def ir_to_transformations(node: IrNode) -> List[TransformationDefinition]:
    """Transformations held by an optional `inputTransformations` child."""
    container = node.find_child(INPUT_TRANSFORMATIONS)
    if container is None:
        return []
    return [ir_to_transformation(child) for child in container.children]


# Nodes and trees

def ir_to_node(node: IrNode) -> NodeDefinition:
    """Convert a `noiseModule` IR node into a tagged node definition."""

    _expect_type(node, NOISE_MODULE)
    module_type = node.require_setting(MODULE_TYPE_KEY)
    transformations = ir_to_transformations(node)

    if module_type.lower() == "composed":
        return ComposedDefinition(Composed=ComposedBody(
            scheme=ir_to_scheme(node.require_child(COMPOSITION_SCHEME)),
            children=[ir_to_node(child) for child in node.children_of(NOISE_MODULE)],
            transformations=transformations,
        ))

    fragments = build_fragments(node.settings)
    return LeafDefinition(Leaf=LeafBody(
        module_type=module_type,
        module_conf=[wrap_fragment(fragment) for fragment in fragments],
        transformations=transformations,
    ))


def ir_to_global_conf(node: IrNode) -> GlobalConf:
    """Build a GlobalConf from a `globalConf` IR node; absent keys keep defaults."""

    _expect_type(node, GLOBAL_CONF)
    values: Dict[str, str] = {}
    for setting in node.settings:
        if setting.key not in GLOBAL_CONF_KEYS:
            raise ConfigError(f"Unhandled setting provided to global conf: {setting.key}")
        values[GLOBAL_CONF_KEYS[setting.key]] = setting.value

    try:
        return GlobalConf.model_validate(values)
    except ValidationError as e:
        raise ParseError(f"Unable to convert IR global conf into `GlobalConf`: {e}") from e


def ir_to_tree(node: IrNode) -> TreeDefinition:
    """The root module node doubles as the carrier of the `globalConf` child."""

    global_conf_node = node.find_child(GLOBAL_CONF)
    global_conf = ir_to_global_conf(global_conf_node) if global_conf_node is not None else GlobalConf()
    return TreeDefinition(global_conf=global_conf, root_node=ir_to_node(node))


def build_tree_from_ir(data: Any, catalog: GeneratorCatalog = default_catalog) -> CompositionTree:
    """Parse an IR tree definition and build the runtime tree."""
    tree = build_tree(ir_to_tree(parse_ir(data)), catalog)
    logger.debug("Built composition tree from IR definition")
    return tree


# Format detection

def is_ir(data: Any) -> bool:
    return isinstance(data, dict) and "type" in data


def _detect(data: Any) -> Tuple[Any, bool]:
    decoded = load_json(data)
    return decoded, is_ir(decoded)


def parse_tree(data: Any) -> TreeDefinition:
    """Tree definition from either format."""
    decoded, ir = _detect(data)
    return ir_to_tree(parse_ir(decoded)) if ir else parse_tree_definition(data)


def parse_node_definition(data: Any) -> NodeDefinition:
    """Node definition from either format."""
    decoded, ir = _detect(data)
    return ir_to_node(parse_ir(decoded)) if ir else parse_tagged_node(data)


def parse_scheme(data: Any) -> SchemeDefinition:
    """Composition scheme from either format."""
    decoded, ir = _detect(data)
    return ir_to_scheme(parse_ir(decoded)) if ir else parse_tagged_scheme(data)


def parse_transformation(data: Any) -> TransformationDefinition:
    """Input transformation from either format."""
    decoded, ir = _detect(data)
    return ir_to_transformation(parse_ir(decoded)) if ir else parse_tagged_transformation(data)


def parse_global_conf(data: Any) -> GlobalConf:
    """Global conf from a `globalConf` IR node or a plain GlobalConf object."""
    decoded, ir = _detect(data)
    if ir:
        return ir_to_global_conf(parse_ir(decoded))
    try:
        return GlobalConf.model_validate(decoded)
    except ValidationError as e:
        raise ParseError(f"Unable to build `GlobalConf` from supplied definition: {e}") from e


def load_tree(data: Any, catalog: GeneratorCatalog = default_catalog) -> CompositionTree:
    return build_tree(parse_tree(data), catalog)


def load_node(data: Any, catalog: GeneratorCatalog = default_catalog) -> CompositionTreeNode:
    return build_node(parse_node_definition(data), catalog)


def load_scheme(data: Any) -> CompositionScheme:
    return build_scheme(parse_scheme(data))


def load_transformation(data: Any, catalog: GeneratorCatalog = default_catalog) -> InputTransformation:
    return build_transformation(parse_transformation(data), catalog)
