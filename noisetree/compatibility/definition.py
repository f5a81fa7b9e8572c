"""
Tagged-tree definition format.

A composition tree definition is a JSON document of the form

    {"global_conf": {...}, "root_node": <node>}

where nodes, fragments, schemes and transformations are externally
tagged: the single key of each object names its variant.  The models
here validate that JSON and compile it into a runtime CompositionTree.
Definitions also serialize back to the same JSON with `to_json`.
"""

import json
import logging
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..engine import (
    Average, CombinedNode, CompositionScheme, CompositionTree, CompositionTreeNode, Dim,
    GlobalConf, HigherOrderNoiseModule, InputTransformation, LeafNode, ScaleAll,
    WeightedAverage, ZoomScale
)
from ..errors import ParseError
from ..procgen import (
    ConfFragment, ConstantConf, GeneratorCatalog, GeneratorSpec, MultiFractalConf,
    RidgedMultiConf, SeedableConf, WorleyConf, default_catalog
)

logger = logging.getLogger(__name__)


class TaggedModel(BaseModel):
    """Single-key wrapper object; the key is the variant tag."""

    model_config = ConfigDict(extra="forbid")

    @property
    def tag(self) -> str:
        return next(iter(type(self).model_fields))

    @property
    def body(self) -> Any:
        return getattr(self, self.tag)


class DefinitionBody(BaseModel):
    model_config = ConfigDict(extra="forbid")


# Configuration fragments

class MultiFractalFragment(TaggedModel):
    MultiFractal: MultiFractalConf


class SeedableFragment(TaggedModel):
    Seedable: SeedableConf


class WorleyFragment(TaggedModel):
    Worley: WorleyConf


class ConstantFragment(TaggedModel):
    Constant: ConstantConf


class RidgedMultiFragment(TaggedModel):
    RidgedMulti: RidgedMultiConf


FragmentDefinition = Union[
    MultiFractalFragment, SeedableFragment, WorleyFragment, ConstantFragment, RidgedMultiFragment
]

_FRAGMENT_WRAPPERS = {
    next(iter(wrapper.model_fields)): wrapper
    for wrapper in (
        MultiFractalFragment, SeedableFragment, WorleyFragment, ConstantFragment, RidgedMultiFragment
    )
}


def wrap_fragment(conf: ConfFragment) -> FragmentDefinition:
    """Wrap a bare fragment in its tagged definition."""
    return _FRAGMENT_WRAPPERS[conf.fragment](**{conf.fragment: conf})


# Composition schemes

class WeightedAverageScheme(TaggedModel):
    WeightedAverage: List[float]


SchemeDefinition = Union[Literal["Average"], WeightedAverageScheme]


# Input transformations

class ZoomScaleBody(DefinitionBody):
    speed: float
    zoom: float


class ZoomScaleTransformation(TaggedModel):
    ZoomScale: ZoomScaleBody


class ScaleAllTransformation(TaggedModel):
    ScaleAll: float


class HigherOrderNoiseModuleBody(DefinitionBody):
    node_def: "NodeDefinition"
    replaced_dim: Dim


class HigherOrderNoiseModuleTransformation(TaggedModel):
    HigherOrderNoiseModule: HigherOrderNoiseModuleBody


TransformationDefinition = Union[
    ZoomScaleTransformation, ScaleAllTransformation, HigherOrderNoiseModuleTransformation
]


# Nodes

class LeafBody(DefinitionBody):
    # Plain string so an unknown kind surfaces as a ConfigError at build time.
    module_type: str
    module_conf: List[FragmentDefinition] = Field(default_factory=list)
    transformations: List[TransformationDefinition] = Field(default_factory=list)


class LeafDefinition(TaggedModel):
    Leaf: LeafBody


class ComposedBody(DefinitionBody):
    scheme: SchemeDefinition
    children: List["NodeDefinition"] = Field(default_factory=list)
    transformations: List[TransformationDefinition] = Field(default_factory=list)


class ComposedDefinition(TaggedModel):
    Composed: ComposedBody


NodeDefinition = Union[LeafDefinition, ComposedDefinition]

HigherOrderNoiseModuleBody.model_rebuild()
LeafBody.model_rebuild()
ComposedBody.model_rebuild()
HigherOrderNoiseModuleTransformation.model_rebuild()
ComposedDefinition.model_rebuild()
LeafDefinition.model_rebuild()


class TreeDefinition(BaseModel):
    """Complete tagged-tree document."""

    model_config = ConfigDict(extra="forbid")

    global_conf: GlobalConf = Field(default_factory=GlobalConf)
    root_node: NodeDefinition


_tree_adapter = TypeAdapter(TreeDefinition)
_node_adapter = TypeAdapter(NodeDefinition)
_scheme_adapter = TypeAdapter(SchemeDefinition)
_transformation_adapter = TypeAdapter(TransformationDefinition)


# Parsing

def _validate(adapter: TypeAdapter, data: Any, what: str):
    try:
        if isinstance(data, (str, bytes)):
            return adapter.validate_json(data)
        return adapter.validate_python(data)
    except ValidationError as e:
        raise ParseError(f"Unable to build {what} from supplied definition: {e}") from e


def parse_tree_definition(data: Any) -> TreeDefinition:
    """Validate a tree definition given as JSON text or decoded JSON."""
    return _validate(_tree_adapter, data, "`CompositionTreeDefinition`")


def parse_tagged_node(data: Any) -> NodeDefinition:
    return _validate(_node_adapter, data, "`CompositionTreeNodeDefinition`")


def parse_tagged_scheme(data: Any) -> SchemeDefinition:
    return _validate(_scheme_adapter, data, "`CompositionScheme`")


def parse_tagged_transformation(data: Any) -> TransformationDefinition:
    return _validate(_transformation_adapter, data, "`InputTransformationDefinition`")


def to_json(definition: Union[TreeDefinition, BaseModel], indent: Optional[int] = None) -> str:
    """Serialize a definition back to its tagged JSON form."""
    return definition.model_dump_json(indent=indent)


# Building

def build_scheme(scheme_def: SchemeDefinition) -> CompositionScheme:
    if isinstance(scheme_def, WeightedAverageScheme):
        return WeightedAverage(scheme_def.WeightedAverage)
    return Average()


def build_transformation(
    transformation_def: TransformationDefinition,
    catalog: GeneratorCatalog = default_catalog
) -> InputTransformation:
    if isinstance(transformation_def, ZoomScaleTransformation):
        body = transformation_def.ZoomScale
        return ZoomScale(speed=body.speed, zoom=body.zoom)
    if isinstance(transformation_def, ScaleAllTransformation):
        return ScaleAll(transformation_def.ScaleAll)

    body = transformation_def.HigherOrderNoiseModule
    return HigherOrderNoiseModule(build_node(body.node_def, catalog), body.replaced_dim)


def build_transformations(
    transformation_defs: List[TransformationDefinition],
    catalog: GeneratorCatalog = default_catalog
) -> List[InputTransformation]:
    return [build_transformation(t, catalog) for t in transformation_defs]


def build_node(node_def: NodeDefinition, catalog: GeneratorCatalog = default_catalog) -> CompositionTreeNode:
    """
    Compile a node definition into a runtime node.

    Raises:
        ConfigError: If a leaf names an unknown generator kind
    """

    if isinstance(node_def, LeafDefinition):
        body = node_def.Leaf
        confs = [fragment.body for fragment in body.module_conf]
        generator = catalog.build(GeneratorSpec(body.module_type, confs))
        return LeafNode(generator, build_transformations(body.transformations, catalog))

    body = node_def.Composed
    return CombinedNode(
        build_scheme(body.scheme),
        children=[build_node(child, catalog) for child in body.children],
        transformations=build_transformations(body.transformations, catalog),
    )


def build_tree(tree_def: TreeDefinition, catalog: GeneratorCatalog = default_catalog) -> CompositionTree:
    """Compile a full tree definition."""

    root_node = build_node(tree_def.root_node, catalog)
    logger.debug("Built composition tree from tagged definition")
    return CompositionTree(root_node, tree_def.global_conf.model_copy())


def tree_from_json(data: Any) -> CompositionTree:
    """Parse and build a tagged-tree definition in one step."""
    return build_tree(parse_tree_definition(data))


def load_json(data: Any) -> Any:
    """Decode JSON text (str or bytes); already-decoded values pass through."""
    if not isinstance(data, (str, bytes)):
        return data
    try:
        return json.loads(data)
    except ValueError as e:
        raise ParseError(f"Error while parsing the provided definition string: {e}") from e
