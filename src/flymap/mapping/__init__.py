"""flymap mapping — declarative mapping specifications and their builder."""

from flymap.mapping.builder import (
    ClassMappingBuilder,
    ConfigurationBuilder,
    CustomConverterBuilder,
    FieldDefinitionBuilder,
    FieldExclusionBuilder,
    FieldMappingBuilder,
    SpecificationBuilder,
    TypeDefinitionBuilder,
    new_specification,
)
from flymap.mapping.class_mapping import ClassMapping, TypeDefinition
from flymap.mapping.configuration import (
    CopyByReference,
    CustomConverterDescription,
    GlobalConfiguration,
)
from flymap.mapping.field import FieldReference, HintContainer, parse_field_reference
from flymap.mapping.loader import DefaultTypeLoader, TypeLoader, type_name
from flymap.mapping.properties import MappingProperties
from flymap.mapping.rules import ExclusionRule, MappingRule, select_strategy
from flymap.mapping.specification import MappingSpecification
from flymap.mapping.types import MappingDirection, RelationshipType, RuleStrategy
from flymap.mapping.validation import validate_specification

__all__ = [
    # Builders
    "new_specification",
    "SpecificationBuilder",
    "ConfigurationBuilder",
    "CustomConverterBuilder",
    "ClassMappingBuilder",
    "TypeDefinitionBuilder",
    "FieldMappingBuilder",
    "FieldExclusionBuilder",
    "FieldDefinitionBuilder",
    # Model
    "MappingSpecification",
    "GlobalConfiguration",
    "CustomConverterDescription",
    "CopyByReference",
    "ClassMapping",
    "TypeDefinition",
    "MappingRule",
    "ExclusionRule",
    "FieldReference",
    "HintContainer",
    # Enums
    "MappingDirection",
    "RelationshipType",
    "RuleStrategy",
    # Functions and collaborators
    "parse_field_reference",
    "select_strategy",
    "validate_specification",
    "TypeLoader",
    "DefaultTypeLoader",
    "type_name",
    "MappingProperties",
]
