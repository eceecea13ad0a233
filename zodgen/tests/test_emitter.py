"""Tests for rendering entity modules."""

import pytest

from zodgen.codegen.emitter import render_entity, render_index, render_model, render_modules
from zodgen.codegen.generator import generate_model_mappings
from zodgen.codegen.registry import SchemaRegistry
from zodgen.codegen.usage import build_parameter_models, collect_schema_usage
from zodgen.config import GenerationConfig
from zodgen.openapi import OpenAPIDocument

from .fixtures import SHOP_SPEC

REPORT_REGION = (
    '//#region Report\n'
    'export const ReportValidationSchema = z.object({\n'
    "  'tags': z.array(z.string()).optional(),\n"
    '});\n'
    '\n'
    'export type Report = z.infer<typeof ReportValidationSchema>;\n'
    '//#endregion'
)


def build_mappings(**config):
    document = OpenAPIDocument.model_validate(SHOP_SPEC)
    parameter_models = build_parameter_models(document)
    registry = SchemaRegistry.from_components(
        {**document.components.schemas, **parameter_models}
    )
    usage = collect_schema_usage(document, registry, parameter_models)
    return generate_model_mappings(registry, usage, GenerationConfig(**config))


@pytest.fixture
def mappings():
    return build_mappings()


class TestRenderModel:
    """Test rendering of one model region."""

    def test_region_without_enums(self, mappings):
        """Test the region layout of a simple model."""
        assert render_model(mappings.entities['Reports'].models[0]) == REPORT_REGION

    def test_region_with_enum_declarations(self, mappings):
        """Test that enum declarations come first, each followed by a blank line."""
        user = mappings.entities['Users'].models[2]

        assert render_model(user).startswith(
            '//#region User\n'
            'export const userTierOptions = ["free", "pro", "enterprise"] as const;\n'
            '\n'
            'export type UserTier = (typeof userTierOptions)[number];\n'
            '\n'
            'export const UserValidationSchema = z.object({\n'
        )


class TestRenderEntity:
    """Test rendering of a whole module."""

    def test_single_model_entity(self, mappings):
        """Test the import block followed by the region."""
        assert render_entity(mappings.entities['Reports']) == (
            "import { z } from 'zod';\n\n" + REPORT_REGION + '\n'
        )

    def test_cross_entity_import(self, mappings):
        """Test that imports precede every region."""
        content = render_entity(mappings.entities['Users'])

        assert content.startswith(
            "import { z } from 'zod';\n"
            "import { AddressValidationSchema } from './Utils';\n"
            '\n'
            '//#region ListUsersHeaderParams\n'
        )
        assert "  'address': AddressValidationSchema.optional(),\n" in content

    def test_regions_follow_model_order(self, mappings):
        """Test that regions appear in dependency order."""
        content = render_entity(mappings.entities['Orders'])

        positions = [
            content.index(f'//#region {name}\n') for name in ('Product', 'OrderLine', 'Order')
        ]
        assert positions == sorted(positions)

    def test_recursive_entity(self, mappings):
        """Test the explicit annotation and interface in a module."""
        content = render_entity(mappings.entities['Catalog'])

        assert 'export const CategoryValidationSchema: z.ZodType<Category> = z.object({' in content
        assert 'export interface Category {' in content


class TestRenderModules:
    """Test rendering of every module of a pass."""

    def test_file_names(self, mappings):
        """Test one file per entity plus the index."""
        files = render_modules(mappings)

        assert list(files) == [
            'Catalog.ts',
            'Orders.ts',
            'Reports.ts',
            'Users.ts',
            'Utils.ts',
            'index.ts',
        ]

    def test_index(self, mappings):
        """Test that the index re-exports every module."""
        files = render_modules(mappings)

        assert files['index.ts'] == (
            "export * from './Catalog';\n"
            "export * from './Orders';\n"
            "export * from './Reports';\n"
            "export * from './Users';\n"
            "export * from './Utils';\n"
        )

    def test_without_index(self, mappings):
        assert 'index.ts' not in render_modules(mappings, write_index=False)

    def test_index_sorted(self):
        assert render_index(['b', 'a']) == "export * from './a';\nexport * from './b';\n"

    def test_framework_imports(self):
        """Test that decorator imports are rendered with the zod import."""
        files = render_modules(build_mappings(generate_framework_annotations=True))

        assert files['Orders.ts'].startswith(
            "import { z } from 'zod';\n"
            'import { Property, Required, MinLength, MaxLength, Min, ArrayOf, Enum }'
            " from '@tsed/schema';\n"
        )
        assert "import { AddressValidationSchema, Address } from './Utils';" in files['Orders.ts']
