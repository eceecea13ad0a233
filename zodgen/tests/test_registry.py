"""Tests for the schema registry and reference closures."""

import pytest

from zodgen.codegen.registry import SchemaRegistry
from zodgen.codegen.schema import StringSchema
from zodgen.exceptions import SchemaResolutionError

from .fixtures import DANGLING_SCHEMAS, SHOP_SPEC, ref


@pytest.fixture
def shop_registry():
    return SchemaRegistry.from_components(SHOP_SPEC['components']['schemas'])


class TestRegistryMapping:
    """Test the mapping interface."""

    def test_lookup_and_iteration(self, shop_registry):
        """Test that every component schema is registered in document order."""
        assert len(shop_registry) == 10
        assert list(shop_registry)[:3] == ['User', 'Address', 'Order']
        assert 'Product' in shop_registry
        assert 'Missing' not in shop_registry

    def test_unknown_name_raises_key_error(self, shop_registry):
        """Test lookups of unregistered names."""
        with pytest.raises(KeyError):
            shop_registry['Missing']

    def test_issues_are_kept_per_schema(self):
        """Test that degraded shapes are attributed to their schema."""
        registry = SchemaRegistry.from_components(
            {
                'Code': {'type': 'integer', 'enum': [1, 2]},
                'Name': {'type': 'string'},
            }
        )

        assert [issue.reason for issue in registry.issues_for('Code')] == ['numeric enum']
        assert registry.issues_for('Name') == []
        assert registry['Name'] == StringSchema()


class TestClosure:
    """Test closure computation."""

    def test_transitive_closure(self, shop_registry):
        """Test that closures follow arrays and nested references."""
        assert shop_registry.closure('Order') == {'Address', 'OrderLine', 'Product'}
        assert shop_registry.closure('OrderLine') == {'Product'}
        assert shop_registry.closure('Product') == frozenset()

    def test_self_recursive(self, shop_registry):
        """Test that a self reference includes the schema itself."""
        assert shop_registry.closure('Category') == {'Category'}
        assert shop_registry.is_recursive('Category') is True

    def test_mutual_recursion(self, shop_registry):
        """Test that mutually recursive schemas reach each other and themselves."""
        assert shop_registry.closure('NodeA') == {'NodeA', 'NodeB'}
        assert shop_registry.closure('NodeB') == {'NodeA', 'NodeB'}
        assert shop_registry.is_recursive('NodeA') is True

    def test_non_recursive(self, shop_registry):
        """Test that acyclic schemas are not recursive."""
        assert shop_registry.is_recursive('Order') is False

    def test_long_cycle_terminates(self):
        """Test a cycle of three schemas."""
        registry = SchemaRegistry.from_components(
            {
                'A': {'type': 'object', 'properties': {'b': ref('B')}},
                'B': {'type': 'object', 'properties': {'c': ref('C')}},
                'C': {'type': 'object', 'properties': {'a': ref('A')}},
            }
        )

        assert registry.closure('A') == {'A', 'B', 'C'}
        assert registry.closure('B') == {'A', 'B', 'C'}

    def test_union_and_record_edges(self):
        """Test that union branches and record values are followed."""
        registry = SchemaRegistry.from_components(
            {
                'Pet': {'oneOf': [ref('Cat'), ref('Dog')]},
                'Kennel': {'additionalProperties': ref('Dog')},
                'Cat': {'type': 'object'},
                'Dog': {'type': 'object'},
            }
        )

        assert registry.closure('Pet') == {'Cat', 'Dog'}
        assert registry.closure('Kennel') == {'Dog'}

    def test_closure_is_cached(self, shop_registry):
        """Test that the same closure object is returned twice."""
        assert shop_registry.closure('Order') is shop_registry.closure('Order')


class TestDanglingReferences:
    """Test resolution failures."""

    def test_direct_dangling_reference(self):
        """Test that the citing schema is named in the error."""
        registry = SchemaRegistry.from_components(DANGLING_SCHEMAS)

        with pytest.raises(SchemaResolutionError) as exc_info:
            registry.closure('Invoice')

        assert exc_info.value.reference == 'Customer'
        assert exc_info.value.cited_by == 'Invoice'

    def test_transitive_dangling_reference(self):
        """Test that a dangling reference is found through another schema."""
        registry = SchemaRegistry.from_components(DANGLING_SCHEMAS)

        with pytest.raises(SchemaResolutionError) as exc_info:
            registry.closure('Receipt')

        assert exc_info.value.cited_by == 'Invoice'

    def test_unaffected_schema_resolves(self):
        """Test that schemas without dangling references still resolve."""
        registry = SchemaRegistry.from_components(DANGLING_SCHEMAS)

        assert registry.closure('Note') == frozenset()


class TestClosesCycle:
    """Test the cycle guard predicate."""

    def test_self_reference_closes_cycle(self, shop_registry):
        assert shop_registry.closes_cycle('Category', 'Category') is True

    def test_mutual_reference_closes_cycle(self, shop_registry):
        assert shop_registry.closes_cycle('NodeA', 'NodeB') is True
        assert shop_registry.closes_cycle('NodeB', 'NodeA') is True

    def test_acyclic_reference(self, shop_registry):
        assert shop_registry.closes_cycle('Order', 'OrderLine') is False
        assert shop_registry.closes_cycle('User', 'Address') is False
