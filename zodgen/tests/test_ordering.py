"""Tests for ordering models within an entity."""

from zodgen.codegen.ordering import order_models, strongly_connected_components


class TestOrderModels:
    """Test order_models function."""

    def test_chain_of_three(self):
        """Test that each model follows the model it references."""
        order = order_models({'Order': ['Line'], 'Line': ['Product'], 'Product': []})

        assert order == ['Product', 'Line', 'Order']

    def test_independent_models_sorted_first(self):
        """Test that models without sibling dependencies come first, by name."""
        order = order_models(
            {'Zeta': [], 'Order': ['Alpha'], 'Alpha': [], 'Beta': ['Unknown']}
        )

        assert order == ['Alpha', 'Beta', 'Zeta', 'Order']

    def test_smallest_ready_name_first(self):
        """Test tie breaking between models that become ready together."""
        order = order_models({'Base': [], 'Ycar': ['Base'], 'Xcar': ['Base']})

        assert order == ['Base', 'Xcar', 'Ycar']

    def test_mutual_pair(self):
        """Test that a mutual reference is broken at the smallest name."""
        assert order_models({'NodeB': ['NodeA'], 'NodeA': ['NodeB']}) == ['NodeA', 'NodeB']

    def test_cycle_with_dependent(self):
        """Test that models waiting on a cycle are placed after it."""
        order = order_models({'C': ['A'], 'A': ['B'], 'B': ['A'], 'D': []})

        assert order == ['D', 'A', 'B', 'C']

    def test_dependent_sorting_before_cycle(self):
        """Test that a model using a cycle follows it even when its name is smaller."""
        order = order_models({'Aardvark': ['Bee'], 'Bee': ['Cat'], 'Cat': ['Bee']})

        assert order == ['Bee', 'Aardvark', 'Cat']

    def test_chain_into_cycle(self):
        """Test a chain of dependents that ends in a three-model cycle."""
        order = order_models(
            {
                'Alpha': ['Beta'],
                'Beta': ['Gamma'],
                'Gamma': ['Delta'],
                'Delta': ['Epsilon'],
                'Epsilon': ['Gamma'],
            }
        )

        assert order == ['Delta', 'Gamma', 'Beta', 'Alpha', 'Epsilon']

    def test_self_reference_ignored(self):
        """Test that a model referencing itself counts as independent."""
        assert order_models({'Category': ['Category'], 'Tag': []}) == ['Category', 'Tag']

    def test_every_name_once(self):
        """Test that the result is a permutation of the input."""
        dependencies = {
            'A': ['B', 'C'],
            'B': ['C'],
            'C': ['A'],
            'D': ['A', 'E'],
            'E': [],
        }

        order = order_models(dependencies)

        assert sorted(order) == sorted(dependencies)
        assert len(order) == len(set(order))

    def test_empty(self):
        """Test an entity without models."""
        assert order_models({}) == []


class TestStronglyConnectedComponents:
    """Test strongly_connected_components function."""

    def test_cycle_members_share_a_component(self):
        """Test that only the cycle members are grouped together."""
        component = strongly_connected_components(
            {'Aardvark': {'Bee'}, 'Bee': {'Cat'}, 'Cat': {'Bee'}, 'Dog': set()}
        )

        assert component['Bee'] == component['Cat']
        assert len({component['Aardvark'], component['Bee'], component['Dog']}) == 3

    def test_long_chain(self):
        """Test that a long reference chain is walked without recursion."""
        graph = {f'M{i}': {f'M{i + 1}'} for i in range(3000)}
        graph['M3000'] = {'M0'}

        component = strongly_connected_components(graph)

        assert len(set(component.values())) == 1
