"""Tests for configuration loading and validation."""

import os
import tempfile
import unittest

from configs import DEFAULT_CONFIG_PATH, load_config, load_layered, merge_configs
from mfgsim.core.identifiers import ComponentType, EntityId
from mfgsim.models.line_config import LineConfig
from mfgsim.streams import DEFAULT_SEEDS


class TestLineConfig(unittest.TestCase):
    """Test cases for LineConfig."""

    def test_defaults(self):
        config = LineConfig({})

        self.assertEqual(config.target_products, 5000)
        self.assertEqual(config.warmup_products, 0)
        self.assertEqual(config.seeds, DEFAULT_SEEDS)
        self.assertEqual(config.tie_break_policy, "lowest_index")
        self.assertEqual(config.inspection_rates[ComponentType.C3], 0.04847)
        self.assertEqual(config.assembly_rates[EntityId.W2], 0.09015)
        self.assertEqual(config.capacity_of(EntityId.C13), 2)
        self.assertEqual(config.num_replications, 11)

    def test_default_file_matches_defaults(self):
        from_file = LineConfig(load_config(DEFAULT_CONFIG_PATH))
        defaults = LineConfig({})

        self.assertEqual(from_file.seeds, defaults.seeds)
        self.assertEqual(from_file.inspection_rates, defaults.inspection_rates)
        self.assertEqual(from_file.assembly_rates, defaults.assembly_rates)
        self.assertEqual(from_file.queue_capacities, defaults.queue_capacities)

    def test_capacity_override(self):
        config = LineConfig({'queues': {'capacity': 3, 'overrides': {'c11': 1}}})
        self.assertEqual(config.capacity_of(EntityId.C11), 1)
        self.assertEqual(config.capacity_of(EntityId.C3), 3)

    def test_invalid_values(self):
        invalid = [
            {'simulation': {'target_products': 0}},
            {'simulation': {'target_products': 10, 'warmup_products': 10}},
            {'simulation': {'seeds': [1, 2, 3]}},
            {'simulation': {'tie_break_policy': 'round_robin'}},
            {'simulation': {'random_stream': 'mersenne'}},
            {'inspectors': {'service_rates': {'c1': 0.0}}},
            {'inspectors': {'service_rates': {'c4': 1.0}}},
            {'workstations': {'service_rates': {'w2': -1.0}}},
            {'inspectors': {'service_rates': {'c1': float('nan')}}},
            {'inspectors': {'service_rates': {'c2': float('inf')}}},
            {'workstations': {'service_rates': {'c11': 1.0}}},
            {'workstations': {'service_rates': {'w1': float('inf')}}},
            {'workstations': {'service_rates': {'w3': float('nan')}}},
            {'queues': {'capacity': 0}},
            {'queues': {'overrides': {'w1': 2}}},
            {'replications': {'count': 0}},
            {'replications': {'confidence_level': 1.0}},
            {'cluster': {}},
            {'simulation': {'target_prodcts': 10}},
            {'queues': {'capacty': 5}},
            {'replications': {'counts': 3}},
            {'simulation': ['target_products']},
        ]
        for config in invalid:
            with self.subTest(config=config):
                with self.assertRaises(ValueError):
                    LineConfig(config)

    def test_replication_offsets_seeds(self):
        config = LineConfig({'replications': {'seed_increment': 10}})
        replica = config.replication(2)

        self.assertEqual(replica.seeds, [s + 20 for s in DEFAULT_SEEDS])
        self.assertEqual(config.seeds, DEFAULT_SEEDS)


class TestConfigFiles(unittest.TestCase):
    """Test cases for YAML loading and merging."""

    def test_merge_configs(self):
        base = {'simulation': {'target_products': 10, 'warmup_products': 2}, 'queues': {'capacity': 2}}
        override = {'simulation': {'target_products': 20}}
        merged = merge_configs(base, override)

        self.assertEqual(merged['simulation'], {'target_products': 20, 'warmup_products': 2})
        self.assertEqual(merged['queues'], {'capacity': 2})
        self.assertEqual(base['simulation']['target_products'], 10)

    def test_load_config(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "line.yaml")
            with open(path, 'w') as f:
                f.write("simulation:\n  target_products: 42\n")

            config = LineConfig(load_config(path))

        self.assertEqual(config.target_products, 42)

    def test_load_config_defaults_to_packaged_file(self):
        self.assertTrue(DEFAULT_CONFIG_PATH.is_file())
        self.assertEqual(load_config(), load_config(DEFAULT_CONFIG_PATH))
        self.assertEqual(LineConfig(load_config()).target_products, 5000)

    def test_load_config_empty_and_non_mapping(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            empty = os.path.join(tmp_dir, "empty.yaml")
            listing = os.path.join(tmp_dir, "list.yaml")
            with open(empty, 'w') as f:
                f.write("")
            with open(listing, 'w') as f:
                f.write("- simulation\n- queues\n")

            self.assertEqual(load_config(empty), {})
            with self.assertRaises(ValueError):
                load_config(listing)

    def test_load_layered_applies_overrides_in_order(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            first = os.path.join(tmp_dir, "first.yaml")
            second = os.path.join(tmp_dir, "second.yaml")
            with open(first, 'w') as f:
                f.write("queues:\n  capacity: 3\nsimulation:\n  target_products: 50\n")
            with open(second, 'w') as f:
                f.write("queues:\n  capacity: 4\n")

            config = LineConfig(load_layered(overrides=[first, second]))

        self.assertEqual(config.capacity_of(EntityId.C2), 4)
        self.assertEqual(config.target_products, 50)
        self.assertEqual(config.num_replications, 11)


if __name__ == '__main__':
    unittest.main()
