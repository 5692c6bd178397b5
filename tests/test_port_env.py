import unittest

import numpy as np

from port_env import PortSimEnv
from scenario import build_port
from ship_generator import generate_scenario, generate_single_ship


class TestPortEnv(unittest.TestCase):
    def test_observation_shape_and_bounds(self):
        env = PortSimEnv()

        for seed in range(3):
            obs, _ = env.reset(seed=seed)
            self.assertEqual(obs.shape, (env.max_quays + 6,))
            self.assertTrue(env.observation_space.contains(obs))

            for _ in range(120):
                obs, _, terminated, truncated, _ = env.step(env.action_space.sample())
                self.assertEqual(obs.shape, (env.max_quays + 6,))
                self.assertGreaterEqual(float(obs.min()), 0.0)
                self.assertLessEqual(float(obs.max()), 1.0)
                if terminated or truncated:
                    break

    def test_each_step_is_one_minute(self):
        env = PortSimEnv()
        env.reset(seed=1)
        for expected in range(1, 26):
            _, _, _, _, info = env.step(env.no_op_action)
            self.assertEqual(info["port_time"], expected)

    def test_release_action_on_empty_quay_is_invalid(self):
        env = PortSimEnv()
        env.reset(seed=0)
        # Nothing has docked before minute 10
        _, reward, _, _, info = env.step(0)
        self.assertTrue(info["invalid_action"])
        self.assertEqual(info["invalid_reason"], "quay_empty")
        self.assertLess(reward, 0.0)

        _, _, _, _, info = env.step(env.max_quays - 1)
        self.assertTrue(info["invalid_action"])
        self.assertEqual(info["invalid_reason"], "invalid_quay")

    def test_release_action_schedules_departure(self):
        env = PortSimEnv()
        env.reset(seed=0)
        quays = env.port.quays
        index, ship = next((i, s) for i, q in enumerate(quays) for s in env.ships if s.can_dock(q))
        quays[index].ship_arrives(ship)

        _, _, _, _, info = env.step(index)

        self.assertFalse(info["invalid_action"])
        self.assertEqual(len([m for m in env.port.movements if m.time <= env.port.time]), 0)

    def test_terminates_at_max_steps(self):
        env = PortSimEnv()
        env.max_steps = 50
        env.reset(seed=3)

        steps = 0
        while True:
            _, _, terminated, truncated, info = env.step(env.no_op_action)
            steps += 1
            if terminated or truncated:
                break

        self.assertEqual(steps, env.max_steps)
        self.assertTrue(terminated)
        self.assertFalse(truncated)
        self.assertEqual(info["step"], env.max_steps)

    def test_out_of_bounds_action(self):
        env = PortSimEnv()
        env.reset(seed=0)
        with self.assertRaises(ValueError):
            env.step(env.action_space.n)


class TestGenerator(unittest.TestCase):
    def test_generate_single_ship_ranges(self):
        rng = np.random.default_rng(0)
        last_arrival = 0.0
        for n in range(200):
            ship, arrival = generate_single_ship(rng, 1_000_000 + n, last_arrival)
            if ship["type"] == "ContainerShip":
                self.assertTrue(5 <= ship["capacity"] <= 40)
            else:
                self.assertTrue(40 <= ship["capacity"] <= 200)
            self.assertGreaterEqual(arrival, last_arrival)
            last_arrival = arrival

    def test_scenario_is_reproducible_and_buildable(self):
        first = generate_scenario(seed=11)
        self.assertEqual(first, generate_scenario(seed=11))

        port, ships, cargo = build_port(first)
        self.assertEqual(len(ships), len(first["ships"]))
        self.assertEqual(len(cargo), len(first["cargo"]))
        for ship in ships:
            self.assertTrue(any(ship.can_dock(q) for q in port.quays))

    def test_overrides(self):
        scenario = generate_scenario(seed=2, num_ships=3, num_bulk_quays=1, num_container_quays=0)
        self.assertEqual(len(scenario["ships"]), 3)
        self.assertEqual([q["type"] for q in scenario["quays"]], ["BulkQuay"])


if __name__ == "__main__":
    unittest.main()
