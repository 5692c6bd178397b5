import gymnasium as gym
from gymnasium import spaces
import numpy as np

from movement import MovementDirection, ShipMovement
from scenario import build_port
from ship_generator import generate_scenario
from ship_manager import ContainerShip, NauticalFlag


class PortSimEnv(gym.Env):
    """
    Gymnasium wrapper that lets an agent decide when docked ships leave.

    Every step elapses one simulated minute of the port. Before the minute
    runs, the agent may schedule an OUTBOUND ShipMovement for the ship at one
    quay; the movement fires on the minute that is about to run.
    """

    def __init__(self, scenario_config=None):
        super().__init__()

        # --- CONSTANTS ---
        self.max_quays = 8              # Observation/action slots for quays
        self.max_steps = 600            # Ten simulated hours
        self.max_stored_cargo = 100     # Warehouse fill is normalised against this
        self.invalid_action_penalty = 0.25
        self.waiting_ship_penalty = 0.02
        self.departure_reward = 1.0
        self.scenario_config = dict(scenario_config or {})

        # --- ACTION SPACE ---
        # action q in [0, max_quays) -> release the ship docked at quay q
        # action max_quays           -> NO-OP
        self.no_op_action = self.max_quays
        self.action_space = spaces.Discrete(self.max_quays + 1)

        # --- OBSERVATION SPACE ---
        # First max_quays: quay occupancy (0 = empty, 1 = ship docked)
        # Next 5: share of queued ships per priority tier
        #         (BRAVO, WHISKEY, HOTEL, container ship, other)
        # Last 1: warehouse fill
        self.observation_space = spaces.Box(
            low=0, high=1, shape=(self.max_quays + 6,), dtype=np.float32
        )

        self.port = None
        self.ships = None
        self.cargo = None
        self.current_step = 0

    # =========================================================================
    # HELPER: Build Observation
    # =========================================================================
    def _get_observation(self):
        quay_obs = np.zeros(self.max_quays, dtype=np.float32)
        for i, quay in enumerate(self.port.quays[:self.max_quays]):
            quay_obs[i] = 0.0 if quay.is_empty() else 1.0

        tier_obs = np.zeros(5, dtype=np.float32)
        queued = self.port.ship_queue.ships
        for ship in queued:
            if ship.flag is NauticalFlag.BRAVO:
                tier_obs[0] += 1
            elif ship.flag is NauticalFlag.WHISKEY:
                tier_obs[1] += 1
            elif ship.flag is NauticalFlag.HOTEL:
                tier_obs[2] += 1
            elif isinstance(ship, ContainerShip):
                tier_obs[3] += 1
            else:
                tier_obs[4] += 1
        if queued:
            tier_obs /= len(queued)

        stored = np.array(
            [min(len(self.port.stored_cargo) / self.max_stored_cargo, 1.0)], dtype=np.float32
        )
        return np.concatenate([quay_obs, tier_obs, stored])

    def _occupied_quays(self):
        return {quay.id for quay in self.port.quays if not quay.is_empty()}

    # =========================================================================
    # RESET — Start a fresh generated scenario
    # =========================================================================
    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        scenario_seed = int(self.np_random.integers(0, 2**31 - 1))
        scenario = generate_scenario(seed=scenario_seed, **self.scenario_config)
        if len(scenario["quays"]) > self.max_quays:
            raise ValueError(
                f"Scenario has {len(scenario['quays'])} quays, env supports {self.max_quays}"
            )
        self.port, self.ships, self.cargo = build_port(scenario)
        self.current_step = 0

        return self._get_observation(), {}

    # =========================================================================
    # STEP — Advance the port by one minute
    # =========================================================================
    def step(self, action):
        action = int(action)
        if action < 0 or action >= self.action_space.n:
            raise ValueError(f"Action {action} out of bounds [0, {self.action_space.n - 1}]")

        reward = 0.0
        invalid_action = False
        invalid_reason = ""

        # --- 1. TRY TO EXECUTE THE ACTION ---
        if action != self.no_op_action:
            quays = self.port.quays
            if action >= len(quays):
                invalid_action = True
                invalid_reason = "invalid_quay"
            elif quays[action].is_empty():
                invalid_action = True
                invalid_reason = "quay_empty"
            else:
                self.port.add_movement(ShipMovement(
                    self.port.time + 1, MovementDirection.OUTBOUND, quays[action].ship
                ))

        # --- 2. RUN THE MINUTE ---
        occupied_before = self._occupied_quays()
        self.port.elapse_one_minute()
        departures = len(occupied_before - self._occupied_quays())
        reward += departures * self.departure_reward

        # --- 3. PENALISE QUEUEING ---
        reward -= self.waiting_ship_penalty * len(self.port.ship_queue)
        if invalid_action:
            reward -= self.invalid_action_penalty

        # --- 4. ADVANCE THE STEP COUNTER ---
        self.current_step += 1
        terminated = self.current_step >= self.max_steps
        truncated = False

        info = {
            "step": self.current_step,
            "port_time": self.port.time,
            "departures": departures,
            "queued_ships": len(self.port.ship_queue),
            "invalid_action": invalid_action,
            "invalid_reason": invalid_reason,
        }
        return self._get_observation(), reward, terminated, truncated, info
