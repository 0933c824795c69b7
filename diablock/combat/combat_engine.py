"""Combat Engine for Diablock.

The per-tick world update that orchestrates all simulation systems in a
fixed order:
- status_effects: effect ticks, damage over time, once-per-wave buffs
- directors: monster AI, movement and player engagement
- combat: player attack with skill procs, monster attacks, regeneration
- loot: kill rewards for every dead monster, roster cleanup
- waves: clear detection and spawning
- stats: derived stats for the next tick, invariant repair

``step_world`` never mutates its input; it deep-copies the previous world
and returns the new one together with the events the tick produced.
"""

import copy
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple, TYPE_CHECKING

from diablock.combat.attack import AttackSystem, CombatStats
from diablock.combat.entities import Monster, MonsterAIState
from diablock.combat.movement import MonsterDirector
from diablock.combat.skill_procs import ProcContext, ProcTrigger, SkillProcSystem
from diablock.combat.status_effects import StatusEffectSystem, StatusEffectType
from diablock.combat.targeting import PlayerDirector
from diablock.combat.waves import WaveDirector
from diablock.core.constants import PLAYER_ID
from diablock.core.game_state import recompute_derived_stats
from diablock.core.item_manager import ItemManager
from diablock.core.rounding import round_half_up
from diablock.core.loot import LootSystem

if TYPE_CHECKING:
    from diablock.core.config import GameConfig
    from diablock.core.game_state import WorldState
    from diablock.data.content import GameContent

logger = logging.getLogger(__name__)


TICK_PHASES: Tuple[str, ...] = (
    "status_effects",
    "directors",
    "combat",
    "loot",
    "waves",
    "stats",
)


@dataclass
class TickState:
    """Scratch data shared by the phases of one tick."""

    events: List[Dict[str, Any]] = field(default_factory=list)
    player_stunned: bool = False
    stunned_monsters: Set[str] = field(default_factory=set)


@dataclass
class TickResult:
    """Outcome of one world update."""

    world: "WorldState"
    events: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def tick(self) -> int:
        return self.world.tick


class CombatEngine:
    """
    Main simulation engine.

    Usage:
        engine = CombatEngine(config, content, rng)
        result = engine.step_world(world)
        world = result.world

    Or one phase at a time (tests):
        engine.run_phase("combat", world)
    """

    def __init__(
        self,
        config: "GameConfig",
        content: "GameContent",
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize combat engine.

        Args:
            config: Balance configuration.
            content: Monster, skill and item tables.
            rng: Random number generator shared by all subsystems.
        """
        self.config = config
        self.content = content
        self.rng = rng or random.Random()
        self._init_subsystems()

    def _init_subsystems(self) -> None:
        """Initialize all simulation subsystems."""
        self.status_effects = StatusEffectSystem(self.rng)
        self.attack_system = AttackSystem(self.rng)
        self.procs = SkillProcSystem(self.config, self.status_effects, self.rng)
        self.monster_director = MonsterDirector(self.config, self.rng)
        self.player_director = PlayerDirector(self.config)
        self.wave_director = WaveDirector(self.config, self.content, self.rng)
        self.item_manager = ItemManager(self.config, self.content)
        self.loot = LootSystem(self.config, self.procs, self.item_manager, self.rng)

    # =========================================================================
    # WORLD UPDATE
    # =========================================================================

    def step_world(self, world: "WorldState") -> TickResult:
        """
        Execute one tick.

        Args:
            world: Previous world snapshot (not mutated).

        Returns:
            TickResult with the new world and this tick's events.
        """
        if world.is_game_over:
            return TickResult(world=world)

        new_world = copy.deepcopy(world)
        new_world.tick += 1
        new_world.game_time += self.config.tick_seconds
        new_world.stats.play_time += self.config.tick_seconds
        new_world.player.dodged_this_tick = False

        state = TickState()
        for phase in TICK_PHASES:
            self.run_phase(phase, new_world, state)
        for event in state.events:
            event.setdefault("tick", new_world.tick)

        return TickResult(world=new_world, events=state.events)

    def run_phase(self, phase: str, world: "WorldState", state: Optional[TickState] = None) -> TickState:
        """Run a single named phase in place."""
        if phase not in TICK_PHASES:
            raise ValueError(f"Unknown tick phase: {phase}")
        state = state or TickState()
        getattr(self, f"_phase_{phase}")(world, state)
        return state

    # =========================================================================
    # PHASES
    # =========================================================================

    def _phase_status_effects(self, world: "WorldState", state: TickState) -> None:
        player = world.player

        result = self.status_effects.tick(player)
        state.player_stunned = result.was_stunned
        state.events.extend(result.events)
        world.stats.damage_taken += int(result.damage)
        self._check_player_death(world, state)

        if not world.is_game_over:
            self.procs.fire(ProcTrigger.PERIODIC, ProcContext(world=world, events=state.events))

        for monster in world.monsters:
            monster.stunned_this_tick = False
            if not monster.is_alive:
                continue
            result = self.status_effects.tick(monster)
            state.events.extend(result.events)
            world.stats.damage_dealt += int(result.damage)
            if result.was_stunned:
                state.stunned_monsters.add(monster.id)
                monster.stunned_this_tick = True

    def _phase_directors(self, world: "WorldState", state: TickState) -> None:
        if world.is_game_over:
            return
        for monster in world.monsters:
            if monster.is_alive:
                self.monster_director.update(
                    monster, world.player, stunned=monster.id in state.stunned_monsters
                )
        state.events.extend(self.player_director.update(world))

    def _phase_combat(self, world: "WorldState", state: TickState) -> None:
        if world.is_game_over:
            return
        self._player_attack(world, state)
        self._monster_attacks(world, state)
        if world.player.dodged_this_tick and world.player.is_alive:
            self.procs.fire(ProcTrigger.AFTER_DODGE, ProcContext(world=world, events=state.events))
        self._regenerate(world)

    def _phase_loot(self, world: "WorldState", state: TickState) -> None:
        state.events.extend(self.loot.process_kills(world))

    def _phase_waves(self, world: "WorldState", state: TickState) -> None:
        state.events.extend(self.wave_director.update(world))

    def _phase_stats(self, world: "WorldState", state: TickState) -> None:
        recompute_derived_stats(world, self.config, self.content)

        for monster in world.monsters:
            monster.hp = min(max(0.0, monster.hp), monster.max_hp)

        player = world.player
        if player.engaged_monster_id is not None and world.get_monster(player.engaged_monster_id) is None:
            player.reset_engagement()

    # =========================================================================
    # COMBAT
    # =========================================================================

    def _player_attack(self, world: "WorldState", state: TickState) -> None:
        player = world.player
        if state.player_stunned or not player.is_alive:
            return

        target = world.get_monster(player.engaged_monster_id)
        if target is None:
            return
        if not self.player_director.is_valid_target(world, target):
            player.reset_engagement()
            return

        derived = world.derived
        attacker = CombatStats(
            attack=derived.attack,
            defense=derived.defense,
            crit_chance=derived.crit_chance,
            crit_damage=derived.crit_damage,
        )
        ctx = ProcContext(world=world, events=state.events, target=target, attacker_stats=attacker)

        self.procs.fire(ProcTrigger.BEFORE_DAMAGE, ctx)
        attacker.crit_chance = min(1.0, max(0.0, attacker.crit_chance))

        defender = CombatStats(attack=target.attack, defense=target.defense)
        result = self.attack_system.resolve_attack(
            attacker, defender, target.effects, ctx.defense_ignore_on_crit
        )
        ctx.result = result
        ctx.damage = max(1, round_half_up(result.damage * ctx.damage_multiplier))

        self.procs.fire(ProcTrigger.DAMAGE, ctx)

        dealt = min(ctx.damage, target.hp)
        target.hp = max(0.0, target.hp - ctx.damage)
        world.stats.damage_dealt += int(dealt)
        crit_text = " (critical)" if result.is_critical else ""
        state.events.append({
            "tick": world.tick,
            "type": "attack",
            "source_id": PLAYER_ID,
            "target_id": target.id,
            "damage": ctx.damage,
            "is_critical": result.is_critical,
            "message": f"You hit {target.name} for {ctx.damage}{crit_text}",
        })

        if player.last_attack_tick != world.tick - 1:
            player.consecutive_attack_count = 0
        player.consecutive_attack_count += 1
        player.last_attack_tick = world.tick

        self.procs.fire(ProcTrigger.AFTER_HIT, ctx)
        self.procs.fire(ProcTrigger.CONSECUTIVE_HIT, ctx)
        if result.is_critical:
            self.procs.fire(ProcTrigger.ON_CRITICAL, ctx)

        self._apply_base_on_hit_effect(target)

    def _apply_base_on_hit_effect(self, target: Monster) -> None:
        roll = self.config.player_base_status_effect
        if roll is None or not target.is_alive:
            return
        if self.rng.random() >= roll.chance:
            return
        effect_type = self._effect_type(roll.type)
        if effect_type is not None:
            self.status_effects.apply_to(target, effect_type, roll.potency, roll.duration, PLAYER_ID)

    def _monster_attacks(self, world: "WorldState", state: TickState) -> None:
        player = world.player
        for monster in world.monsters:
            if not player.is_alive:
                break
            if not monster.is_alive or monster.ai_state != MonsterAIState.ENGAGED:
                continue
            if monster.id in state.stunned_monsters:
                continue
            if monster.position.distance_to(player.position) > self.config.engagement_range:
                continue
            self._monster_attack(world, state, monster)

    def _monster_attack(self, world: "WorldState", state: TickState, monster: Monster) -> None:
        player = world.player
        derived = world.derived
        attacker = CombatStats(
            attack=monster.attack,
            defense=monster.defense,
            crit_chance=self.config.monster_crit_chance,
            crit_damage=self.config.monster_crit_damage,
        )
        defender = CombatStats(attack=derived.attack, defense=derived.defense)
        result = self.attack_system.resolve_attack(attacker, defender, player.effects)

        ctx = ProcContext(
            world=world,
            events=state.events,
            attacker=monster,
            result=result,
            damage=result.damage,
        )
        self.procs.fire(ProcTrigger.INCOMING_HIT, ctx)

        taken = min(ctx.damage, player.hp)
        player.hp = max(0.0, player.hp - ctx.damage)
        world.stats.damage_taken += int(taken)
        state.events.append({
            "tick": world.tick,
            "type": "monster_attack",
            "source_id": monster.id,
            "target_id": PLAYER_ID,
            "damage": ctx.damage,
            "is_critical": result.is_critical,
            "dodged": ctx.dodged,
            "message": f"{monster.name} hits you for {ctx.damage}",
        })

        if monster.applies_effect is not None and player.is_alive:
            self._apply_monster_effect(world, state, monster)

        self.procs.fire(ProcTrigger.AFTER_INCOMING_HIT, ctx)

        if ctx.reflect_damage > 0 and monster.is_alive:
            reflected = min(ctx.reflect_damage, monster.hp)
            monster.hp = max(0.0, monster.hp - ctx.reflect_damage)
            world.stats.damage_dealt += int(reflected)
            state.events.append({
                "tick": world.tick,
                "type": "thorns",
                "source_id": PLAYER_ID,
                "target_id": monster.id,
                "damage": reflected,
            })

        self._check_player_death(world, state)

    def _apply_monster_effect(self, world: "WorldState", state: TickState, monster: Monster) -> None:
        effect = monster.applies_effect
        if self.rng.random() >= effect.chance:
            return
        effect_type = self._effect_type(effect.type)
        if effect_type is None:
            return

        ctx = self.procs.fire(
            ProcTrigger.DEBUFF_RESISTANCE,
            ProcContext(world=world, events=state.events, attacker=monster),
        )
        result = self.status_effects.apply_to(
            world.player,
            effect_type,
            effect.potency,
            effect.duration,
            monster.id,
            debuff_duration_reduction=ctx.duration_reduction,
            resist_chance=ctx.resist_chance,
        )
        if result.resisted:
            state.events.append({
                "tick": world.tick,
                "type": "effect_resisted",
                "effect": effect_type.name,
                "source_id": monster.id,
                "message": f"You resist {monster.name}'s {effect_type.name.lower()}",
            })
        elif result.applied is not None:
            state.events.append({
                "tick": world.tick,
                "type": "effect_applied",
                "effect": effect_type.name,
                "source_id": monster.id,
                "target_id": PLAYER_ID,
                "duration": result.applied.duration,
            })

    def _regenerate(self, world: "WorldState") -> None:
        player = world.player
        if not player.is_alive:
            return
        ctx = self.procs.fire(ProcTrigger.REGENERATION, ProcContext(world=world))
        amount = world.derived.health_regen * self.config.tick_seconds * ctx.regen_multiplier
        if amount > 0:
            player.hp = min(world.derived.max_hp, player.hp + amount)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _check_player_death(self, world: "WorldState", state: TickState) -> None:
        player = world.player
        if player.hp > 0 or world.is_game_over:
            return

        player.hp = 0.0
        world.is_game_over = True
        world.progress.record_wave(world.wave.number - 1)
        player.reset_engagement()
        for monster in world.monsters:
            monster.ai_state = MonsterAIState.PATROLLING

        message = f"You have fallen on wave {world.wave.number}"
        logger.info("Tick %d: %s", world.tick, message)
        state.events.append({
            "tick": world.tick,
            "type": "player_died",
            "wave": world.wave.number,
            "message": message,
        })

    @staticmethod
    def _effect_type(name: str) -> Optional[StatusEffectType]:
        try:
            return StatusEffectType[name.upper()]
        except KeyError:
            logger.warning("Unknown status effect type %r in content table", name)
            return None
