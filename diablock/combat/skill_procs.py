"""Skill Proc Handlers for Diablock Combat.

Conditional skill behaviour evaluated at fixed combat checkpoints:
- Before damage (crit bonuses, attack multipliers, defense piercing)
- Damage (bonus damage added to a resolved hit)
- After hit (debuffs, crowd control, area damage, self-buffs)
- On critical hit, on consecutive hits, on kill, on gold roll
- Incoming hits (dodge, flat reduction, retaliation, reflect)
- Debuff resistance, regeneration and once-per-wave buffs

Handlers never call each other. A composed effect (a stun that also
grants a crit buff) is two handlers on the same checkpoint, the second
gated on a flag the first sets in the ProcContext.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Tuple, TYPE_CHECKING

from diablock.combat.attack import AttackResult, CombatStats
from diablock.combat.entities import AttackCharges, Monster
from diablock.combat.status_effects import (
    StatusEffectSystem,
    StatusEffectType,
    has_effect,
)
from diablock.core.constants import PLAYER_ID
from diablock.core.rounding import round_half_up

if TYPE_CHECKING:
    from diablock.core.config import GameConfig
    from diablock.core.game_state import WorldState

logger = logging.getLogger(__name__)


class ProcTrigger(Enum):
    """Combat checkpoints where skills may fire."""

    PERIODIC = auto()  # Once per tick, before combat
    BEFORE_DAMAGE = auto()  # Player attack, before the hit is resolved
    DAMAGE = auto()  # Player attack, resolved but not yet applied
    AFTER_HIT = auto()  # Player attack, damage applied
    ON_CRITICAL = auto()  # Player attack was critical
    CONSECUTIVE_HIT = auto()  # Consecutive-attack counter advanced
    GOLD_ROLL = auto()  # Gold from a kill, before buffs
    ON_KILL = auto()  # A monster died
    INCOMING_HIT = auto()  # Monster hit resolved, before it lands
    AFTER_INCOMING_HIT = auto()  # Monster hit landed
    AFTER_DODGE = auto()  # Player dodged at least once this tick
    DEBUFF_RESISTANCE = auto()  # Player is about to receive a debuff
    REGENERATION = auto()  # Health regen for this tick


@dataclass
class ProcContext:
    """
    Mutable scratchpad for one checkpoint evaluation.

    Handlers read the world and adjust the fields relevant to their
    checkpoint; the combat engine reads them back afterwards.
    """

    world: "WorldState"
    events: List[Dict[str, Any]] = field(default_factory=list)

    # Player attack
    target: Optional[Monster] = None
    attacker_stats: Optional[CombatStats] = None
    defense_ignore_on_crit: float = 0.0
    damage_multiplier: float = 1.0
    result: Optional[AttackResult] = None
    damage: int = 0
    stun_applied: bool = False
    attack_buff_applied: bool = False

    # Incoming hit
    attacker: Optional[Monster] = None
    dodged: bool = False
    reflect_damage: int = 0

    # Kill rewards
    gold: int = 0

    # Debuff resistance
    duration_reduction: float = 0.0
    resist_chance: float = 0.0

    # Regeneration
    regen_multiplier: float = 1.0

    @property
    def player(self):
        return self.world.player

    @property
    def tick(self) -> int:
        return self.world.tick


Handler = Callable[[ProcContext, int], None]


class SkillProcSystem:
    """
    Registry of skill proc handlers keyed by checkpoint.

    Each handler takes (context, skill_level) and is only called when the
    skill's level is above zero. Handlers run in registration order.
    """

    def __init__(
        self,
        config: "GameConfig",
        effect_system: StatusEffectSystem,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.effects = effect_system
        self.rng = rng or effect_system.rng
        self._handlers: Dict[ProcTrigger, List[Tuple[str, Handler]]] = {t: [] for t in ProcTrigger}
        self.register_all_handlers()

    def register_all_handlers(self) -> None:
        """Register all skill proc handlers."""
        handlers: Dict[ProcTrigger, List[Tuple[str, Handler]]] = {
            ProcTrigger.PERIODIC: [
                ("master_tactician", self.handle_master_tactician),
            ],
            ProcTrigger.BEFORE_DAMAGE: [
                ("unstoppable_force", self.handle_unstoppable_force_charge),
                ("finishing_touch", self.handle_finishing_touch),
                ("retribution", self.handle_retribution_charge),
                ("piercing_crits", self.handle_piercing_crits),
                ("hunter_instinct", self.handle_hunter_instinct),
            ],
            ProcTrigger.DAMAGE: [
                ("power_strike", self.handle_power_strike),
                ("executioner_strike", self.handle_executioner_strike),
                ("shattering_blows", self.handle_shattering_blows),
            ],
            ProcTrigger.AFTER_HIT: [
                ("sunder_armor", self.handle_sunder_armor),
                ("crushing_impact", self.handle_crushing_impact),
                ("unstoppable_force", self.handle_unstoppable_force_grant),
                ("quake_stomp", self.handle_quake_stomp),
                ("insightful_strikes", self.handle_insightful_strikes),
                ("tactical_advantage", self.handle_tactical_advantage),
            ],
            ProcTrigger.ON_CRITICAL: [
                ("lethal_tempo", self.handle_lethal_tempo),
                ("expose_weakness", self.handle_expose_weakness),
            ],
            ProcTrigger.CONSECUTIVE_HIT: [
                ("combat_flow", self.handle_combat_flow),
            ],
            ProcTrigger.GOLD_ROLL: [
                ("keen_senses", self.handle_keen_senses),
                ("treasure_hunter", self.handle_treasure_hunter),
                ("fortune_favors", self.handle_fortune_favors),
            ],
            ProcTrigger.ON_KILL: [
                ("battle_trance", self.handle_battle_trance),
                ("lucky_streak", self.handle_lucky_streak),
            ],
            ProcTrigger.INCOMING_HIT: [
                ("nimble_defense", self.handle_nimble_defense),
                ("resilience", self.handle_resilience),
            ],
            ProcTrigger.AFTER_INCOMING_HIT: [
                ("retribution", self.handle_retribution_grant),
                ("thorns_aura", self.handle_thorns_aura),
                ("spiked_armor", self.handle_spiked_armor),
            ],
            ProcTrigger.AFTER_DODGE: [
                ("evasive_maneuvers", self.handle_evasive_maneuvers),
            ],
            ProcTrigger.DEBUFF_RESISTANCE: [
                ("iron_will", self.handle_iron_will),
                ("purification", self.handle_purification),
            ],
            ProcTrigger.REGENERATION: [
                ("unyielding_spirit", self.handle_unyielding_spirit),
            ],
        }

        for trigger, entries in handlers.items():
            for skill_id, handler in entries:
                self.register_handler(trigger, skill_id, handler)

    def register_handler(self, trigger: ProcTrigger, skill_id: str, handler: Handler) -> None:
        self._handlers[trigger].append((skill_id, handler))

    def handlers_for(self, trigger: ProcTrigger) -> List[Tuple[str, Handler]]:
        return list(self._handlers[trigger])

    def fire(self, trigger: ProcTrigger, ctx: ProcContext) -> ProcContext:
        """Run every learned skill registered for a checkpoint."""
        for skill_id, handler in self._handlers[trigger]:
            level = ctx.world.skill_level(skill_id)
            if level > 0:
                handler(ctx, level)
        return ctx

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _roll(self, chance: float) -> bool:
        return chance > 0 and self.rng.random() < chance

    def _proc(self, ctx: ProcContext, skill_id: str, message: str, **data: Any) -> None:
        logger.debug("Tick %d: %s proc (%s)", ctx.tick, skill_id, message)
        ctx.events.append({
            "tick": ctx.tick,
            "type": "skill_proc",
            "skill_id": skill_id,
            "message": message,
            **data,
        })

    def _buff_player(self, ctx: ProcContext, effect_type: StatusEffectType, potency: float, duration: int) -> None:
        self.effects.apply_to(ctx.player, effect_type, potency, max(1, duration), PLAYER_ID)

    def _debuff(self, monster: Monster, effect_type: StatusEffectType, potency: float, duration: int) -> None:
        self.effects.apply_to(monster, effect_type, potency, max(1, duration), PLAYER_ID)

    # =========================================================================
    # PERIODIC
    # =========================================================================

    def handle_master_tactician(self, ctx: ProcContext, level: int) -> None:
        """Once per non-boss wave: large crit chance and crit damage buff."""
        wave = ctx.world.wave.number
        if self.config.is_boss_wave(wave):
            return
        if ctx.player.master_tactician_applied_wave >= wave:
            return
        self._buff_player(ctx, StatusEffectType.MASTER_TACTICIAN_BUFF, 1.0, level * 3 + 2)
        ctx.player.master_tactician_applied_wave = wave
        self._proc(ctx, "master_tactician", "Master Tactician sharpens your focus")

    # =========================================================================
    # BEFORE DAMAGE
    # =========================================================================

    def handle_unstoppable_force_charge(self, ctx: ProcContext, level: int) -> None:
        charges = ctx.player.unstoppable_force
        if charges is None or charges.attacks_remaining <= 0:
            return
        ctx.attacker_stats.crit_chance += charges.value
        charges.attacks_remaining -= 1
        if charges.attacks_remaining <= 0:
            ctx.player.unstoppable_force = None

    def handle_finishing_touch(self, ctx: ProcContext, level: int) -> None:
        if ctx.target.hp_fraction <= 0.25:
            ctx.attacker_stats.crit_chance += level * 0.05 + 0.05

    def handle_retribution_charge(self, ctx: ProcContext, level: int) -> None:
        charges = ctx.player.retribution
        if charges is None or charges.attacks_remaining <= 0:
            return
        ctx.attacker_stats.attack *= charges.value
        charges.attacks_remaining -= 1
        if charges.attacks_remaining <= 0:
            ctx.player.retribution = None

    def handle_piercing_crits(self, ctx: ProcContext, level: int) -> None:
        ctx.defense_ignore_on_crit = level * 0.06 + 0.04

    def handle_hunter_instinct(self, ctx: ProcContext, level: int) -> None:
        if ctx.target.is_boss:
            ctx.damage_multiplier *= 1 + (level * 0.05 + 0.02)

    # =========================================================================
    # DAMAGE
    # =========================================================================

    def handle_power_strike(self, ctx: ProcContext, level: int) -> None:
        """Release banked bonus damage, then maybe bank more for the next hit."""
        pending = ctx.player.power_strike_pending_damage
        if pending > 0:
            ctx.damage += pending
            ctx.player.power_strike_pending_damage = 0
            self._proc(ctx, "power_strike", f"Power Strike adds {pending} damage", bonus=pending)

        if self._roll((level * 6 + 4) / 100):
            ctx.player.power_strike_pending_damage = level * 10

    def handle_executioner_strike(self, ctx: ProcContext, level: int) -> None:
        if ctx.target.hp_fraction <= 0.30:
            bonus = round_half_up(ctx.damage * (level * 0.10 + 0.05))
            ctx.damage += bonus
            self._proc(ctx, "executioner_strike", f"Executioner Strike adds {bonus} damage", bonus=bonus)

    def handle_shattering_blows(self, ctx: ProcContext, level: int) -> None:
        if has_effect(ctx.target.effects, StatusEffectType.DEFENSE_DOWN):
            bonus = round_half_up(ctx.damage * (level * 0.15 + 0.05))
            ctx.damage += bonus
            self._proc(ctx, "shattering_blows", f"Shattering Blows adds {bonus} damage", bonus=bonus)

    # =========================================================================
    # AFTER HIT
    # =========================================================================

    def handle_sunder_armor(self, ctx: ProcContext, level: int) -> None:
        if self._roll((level * 8 + 7) / 100):
            self._debuff(ctx.target, StatusEffectType.DEFENSE_DOWN, level * 0.05 + 0.10, level + 2)
            self._proc(ctx, "sunder_armor", f"Sunder Armor weakens {ctx.target.name}")

    def handle_crushing_impact(self, ctx: ProcContext, level: int) -> None:
        if not ctx.target.is_alive or not self._roll(level * 0.05 + 0.05):
            return
        duration = round_half_up(level * 0.5 + 0.5)
        if ctx.target.is_boss:
            duration = max(1, duration // 2)
        self._debuff(ctx.target, StatusEffectType.STUN, 0, duration)
        ctx.stun_applied = True
        self._proc(ctx, "crushing_impact", f"Crushing Impact stuns {ctx.target.name}", duration=duration)

    def handle_unstoppable_force_grant(self, ctx: ProcContext, level: int) -> None:
        if ctx.stun_applied:
            ctx.player.unstoppable_force = AttackCharges(
                attacks_remaining=level,
                value=level * 0.10 + 0.05,
            )
            self._proc(ctx, "unstoppable_force", "Unstoppable Force empowers your next attacks")

    def handle_quake_stomp(self, ctx: ProcContext, level: int) -> None:
        damage = round_half_up(ctx.attacker_stats.attack * (level * 0.10 + 0.05))
        if damage <= 0:
            return
        radius = self.config.quake_stomp_radius
        hit = 0
        for monster in ctx.world.monsters:
            if monster is ctx.target or not monster.is_alive:
                continue
            if monster.position.distance_to(ctx.target.position) > radius:
                continue
            dealt = min(damage, monster.hp)
            monster.hp = max(0.0, monster.hp - damage)
            ctx.world.stats.damage_dealt += int(dealt)
            self._debuff(monster, StatusEffectType.SLOW, 0.20, level + 1)
            ctx.events.append({
                "tick": ctx.tick,
                "type": "quake_stomp",
                "source_id": PLAYER_ID,
                "target_id": monster.id,
                "damage": dealt,
            })
            hit += 1
        if hit:
            self._proc(ctx, "quake_stomp", f"Quake Stomp hits {hit} nearby monsters", targets=hit)

    def handle_insightful_strikes(self, ctx: ProcContext, level: int) -> None:
        if self._roll(level * 0.03 + 0.02):
            self._buff_player(ctx, StatusEffectType.ATTACK_BUFF, level * 0.05 + 0.03, level * 2 + 1)
            ctx.attack_buff_applied = True
            self._proc(ctx, "insightful_strikes", "Insightful Strikes raises your attack")

    def handle_tactical_advantage(self, ctx: ProcContext, level: int) -> None:
        if ctx.attack_buff_applied:
            self._buff_player(ctx, StatusEffectType.ALL_STATS_BUFF, level * 0.02 + 0.01, level * 2)
            self._proc(ctx, "tactical_advantage", "Tactical Advantage bolsters all stats")

    # =========================================================================
    # ON CRITICAL / CONSECUTIVE HITS
    # =========================================================================

    def handle_lethal_tempo(self, ctx: ProcContext, level: int) -> None:
        self._buff_player(ctx, StatusEffectType.ATTACK_SPEED_BUFF, level * 0.05 + 0.05, level + 1)
        self._proc(ctx, "lethal_tempo", "Lethal Tempo quickens your attacks")

    def handle_expose_weakness(self, ctx: ProcContext, level: int) -> None:
        if self._roll(level * 0.10 + 0.05):
            self._debuff(ctx.target, StatusEffectType.VULNERABILITY, level * 0.03 + 0.02, 5)
            self._proc(ctx, "expose_weakness", f"Expose Weakness leaves {ctx.target.name} vulnerable")

    def handle_combat_flow(self, ctx: ProcContext, level: int) -> None:
        if ctx.player.consecutive_attack_count >= self.config.combat_flow_hits_required:
            self._buff_player(ctx, StatusEffectType.ATTACK_SPEED_BUFF, level * 0.10, level * 2)
            ctx.player.consecutive_attack_count = 0
            self._proc(ctx, "combat_flow", "Combat Flow builds momentum")

    # =========================================================================
    # KILLS
    # =========================================================================

    def handle_keen_senses(self, ctx: ProcContext, level: int) -> None:
        ctx.gold = round_half_up(ctx.gold * (1 + (level * 0.07 + 0.03)))

    def handle_treasure_hunter(self, ctx: ProcContext, level: int) -> None:
        ctx.gold = round_half_up(ctx.gold * (1 + level * 0.10))

    def handle_fortune_favors(self, ctx: ProcContext, level: int) -> None:
        if self._roll(level * 0.01 + 0.01):
            bonus = self.rng.randint(5, 14)
            ctx.gold += bonus
            self._proc(ctx, "fortune_favors", f"Fortune Favors: +{bonus} gold", bonus=bonus)

    def handle_battle_trance(self, ctx: ProcContext, level: int) -> None:
        duration = level * 2
        self._buff_player(ctx, StatusEffectType.ATTACK_SPEED_BUFF, level * 0.05, duration)
        self._buff_player(ctx, StatusEffectType.MOVEMENT_SPEED_BUFF, level * 0.03, duration)
        self._proc(ctx, "battle_trance", "Battle Trance surges through you")

    def handle_lucky_streak(self, ctx: ProcContext, level: int) -> None:
        window_start = ctx.tick - self.config.lucky_streak_window_ticks
        kills = [t for t in ctx.player.recent_kill_ticks if t > window_start]
        kills.append(ctx.tick)
        if len(kills) >= self.config.lucky_streak_kills_required:
            duration = (level + 1) * self.config.lucky_streak_duration_ticks
            self._buff_player(ctx, StatusEffectType.GOLD_FIND_BUFF, 0.5, duration)
            kills = []
            self._proc(ctx, "lucky_streak", "Lucky Streak! Gold find increased")
        ctx.player.recent_kill_ticks = kills

    # =========================================================================
    # INCOMING HITS
    # =========================================================================

    def handle_nimble_defense(self, ctx: ProcContext, level: int) -> None:
        if self._roll(level * 0.03 + 0.02):
            ctx.damage = max(1, ctx.damage // 2)
            ctx.dodged = True
            ctx.player.dodged_this_tick = True
            self._proc(ctx, "nimble_defense", f"You partially dodge {ctx.attacker.name}")

    def handle_resilience(self, ctx: ProcContext, level: int) -> None:
        ctx.damage = max(1, ctx.damage - (level + 1))

    def handle_retribution_grant(self, ctx: ProcContext, level: int) -> None:
        if ctx.result is not None and ctx.result.is_critical:
            ctx.player.retribution = AttackCharges(
                attacks_remaining=level,
                value=1 + (level * 0.10 + 0.10),
            )
            self._proc(ctx, "retribution", "Retribution: your next attacks hit harder")

    def handle_thorns_aura(self, ctx: ProcContext, level: int) -> None:
        ctx.reflect_damage = round_half_up(ctx.world.derived.defense * (level * 0.05 + 0.05))

    def handle_spiked_armor(self, ctx: ProcContext, level: int) -> None:
        if ctx.reflect_damage <= 0:
            return
        ctx.reflect_damage = round_half_up(ctx.reflect_damage * (1 + level * 0.10 + 0.05))
        if ctx.attacker.is_alive and self._roll(level * 0.05 + 0.05):
            potency = max(1, round_half_up(ctx.world.derived.defense * 0.1))
            self._debuff(ctx.attacker, StatusEffectType.BLEED, potency, 3)
            self._proc(ctx, "spiked_armor", f"Spiked Armor makes {ctx.attacker.name} bleed")

    def handle_evasive_maneuvers(self, ctx: ProcContext, level: int) -> None:
        self._buff_player(ctx, StatusEffectType.MOVEMENT_SPEED_BUFF, level * 0.10 + 0.10, level + 1)
        self._proc(ctx, "evasive_maneuvers", "Evasive Maneuvers")

    # =========================================================================
    # RESISTANCE / REGENERATION
    # =========================================================================

    def handle_iron_will(self, ctx: ProcContext, level: int) -> None:
        ctx.duration_reduction = level * 0.06 + 0.04

    def handle_purification(self, ctx: ProcContext, level: int) -> None:
        ctx.resist_chance = level * 0.05 + 0.05

    def handle_unyielding_spirit(self, ctx: ProcContext, level: int) -> None:
        derived = ctx.world.derived
        if derived.max_hp > 0 and ctx.player.hp / derived.max_hp <= 0.30:
            ctx.regen_multiplier *= 1 + (level * 0.10 + 0.10)
