"""
Static data API routes.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException

from diablock.data.loaders import load_monsters, load_permanent_upgrades, load_skills

router = APIRouter()


# === Monsters ===


@router.get("/monsters")
async def get_all_monsters(is_boss: Optional[bool] = None) -> List[Dict[str, Any]]:
    """Get all monster definitions, optionally only bosses or only regulars."""
    monsters = load_monsters()
    if is_boss is not None:
        monsters = [m for m in monsters if m.is_boss == is_boss]
    return [m.model_dump(mode="json") for m in monsters]


@router.get("/monsters/{monster_id}")
async def get_monster(monster_id: str) -> Dict[str, Any]:
    """Get specific monster by ID."""
    for monster in load_monsters():
        if monster.id == monster_id:
            return monster.model_dump(mode="json")
    raise HTTPException(status_code=404, detail="Monster not found")


# === Skills ===


@router.get("/skills")
async def get_all_skills() -> List[Dict[str, Any]]:
    """Get all skill definitions."""
    return [s.model_dump(mode="json") for s in load_skills()]


@router.get("/skills/{skill_id}")
async def get_skill(skill_id: str) -> Dict[str, Any]:
    """Get specific skill by ID."""
    for skill in load_skills():
        if skill.id == skill_id:
            return skill.model_dump(mode="json")
    raise HTTPException(status_code=404, detail="Skill not found")


# === Permanent upgrades ===


@router.get("/upgrades")
async def get_all_upgrades() -> List[Dict[str, Any]]:
    """Get all permanent upgrades."""
    return [u.model_dump(mode="json") for u in load_permanent_upgrades()]
