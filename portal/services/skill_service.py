"""Skill catalogue endpoints."""

from typing import Any, Dict, List

from portal.models import Skill
from portal.services.base import BaseService, parse_list, parse_model


class SkillService(BaseService):

    def get_all_skills(self) -> List[Skill]:
        return parse_list(Skill, self.client.get("/Skill"))

    def get_skill(self, skill_id: str) -> Skill:
        return parse_model(Skill, self.client.get(f"/Skill/{skill_id}"))

    def create_skill(self, skill: Dict[str, Any]) -> Skill:
        return parse_model(Skill, self.client.post("/Skill", json=skill))

    def update_skill(self, skill_id: str, skill: Dict[str, Any]) -> Skill:
        return parse_model(Skill, self.client.put(f"/Skill/{skill_id}", json=skill))

    def delete_skill(self, skill_id: str) -> None:
        self.client.delete(f"/Skill/{skill_id}")

    def deactivate_skill(self, skill_id: str) -> None:
        self.client.patch(f"/Skill/{skill_id}/deactivate", json={})
