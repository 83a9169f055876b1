"""User profile (weight, gender) and where it comes from.

BAC needs both fields. A missing or failing source is never an error:
it yields an empty profile and BAC is reported as unavailable.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

logger = logging.getLogger(__name__)

GENDERS = ("male", "female")


def _parse_gender(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    lowered = value.strip().lower()
    if lowered in {"male", "m", "man", "homme"}:
        return "male"
    if lowered in {"female", "f", "woman", "femme"}:
        return "female"
    return lowered or None


@dataclass(frozen=True)
class UserProfile:
    weight_kg: float | None = None
    gender: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.weight_kg and self.weight_kg > 0 and self.gender)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> "UserProfile":
        if not raw:
            return cls()
        if not isinstance(raw, Mapping):
            logger.warning("Ignoring profile settings that are not a mapping: %r", raw)
            return cls()
        weight = None
        for key in ("weight_kg", "weightKg", "userWeight", "weight"):
            if raw.get(key) not in (None, ""):
                try:
                    weight = float(raw[key])
                except (TypeError, ValueError):
                    logger.warning("Ignoring non-numeric profile weight %r", raw[key])
                break
        gender = None
        for key in ("gender", "userGender", "genderCategory"):
            if raw.get(key) not in (None, ""):
                gender = _parse_gender(raw[key])
                break
        return cls(weight_kg=weight, gender=gender)

    def to_dict(self) -> dict[str, Any]:
        return {"weight": self.weight_kg, "gender": self.gender, "configured": self.configured}


class ProfileProvider:
    """Async source of a UserProfile."""

    async def get_profile(self) -> UserProfile:
        raise NotImplementedError


class StaticProfileProvider(ProfileProvider):
    def __init__(self, profile: UserProfile | None = None):
        self.profile = profile or UserProfile()

    async def get_profile(self) -> UserProfile:
        return self.profile


class YamlProfileProvider(ProfileProvider):
    """Reads ``weight_kg``/``gender`` from a YAML file."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def _read(self) -> UserProfile:
        with open(self.path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Profile file {self.path} must contain a mapping")
        return UserProfile.from_dict(data)

    async def get_profile(self) -> UserProfile:
        return await asyncio.get_running_loop().run_in_executor(None, self._read)


async def resolve_profile(
    settings: UserProfile | Mapping[str, Any] | None,
    provider: ProfileProvider | None = None,
) -> UserProfile:
    """Explicit settings win; otherwise ask the provider. Failures give an empty profile."""
    if settings is not None:
        if isinstance(settings, UserProfile):
            return settings
        return UserProfile.from_dict(settings)
    if provider is None:
        return UserProfile()
    try:
        return await provider.get_profile()
    except Exception:
        logger.warning("Could not load user profile, continuing without one", exc_info=True)
        return UserProfile()
